"""Domain Types — identity types and enums shared by every layer.

Invariants:
    - StudentId, RatingId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - Enum values are the exact strings stored in the DB

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare equal to the stored column value
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

StudentId = NewType("StudentId", UUID)
RatingId = NewType("RatingId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

RatingValue = NewType("RatingValue", int)   # 1–10

MIN_RATING = 1
MAX_RATING = 10


# ─── Enums ───────────────────────────────────────────────────────

class StudentStatus(str, Enum):
    """Admission lifecycle — maps to DB `status` column."""
    PENDING = "PENDING"
    OFFERED = "OFFERED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Track(str, Enum):
    """Applicant category used to filter review queues and leaderboards."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class RejectionReason(str, Enum):
    """Why an applicant was rejected. OTHER is the default."""
    EXPERIENCE = "EXPERIENCE"
    TIME_COMMITMENT = "TIME_COMMITMENT"
    INCOMPLETE_APPLICATION = "INCOMPLETE_APPLICATION"
    CAPACITY = "CAPACITY"
    OTHER = "OTHER"


class AuthRole(str, Enum):
    """Caller capability classes carried in the auth token."""
    REVIEWER = "reviewer"
    ADMIN = "admin"
    STUDENT = "student"
