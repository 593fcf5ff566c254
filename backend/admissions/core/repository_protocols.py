"""Boundary Protocols — contracts between the admission workflow and its store.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell (services/sql_repositories.py) or by test fakes

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the pure rules that decide outcomes (core/) are never async
    - update_status_if is the compare-and-transition primitive: the store
      re-verifies the precondition at write time
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from admissions.core.domain_types import (
    RatingId, RatingValue, RejectionReason, StudentId, StudentStatus, Track,
)
from admissions.core.ranking import StudentMean


class StudentLike(Protocol):
    """Structural contract for Student objects returned by a repository."""
    id: UUID
    username: str
    track: str
    status: str
    offer_date: datetime | None
    rejection_reason: str | None
    created_at: datetime


class StudentRef(Protocol):
    """Union selector: exactly one of id / username is set."""
    id: UUID | None
    username: str | None


class StudentRepository(Protocol):
    """Contract for student persistence."""
    async def find_by_ref(self, ref: StudentRef) -> StudentLike | None: ...
    async def find_by_username(self, username: str) -> StudentLike | None: ...
    async def find_next_unrated(
        self, reviewer: str, track: Track | None,
    ) -> StudentLike | None: ...
    async def get_many_by_ids(
        self, student_ids: list[StudentId],
    ) -> list[StudentLike]: ...
    async def update_status(
        self,
        student_id: StudentId,
        *,
        status: StudentStatus | None = None,
        offer_date: datetime | None = None,
        rejection_reason: RejectionReason | None = None,
        clear_rejection_reason: bool = False,
    ) -> StudentLike: ...
    async def update_status_if(
        self,
        student_id: StudentId,
        *,
        expected_status: StudentStatus,
        offered_after: datetime,
        new_status: StudentStatus,
    ) -> StudentLike | None: ...


class RatingRepository(Protocol):
    """Contract for admission rating persistence."""
    async def exists(self, student_id: StudentId, reviewer: str) -> bool: ...
    async def insert_rating(
        self, student_id: StudentId, reviewer: str, rating: RatingValue,
    ) -> RatingId: ...
    async def aggregate_mean_by_student(
        self, track: Track | None, skip: int | None, take: int | None,
    ) -> list[StudentMean]: ...


class SlackConversations(Protocol):
    """Contract for the Slack calls the channel archiver makes."""
    async def conversations_info(self, channel: str) -> dict: ...
    async def conversations_rename(self, channel: str, name: str) -> dict: ...
    async def conversations_archive(self, channel: str) -> None: ...
