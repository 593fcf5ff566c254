"""Student Schemas — request selectors/bodies and the public Student shape.

Invariants:
    - StudentWhere: exactly one of id / username
    - RatingSubmission.rating is NOT coerced here; core/enforce_rating.py decides
    - Responses serialize camelCase (offerDate, averageAdmissionRating, ...)
    - has_valid_admission_offer / offer_expires_at are derived, never stored
"""

from datetime import datetime, timedelta
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, model_validator,
)
from pydantic.alias_generators import to_camel

from admissions.core.domain_types import RejectionReason, StudentStatus, Track
from admissions.core.offer_policy import has_valid_admission_offer, offer_expires_at
from admissions.core.repository_protocols import StudentLike


class StudentWhere(BaseModel):
    """Select a student by opaque id OR unique username."""
    id: UUID | None = None
    username: str | None = Field(None, min_length=1, max_length=255)

    @model_validator(mode="after")
    def validate_exactly_one(self):
        if (self.id is None) == (self.username is None):
            raise ValueError("provide exactly one of id or username")
        return self


class StudentTarget(BaseModel):
    """Body for admin operations that act on one student."""
    where: StudentWhere


class RatingSubmission(BaseModel):
    where: StudentWhere
    rating: StrictInt | StrictFloat | StrictStr


class RejectStudentRequest(BaseModel):
    where: StudentWhere
    reason: RejectionReason | None = None


class StudentResponse(BaseModel):
    """Public Student shape."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    username: str
    given_name: str | None = None
    surname: str | None = None
    track: Track
    status: StudentStatus
    offer_date: datetime | None = None
    offer_expires_at: datetime | None = None
    has_valid_admission_offer: bool = False
    rejection_reason: RejectionReason | None = None
    created_at: datetime
    average_admission_rating: float | None = None

    @classmethod
    def from_student(
        cls,
        student: StudentLike,
        offer_window: timedelta,
        now: datetime,
        average_admission_rating: float | None = None,
    ) -> "StudentResponse":
        return cls(
            id=student.id,
            username=student.username,
            given_name=getattr(student, "given_name", None),
            surname=getattr(student, "surname", None),
            track=student.track,
            status=student.status,
            offer_date=student.offer_date,
            offer_expires_at=offer_expires_at(student.offer_date, offer_window),
            has_valid_admission_offer=has_valid_admission_offer(
                student.status, student.offer_date, now, offer_window,
            ),
            rejection_reason=student.rejection_reason,
            created_at=student.created_at,
            average_admission_rating=average_admission_rating,
        )
