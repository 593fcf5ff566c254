"""Student ORM — an applicant moving through the admission lifecycle.

Invariants:
    - id is UUID primary key; username is unique
    - status transitions: PENDING -> OFFERED -> ACCEPTED | REJECTED; PENDING -> REJECTED;
      OFFERED -> OFFERED (re-offer resets offer_date)
    - offer_date set whenever status becomes OFFERED; never cleared by accept
    - rejection_reason meaningful only when status == REJECTED
    - created_at immutable, drives FIFO review ordering
    - Rows are created by admissions intake; this service never deletes them
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from admissions.core.domain_types import StudentStatus
from admissions.db.base import Base


class Student(Base):
    """Applicant entity — owns its admission ratings."""
    __tablename__ = "students"
    __table_args__ = (
        Index("ix_students_track_created_at", "track", "created_at"),
        CheckConstraint(
            "status in ('PENDING', 'OFFERED', 'ACCEPTED', 'REJECTED')",
            name="ck_students_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    given_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    surname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    track: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StudentStatus.PENDING.value,
    )
    offer_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(
        String(40), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    admission_ratings: Mapped[list["AdmissionRating"]] = relationship(
        "AdmissionRating", back_populates="student",
        lazy="raise",
    )
