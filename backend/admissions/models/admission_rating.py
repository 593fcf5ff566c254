"""AdmissionRating ORM — one reviewer's immutable 1–10 score for one student.

Invariants:
    - Always belongs to a Student (student_id FK)
    - rating in [1, 10] (CheckConstraint mirrors core/enforce_rating.py)
    - (student_id, rated_by) unique: a reviewer rates a student at most once
    - No update or delete path exists
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from admissions.db.base import Base


class AdmissionRating(Base):
    """Reviewer rating entity."""
    __tablename__ = "admission_ratings"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "rated_by", name="uq_admission_ratings_student_rated_by",
        ),
        CheckConstraint(
            "rating >= 1 AND rating <= 10", name="ck_admission_ratings_rating_range",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True,
    )
    rated_by: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    student: Mapped["Student"] = relationship(
        "Student", back_populates="admission_ratings",
    )
