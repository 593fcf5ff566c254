"""Rating Store — drives reviewers through the review queue and records their ratings.

Invariants:
    - next_unrated_student never returns a student the reviewer already rated
    - An empty queue returns None, never raises
    - submit_rating validates the value BEFORE any read or write
    - One rating per (student, reviewer): checked here and enforced by the DB constraint
    - Ratings are immutable once inserted
"""

import logging

from admissions.core.domain_types import Track
from admissions.core.enforce_rating import validate_rating
from admissions.core.errors import (
    DuplicateRatingError, ErrorContext, ResourceNotFoundError,
)
from admissions.core.repository_protocols import (
    RatingRepository, StudentLike, StudentRef, StudentRepository,
)
from admissions.core.student_ref import describe_ref

logger = logging.getLogger(__name__)


class RatingStore:
    """Review queue and rating insertion."""

    def __init__(self, students: StudentRepository, ratings: RatingRepository):
        self.students = students
        self.ratings = ratings

    async def next_unrated_student(
        self, reviewer: str, track: Track | None = None,
    ) -> StudentLike | None:
        """Oldest-created student (optionally in `track`) with no rating from `reviewer`."""
        student = await self.students.find_next_unrated(reviewer, track)
        if student is None:
            logger.info(
                "Review queue empty",
                extra={"reviewer": reviewer, "track": track.value if track else None},
            )
        return student

    async def submit_rating(
        self, ref: StudentRef, reviewer: str, rating: object,
    ) -> bool:
        """Record `reviewer`'s rating for the student selected by `ref`."""
        value = validate_rating(rating)

        student = await self.students.find_by_ref(ref)
        if student is None:
            raise ResourceNotFoundError(
                "Student", describe_ref(ref),
                ErrorContext(student_ref=describe_ref(ref), operation="submit_rating"),
            )
        if await self.ratings.exists(student.id, reviewer):
            raise DuplicateRatingError(reviewer, str(student.id))

        await self.ratings.insert_rating(student.id, reviewer, value)
        logger.info(
            f"Rating {value} recorded",
            extra={"student_id": student.id, "reviewer": reviewer},
        )
        return True
