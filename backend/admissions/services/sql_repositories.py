"""SQL Repositories — SQLAlchemy implementations of the core repository protocols.

Invariants:
    - Every write commits before returning; a failed write rolls back first
    - find_next_unrated orders by created_at ascending (id breaks same-instant ties)
    - aggregate_mean_by_student pages the GROUPED result, ordered mean desc, student_id asc
    - update_status_if is a single conditional UPDATE: the precondition is
      re-checked by the database at write time
    - A (student_id, rated_by) unique violation surfaces as DuplicateRatingError

Design Decisions:
    - Repositories share the request's AsyncSession, so reads made by one
      operation run in the same transaction
    - synchronize_session=False on bulk UPDATE + populate_existing on re-read:
      the identity map never serves a stale status
"""

import logging
from datetime import datetime
from sqlalchemy import exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.domain_types import (
    RatingId, RatingValue, RejectionReason, StudentId, StudentStatus, Track,
)
from admissions.core.errors import DuplicateRatingError, ResourceNotFoundError
from admissions.core.ranking import StudentMean
from admissions.core.repository_protocols import StudentRef
from admissions.models.admission_rating import AdmissionRating
from admissions.models.student import Student

logger = logging.getLogger(__name__)


class SqlStudentRepository:
    """Student persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_ref(self, ref: StudentRef) -> Student | None:
        query = select(Student)
        if ref.id is not None:
            query = query.where(Student.id == ref.id)
        else:
            query = query.where(Student.username == ref.username)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> Student | None:
        result = await self.db.execute(
            select(Student).where(Student.username == username),
        )
        return result.scalar_one_or_none()

    async def find_next_unrated(
        self, reviewer: str, track: Track | None,
    ) -> Student | None:
        """Oldest student with no rating from `reviewer`."""
        already_rated = exists().where(
            AdmissionRating.student_id == Student.id,
            AdmissionRating.rated_by == reviewer,
        )
        query = select(Student).where(~already_rated)
        if track is not None:
            query = query.where(Student.track == track.value)
        query = query.order_by(
            Student.created_at.asc(), Student.id.asc(),
        ).limit(1)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_many_by_ids(self, student_ids: list[StudentId]) -> list[Student]:
        if not student_ids:
            return []
        result = await self.db.execute(
            select(Student).where(Student.id.in_(student_ids)),
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        student_id: StudentId,
        *,
        status: StudentStatus | None = None,
        offer_date: datetime | None = None,
        rejection_reason: RejectionReason | None = None,
        clear_rejection_reason: bool = False,
    ) -> Student:
        """Set the given fields; fields left as None are not touched.

        clear_rejection_reason nulls the reason (a student leaving REJECTED).
        """
        student = await self.db.get(Student, student_id)
        if student is None:
            raise ResourceNotFoundError("Student", str(student_id))
        if status is not None:
            student.status = status.value
        if offer_date is not None:
            student.offer_date = offer_date
        if rejection_reason is not None:
            student.rejection_reason = rejection_reason.value
        elif clear_rejection_reason:
            student.rejection_reason = None
        await self.db.commit()
        return student

    async def update_status_if(
        self,
        student_id: StudentId,
        *,
        expected_status: StudentStatus,
        offered_after: datetime,
        new_status: StudentStatus,
    ) -> Student | None:
        """Compare-and-transition. Returns None when the precondition no longer holds."""
        result = await self.db.execute(
            update(Student)
            .where(Student.id == student_id)
            .where(Student.status == expected_status.value)
            .where(Student.offer_date >= offered_after)
            .values(status=new_status.value)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            await self.db.rollback()
            return None
        await self.db.commit()
        refreshed = await self.db.execute(
            select(Student)
            .where(Student.id == student_id)
            .execution_options(populate_existing=True),
        )
        return refreshed.scalar_one()


class SqlRatingRepository:
    """Admission rating persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, student_id: StudentId, reviewer: str) -> bool:
        result = await self.db.execute(
            select(AdmissionRating.id)
            .where(AdmissionRating.student_id == student_id)
            .where(AdmissionRating.rated_by == reviewer)
            .limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def insert_rating(
        self, student_id: StudentId, reviewer: str, rating: RatingValue,
    ) -> RatingId:
        row = AdmissionRating(
            student_id=student_id, rated_by=reviewer, rating=int(rating),
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self.exists(student_id, reviewer):
                raise DuplicateRatingError(reviewer, str(student_id))
            raise
        return RatingId(row.id)

    async def aggregate_mean_by_student(
        self, track: Track | None, skip: int | None, take: int | None,
    ) -> list[StudentMean]:
        average = func.avg(AdmissionRating.rating).label("average_rating")
        query = (
            select(
                AdmissionRating.student_id,
                average,
                func.count(AdmissionRating.id).label("rating_count"),
            )
            .group_by(AdmissionRating.student_id)
            .order_by(average.desc(), AdmissionRating.student_id.asc())
        )
        if track is not None:
            query = query.join(
                Student, Student.id == AdmissionRating.student_id,
            ).where(Student.track == track.value)
        if skip:
            query = query.offset(skip)
        if take is not None:
            query = query.limit(take)

        result = await self.db.execute(query)
        return [
            StudentMean(
                student_id=row.student_id,
                average_rating=float(row.average_rating),
                rating_count=row.rating_count,
            )
            for row in result.all()
        ]
