"""Ranking Engine — paginated leaderboard of students by mean admission rating.

Invariants:
    - skip/take apply to the grouped per-student result, not to raw rating rows
    - Output order is exactly the aggregation order (mean desc, student id asc);
      student rows are joined back by id, never re-queried with their own ordering
    - Students with zero ratings never appear
    - Aggregate and fetch share one repository session; the API opens it as a
      REPEATABLE READ snapshot on PostgreSQL (single logical read)
"""

import logging

from admissions.core.domain_types import StudentId, Track
from admissions.core.ranking import RankedStudent, join_ranked_students, rank_means
from admissions.core.repository_protocols import (
    RatingRepository, StudentLike, StudentRepository,
)

logger = logging.getLogger(__name__)


class RankingEngine:
    """Aggregates ratings into the admin leaderboard."""

    def __init__(self, students: StudentRepository, ratings: RatingRepository):
        self.students = students
        self.ratings = ratings

    async def top_rated(
        self,
        skip: int | None = None,
        take: int | None = None,
        track: Track | None = None,
    ) -> list[RankedStudent[StudentLike]]:
        page = await self.ratings.aggregate_mean_by_student(track, skip, take)
        # pin the tie-break regardless of store ordering
        page = rank_means(page)
        students = await self.students.get_many_by_ids(
            [StudentId(row.student_id) for row in page],
        )
        ranked = join_ranked_students(page, students)
        if len(ranked) != len(page):
            logger.warning(
                f"{len(page) - len(ranked)} rated student(s) vanished between aggregate and fetch",
            )
        return ranked
