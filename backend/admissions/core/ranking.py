"""Ranking — ordering of per-student mean ratings and the join back to student rows.

Invariants:
    - Order is mean descending, then student id ascending (deterministic ties)
    - join_ranked_students preserves the aggregation order exactly;
      the order students were fetched in is irrelevant
    - Students missing from the fetch (deleted between steps) are dropped, never reordered
    - Students with zero ratings never appear (input is the rating aggregate)
"""

from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar
from uuid import UUID

T = TypeVar("T")


@dataclass(frozen=True)
class StudentMean:
    """One row of the rating aggregate."""
    student_id: UUID
    average_rating: float
    rating_count: int = 0


@dataclass(frozen=True)
class RankedStudent(Generic[T]):
    """A fetched student with its mean re-attached."""
    student: T
    average_admission_rating: float


def ranking_key(row: StudentMean) -> tuple:
    return (-row.average_rating, row.student_id)


def rank_means(rows: Iterable[StudentMean]) -> list[StudentMean]:
    """Sort aggregate rows into leaderboard order."""
    return sorted(rows, key=ranking_key)


def join_ranked_students(
    ranked: list[StudentMean], students: Iterable[T],
) -> list[RankedStudent[T]]:
    """Attach each student's mean, in the order of `ranked`."""
    by_id = {student.id: student for student in students}
    return [
        RankedStudent(by_id[row.student_id], row.average_rating)
        for row in ranked
        if row.student_id in by_id
    ]
