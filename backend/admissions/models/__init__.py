"""ORM Models — SQLAlchemy declarative models for students and their ratings.

Invariants:
    - All models inherit from Base (db/base.py)
    - Student is the aggregate root; ratings are scoped by student_id

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from admissions.models.student import Student  # noqa: F401
from admissions.models.admission_rating import AdmissionRating  # noqa: F401
