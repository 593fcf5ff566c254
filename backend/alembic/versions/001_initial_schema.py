"""Initial schema — students and admission_ratings.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False, unique=True),
        sa.Column("given_name", sa.String(255), nullable=True),
        sa.Column("surname", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("track", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("offer_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.String(40), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "status in ('PENDING', 'OFFERED', 'ACCEPTED', 'REJECTED')",
            name="ck_students_status",
        ),
    )
    op.create_index("ix_students_track_created_at", "students", ["track", "created_at"])

    op.create_table(
        "admission_ratings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("rated_by", sa.String(255), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "rated_by", name="uq_admission_ratings_student_rated_by"),
        sa.CheckConstraint("rating >= 1 AND rating <= 10", name="ck_admission_ratings_rating_range"),
    )
    op.create_index("ix_admission_ratings_student_id", "admission_ratings", ["student_id"])


def downgrade() -> None:
    op.drop_index("ix_admission_ratings_student_id", table_name="admission_ratings")
    op.drop_table("admission_ratings")
    op.drop_index("ix_students_track_created_at", table_name="students")
    op.drop_table("students")
