"""Initial schema for ad-hoc grading

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""

import typing as t

from alembic import op
from sqlalchemy import false
from sqlalchemy import func as f
from sqlalchemy.schema import Column, ForeignKey
from sqlalchemy.types import Boolean, DateTime, Float, Integer, String

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None


def upgrade() -> None:
    # Roster
    op.create_table(
        "activities",
        Column("activity_id", Integer, primary_key=True, autoincrement=False),
        Column("course_id", Integer, nullable=False),
        Column("name", String, nullable=False),
        Column("natively_graded", Boolean, nullable=False, server_default=false()),
    )
    op.create_index("ix_activities_course_id", "activities", ["course_id"])

    op.create_table(
        "people",
        Column("person_id", Integer, primary_key=True, autoincrement=False),
        Column("full_name", String, nullable=False),
    )

    op.create_table(
        "enrollments",
        Column("course_id", Integer, primary_key=True),
        Column("person_id", Integer, ForeignKey("people.person_id", ondelete="CASCADE"), primary_key=True),
        Column("role", String, nullable=False),
    )

    # Grading
    op.create_table(
        "grade_resources",
        Column("resource_id", Integer, primary_key=True, autoincrement=True),
        Column("label", String, nullable=False),
        Column("min_value", Float, nullable=False),
        Column("max_value", Float, nullable=False),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
    )

    # resource_id deliberately has no foreign key, see gradepad.storage.table
    op.create_table(
        "grading_links",
        Column("link_id", Integer, primary_key=True, autoincrement=True),
        Column("activity_id", Integer, unique=True, nullable=False),
        Column("resource_id", Integer, nullable=False),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
    )

    op.create_table(
        "grade_records",
        Column(
            "resource_id",
            Integer,
            ForeignKey("grade_resources.resource_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        Column("subject_id", Integer, primary_key=True),
        Column("value", Float, nullable=True),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("grade_records")
    op.drop_table("grading_links")
    op.drop_table("grade_resources")
    op.drop_table("enrollments")
    op.drop_table("people")
    op.drop_index("ix_activities_course_id")
    op.drop_table("activities")
