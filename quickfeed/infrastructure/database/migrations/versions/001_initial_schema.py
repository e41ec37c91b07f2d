# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial quickfeed schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-01-15

Creates all tables defined in quickfeed/infrastructure/database/models/.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    """Create quickfeed tables."""
    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("login", sa.String(255), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("student_id", sa.String(64), nullable=False, server_default=""),
        sa.Column("avatar_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "remote_identities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("remote_id", sa.Integer, nullable=False),
        sa.Column("access_token", sa.String(512), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("provider", "remote_id", name="uq_remote_identities_provider"),
    )
    op.create_index("ix_remote_identities_user_id", "remote_identities", ["user_id"])

    # ==========================================================================
    # Courses
    # ==========================================================================
    op.create_table(
        "courses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("tag", sa.String(64), nullable=False, server_default=""),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("directory_id", sa.Integer, nullable=False, unique=True),
        sa.Column("organization_path", sa.String(255), nullable=False),
        sa.Column(
            "course_creator_id",
            sa.Integer,
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        *_timestamps(),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.UniqueConstraint("course_id", "name", name="uq_groups_course_id"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="valid_group_status",
        ),
    )
    op.create_index("ix_groups_course_id", "groups", ["course_id"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "group_id",
            sa.Integer,
            sa.ForeignKey("groups.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.UniqueConstraint("course_id", "user_id", name="uq_enrollments_course_id"),
        sa.CheckConstraint(
            "status IN ('pending', 'student', 'teacher', 'rejected')",
            name="valid_enrollment_status",
        ),
    )
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"])
    op.create_index("ix_enrollments_user_id", "enrollments", ["user_id"])

    op.create_table(
        "repositories",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("repository_id", sa.Integer, nullable=False, unique=True),
        sa.Column("directory_id", sa.Integer, nullable=False),
        sa.Column("html_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("repo_type", sa.String(20), nullable=False),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "group_id",
            sa.Integer,
            sa.ForeignKey("groups.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_repositories_directory_id", "repositories", ["directory_id"])

    # ==========================================================================
    # Assignments and grading
    # ==========================================================================
    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assignment_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("directory", sa.String(512), nullable=False, server_default=""),
        sa.Column("language", sa.String(64), nullable=False, server_default=""),
        sa.Column("deadline", sa.String(64), nullable=False, server_default=""),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("auto_approve", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_group_lab", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("reviewers", sa.Integer, nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint("course_id", "assignment_id", name="uq_assignments_course_id"),
    )
    op.create_index("ix_assignments_course_id", "assignments", ["course_id"])

    op.create_table(
        "grading_benchmarks",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "assignment_id",
            sa.Integer,
            sa.ForeignKey("assignments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("heading", sa.String(255), nullable=False, server_default=""),
        sa.Column("comment", sa.Text, nullable=False, server_default=""),
    )
    op.create_index(
        "ix_grading_benchmarks_assignment_id", "grading_benchmarks", ["assignment_id"]
    )

    op.create_table(
        "grading_criteria",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "benchmark_id",
            sa.Integer,
            sa.ForeignKey("grading_benchmarks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("points", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comment", sa.Text, nullable=False, server_default=""),
    )
    op.create_index("ix_grading_criteria_benchmark_id", "grading_criteria", ["benchmark_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "assignment_id",
            sa.Integer,
            sa.ForeignKey("assignments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "group_id",
            sa.Integer,
            sa.ForeignKey("groups.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("commit_hash", sa.String(64), nullable=False, server_default=""),
        sa.Column("approved", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_submissions_assignment_id", "submissions", ["assignment_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "submission_id",
            sa.Integer,
            sa.ForeignKey("submissions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("reviewer_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("feedback", sa.Text, nullable=False, server_default=""),
        sa.Column("ready", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("edited", sa.String(32), nullable=False, server_default=""),
    )
    op.create_index("ix_reviews_submission_id", "reviews", ["submission_id"])


def downgrade() -> None:
    """Drop quickfeed tables."""
    op.drop_table("reviews")
    op.drop_table("submissions")
    op.drop_table("grading_criteria")
    op.drop_table("grading_benchmarks")
    op.drop_table("assignments")
    op.drop_table("repositories")
    op.drop_table("enrollments")
    op.drop_table("groups")
    op.drop_table("courses")
    op.drop_table("remote_identities")
    op.drop_table("users")
