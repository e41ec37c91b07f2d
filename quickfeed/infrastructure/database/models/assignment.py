# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment, grading rubric, submission and review models."""

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from quickfeed.infrastructure.database.models.base import Base, TimestampMixin


class Assignment(Base, TimestampMixin):
    """An assignment declared by a descriptor in the course tests repository.

    ``assignment_id`` is the ID written in the descriptor and is unique per
    course; ``id`` is the database key other tables refer to.
    """

    __tablename__ = "assignments"
    __table_args__ = (UniqueConstraint("course_id", "assignment_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assignment_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    directory: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    language: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    deadline: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    auto_approve: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_group_lab: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reviewers: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class GradingBenchmark(Base):
    """A heading of an assignment rubric grouping criteria."""

    __tablename__ = "grading_benchmarks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    heading: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")


class GradingCriterion(Base):
    """A single scored item of a benchmark."""

    __tablename__ = "grading_criteria"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    benchmark_id: Mapped[int] = mapped_column(
        ForeignKey("grading_benchmarks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")


class Submission(Base, TimestampMixin):
    """A graded delivery of an assignment by a user or a group."""

    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    group_id: Mapped[int | None] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    commit_hash: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Review(Base):
    """A manual review of a submission against the assignment rubric."""

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reviewer_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    feedback: Mapped[str] = mapped_column(Text, nullable=False, default="")
    ready: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    edited: Mapped[str] = mapped_column(String(32), nullable=False, default="")
