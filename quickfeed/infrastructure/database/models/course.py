# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course, enrollment, group and repository models."""

from enum import Enum

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from quickfeed.infrastructure.database.models.base import Base, TimestampMixin


class EnrollmentStatus(str, Enum):
    """Status of a user in a course."""

    PENDING = "pending"
    STUDENT = "student"
    TEACHER = "teacher"
    REJECTED = "rejected"


class GroupStatus(str, Enum):
    """Approval status of a student group."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RepoType(str, Enum):
    """Role of a repository within a course."""

    COURSE_INFO = "course-info"
    ASSIGNMENTS = "assignments"
    TESTS = "tests"
    SOLUTIONS = "solutions"
    USER = "user"
    GROUP = "group"


COURSE_REPOSITORIES: tuple[RepoType, ...] = (
    RepoType.COURSE_INFO,
    RepoType.ASSIGNMENTS,
    RepoType.TESTS,
    RepoType.SOLUTIONS,
)


class Course(Base, TimestampMixin):
    """A course backed by one remote directory."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(64), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    tag: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    directory_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    organization_path: Mapped[str] = mapped_column(String(255), nullable=False)
    course_creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)


class Group(Base, TimestampMixin):
    """A set of students working together on group assignments."""

    __tablename__ = "groups"
    __table_args__ = (UniqueConstraint("course_id", "name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GroupStatus.PENDING.value
    )


class Enrollment(Base, TimestampMixin):
    """Membership of a user in a course."""

    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("course_id", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    group_id: Mapped[int | None] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EnrollmentStatus.PENDING.value
    )


class Repository(Base, TimestampMixin):
    """Local mirror of a remote repository owned by a course."""

    __tablename__ = "repositories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    repository_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    directory_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    html_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    repo_type: Mapped[str] = mapped_column(String(20), nullable=False)
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    group_id: Mapped[int | None] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
