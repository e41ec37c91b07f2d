# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for quickfeed."""

from quickfeed.infrastructure.database.models.assignment import (
    Assignment,
    GradingBenchmark,
    GradingCriterion,
    Review,
    Submission,
)
from quickfeed.infrastructure.database.models.base import Base, TimestampMixin
from quickfeed.infrastructure.database.models.course import (
    COURSE_REPOSITORIES,
    Course,
    Enrollment,
    EnrollmentStatus,
    Group,
    GroupStatus,
    Repository,
    RepoType,
)
from quickfeed.infrastructure.database.models.user import RemoteIdentity, User

__all__ = [
    "Base",
    "TimestampMixin",
    # Users
    "User",
    "RemoteIdentity",
    # Courses
    "Course",
    "Enrollment",
    "EnrollmentStatus",
    "Group",
    "GroupStatus",
    "Repository",
    "RepoType",
    "COURSE_REPOSITORIES",
    # Assignments
    "Assignment",
    "GradingBenchmark",
    "GradingCriterion",
    "Submission",
    "Review",
]
