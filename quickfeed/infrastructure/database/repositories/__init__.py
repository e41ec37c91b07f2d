# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Query repositories grouped by aggregate."""

from quickfeed.infrastructure.database.repositories.assignment import AssignmentRepository
from quickfeed.infrastructure.database.repositories.course import CourseRepository
from quickfeed.infrastructure.database.repositories.group import GroupRepository
from quickfeed.infrastructure.database.repositories.user import UserRepository

__all__ = [
    "AssignmentRepository",
    "CourseRepository",
    "GroupRepository",
    "UserRepository",
]
