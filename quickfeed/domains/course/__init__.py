# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain."""

from quickfeed.domains.course.service import (
    CourseAlreadyExistsError,
    CourseNotFoundError,
    CourseService,
    RepositoryNotFoundError,
)

__all__ = [
    "CourseService",
    "CourseNotFoundError",
    "CourseAlreadyExistsError",
    "RepositoryNotFoundError",
]
