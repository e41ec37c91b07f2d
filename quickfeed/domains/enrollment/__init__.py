# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain."""

from quickfeed.domains.enrollment.service import (
    EnrollmentExistsError,
    EnrollmentNotFoundError,
    EnrollmentService,
    student_repository_name,
)

__all__ = [
    "EnrollmentService",
    "EnrollmentNotFoundError",
    "EnrollmentExistsError",
    "student_repository_name",
]
