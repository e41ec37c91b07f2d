# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    users: User lookup and profile updates.
    courses: Course creation, assignments, organizations and providers.
    enrollments: Enrollment requests and approvals.
    groups: Student groups.
    grading: Rubrics and reviews.
    submissions: Submission records and approval.
"""

from fastapi import APIRouter

from quickfeed.api.v1 import courses, enrollments, grading, groups, submissions, users

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(enrollments.router, prefix="/courses", tags=["Enrollments"])
router.include_router(groups.router, prefix="/courses", tags=["Groups"])
router.include_router(grading.router, prefix="/courses", tags=["Grading"])
router.include_router(submissions.router, prefix="/courses", tags=["Submissions"])

__all__ = ["router"]
