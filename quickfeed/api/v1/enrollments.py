# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

- POST /{course_id}/enrollments - Request enrollment for the caller
- GET /{course_id}/enrollments - List enrollments (teacher)
- PUT /{course_id}/enrollments/{user_id} - Accept, reject or promote (teacher)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from quickfeed.api.dependencies import (
    get_current_user,
    get_scm_factory,
    get_storage,
    open_scm,
    require_course_teacher,
)
from quickfeed.domains.course import CourseService
from quickfeed.domains.enrollment import EnrollmentService
from quickfeed.infrastructure.database.models import EnrollmentStatus, User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.course import EnrollmentResponse, EnrollmentUpdateRequest
from quickfeed.services.scm import ScmFactory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{course_id}/enrollments",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request enrollment",
)
async def create_enrollment(
    course_id: int,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> EnrollmentResponse:
    """Request enrollment of the caller in a course."""
    return await EnrollmentService(storage).create_enrollment(course_id, caller.id)


@router.get(
    "/{course_id}/enrollments",
    response_model=list[EnrollmentResponse],
    summary="List enrollments",
)
async def list_enrollments(
    course_id: int,
    statuses: Annotated[
        list[EnrollmentStatus] | None,
        Query(alias="status", description="Filter by status"),
    ] = None,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> list[EnrollmentResponse]:
    """List the enrollments of a course."""
    return await EnrollmentService(storage).get_enrollments_by_course(course_id, statuses)


@router.put(
    "/{course_id}/enrollments/{user_id}",
    response_model=EnrollmentResponse,
    summary="Update enrollment",
)
async def update_enrollment(
    course_id: int,
    user_id: int,
    data: EnrollmentUpdateRequest,
    caller: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
    factory: ScmFactory = Depends(get_scm_factory),
) -> EnrollmentResponse:
    """Change an enrollment status.

    Accepting a student creates the student's repository.
    """
    course = await CourseService(storage).get_course(course_id)
    async with open_scm(factory, caller, course.provider) as scm:
        return await EnrollmentService(storage).update_enrollment(
            scm, course_id, user_id, data.status
        )
