# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User API endpoints.

- GET / - List users (admin)
- GET /{user_id} - Get a user (self or admin)
- PATCH /{user_id} - Update a user (self or admin)
- GET /{user_id}/courses - Courses with the user's enrollment status
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from quickfeed.api.dependencies import (
    get_current_user,
    get_storage,
    require_admin,
    require_self_or_admin,
)
from quickfeed.domains.enrollment import EnrollmentService
from quickfeed.domains.user import UserService
from quickfeed.infrastructure.database.models import EnrollmentStatus, User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.course import CourseWithEnrollmentResponse
from quickfeed.models.user import UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
)
async def list_users(
    _: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
) -> list[UserResponse]:
    """List all users. Requires admin access."""
    return await UserService(storage).list_users()


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
)
async def get_user(
    user_id: int,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    """Get a user by ID."""
    require_self_or_admin(user_id, caller)
    return await UserService(storage).get_user(user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
)
async def update_user(
    user_id: int,
    data: UserUpdateRequest,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    """Update a user's profile. Only admins may change admin rights."""
    return await UserService(storage).update_user(user_id, data, caller)


@router.get(
    "/{user_id}/courses",
    response_model=list[CourseWithEnrollmentResponse],
    summary="List courses with enrollment",
)
async def list_courses_with_enrollment(
    user_id: int,
    statuses: Annotated[
        list[EnrollmentStatus] | None,
        Query(alias="status", description="Filter by status"),
    ] = None,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> list[CourseWithEnrollmentResponse]:
    """List courses together with the user's enrollment status."""
    require_self_or_admin(user_id, caller)
    return await EnrollmentService(storage).get_courses_with_enrollment(user_id, statuses)
