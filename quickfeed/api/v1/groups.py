# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group API endpoints.

- POST /{course_id}/groups - Create a group (member, teacher or admin)
- GET /{course_id}/groups - List groups (teacher)
- GET /{course_id}/groups/{group_id} - Get a group (group member or teacher)
- PUT /{course_id}/groups/{group_id} - Update or approve a group (teacher)
- DELETE /{course_id}/groups/{group_id} - Delete a group (teacher)
- GET /{course_id}/users/{user_id}/group - Group of a user (self or teacher)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from quickfeed.api.dependencies import (
    get_current_user,
    get_scm_factory,
    get_storage,
    has_course_status,
    open_scm,
    require_course_teacher,
)
from quickfeed.domains.course import CourseService
from quickfeed.domains.group import GroupNotFoundError, GroupService
from quickfeed.infrastructure.database.models import EnrollmentStatus, User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.group import GroupCreateRequest, GroupResponse, GroupUpdateRequest
from quickfeed.services.scm import ScmFactory

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_course_group(service: GroupService, course_id: int, group_id: int) -> GroupResponse:
    """Get a group and make sure it belongs to the course in the path."""
    group = await service.get_group(group_id)
    if group.course_id != course_id:
        raise GroupNotFoundError(f"Group {group_id} not found in course {course_id}")
    return group


@router.post(
    "/{course_id}/groups",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create group",
)
async def create_group(
    course_id: int,
    data: GroupCreateRequest,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> GroupResponse:
    """Create a pending group of students."""
    return await GroupService(storage).create_group(course_id, data, caller)


@router.get(
    "/{course_id}/groups",
    response_model=list[GroupResponse],
    summary="List groups",
)
async def list_groups(
    course_id: int,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> list[GroupResponse]:
    """List the groups of a course."""
    return await GroupService(storage).get_groups(course_id)


@router.get(
    "/{course_id}/groups/{group_id}",
    response_model=GroupResponse,
    summary="Get group",
)
async def get_group(
    course_id: int,
    group_id: int,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> GroupResponse:
    """Get a group. Visible to its members and the course teachers."""
    group = await _get_course_group(GroupService(storage), course_id, group_id)
    if caller.id not in group.user_ids and not await has_course_status(
        storage, course_id, caller, EnrollmentStatus.TEACHER
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return group


@router.get(
    "/{course_id}/users/{user_id}/group",
    response_model=GroupResponse,
    summary="Get group of user",
)
async def get_group_by_user(
    course_id: int,
    user_id: int,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> GroupResponse:
    """Get the group a user belongs to in a course."""
    if caller.id != user_id and not await has_course_status(
        storage, course_id, caller, EnrollmentStatus.TEACHER
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return await GroupService(storage).get_group_by_user_and_course(user_id, course_id)


@router.put(
    "/{course_id}/groups/{group_id}",
    response_model=GroupResponse,
    summary="Update group",
)
async def update_group(
    course_id: int,
    group_id: int,
    data: GroupUpdateRequest,
    caller: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
    factory: ScmFactory = Depends(get_scm_factory),
) -> GroupResponse:
    """Update a group. Approving it creates the group repository."""
    service = GroupService(storage)
    await _get_course_group(service, course_id, group_id)
    course = await CourseService(storage).get_course(course_id)
    async with open_scm(factory, caller, course.provider) as scm:
        return await service.update_group(scm, group_id, data)


@router.delete(
    "/{course_id}/groups/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete group",
)
async def delete_group(
    course_id: int,
    group_id: int,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> None:
    """Delete a group. Its repository is kept."""
    service = GroupService(storage)
    await _get_course_group(service, course_id, group_id)
    await service.delete_group(group_id)
