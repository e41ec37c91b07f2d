# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

- POST / - Create a course with its directory and repositories (admin)
- GET / - List courses
- GET /providers - SCM providers enabled on this server
- GET /organizations - Directories available for a new course (admin)
- GET /{course_id} - Get a course
- PUT /{course_id} - Update a course (teacher)
- POST /{course_id}/refresh - Synchronize assignments from git (teacher)
- GET /{course_id}/assignments - List assignments (student or teacher)
- GET /{course_id}/repositories/{repo_type} - URL of a course repository
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from quickfeed.api.dependencies import (
    get_current_user,
    get_scm_factory,
    get_storage,
    open_scm,
    require_admin,
    require_course_member,
    require_course_teacher,
)
from quickfeed.core.errors import NotFoundError
from quickfeed.domains.assignment import AssignmentService
from quickfeed.domains.course import CourseService
from quickfeed.infrastructure.database.models import RepoType, User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.assignment import AssignmentResponse
from quickfeed.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
    OrganizationResponse,
    ProvidersResponse,
    RepositoryURLResponse,
)
from quickfeed.services.scm import ScmFactory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
)
async def create_course(
    data: CourseCreateRequest,
    caller: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
    factory: ScmFactory = Depends(get_scm_factory),
) -> CourseResponse:
    """Create a course, its directory and its repositories.

    Remote resources created before a failure are deleted again.
    """
    logger.info("Creating course %s on %s by %s", data.code, data.provider, caller.id)
    async with open_scm(factory, caller, data.provider) as scm:
        return await CourseService(storage).create_course(scm, data, caller)


@router.get(
    "",
    response_model=list[CourseResponse],
    summary="List courses",
)
async def list_courses(
    _: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> list[CourseResponse]:
    """List all courses."""
    return await CourseService(storage).list_courses()


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List SCM providers",
)
async def get_providers(
    _: User = Depends(get_current_user),
    factory: ScmFactory = Depends(get_scm_factory),
) -> ProvidersResponse:
    """List the SCM providers enabled on this server."""
    providers = factory.enabled_providers
    if not providers:
        raise NotFoundError("no SCM providers enabled")
    return ProvidersResponse(providers=providers)


@router.get(
    "/organizations",
    response_model=list[OrganizationResponse],
    summary="List free organizations",
)
async def list_organizations(
    provider: Annotated[str, Query(min_length=1, description="SCM provider")],
    caller: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
    factory: ScmFactory = Depends(get_scm_factory),
) -> list[OrganizationResponse]:
    """List the caller's directories that no course uses yet."""
    async with open_scm(factory, caller, provider) as scm:
        return await CourseService(storage).list_organizations(scm, factory.settings.max_wait)


@router.get(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Get course",
)
async def get_course(
    course_id: int,
    _: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> CourseResponse:
    """Get a course by ID."""
    return await CourseService(storage).get_course(course_id)


@router.put(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Update course",
)
async def update_course(
    course_id: int,
    data: CourseUpdateRequest,
    caller: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
    factory: ScmFactory = Depends(get_scm_factory),
) -> CourseResponse:
    """Update course details."""
    service = CourseService(storage)
    course = await service.get_course(course_id)
    async with open_scm(factory, caller, course.provider) as scm:
        return await service.update_course(scm, course_id, data)


@router.post(
    "/{course_id}/refresh",
    response_model=list[AssignmentResponse],
    summary="Refresh course assignments",
)
async def refresh_course(
    course_id: int,
    caller: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
    factory: ScmFactory = Depends(get_scm_factory),
) -> list[AssignmentResponse]:
    """Synchronize assignments with the descriptors in the tests repository."""
    course = await CourseService(storage).get_course(course_id)
    async with open_scm(factory, caller, course.provider) as scm:
        return await AssignmentService(storage).refresh_course(scm, course_id)


@router.get(
    "/{course_id}/assignments",
    response_model=list[AssignmentResponse],
    summary="List assignments",
)
async def get_assignments(
    course_id: int,
    _: User = Depends(require_course_member),
    storage: Storage = Depends(get_storage),
) -> list[AssignmentResponse]:
    """List the assignments of a course in order."""
    return await AssignmentService(storage).get_assignments(course_id)


@router.get(
    "/{course_id}/repositories/{repo_type}",
    response_model=RepositoryURLResponse,
    summary="Get repository URL",
)
async def get_repository_url(
    course_id: int,
    repo_type: RepoType,
    caller: User = Depends(require_course_member),
    storage: Storage = Depends(get_storage),
) -> RepositoryURLResponse:
    """Get the URL of a course repository, or of the caller's own one."""
    return await CourseService(storage).get_repository_url(course_id, caller.id, repo_type)
