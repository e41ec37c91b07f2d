# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the storage facade of the request
- Get the authenticated user
- Check admin and course role predicates
- Open SCM clients bound to the caller's own access token

Example:
    @router.get("/courses/{course_id}")
    async def get_course(
        course_id: int,
        caller: User = Depends(get_current_user),
        storage: Storage = Depends(get_storage),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status

from quickfeed.core.errors import PermissionDeniedError
from quickfeed.infrastructure.database.connection import get_session
from quickfeed.infrastructure.database.models import EnrollmentStatus, User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.services.scm import SCM, ScmFactory

logger = logging.getLogger(__name__)


async def get_storage() -> AsyncGenerator[Storage, None]:
    """Get the storage facade for one request.

    Yields:
        Storage over a fresh database session.
    """
    async with get_session() as session:
        yield Storage(session)


def get_scm_factory(request: Request) -> ScmFactory:
    """Get the SCM client factory created at startup."""
    return request.app.state.scm_factory


async def get_current_user(
    request: Request,
    storage: Storage = Depends(get_storage),
) -> User:
    """Require an authenticated user and load it.

    Raises:
        HTTPException: 401 if the request carries no valid token or the
            user no longer exists.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await storage.users.get(user_id)
    if user is None:
        logger.warning("Token subject %s does not match any user", user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(caller: User = Depends(get_current_user)) -> User:
    """Require an admin user.

    Raises:
        HTTPException: 403 if the caller is not an admin.
    """
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return caller


async def require_course_teacher(
    course_id: int,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> User:
    """Require a teacher of the course in the path, or an admin.

    Raises:
        HTTPException: 403 if the caller does not teach the course.
    """
    if not await has_course_status(storage, course_id, caller, EnrollmentStatus.TEACHER):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teacher access required",
        )
    return caller


async def require_course_member(
    course_id: int,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> User:
    """Require a student or teacher of the course in the path, or an admin.

    Raises:
        HTTPException: 403 if the caller is not enrolled in the course.
    """
    if not await has_course_status(
        storage,
        course_id,
        caller,
        EnrollmentStatus.TEACHER,
        EnrollmentStatus.STUDENT,
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Course access required",
        )
    return caller


async def has_course_status(
    storage: Storage,
    course_id: int,
    user: User,
    *statuses: EnrollmentStatus,
) -> bool:
    """Check whether a user is an admin or has one of the enrollment statuses."""
    if user.is_admin:
        return True
    enrollment = await storage.courses.get_enrollment(course_id, user.id)
    return enrollment is not None and enrollment.status in {s.value for s in statuses}


def require_self_or_admin(user_id: int, caller: User) -> None:
    """Raise 403 unless the caller is the given user or an admin."""
    if caller.id != user_id and not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )


def open_scm(factory: ScmFactory, caller: User, provider: str) -> SCM:
    """Create an SCM client acting as the caller.

    Args:
        factory: Factory from the application state.
        caller: Authenticated user whose access token is used.
        provider: Provider of the course, e.g. "github".

    Returns:
        A client to be used as an async context manager.

    Raises:
        PermissionDeniedError: If the caller has no token for the provider.
        InvalidArgumentError: If the provider is unknown or disabled.
    """
    token = caller.token_for(provider)
    if not token:
        raise PermissionDeniedError(f"User {caller.id} has no {provider} access token")
    return factory.create(provider, token)
