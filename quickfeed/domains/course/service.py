# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service.

This module provides the CourseService that handles:
- Course creation with provisioning of the course directory and repositories
- Course updates and lookups
- Listing directories still available for new courses
- Resolving repository URLs for a user

Course creation follows the create-then-persist ordering: remote resources
are created first and the course is stored only when all of them exist.
Any failure deletes the remote resources created by the request.

Example:
    >>> service = CourseService(storage)
    >>> async with factory.create(request.provider, token) as scm:
    ...     course = await service.create_course(scm, request, creator)
"""

import asyncio
import logging

from quickfeed.core.errors import AlreadyExistsError, NotFoundError
from quickfeed.domains.provisioning import (
    CompensationSaga,
    RemoteProvisioner,
    repository_record,
)
from quickfeed.infrastructure.database.models import (
    COURSE_REPOSITORIES,
    Course,
    Enrollment,
    EnrollmentStatus,
    RepoType,
    User,
)
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
    OrganizationResponse,
    RepositoryURLResponse,
)
from quickfeed.services.scm import SCM, Directory, ScmTimeoutError

logger = logging.getLogger(__name__)

# Repositories that hold material students must not see.
PRIVATE_COURSE_REPOSITORIES = frozenset({RepoType.TESTS, RepoType.SOLUTIONS})


class CourseNotFoundError(NotFoundError):
    """Raised when a course does not exist."""

    pass


class CourseAlreadyExistsError(AlreadyExistsError):
    """Raised when the directory already holds a course."""

    pass


class RepositoryNotFoundError(NotFoundError):
    """Raised when a course has no repository of the requested kind."""

    pass


class CourseService:
    """Service for creating and managing courses.

    Attributes:
        _storage: Storage facade of the current request.
    """

    def __init__(self, storage: Storage) -> None:
        """Initialize the course service.

        Args:
            storage: Storage facade of the current request.
        """
        self._storage = storage

    async def create_course(
        self,
        scm: SCM,
        request: CourseCreateRequest,
        creator: User,
    ) -> CourseResponse:
        """Create a course with its directory and repositories.

        Steps:
        1. Resolve the existing directory, or create a new one
        2. Refuse directories that already hold course repositories
        3. Create the course-info, assignments, tests and solutions repositories
        4. Persist the course, the repository mirrors and a teacher
           enrollment for the creator

        Args:
            scm: Client authenticated as the creator.
            request: Course details and directory reference.
            creator: User creating the course.

        Returns:
            The created course.

        Raises:
            ScmNotFoundError: If directory_id does not resolve.
            CourseAlreadyExistsError: If the directory is already used.
        """
        async with CompensationSaga("create course") as saga:
            provisioner = RemoteProvisioner(scm, saga)

            if request.directory_id is not None:
                directory = await scm.get_directory(request.directory_id)
            else:
                directory = await provisioner.create_directory(
                    name=request.directory_name or request.directory_path,
                    path=request.directory_path,
                )

            await self._ensure_directory_unused(scm, directory)

            repositories = []
            for repo_type in COURSE_REPOSITORIES:
                repository = await provisioner.create_repository(
                    repo_type.value,
                    directory,
                    private=repo_type in PRIVATE_COURSE_REPOSITORIES,
                )
                repositories.append((repository, repo_type))

            async with self._storage.transaction():
                course = Course(
                    name=request.name,
                    code=request.code,
                    year=request.year,
                    tag=request.tag,
                    provider=scm.provider.value,
                    directory_id=directory.id,
                    organization_path=directory.path,
                    course_creator_id=creator.id,
                )
                await self._storage.add(course)

                for repository, repo_type in repositories:
                    await self._storage.add(repository_record(repository, repo_type))

                await self._storage.add(
                    Enrollment(
                        course_id=course.id,
                        user_id=creator.id,
                        group_id=None,
                        status=EnrollmentStatus.TEACHER.value,
                    )
                )

        logger.info(
            "Course created: %s (id=%s, directory=%s) by user %s",
            course.code,
            course.id,
            directory.path,
            creator.id,
        )
        return CourseResponse.model_validate(course)

    async def update_course(
        self,
        scm: SCM,
        course_id: int,
        request: CourseUpdateRequest,
    ) -> CourseResponse:
        """Update course details after checking its directory still exists.

        Raises:
            CourseNotFoundError: If the course does not exist.
            ScmNotFoundError: If the course directory is gone.
        """
        course = await self._get_course(course_id)
        await scm.get_directory(course.directory_id)

        async with self._storage.transaction():
            course.name = request.name
            course.code = request.code
            course.year = request.year
            course.tag = request.tag

        logger.info("Course updated: %s", course.id)
        return CourseResponse.model_validate(course)

    async def get_course(self, course_id: int) -> CourseResponse:
        """Get a course by ID.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        return CourseResponse.model_validate(await self._get_course(course_id))

    async def list_courses(self) -> list[CourseResponse]:
        """List all courses."""
        return [CourseResponse.model_validate(c) for c in await self._storage.courses.list_all()]

    async def list_organizations(self, scm: SCM, max_wait: float) -> list[OrganizationResponse]:
        """List directories of the caller that are not bound to a course.

        Args:
            scm: Client authenticated as the caller.
            max_wait: Upper bound in seconds for the provider call.

        Raises:
            ScmTimeoutError: If the provider does not answer within max_wait.
        """
        try:
            async with asyncio.timeout(max_wait):
                directories = await scm.list_directories()
        except TimeoutError as e:
            logger.warning("Listing organizations exceeded %.1fs", max_wait)
            raise ScmTimeoutError(
                f"listing organizations took longer than {max_wait}s",
                scm.provider.value,
                "list_directories",
            ) from e

        used = await self._storage.courses.list_directory_ids()
        return [
            OrganizationResponse(id=d.id, path=d.path, avatar_url=d.avatar_url)
            for d in directories
            if d.id not in used
        ]

    async def get_repository_url(
        self,
        course_id: int,
        user_id: int,
        repo_type: RepoType,
    ) -> RepositoryURLResponse:
        """Get the browser URL of a course repository.

        For ``user`` and ``group`` repositories the repository of the given
        user, or of their group, is returned.

        Raises:
            CourseNotFoundError: If the course does not exist.
            RepositoryNotFoundError: If no matching repository exists.
        """
        course = await self._get_course(course_id)

        user_filter: int | None = None
        group_filter: int | None = None
        if repo_type == RepoType.USER:
            user_filter = user_id
        elif repo_type == RepoType.GROUP:
            enrollment = await self._storage.courses.get_enrollment(course_id, user_id)
            if enrollment is None or enrollment.group_id is None:
                raise RepositoryNotFoundError(
                    f"User {user_id} has no group in course {course_id}"
                )
            group_filter = enrollment.group_id

        repositories = await self._storage.courses.list_repositories(
            course.directory_id,
            repo_type=repo_type.value,
            user_id=user_filter,
            group_id=group_filter,
        )
        if not repositories:
            raise RepositoryNotFoundError(
                f"No {repo_type.value} repository found for course {course_id}"
            )
        return RepositoryURLResponse(repo_type=repo_type.value, html_url=repositories[0].html_url)

    async def _get_course(self, course_id: int) -> Course:
        course = await self._storage.courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def _ensure_directory_unused(self, scm: SCM, directory: Directory) -> None:
        """Refuse a directory bound to a course or holding course repositories."""
        if await self._storage.courses.get_by_directory(directory.id) is not None:
            raise CourseAlreadyExistsError(
                f"Directory {directory.path} is already used by a course"
            )

        existing = {repository.path for repository in await scm.get_repositories(directory)}
        taken = [t.value for t in COURSE_REPOSITORIES if t.value in existing]
        if taken:
            raise CourseAlreadyExistsError(
                f"Directory {directory.path} already contains course repositories",
                {"repositories": taken},
            )
