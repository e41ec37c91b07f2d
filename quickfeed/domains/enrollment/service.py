# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service.

Users ask to join a course with a pending enrollment; teachers then accept
them as students or teachers, or reject them. Accepting a student
provisions the student's ``<login>-labs`` repository in the course
directory before the new status is stored.

Example:
    >>> service = EnrollmentService(storage)
    >>> await service.create_enrollment(course_id=3, user_id=12)
    >>> async with factory.create(course.provider, token) as scm:
    ...     await service.update_enrollment(scm, 3, 12, EnrollmentStatus.STUDENT)
"""

import logging

from quickfeed.core.errors import AlreadyExistsError, InvalidArgumentError, NotFoundError
from quickfeed.domains.course.service import CourseNotFoundError
from quickfeed.domains.provisioning import (
    CompensationSaga,
    RemoteProvisioner,
    repository_record,
)
from quickfeed.infrastructure.database.models import (
    Course,
    Enrollment,
    EnrollmentStatus,
    RepoType,
)
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.course import CourseWithEnrollmentResponse, EnrollmentResponse
from quickfeed.services.scm import SCM, Directory

logger = logging.getLogger(__name__)


class EnrollmentNotFoundError(NotFoundError):
    """Raised when a user is not enrolled in a course."""

    pass


class EnrollmentExistsError(AlreadyExistsError):
    """Raised when a user is already enrolled in a course."""

    pass


def student_repository_name(login: str) -> str:
    """Name of the personal repository of a student."""
    return f"{login}-labs"


class EnrollmentService:
    """Service for managing course enrollments.

    Attributes:
        _storage: Storage facade of the current request.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def create_enrollment(self, course_id: int, user_id: int) -> EnrollmentResponse:
        """Request enrollment of a user in a course.

        Raises:
            CourseNotFoundError: If the course does not exist.
            EnrollmentExistsError: If the user is already enrolled.
        """
        await self._get_course(course_id)
        if await self._storage.courses.get_enrollment(course_id, user_id) is not None:
            raise EnrollmentExistsError(f"User {user_id} is already enrolled in course {course_id}")

        enrollment = Enrollment(
            course_id=course_id,
            user_id=user_id,
            group_id=None,
            status=EnrollmentStatus.PENDING.value,
        )
        async with self._storage.transaction():
            await self._storage.add(enrollment)

        logger.info("Enrollment requested: user %s in course %s", user_id, course_id)
        return EnrollmentResponse.model_validate(enrollment)

    async def update_enrollment(
        self,
        scm: SCM,
        course_id: int,
        user_id: int,
        status: EnrollmentStatus,
    ) -> EnrollmentResponse:
        """Change the status of an enrollment.

        Accepting a student who has no personal repository yet creates
        ``<login>-labs`` in the course directory first; if storing the new
        status fails the repository is deleted again.

        Raises:
            CourseNotFoundError: If the course does not exist.
            EnrollmentNotFoundError: If the user is not enrolled.
            InvalidArgumentError: If the status change is not allowed.
        """
        course = await self._get_course(course_id)
        enrollment = await self._storage.courses.get_enrollment(course_id, user_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(f"User {user_id} is not enrolled in course {course_id}")

        if status == EnrollmentStatus.PENDING:
            raise InvalidArgumentError("An enrollment cannot be moved back to pending")
        if user_id == course.course_creator_id and status != EnrollmentStatus.TEACHER:
            raise InvalidArgumentError("The course creator must remain a teacher")

        if status == EnrollmentStatus.STUDENT and not await self._has_student_repository(
            course, user_id
        ):
            await self._accept_student(scm, course, enrollment)
        else:
            async with self._storage.transaction():
                enrollment.status = status.value
                if status == EnrollmentStatus.REJECTED:
                    enrollment.group_id = None

        logger.info(
            "Enrollment updated: user %s in course %s is now %s",
            user_id,
            course_id,
            enrollment.status,
        )
        return EnrollmentResponse.model_validate(enrollment)

    async def get_enrollments_by_course(
        self,
        course_id: int,
        statuses: list[EnrollmentStatus] | None = None,
    ) -> list[EnrollmentResponse]:
        """List the enrollments of a course, optionally filtered by status.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        await self._get_course(course_id)
        enrollments = await self._storage.courses.list_enrollments(
            course_id,
            statuses=[s.value for s in statuses] if statuses else None,
        )
        return [EnrollmentResponse.model_validate(e) for e in enrollments]

    async def get_courses_with_enrollment(
        self,
        user_id: int,
        statuses: list[EnrollmentStatus] | None = None,
    ) -> list[CourseWithEnrollmentResponse]:
        """List courses together with the user's enrollment status.

        Args:
            user_id: User whose enrollments are reported.
            statuses: If given, only courses where the user has one of these
                statuses are returned. Otherwise all courses are returned,
                with no status where the user is not enrolled.
        """
        by_course = {
            e.course_id: e for e in await self._storage.courses.list_enrollments_by_user(user_id)
        }
        wanted = {s.value for s in statuses} if statuses else None

        result = []
        for course in await self._storage.courses.list_all():
            enrollment = by_course.get(course.id)
            status = enrollment.status if enrollment else None
            if wanted is not None and status not in wanted:
                continue
            response = CourseWithEnrollmentResponse.model_validate(course)
            response.enrollment = EnrollmentStatus(status) if status else None
            result.append(response)
        return result

    async def _accept_student(self, scm: SCM, course: Course, enrollment: Enrollment) -> None:
        user = await self._storage.users.get(enrollment.user_id)
        if user is None or not user.login:
            raise InvalidArgumentError(
                f"User {enrollment.user_id} has no login to name a repository after"
            )

        directory = Directory(id=course.directory_id, path=course.organization_path)
        async with CompensationSaga("accept student") as saga:
            repository = await RemoteProvisioner(scm, saga).create_repository(
                student_repository_name(user.login),
                directory,
                private=True,
            )
            async with self._storage.transaction():
                enrollment.status = EnrollmentStatus.STUDENT.value
                await self._storage.add(
                    repository_record(repository, RepoType.USER, user_id=user.id)
                )

    async def _has_student_repository(self, course: Course, user_id: int) -> bool:
        repositories = await self._storage.courses.list_repositories(
            course.directory_id,
            repo_type=RepoType.USER.value,
            user_id=user_id,
        )
        return bool(repositories)

    async def _get_course(self, course_id: int) -> Course:
        course = await self._storage.courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course
