# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group service.

This module provides the GroupService that handles:
- Group creation by students or teachers (groups start out pending)
- Group lookups by ID, by course and by member
- Group updates, where approval provisions the group repository
- Group deletion

Members of a group are enrollments pointing at it; a student can belong
to at most one group per course.

Example:
    >>> service = GroupService(storage)
    >>> group = await service.create_group(course_id, request, caller)
    >>> async with factory.create(course.provider, token) as scm:
    ...     await service.update_group(scm, group.id, GroupUpdateRequest(status="approved"))
"""

import logging

from quickfeed.core.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
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
    Group,
    GroupStatus,
    RepoType,
    User,
)
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.group import GroupCreateRequest, GroupResponse, GroupUpdateRequest
from quickfeed.services.scm import SCM, Directory

logger = logging.getLogger(__name__)


class GroupNotFoundError(NotFoundError):
    """Raised when a group does not exist."""

    pass


class GroupNameTakenError(AlreadyExistsError):
    """Raised when a course already has a group with the requested name."""

    pass


class InvalidGroupMembersError(InvalidArgumentError):
    """Raised when proposed members cannot form the group."""

    pass


class GroupService:
    """Service for managing student groups.

    Attributes:
        _storage: Storage facade of the current request.
    """

    def __init__(self, storage: Storage) -> None:
        """Initialize the group service.

        Args:
            storage: Storage facade of the current request.
        """
        self._storage = storage

    async def create_group(
        self,
        course_id: int,
        request: GroupCreateRequest,
        caller: User,
    ) -> GroupResponse:
        """Create a pending group.

        Args:
            course_id: Course of the group.
            request: Name and members of the group.
            caller: User creating the group. Must be one of the members,
                a teacher of the course or an admin.

        Returns:
            The created group.

        Raises:
            CourseNotFoundError: If the course does not exist.
            PermissionDeniedError: If the caller may not create the group.
            GroupNameTakenError: If the name is already used in the course.
            InvalidGroupMembersError: If a member is not an enrolled student
                or already belongs to another group.
        """
        await self._get_course(course_id)
        user_ids = sorted(set(request.user_ids))

        if caller.id not in user_ids and not await self._is_teacher(course_id, caller):
            raise PermissionDeniedError("Only members, teachers or admins can create a group")

        if await self._storage.groups.get_by_name(course_id, request.name) is not None:
            raise GroupNameTakenError(f"Group name '{request.name}' is already in use")

        members = await self._validate_members(course_id, user_ids, group_id=None)

        group = Group(course_id=course_id, name=request.name, status=GroupStatus.PENDING.value)
        async with self._storage.transaction():
            await self._storage.add(group)
            for enrollment in members:
                enrollment.group_id = group.id

        logger.info("Group created: %s (id=%s) in course %s", group.name, group.id, course_id)
        return self._to_response(group, user_ids)

    async def get_group(self, group_id: int) -> GroupResponse:
        """Get a group by ID.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        group = await self._get_group(group_id)
        return await self._build_response(group)

    async def get_groups(self, course_id: int) -> list[GroupResponse]:
        """List the groups of a course.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        await self._get_course(course_id)
        return [
            await self._build_response(group)
            for group in await self._storage.groups.list_by_course(course_id)
        ]

    async def get_group_by_user_and_course(self, user_id: int, course_id: int) -> GroupResponse:
        """Get the group a user belongs to in a course.

        Raises:
            GroupNotFoundError: If the user has no group in the course.
        """
        enrollment = await self._storage.courses.get_enrollment(course_id, user_id)
        if enrollment is None or enrollment.group_id is None:
            raise GroupNotFoundError(f"User {user_id} has no group in course {course_id}")
        return await self.get_group(enrollment.group_id)

    async def update_group(
        self,
        scm: SCM,
        group_id: int,
        request: GroupUpdateRequest,
    ) -> GroupResponse:
        """Update name, members or status of a group.

        Approving a group that has no repository yet creates one named
        after the group in the course directory before the change is
        stored; if storing fails the repository is deleted again.

        Raises:
            GroupNotFoundError: If the group does not exist.
            GroupNameTakenError: If the new name is already used.
            InvalidGroupMembersError: If the new members are not valid.
        """
        group = await self._get_group(group_id)
        course = await self._get_course(group.course_id)

        if request.name is not None and request.name != group.name:
            other = await self._storage.groups.get_by_name(course.id, request.name)
            if other is not None:
                raise GroupNameTakenError(f"Group name '{request.name}' is already in use")

        current = await self._storage.groups.list_members(group.id)
        if request.user_ids is not None:
            user_ids = sorted(set(request.user_ids))
            members = await self._validate_members(course.id, user_ids, group_id=group.id)
        else:
            user_ids = sorted(e.user_id for e in current)
            members = current

        status = request.status.value if request.status is not None else group.status
        name = request.name if request.name is not None else group.name

        needs_repository = (
            status == GroupStatus.APPROVED.value
            and not await self._has_group_repository(course, group.id)
        )

        async with CompensationSaga("update group") as saga:
            repository = None
            if needs_repository:
                directory = Directory(id=course.directory_id, path=course.organization_path)
                repository = await RemoteProvisioner(scm, saga).create_repository(
                    name,
                    directory,
                    private=True,
                )

            async with self._storage.transaction():
                group.name = name
                group.status = status
                for enrollment in current:
                    if enrollment.user_id not in user_ids:
                        enrollment.group_id = None
                for enrollment in members:
                    enrollment.group_id = group.id
                if repository is not None:
                    await self._storage.add(
                        repository_record(repository, RepoType.GROUP, group_id=group.id)
                    )

        logger.info("Group updated: %s (id=%s, status=%s)", group.name, group.id, group.status)
        return self._to_response(group, user_ids)

    async def delete_group(self, group_id: int) -> None:
        """Delete a group and release its members.

        The group repository, if any, is kept.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        group = await self._get_group(group_id)
        async with self._storage.transaction():
            for enrollment in await self._storage.groups.list_members(group.id):
                enrollment.group_id = None
            await self._storage.delete(group)

        logger.info("Group deleted: %s", group_id)

    async def _validate_members(
        self,
        course_id: int,
        user_ids: list[int],
        group_id: int | None,
    ) -> list[Enrollment]:
        """Check that users are students of the course and free to join."""
        members = []
        for user_id in user_ids:
            enrollment = await self._storage.courses.get_enrollment(course_id, user_id)
            if enrollment is None or enrollment.status != EnrollmentStatus.STUDENT.value:
                raise InvalidGroupMembersError(
                    f"User {user_id} is not a student of course {course_id}"
                )
            if enrollment.group_id is not None and enrollment.group_id != group_id:
                raise InvalidGroupMembersError(f"User {user_id} is already in another group")
            members.append(enrollment)
        return members

    async def _is_teacher(self, course_id: int, user: User) -> bool:
        if user.is_admin:
            return True
        enrollment = await self._storage.courses.get_enrollment(course_id, user.id)
        return enrollment is not None and enrollment.status == EnrollmentStatus.TEACHER.value

    async def _has_group_repository(self, course: Course, group_id: int) -> bool:
        repositories = await self._storage.courses.list_repositories(
            course.directory_id,
            repo_type=RepoType.GROUP.value,
            group_id=group_id,
        )
        return bool(repositories)

    async def _get_group(self, group_id: int) -> Group:
        group = await self._storage.groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(f"Group {group_id} not found")
        return group

    async def _get_course(self, course_id: int) -> Course:
        course = await self._storage.courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def _build_response(self, group: Group) -> GroupResponse:
        members = await self._storage.groups.list_members(group.id)
        return self._to_response(group, sorted(e.user_id for e in members))

    @staticmethod
    def _to_response(group: Group, user_ids: list[int]) -> GroupResponse:
        return GroupResponse(
            id=group.id,
            course_id=group.course_id,
            name=group.name,
            status=GroupStatus(group.status),
            user_ids=user_ids,
        )
