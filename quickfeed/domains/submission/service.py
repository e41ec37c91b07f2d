# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission service.

This module provides the SubmissionService that handles:
- Recording a submission of an assignment by a student or a group
- Reading one submission or listing those of a course, a user or a group
- Approving and rescoring submissions

Reads are open to the submitting student, members of the submitting group,
teachers of the course and admins. Every lookup is scoped to a course:
submissions reached through another course are reported as missing.

Example:
    >>> service = SubmissionService(storage)
    >>> mine = await service.get_submissions(course_id, caller, user_id=caller.id)
    >>> await service.update_submission(course_id, mine[0].id, SubmissionUpdateRequest(approved=True))
"""

import logging

from quickfeed.core.errors import InvalidArgumentError, NotFoundError, PermissionDeniedError
from quickfeed.domains.assignment.service import AssignmentNotFoundError
from quickfeed.domains.course.service import CourseNotFoundError
from quickfeed.infrastructure.database.models import (
    Assignment,
    EnrollmentStatus,
    Submission,
    User,
)
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.submission import (
    SubmissionCreateRequest,
    SubmissionResponse,
    SubmissionUpdateRequest,
)

logger = logging.getLogger(__name__)


class SubmissionNotFoundError(NotFoundError):
    """Raised when a submission does not exist."""

    pass


class InvalidSubmissionOwnerError(InvalidArgumentError):
    """Raised when a submission owner does not fit the assignment."""

    pass


class SubmissionService:
    """Service for submission records and their approval."""

    def __init__(self, storage: Storage) -> None:
        """Initialize the service.

        Args:
            storage: Storage facade of the current request.
        """
        self._storage = storage

    async def create_submission(
        self,
        course_id: int,
        request: SubmissionCreateRequest,
    ) -> SubmissionResponse:
        """Record a submission of an assignment.

        Group assignments are submitted by groups of the course and all
        other assignments by students of the course. New submissions are
        not approved.

        Args:
            course_id: Course of the assignment.
            request: Assignment, owner, commit and score.

        Returns:
            The stored submission.

        Raises:
            CourseNotFoundError: If the course does not exist.
            AssignmentNotFoundError: If the assignment is not in the course.
            InvalidSubmissionOwnerError: If the owner does not match the
                assignment kind or is not part of the course.
        """
        await self._get_course(course_id)
        assignment = await self._get_assignment(course_id, request.assignment_id)

        if assignment.is_group_lab:
            if request.group_id is None:
                raise InvalidSubmissionOwnerError(
                    f"Assignment {assignment.id} is a group assignment and needs a group"
                )
            group = await self._storage.groups.get(request.group_id)
            if group is None or group.course_id != course_id:
                raise InvalidSubmissionOwnerError(
                    f"Group {request.group_id} is not in course {course_id}"
                )
        else:
            if request.user_id is None:
                raise InvalidSubmissionOwnerError(
                    f"Assignment {assignment.id} is an individual assignment and needs a user"
                )
            enrollment = await self._storage.courses.get_enrollment(course_id, request.user_id)
            if enrollment is None or enrollment.status != EnrollmentStatus.STUDENT.value:
                raise InvalidSubmissionOwnerError(
                    f"User {request.user_id} is not a student of course {course_id}"
                )

        submission = Submission(
            assignment_id=assignment.id,
            user_id=request.user_id,
            group_id=request.group_id,
            score=request.score,
            commit_hash=request.commit_hash,
            approved=False,
        )
        async with self._storage.transaction():
            await self._storage.add(submission)

        logger.info(
            "Submission %s recorded for assignment %s (score=%s)",
            submission.id,
            assignment.id,
            submission.score,
        )
        return SubmissionResponse.model_validate(submission)

    async def get_submission(
        self,
        course_id: int,
        submission_id: int,
        caller: User,
    ) -> SubmissionResponse:
        """Get a submission visible to the caller.

        Raises:
            SubmissionNotFoundError: If the submission is not in the course.
            PermissionDeniedError: If the caller is neither an owner nor a
                teacher of the course.
        """
        submission = await self._get_submission(course_id, submission_id)
        if not await self._can_access(course_id, caller, submission.user_id, submission.group_id):
            raise PermissionDeniedError(
                "Only members, teachers or admins can access submissions"
            )
        return SubmissionResponse.model_validate(submission)

    async def get_submissions(
        self,
        course_id: int,
        caller: User,
        user_id: int | None = None,
        group_id: int | None = None,
    ) -> list[SubmissionResponse]:
        """List submissions of a course.

        Args:
            course_id: Course to list.
            caller: Authenticated user.
            user_id: Only submissions of this student.
            group_id: Only submissions of this group.

        Returns:
            Submissions ordered by assignment order. Without filters every
            submission of the course is returned, which only teachers may
            ask for.

        Raises:
            CourseNotFoundError: If the course does not exist.
            PermissionDeniedError: If the caller may not see the submissions.
        """
        await self._get_course(course_id)
        if user_id is None and group_id is None:
            allowed = await self._is_teacher(course_id, caller)
        else:
            allowed = await self._can_access(course_id, caller, user_id, group_id)
        if not allowed:
            raise PermissionDeniedError(
                "Only members, teachers or admins can access submissions"
            )

        rows = await self._storage.assignments.list_submissions(
            course_id, user_id=user_id, group_id=group_id
        )
        return [SubmissionResponse.model_validate(row) for row in rows]

    async def update_submission(
        self,
        course_id: int,
        submission_id: int,
        request: SubmissionUpdateRequest,
    ) -> SubmissionResponse:
        """Approve, unapprove or rescore a submission.

        Raises:
            SubmissionNotFoundError: If the submission is not in the course.
        """
        submission = await self._get_submission(course_id, submission_id)
        async with self._storage.transaction():
            if request.approved is not None:
                submission.approved = request.approved
            if request.score is not None:
                submission.score = request.score

        logger.info(
            "Submission %s updated (approved=%s, score=%s)",
            submission.id,
            submission.approved,
            submission.score,
        )
        return SubmissionResponse.model_validate(submission)

    async def _get_course(self, course_id: int) -> None:
        if await self._storage.courses.get(course_id) is None:
            raise CourseNotFoundError(f"Course {course_id} not found")

    async def _get_assignment(self, course_id: int, assignment_id: int) -> Assignment:
        assignment = await self._storage.assignments.get(assignment_id)
        if assignment is None or assignment.course_id != course_id:
            raise AssignmentNotFoundError(
                f"Assignment {assignment_id} not found in course {course_id}"
            )
        return assignment

    async def _get_submission(self, course_id: int, submission_id: int) -> Submission:
        submission = await self._storage.assignments.get_submission(submission_id)
        if submission is not None:
            assignment = await self._storage.assignments.get(submission.assignment_id)
            if assignment is not None and assignment.course_id == course_id:
                return submission
        raise SubmissionNotFoundError(f"Submission {submission_id} not found")

    async def _is_teacher(self, course_id: int, user: User) -> bool:
        if user.is_admin:
            return True
        enrollment = await self._storage.courses.get_enrollment(course_id, user.id)
        return enrollment is not None and enrollment.status == EnrollmentStatus.TEACHER.value

    async def _can_access(
        self,
        course_id: int,
        caller: User,
        user_id: int | None,
        group_id: int | None,
    ) -> bool:
        if await self._is_teacher(course_id, caller):
            return True
        enrollment = await self._storage.courses.get_enrollment(course_id, caller.id)
        if enrollment is None or enrollment.status != EnrollmentStatus.STUDENT.value:
            return False
        if user_id is not None and user_id == caller.id:
            return True
        return group_id is not None and enrollment.group_id == group_id
