# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment synchronization service.

This module keeps the assignments of a course in line with the descriptors
in the course ``tests`` repository:
- update_assignments: fetch descriptors through the SCM client and upsert
- get_assignments: list stored assignments with normalized deadlines
- load_criteria: replace the grading rubric of an assignment
- refresh_course: update_assignments followed by get_assignments

Assignments are matched by (course_id, assignment_id). Assignments whose
descriptor disappeared are kept so that their submissions survive.

Example:
    >>> service = AssignmentService(storage)
    >>> async with factory.create(course.provider, token) as scm:
    ...     assignments = await service.refresh_course(scm, course.id)
"""

import asyncio
import logging

from quickfeed.core.errors import NotFoundError
from quickfeed.domains.assignment.criteria import criteria_path, parse_criteria
from quickfeed.domains.assignment.deadline import fix_deadline
from quickfeed.domains.assignment.parser import (
    InMemoryFileTree,
    ParsedAssignment,
    is_descriptor,
    parse_assignments,
)
from quickfeed.domains.course.service import CourseNotFoundError
from quickfeed.infrastructure.database.models import (
    Assignment,
    Course,
    GradingBenchmark,
    GradingCriterion,
    RepoType,
)
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.assignment import AssignmentResponse
from quickfeed.models.grading import BenchmarkResponse, CriterionResponse
from quickfeed.services.scm import SCM, FileOptions
from quickfeed.utils.datetime import format_deadline

logger = logging.getLogger(__name__)


class AssignmentNotFoundError(NotFoundError):
    """Raised when an assignment does not exist in the given course."""

    pass


def _assignment_values(parsed: ParsedAssignment) -> dict[str, object]:
    return {
        "name": parsed.name,
        "directory": parsed.directory,
        "language": parsed.language,
        "deadline": format_deadline(parsed.deadline),
        "order": parsed.order,
        "auto_approve": parsed.auto_approve,
        "is_group_lab": parsed.is_group_lab,
        "reviewers": parsed.reviewers,
    }


class AssignmentService:
    """Service for synchronizing assignments and rubrics.

    Attributes:
        _storage: Storage facade of the current request.
    """

    def __init__(self, storage: Storage) -> None:
        """Initialize the assignment service.

        Args:
            storage: Storage facade of the current request.
        """
        self._storage = storage

    async def update_assignments(self, scm: SCM, course_id: int) -> list[AssignmentResponse]:
        """Fetch assignment descriptors of a course and upsert them.

        Args:
            scm: Client authenticated for the course provider.
            course_id: ID of the course.

        Returns:
            All stored assignments of the course after the update.

        Raises:
            CourseNotFoundError: If the course does not exist.
            ScmNotFoundError: If the tests repository does not exist.
            AssignmentParseError: If any descriptor is invalid. Nothing is
                written in that case.
        """
        course = await self._get_course(course_id)
        parsed = await self._fetch_assignments(scm, course)

        inserted = updated = 0
        async with self._storage.transaction():
            existing = {
                row.assignment_id: row
                for row in await self._storage.assignments.list_by_course(course.id)
            }
            for assignment in parsed:
                values = _assignment_values(assignment)
                row = existing.get(assignment.assignment_id)
                if row is None:
                    await self._storage.add(
                        Assignment(
                            course_id=course.id,
                            assignment_id=assignment.assignment_id,
                            **values,
                        )
                    )
                    inserted += 1
                    continue

                changed = False
                for field, value in values.items():
                    if getattr(row, field) != value:
                        setattr(row, field, value)
                        changed = True
                if changed:
                    updated += 1

        logger.info(
            "Assignments synchronized for course %s: %d inserted, %d updated, %d unchanged",
            course.id,
            inserted,
            updated,
            len(parsed) - inserted - updated,
        )
        return await self.get_assignments(course.id)

    async def get_assignments(self, course_id: int) -> list[AssignmentResponse]:
        """List the assignments of a course ordered by their order index.

        Legacy deadline layouts are normalized in the response; stored rows
        are left untouched.

        Raises:
            CourseNotFoundError: If the course does not exist.
        """
        await self._get_course(course_id)
        rows = await self._storage.assignments.list_by_course(course_id)
        return [self._to_response(row) for row in rows]

    async def refresh_course(self, scm: SCM, course_id: int) -> list[AssignmentResponse]:
        """Synchronize the assignments of a course and return them."""
        return await self.update_assignments(scm, course_id)

    async def load_criteria(
        self,
        scm: SCM,
        course_id: int,
        assignment_id: int,
    ) -> list[BenchmarkResponse]:
        """Replace the grading rubric of an assignment with the one in git.

        The rubric is read from ``<assignment folder>/criteria.json`` in the
        tests repository. Old benchmarks, their criteria and all reviews of
        the assignment's submissions are deleted and the new rubric is
        inserted in a single transaction.

        Args:
            scm: Client authenticated for the course provider.
            course_id: ID of the course.
            assignment_id: Database ID of the assignment.

        Returns:
            The new benchmarks with their criteria.

        Raises:
            AssignmentNotFoundError: If the assignment is not in the course.
            ScmNotFoundError: If the rubric file does not exist.
            CriteriaParseError: If the rubric file is invalid. Nothing is
                written in that case.
        """
        assignment = await self._storage.assignments.get(assignment_id)
        if assignment is None or assignment.course_id != course_id:
            raise AssignmentNotFoundError(
                f"Assignment {assignment_id} not found in course {course_id}"
            )
        course = await self._get_course(course_id)

        path = criteria_path(assignment.directory or assignment.name)
        text = await scm.get_file_content(
            FileOptions(
                owner=course.organization_path,
                repository=RepoType.TESTS.value,
                path=path,
            )
        )
        rubric = parse_criteria(text, source=path)

        benchmarks: list[BenchmarkResponse] = []
        async with self._storage.transaction():
            reviews = await self._storage.assignments.delete_reviews_for_assignment(assignment.id)
            old = await self._storage.assignments.delete_rubric(assignment.id)

            for item in rubric:
                benchmark = GradingBenchmark(
                    assignment_id=assignment.id,
                    heading=item.heading,
                    comment=item.comment,
                )
                await self._storage.add(benchmark)

                criteria: list[CriterionResponse] = []
                for entry in item.criteria:
                    criterion = GradingCriterion(
                        benchmark_id=benchmark.id,
                        description=entry.description,
                        points=entry.points,
                        comment=entry.comment,
                    )
                    await self._storage.add(criterion)
                    criteria.append(CriterionResponse.model_validate(criterion))

                benchmarks.append(
                    BenchmarkResponse(
                        id=benchmark.id,
                        assignment_id=benchmark.assignment_id,
                        heading=benchmark.heading,
                        comment=benchmark.comment,
                        criteria=criteria,
                    )
                )

        logger.info(
            "Rubric of assignment %s replaced: %d benchmarks and %d reviews removed, %d benchmarks loaded",
            assignment.id,
            old,
            reviews,
            len(benchmarks),
        )
        return benchmarks

    async def _get_course(self, course_id: int) -> Course:
        course = await self._storage.courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def _fetch_assignments(self, scm: SCM, course: Course) -> list[ParsedAssignment]:
        """Download and parse every descriptor of the course tests repository."""
        repository = FileOptions(owner=course.organization_path, repository=RepoType.TESTS.value)
        paths = [path for path in await scm.list_files(repository) if is_descriptor(path)]

        contents = await asyncio.gather(
            *(
                scm.get_file_content(
                    FileOptions(owner=repository.owner, repository=repository.repository, path=path)
                )
                for path in paths
            )
        )
        logger.debug(
            "Fetched %d descriptors from %s/%s",
            len(paths),
            repository.owner,
            repository.repository,
        )
        return parse_assignments(InMemoryFileTree(dict(zip(paths, contents))), course.id)

    @staticmethod
    def _to_response(row: Assignment) -> AssignmentResponse:
        response = AssignmentResponse.model_validate(row)
        response.deadline = fix_deadline(row.deadline)
        return response
