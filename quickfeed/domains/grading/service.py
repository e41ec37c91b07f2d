# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading service.

Manual edits of an assignment rubric and the reviews graded against it.
Bulk rubric imports from ``criteria.json`` live in the assignment service.

Every operation is scoped to a course: rows reached through an ID that
belongs to another course are reported as missing.
"""

import logging

from quickfeed.core.errors import InvalidArgumentError, NotFoundError
from quickfeed.domains.assignment.service import AssignmentNotFoundError
from quickfeed.domains.submission.service import SubmissionNotFoundError
from quickfeed.infrastructure.database.models import (
    Assignment,
    GradingBenchmark,
    GradingCriterion,
    Review,
    Submission,
)
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.grading import (
    BenchmarkCreateRequest,
    BenchmarkResponse,
    BenchmarkUpdateRequest,
    CriterionCreateRequest,
    CriterionResponse,
    CriterionUpdateRequest,
    ReviewCreateRequest,
    ReviewResponse,
    ReviewUpdateRequest,
)
from quickfeed.utils.datetime import format_review_edited

logger = logging.getLogger(__name__)


class BenchmarkNotFoundError(NotFoundError):
    """Raised when a grading benchmark does not exist."""

    pass


class CriterionNotFoundError(NotFoundError):
    """Raised when a grading criterion does not exist."""

    pass


class ReviewNotFoundError(NotFoundError):
    """Raised when a review does not exist."""

    pass


class TooManyReviewsError(InvalidArgumentError):
    """Raised when a submission already has all the reviews it needs."""

    pass


class GradingService:
    """Service for rubric edits and submission reviews."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def list_benchmarks(self, course_id: int, assignment_id: int) -> list[BenchmarkResponse]:
        """List the rubric of an assignment with nested criteria.

        Args:
            course_id: Course the assignment belongs to.
            assignment_id: Database ID of the assignment.

        Raises:
            AssignmentNotFoundError: If the assignment is not in the course.
        """
        await self._get_assignment(course_id, assignment_id)
        benchmarks = await self._storage.assignments.list_benchmarks(assignment_id)
        criteria = await self._storage.assignments.list_criteria([b.id for b in benchmarks])

        by_benchmark: dict[int, list[CriterionResponse]] = {b.id: [] for b in benchmarks}
        for criterion in criteria:
            by_benchmark[criterion.benchmark_id].append(
                CriterionResponse.model_validate(criterion)
            )

        return [
            BenchmarkResponse(
                id=b.id,
                assignment_id=b.assignment_id,
                heading=b.heading,
                comment=b.comment,
                criteria=by_benchmark[b.id],
            )
            for b in benchmarks
        ]

    async def create_benchmark(
        self,
        course_id: int,
        assignment_id: int,
        request: BenchmarkCreateRequest,
    ) -> BenchmarkResponse:
        """Add an empty benchmark to an assignment rubric."""
        await self._get_assignment(course_id, assignment_id)
        benchmark = GradingBenchmark(
            assignment_id=assignment_id,
            heading=request.heading,
            comment=request.comment,
        )
        async with self._storage.transaction():
            await self._storage.add(benchmark)

        logger.info("Benchmark %s added to assignment %s", benchmark.id, assignment_id)
        return BenchmarkResponse(
            id=benchmark.id,
            assignment_id=benchmark.assignment_id,
            heading=benchmark.heading,
            comment=benchmark.comment,
        )

    async def update_benchmark(
        self,
        course_id: int,
        benchmark_id: int,
        request: BenchmarkUpdateRequest,
    ) -> BenchmarkResponse:
        """Replace heading and comment of a benchmark."""
        benchmark = await self._get_benchmark(course_id, benchmark_id)
        async with self._storage.transaction():
            benchmark.heading = request.heading
            benchmark.comment = request.comment

        criteria = await self._storage.assignments.list_criteria([benchmark.id])
        return BenchmarkResponse(
            id=benchmark.id,
            assignment_id=benchmark.assignment_id,
            heading=benchmark.heading,
            comment=benchmark.comment,
            criteria=[CriterionResponse.model_validate(c) for c in criteria],
        )

    async def delete_benchmark(self, course_id: int, benchmark_id: int) -> None:
        """Delete a benchmark together with its criteria."""
        benchmark = await self._get_benchmark(course_id, benchmark_id)
        async with self._storage.transaction():
            for criterion in await self._storage.assignments.list_criteria([benchmark.id]):
                await self._storage.delete(criterion)
            await self._storage.delete(benchmark)

        logger.info("Benchmark %s deleted", benchmark_id)

    async def create_criterion(
        self,
        course_id: int,
        benchmark_id: int,
        request: CriterionCreateRequest,
    ) -> CriterionResponse:
        """Add a criterion to a benchmark."""
        await self._get_benchmark(course_id, benchmark_id)
        criterion = GradingCriterion(
            benchmark_id=benchmark_id,
            description=request.description,
            points=request.points,
            comment=request.comment,
        )
        async with self._storage.transaction():
            await self._storage.add(criterion)
        return CriterionResponse.model_validate(criterion)

    async def update_criterion(
        self,
        course_id: int,
        criterion_id: int,
        request: CriterionUpdateRequest,
    ) -> CriterionResponse:
        """Replace description, points and comment of a criterion."""
        criterion = await self._get_criterion(course_id, criterion_id)
        async with self._storage.transaction():
            criterion.description = request.description
            criterion.points = request.points
            criterion.comment = request.comment
        return CriterionResponse.model_validate(criterion)

    async def delete_criterion(self, course_id: int, criterion_id: int) -> None:
        """Delete a single criterion."""
        criterion = await self._get_criterion(course_id, criterion_id)
        async with self._storage.transaction():
            await self._storage.delete(criterion)

    async def create_review(
        self,
        course_id: int,
        request: ReviewCreateRequest,
        reviewer_id: int,
    ) -> ReviewResponse:
        """Review a submission.

        Args:
            course_id: Course the submission belongs to.
            request: Submission and grading values.
            reviewer_id: User writing the review.

        Returns:
            The stored review, stamped with the edit time.

        Raises:
            SubmissionNotFoundError: If the submission is not in the course.
            TooManyReviewsError: If the submission already has as many
                reviews as its assignment asks for.
        """
        submission = await self._get_submission(course_id, request.submission_id)
        assignment = await self._get_assignment(course_id, submission.assignment_id)

        reviews = await self._storage.assignments.count_reviews(submission.id)
        if reviews >= assignment.reviewers:
            raise TooManyReviewsError(
                f"Submission {submission.id} already has {reviews} of "
                f"{assignment.reviewers} reviews"
            )

        review = Review(
            submission_id=submission.id,
            reviewer_id=reviewer_id,
            feedback=request.feedback,
            ready=request.ready,
            score=request.score,
            edited=format_review_edited(),
        )
        async with self._storage.transaction():
            await self._storage.add(review)

        logger.info("Review %s created for submission %s", review.id, submission.id)
        return ReviewResponse.model_validate(review)

    async def update_review(
        self,
        course_id: int,
        review_id: int,
        request: ReviewUpdateRequest,
    ) -> ReviewResponse:
        """Update a stored review and refresh its edit time.

        Raises:
            ReviewNotFoundError: If the review is not in the course.
        """
        review = await self._storage.assignments.get_review(review_id)
        if review is None:
            raise ReviewNotFoundError(f"Review {review_id} not found")
        try:
            await self._get_submission(course_id, review.submission_id)
        except SubmissionNotFoundError as e:
            raise ReviewNotFoundError(f"Review {review_id} not found") from e

        async with self._storage.transaction():
            review.feedback = request.feedback
            review.ready = request.ready
            review.score = request.score
            review.edited = format_review_edited()
        return ReviewResponse.model_validate(review)

    async def _get_assignment(self, course_id: int, assignment_id: int) -> Assignment:
        assignment = await self._storage.assignments.get(assignment_id)
        if assignment is None or assignment.course_id != course_id:
            raise AssignmentNotFoundError(
                f"Assignment {assignment_id} not found in course {course_id}"
            )
        return assignment

    async def _get_benchmark(self, course_id: int, benchmark_id: int) -> GradingBenchmark:
        benchmark = await self._storage.assignments.get_benchmark(benchmark_id)
        if benchmark is None or not await self._in_course(course_id, benchmark.assignment_id):
            raise BenchmarkNotFoundError(f"Benchmark {benchmark_id} not found")
        return benchmark

    async def _get_criterion(self, course_id: int, criterion_id: int) -> GradingCriterion:
        criterion = await self._storage.assignments.get_criterion(criterion_id)
        if criterion is None:
            raise CriterionNotFoundError(f"Criterion {criterion_id} not found")
        benchmark = await self._storage.assignments.get_benchmark(criterion.benchmark_id)
        if benchmark is None or not await self._in_course(course_id, benchmark.assignment_id):
            raise CriterionNotFoundError(f"Criterion {criterion_id} not found")
        return criterion

    async def _get_submission(self, course_id: int, submission_id: int) -> Submission:
        submission = await self._storage.assignments.get_submission(submission_id)
        if submission is None or not await self._in_course(course_id, submission.assignment_id):
            raise SubmissionNotFoundError(f"Submission {submission_id} not found")
        return submission

    async def _in_course(self, course_id: int, assignment_id: int) -> bool:
        assignment = await self._storage.assignments.get(assignment_id)
        return assignment is not None and assignment.course_id == course_id
