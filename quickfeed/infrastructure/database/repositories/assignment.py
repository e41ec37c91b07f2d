# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Queries for assignments, grading rubrics, submissions and reviews."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickfeed.infrastructure.database.models import (
    Assignment,
    GradingBenchmark,
    GradingCriterion,
    Review,
    Submission,
)


class AssignmentRepository:
    """Access to assignments and everything graded against them."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, assignment_id: int) -> Assignment | None:
        """Fetch an assignment by database ID."""
        result = await self._session.execute(
            select(Assignment).where(Assignment.id == assignment_id)
        )
        return result.scalar_one_or_none()

    async def list_by_course(self, course_id: int) -> list[Assignment]:
        """Fetch the assignments of a course ordered by their order index."""
        result = await self._session.execute(
            select(Assignment)
            .where(Assignment.course_id == course_id)
            .order_by(Assignment.order, Assignment.assignment_id)
        )
        return list(result.scalars().all())

    async def list_benchmarks(self, assignment_id: int) -> list[GradingBenchmark]:
        """Fetch the rubric benchmarks of an assignment."""
        result = await self._session.execute(
            select(GradingBenchmark)
            .where(GradingBenchmark.assignment_id == assignment_id)
            .order_by(GradingBenchmark.id)
        )
        return list(result.scalars().all())

    async def list_criteria(self, benchmark_ids: list[int]) -> list[GradingCriterion]:
        """Fetch the criteria of the given benchmarks."""
        if not benchmark_ids:
            return []
        result = await self._session.execute(
            select(GradingCriterion)
            .where(GradingCriterion.benchmark_id.in_(benchmark_ids))
            .order_by(GradingCriterion.id)
        )
        return list(result.scalars().all())

    async def get_benchmark(self, benchmark_id: int) -> GradingBenchmark | None:
        """Fetch a benchmark by ID."""
        result = await self._session.execute(
            select(GradingBenchmark).where(GradingBenchmark.id == benchmark_id)
        )
        return result.scalar_one_or_none()

    async def get_criterion(self, criterion_id: int) -> GradingCriterion | None:
        """Fetch a criterion by ID."""
        result = await self._session.execute(
            select(GradingCriterion).where(GradingCriterion.id == criterion_id)
        )
        return result.scalar_one_or_none()

    async def delete_rubric(self, assignment_id: int) -> int:
        """Delete every benchmark and criterion of an assignment.

        Returns:
            Number of benchmarks deleted.
        """
        benchmark_ids = select(GradingBenchmark.id).where(
            GradingBenchmark.assignment_id == assignment_id
        )
        await self._session.execute(
            delete(GradingCriterion).where(GradingCriterion.benchmark_id.in_(benchmark_ids))
        )
        result = await self._session.execute(
            delete(GradingBenchmark).where(GradingBenchmark.assignment_id == assignment_id)
        )
        return result.rowcount or 0

    async def get_submission(self, submission_id: int) -> Submission | None:
        """Fetch a submission by ID."""
        result = await self._session.execute(
            select(Submission).where(Submission.id == submission_id)
        )
        return result.scalar_one_or_none()

    async def list_submissions(
        self,
        course_id: int,
        user_id: int | None = None,
        group_id: int | None = None,
    ) -> list[Submission]:
        """Fetch submissions to assignments of a course, optionally by owner."""
        query = (
            select(Submission)
            .join(Assignment, Submission.assignment_id == Assignment.id)
            .where(Assignment.course_id == course_id)
        )
        if user_id is not None:
            query = query.where(Submission.user_id == user_id)
        if group_id is not None:
            query = query.where(Submission.group_id == group_id)
        result = await self._session.execute(query.order_by(Assignment.order, Submission.id))
        return list(result.scalars().all())

    async def get_review(self, review_id: int) -> Review | None:
        """Fetch a review by ID."""
        result = await self._session.execute(select(Review).where(Review.id == review_id))
        return result.scalar_one_or_none()

    async def count_reviews(self, submission_id: int) -> int:
        """Count the reviews of a submission."""
        result = await self._session.execute(
            select(func.count()).select_from(Review).where(Review.submission_id == submission_id)
        )
        return result.scalar_one()

    async def delete_reviews_for_assignment(self, assignment_id: int) -> int:
        """Delete the reviews of every submission of an assignment.

        Returns:
            Number of reviews deleted.
        """
        submission_ids = select(Submission.id).where(Submission.assignment_id == assignment_id)
        result = await self._session.execute(
            delete(Review).where(Review.submission_id.in_(submission_ids))
        )
        return result.rowcount or 0
