# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Queries for courses, their enrollments and their repositories."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickfeed.infrastructure.database.models import Course, Enrollment, Repository


class CourseRepository:
    """Read access to courses, enrollments and repository mirrors."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, course_id: int) -> Course | None:
        """Fetch a course by ID."""
        result = await self._session.execute(select(Course).where(Course.id == course_id))
        return result.scalar_one_or_none()

    async def get_by_directory(self, directory_id: int) -> Course | None:
        """Fetch the course bound to a remote directory."""
        result = await self._session.execute(
            select(Course).where(Course.directory_id == directory_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Course]:
        """Fetch all courses ordered by ID."""
        result = await self._session.execute(select(Course).order_by(Course.id))
        return list(result.scalars().all())

    async def list_directory_ids(self) -> set[int]:
        """IDs of all directories already bound to a course."""
        result = await self._session.execute(select(Course.directory_id))
        return set(result.scalars().all())

    async def get_enrollment(self, course_id: int, user_id: int) -> Enrollment | None:
        """Fetch the enrollment of a user in a course."""
        result = await self._session.execute(
            select(Enrollment).where(
                Enrollment.course_id == course_id,
                Enrollment.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_enrollments(
        self,
        course_id: int,
        statuses: Iterable[str] | None = None,
    ) -> list[Enrollment]:
        """Fetch enrollments of a course, optionally filtered by status."""
        query = select(Enrollment).where(Enrollment.course_id == course_id)
        if statuses is not None:
            query = query.where(Enrollment.status.in_(list(statuses)))
        result = await self._session.execute(query.order_by(Enrollment.id))
        return list(result.scalars().all())

    async def list_enrollments_by_user(self, user_id: int) -> list[Enrollment]:
        """Fetch all enrollments of a user."""
        result = await self._session.execute(
            select(Enrollment).where(Enrollment.user_id == user_id).order_by(Enrollment.id)
        )
        return list(result.scalars().all())

    async def list_repositories(
        self,
        directory_id: int,
        repo_type: str | None = None,
        user_id: int | None = None,
        group_id: int | None = None,
    ) -> list[Repository]:
        """Fetch repository mirrors of a directory matching the filters."""
        query = select(Repository).where(Repository.directory_id == directory_id)
        if repo_type is not None:
            query = query.where(Repository.repo_type == repo_type)
        if user_id is not None:
            query = query.where(Repository.user_id == user_id)
        if group_id is not None:
            query = query.where(Repository.group_id == group_id)
        result = await self._session.execute(query.order_by(Repository.id))
        return list(result.scalars().all())
