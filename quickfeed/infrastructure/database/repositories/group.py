# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Queries for student groups."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickfeed.infrastructure.database.models import Enrollment, Group


class GroupRepository:
    """Read access to groups and their members."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, group_id: int) -> Group | None:
        """Fetch a group by ID."""
        result = await self._session.execute(select(Group).where(Group.id == group_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, course_id: int, name: str) -> Group | None:
        """Fetch a group of a course by name."""
        result = await self._session.execute(
            select(Group).where(Group.course_id == course_id, Group.name == name)
        )
        return result.scalar_one_or_none()

    async def list_by_course(self, course_id: int) -> list[Group]:
        """Fetch the groups of a course ordered by ID."""
        result = await self._session.execute(
            select(Group).where(Group.course_id == course_id).order_by(Group.id)
        )
        return list(result.scalars().all())

    async def list_members(self, group_id: int) -> list[Enrollment]:
        """Fetch the enrollments pointing at a group."""
        result = await self._session.execute(
            select(Enrollment).where(Enrollment.group_id == group_id).order_by(Enrollment.user_id)
        )
        return list(result.scalars().all())
