# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Queries for users and their remote identities."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickfeed.infrastructure.database.models import User


class UserRepository:
    """Read access to users."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int) -> User | None:
        """Fetch a user by ID, with remote identities loaded."""
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: list[int]) -> list[User]:
        """Fetch several users by ID. Unknown IDs are skipped."""
        if not user_ids:
            return []
        result = await self._session.execute(
            select(User).where(User.id.in_(user_ids)).order_by(User.id)
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[User]:
        """Fetch all users ordered by ID."""
        result = await self._session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())
