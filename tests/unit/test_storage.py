# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the Storage unit of work."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from quickfeed.infrastructure.database.connection import DatabaseError
from quickfeed.infrastructure.database.models import Course
from quickfeed.infrastructure.database.storage import Storage


@pytest.fixture
def session() -> MagicMock:
    """Provide a mocked AsyncSession."""
    session = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    return session


class TestStorage:
    """Tests for Storage."""

    @pytest.mark.asyncio
    async def test_add_flushes(self, session: MagicMock) -> None:
        storage = Storage(session)
        course = Course(name="OS")

        await storage.add(course)

        session.add.assert_called_once_with(course)
        session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transaction_commits(self, session: MagicMock) -> None:
        storage = Storage(session)

        async with storage.transaction():
            pass

        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, session: MagicMock) -> None:
        storage = Storage(session)

        with pytest.raises(ValueError):
            async with storage.transaction():
                raise ValueError("boom")

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_errors_are_wrapped(self, session: MagicMock) -> None:
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))
        storage = Storage(session)

        with pytest.raises(DatabaseError) as exc_info:
            async with storage.transaction():
                pass

        assert isinstance(exc_info.value.original_error, IntegrityError)
        session.rollback.assert_awaited_once()
