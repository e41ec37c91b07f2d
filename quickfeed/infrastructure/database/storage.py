# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Storage facade used by the domain services.

Storage bundles the query repositories of one session and is the only way
services write: rows are added or deleted through it, and every multi-step
write happens inside ``transaction()`` which commits on success and rolls
back on any exception.

Example:
    >>> storage = Storage(session)
    >>> async with storage.transaction():
    ...     await storage.add(course)
    ...     await storage.add(repository)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickfeed.infrastructure.database.connection import DatabaseError
from quickfeed.infrastructure.database.models import Base
from quickfeed.infrastructure.database.repositories import (
    AssignmentRepository,
    CourseRepository,
    GroupRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


class Storage:
    """Unit of work over one database session.

    Attributes:
        users: User queries.
        courses: Course, enrollment and repository queries.
        groups: Group queries.
        assignments: Assignment, rubric, submission and review queries.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the storage.

        Args:
            session: Async database session owned by the caller.
        """
        self._session = session
        self.users = UserRepository(session)
        self.courses = CourseRepository(session)
        self.groups = GroupRepository(session)
        self.assignments = AssignmentRepository(session)

    async def add(self, instance: Base) -> None:
        """Stage a new row and flush so that its ID is assigned."""
        self._session.add(instance)
        await self._session.flush()

    async def delete(self, instance: Base) -> None:
        """Delete a row."""
        await self._session.delete(instance)
        await self._session.flush()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run a block of writes atomically.

        Raises:
            DatabaseError: If the database rejects the writes.
        """
        try:
            yield
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Transaction rolled back: %s", e)
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await self._session.rollback()
            raise
