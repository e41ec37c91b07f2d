# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Compensating actions for multi-step remote provisioning.

Remote resources cannot take part in a database transaction. Instead, each
step that creates one registers an undo action; when the surrounding block
fails, the undo actions run in reverse order and the original error is
re-raised.

Example:
    >>> async with CompensationSaga("create course") as saga:
    ...     directory = await scm.create_directory(opt)
    ...     saga.add(f"delete directory {directory.path}", lambda: scm.delete_directory(directory))
    ...     await persist_course(directory)
"""

import logging
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Self

logger = logging.getLogger(__name__)

UndoAction = Callable[[], Awaitable[None]]


class CompensationSaga:
    """Collects undo actions and runs them if the block fails.

    Attributes:
        name: Operation name used in log messages.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._actions: list[tuple[str, UndoAction]] = []

    def __len__(self) -> int:
        return len(self._actions)

    def add(self, description: str, action: UndoAction) -> None:
        """Register an undo action for a step that just succeeded.

        Args:
            description: What the action undoes, for logging.
            action: Coroutine function performing the undo.
        """
        self._actions.append((description, action))

    async def compensate(self) -> list[str]:
        """Run registered undo actions, most recent first.

        Failures are logged and do not stop the remaining actions.

        Returns:
            Descriptions of the actions that failed.
        """
        failed: list[str] = []
        while self._actions:
            description, action = self._actions.pop()
            try:
                await action()
                logger.info("%s: compensated (%s)", self.name, description)
            except Exception as e:
                logger.error(
                    "%s: compensation failed (%s): %s",
                    self.name,
                    description,
                    e,
                    exc_info=True,
                )
                failed.append(description)
        return failed

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None:
            self._actions.clear()
            return False

        logger.warning("%s failed, rolling back %d remote steps: %s", self.name, len(self), exc)
        await self.compensate()
        return False
