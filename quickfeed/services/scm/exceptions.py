# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions raised by SCM provider clients.

Provider responses are collapsed into three observable outcomes (not found,
already exists, anything else) so that callers never branch on provider
specific status codes or payloads.
"""

from typing import Any

import httpx

from quickfeed.core.errors import AlreadyExistsError, InternalError, NotFoundError

# Fragments used by GitHub (422) and GitLab (400) to report a name collision.
_ALREADY_EXISTS_MARKERS = ("already exists", "has already been taken")


class ScmError(InternalError):
    """Base exception for SCM provider failures.

    Failures the provider does not classify stay internal; the subclasses
    narrow the category for missing and colliding resources.

    Attributes:
        provider: Name of the provider that failed.
        operation: Client operation that was being performed.
        status_code: HTTP status returned by the provider, if any.
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        operation: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.provider = provider
        self.operation = operation
        self.status_code = status_code
        super().__init__(message, details)


class ScmNotFoundError(ScmError, NotFoundError):
    """Raised when a directory, repository or file does not exist remotely."""

    pass


class ScmAlreadyExistsError(ScmError, AlreadyExistsError):
    """Raised when the provider rejects a path that is already taken."""

    pass


class ScmTimeoutError(ScmError):
    """Raised when a provider call exceeds its time budget."""

    pass


def error_from_response(
    response: httpx.Response,
    provider: str,
    operation: str,
) -> ScmError:
    """Translate a failed provider response into an SCM exception.

    Args:
        response: Response with a 4xx or 5xx status.
        provider: Provider name for error context.
        operation: Client operation for error context.

    Returns:
        The exception matching the response category.
    """
    status = response.status_code
    message = f"{provider} {operation} failed with status {status}"

    if status == 404:
        return ScmNotFoundError(message, provider, operation, status)

    if status == 409:
        return ScmAlreadyExistsError(message, provider, operation, status)

    if status in (400, 422):
        body = response.text.lower()
        if any(marker in body for marker in _ALREADY_EXISTS_MARKERS):
            return ScmAlreadyExistsError(message, provider, operation, status)

    return ScmError(
        message,
        provider,
        operation,
        status,
        details={"response": response.text[:500]},
    )
