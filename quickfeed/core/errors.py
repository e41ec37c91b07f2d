# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by all quickfeed components.

Every exception raised on purpose by a domain service or an SCM client
derives from QuickfeedError and from one of the categories below. SCM
errors are internal unless a narrower client category applies. The API
layer only looks at the category when building a response:

- NotFoundError: entity absent in storage or on the remote provider
- PermissionDeniedError: authorization predicate failed
- InvalidArgumentError: malformed or semantically invalid input
- AlreadyExistsError: local or remote uniqueness violation
- InternalError: anything else; details are logged, never returned
"""

from typing import Any


class QuickfeedError(Exception):
    """Base exception for quickfeed errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class NotFoundError(QuickfeedError):
    """Raised when a requested entity does not exist."""

    pass


class PermissionDeniedError(QuickfeedError):
    """Raised when the caller is not allowed to perform an operation."""

    pass


class InvalidArgumentError(QuickfeedError):
    """Raised when a request or a fetched document is malformed."""

    pass


class AlreadyExistsError(QuickfeedError):
    """Raised when an entity collides with an existing one."""

    pass


class InternalError(QuickfeedError):
    """Raised for failures that must not be described to the caller."""

    pass
