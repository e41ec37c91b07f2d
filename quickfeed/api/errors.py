# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation of domain errors into HTTP responses.

Services raise errors from quickfeed.core.errors; only their category
decides the status code. Errors outside the four client categories are
logged with their cause and answered with a generic message so that no
provider or database detail leaks to the caller.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from quickfeed.core.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    QuickfeedError,
)
from quickfeed.infrastructure.database.connection import DatabaseError

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "server error; check server logs for details"

_STATUS_BY_CATEGORY: tuple[tuple[type[QuickfeedError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (AlreadyExistsError, status.HTTP_409_CONFLICT),
)


def to_http_exception(exc: Exception) -> HTTPException:
    """Build the HTTPException returned for a failed operation.

    Args:
        exc: Error raised by a service or SCM client.

    Returns:
        HTTPException carrying the error message for client errors, or the
        generic server error for everything else.
    """
    if isinstance(exc, QuickfeedError):
        for category, status_code in _STATUS_BY_CATEGORY:
            if isinstance(exc, category):
                return HTTPException(status_code=status_code, detail=exc.message)

    logger.error("Request failed: %s", exc, exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=GENERIC_SERVER_ERROR,
    )


async def _handle_error(request: Request, exc: Exception) -> JSONResponse:
    http_exc = to_http_exception(exc)
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers translating domain, database and unexpected errors.

    The ``Exception`` handler runs in the outermost server error middleware,
    so unexpected failures are logged here and answered with the generic
    JSON detail instead of a plain-text 500.
    """
    app.add_exception_handler(QuickfeedError, _handle_error)
    app.add_exception_handler(DatabaseError, _handle_error)
    app.add_exception_handler(Exception, _handle_error)
