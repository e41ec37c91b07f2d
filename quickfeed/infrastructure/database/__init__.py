# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure: connection, models, repositories and storage."""

from quickfeed.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_session,
    init_database,
)
from quickfeed.infrastructure.database.storage import Storage

__all__ = [
    "DatabaseError",
    "Storage",
    "check_database_connection",
    "close_database",
    "get_session",
    "init_database",
]
