# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for quickfeed.

All Python datetimes handled by the services are timezone-aware UTC.
Deadlines are persisted as canonical text and reviews carry a short
human-readable edit stamp; both formats live here.

Usage:
------
    from quickfeed.utils.datetime import utc_now, format_deadline

    deadline_text = format_deadline(parsed.deadline)
"""

from datetime import datetime, timezone

DEADLINE_STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S"
REVIEW_EDITED_FORMAT = "%d %b %H:%M"


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None. Naive values are assumed
        to already be in UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_deadline(dt: datetime) -> str:
    """Format a deadline in the canonical storage layout.

    Args:
        dt: Deadline to format.

    Returns:
        String such as ``2024-09-01T23:59:00`` (UTC, no offset).
    """
    return ensure_utc(dt).strftime(DEADLINE_STORAGE_FORMAT)


def format_review_edited(dt: datetime | None = None) -> str:
    """Format the edit stamp stored on reviews.

    Args:
        dt: Moment of the edit. Defaults to now.

    Returns:
        String such as ``01 Sep 23:59``.
    """
    return ensure_utc(dt or utc_now()).strftime(REVIEW_EDITED_FORMAT)
