# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Deadline parsing and normalization.

Descriptors write deadlines as ``DD-MM-YYYY HH:MM``. Stored deadlines use
the canonical ``YYYY-MM-DDTHH:MM:SS`` layout, but older rows were written in
several other layouts and are normalized when read.
"""

import re
from datetime import datetime, timezone

from quickfeed.utils.datetime import format_deadline

DESCRIPTOR_DEADLINE_FORMAT = "%d-%m-%Y %H:%M"

# strptime accepts unpadded fields; descriptors must use two digits each.
_DESCRIPTOR_DEADLINE_PATTERN = re.compile(r"\d{2}-\d{2}-\d{4} \d{2}:\d{2}")

# Layouts found in stored deadlines, tried in order.
_LEGACY_FORMATS = (
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M",
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
    "%Y-%m-%d",
    "%d-%m-%Y",
)


def parse_deadline(text: str) -> datetime:
    """Parse a descriptor deadline.

    Args:
        text: Deadline in ``DD-MM-YYYY HH:MM`` format.

    Returns:
        The deadline as a UTC-aware datetime.

    Raises:
        ValueError: If the text does not match the format.
    """
    candidate = text.strip()
    if not _DESCRIPTOR_DEADLINE_PATTERN.fullmatch(candidate):
        raise ValueError(f"deadline {text!r} does not match DD-MM-YYYY HH:MM")
    parsed = datetime.strptime(candidate, DESCRIPTOR_DEADLINE_FORMAT)
    return parsed.replace(tzinfo=timezone.utc)


def fix_deadline(text: str) -> str:
    """Normalize a stored deadline to ``YYYY-MM-DDTHH:MM:SS``.

    Args:
        text: Deadline as stored.

    Returns:
        The canonical form, or ``Invalid date format: <text>`` when no
        known layout matches.

    Example:
        >>> fix_deadline("2020-1-25T23:59:00")
        '2020-01-25T23:59:00'
        >>> fix_deadline("25-01-2020 23:59")
        '2020-01-25T23:59:00'
    """
    candidate = text.strip()

    for layout in _LEGACY_FORMATS:
        try:
            return format_deadline(datetime.strptime(candidate, layout))
        except ValueError:
            continue

    try:
        return format_deadline(datetime.fromisoformat(candidate))
    except ValueError:
        return f"Invalid date format: {text}"
