# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group domain."""

from quickfeed.domains.group.service import (
    GroupNameTakenError,
    GroupNotFoundError,
    GroupService,
    InvalidGroupMembersError,
)

__all__ = [
    "GroupService",
    "GroupNotFoundError",
    "GroupNameTakenError",
    "InvalidGroupMembersError",
]
