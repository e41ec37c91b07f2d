# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission domain: recording, reading and approving submissions."""

from quickfeed.domains.submission.service import (
    InvalidSubmissionOwnerError,
    SubmissionNotFoundError,
    SubmissionService,
)

__all__ = [
    "SubmissionService",
    "SubmissionNotFoundError",
    "InvalidSubmissionOwnerError",
]
