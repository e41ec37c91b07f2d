# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading domain: rubric edits and reviews."""

from quickfeed.domains.grading.service import (
    BenchmarkNotFoundError,
    CriterionNotFoundError,
    GradingService,
    ReviewNotFoundError,
    SubmissionNotFoundError,
    TooManyReviewsError,
)

__all__ = [
    "GradingService",
    "BenchmarkNotFoundError",
    "CriterionNotFoundError",
    "SubmissionNotFoundError",
    "ReviewNotFoundError",
    "TooManyReviewsError",
]
