# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading rubric and review schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CriterionCreateRequest(BaseModel):
    """Request to add a criterion to a benchmark."""

    description: str = Field(min_length=1)
    points: int = Field(default=0, ge=0)
    comment: str = ""


class CriterionUpdateRequest(CriterionCreateRequest):
    """Replacement values for a criterion."""

    pass


class BenchmarkCreateRequest(BaseModel):
    """Request to add a benchmark to an assignment."""

    heading: str = Field(min_length=1, max_length=255)
    comment: str = ""


class BenchmarkUpdateRequest(BenchmarkCreateRequest):
    """Replacement values for a benchmark."""

    pass


class CriterionResponse(BaseModel):
    """Public view of a criterion."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    benchmark_id: int
    description: str
    points: int
    comment: str


class BenchmarkResponse(BaseModel):
    """Public view of a benchmark with its criteria."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    assignment_id: int
    heading: str
    comment: str
    criteria: list[CriterionResponse] = []


class ReviewCreateRequest(BaseModel):
    """Request to review a submission."""

    submission_id: int = Field(gt=0)
    feedback: str = ""
    ready: bool = False
    score: int = Field(default=0, ge=0, le=100)


class ReviewUpdateRequest(BaseModel):
    """Replacement values for a review."""

    feedback: str = ""
    ready: bool = False
    score: int = Field(default=0, ge=0, le=100)


class ReviewResponse(BaseModel):
    """Public view of a review."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    submission_id: int
    reviewer_id: int
    feedback: str
    ready: bool
    score: int
    edited: str
