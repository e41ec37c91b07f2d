# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SubmissionCreateRequest(BaseModel):
    """Request to record a submission of an assignment.

    Exactly one of ``user_id`` and ``group_id`` identifies the owner.
    """

    assignment_id: int = Field(gt=0)
    user_id: int | None = Field(default=None, gt=0)
    group_id: int | None = Field(default=None, gt=0)
    commit_hash: str = Field(default="", max_length=64)
    score: int = Field(default=0, ge=0, le=100)

    @model_validator(mode="after")
    def check_owner(self) -> "SubmissionCreateRequest":
        """Require exactly one owner."""
        if (self.user_id is None) == (self.group_id is None):
            raise ValueError("exactly one of user_id and group_id must be set")
        return self


class SubmissionUpdateRequest(BaseModel):
    """Approval and score changes for a submission. Unset fields are kept."""

    approved: bool | None = None
    score: int | None = Field(default=None, ge=0, le=100)


class SubmissionResponse(BaseModel):
    """Public view of a submission."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    assignment_id: int
    user_id: int | None
    group_id: int | None
    score: int
    commit_hash: str
    approved: bool
