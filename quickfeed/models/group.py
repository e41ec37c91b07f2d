# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group schemas."""

from pydantic import BaseModel, Field

from quickfeed.infrastructure.database.models import GroupStatus


class GroupCreateRequest(BaseModel):
    """Request to create a group in a course."""

    name: str = Field(min_length=1, max_length=255)
    user_ids: list[int] = Field(min_length=1)


class GroupUpdateRequest(BaseModel):
    """Changes to a group. Unset fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    user_ids: list[int] | None = Field(default=None, min_length=1)
    status: GroupStatus | None = None


class GroupResponse(BaseModel):
    """Public view of a group."""

    id: int
    course_id: int
    name: str
    status: GroupStatus
    user_ids: list[int]
