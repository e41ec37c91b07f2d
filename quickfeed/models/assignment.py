# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment schemas."""

from pydantic import BaseModel, ConfigDict


class AssignmentResponse(BaseModel):
    """Public view of an assignment.

    ``deadline`` is ``YYYY-MM-DDTHH:MM:SS`` in UTC, or an
    ``Invalid date format`` message for unreadable legacy values.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    assignment_id: int
    name: str
    directory: str
    language: str
    deadline: str
    order: int
    auto_approve: bool
    is_group_lab: bool
    reviewers: int
