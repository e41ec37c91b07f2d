# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User request and response schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserResponse(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    login: str
    email: str
    student_id: str
    avatar_url: str
    is_admin: bool


class UserUpdateRequest(BaseModel):
    """Changes to a user. Unset fields are left unchanged.

    Only admins may change is_admin.
    """

    name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    student_id: str | None = Field(default=None, max_length=64)
    avatar_url: str | None = Field(default=None, max_length=512)
    is_admin: bool | None = None
