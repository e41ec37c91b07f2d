# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course, enrollment and organization schemas."""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from quickfeed.infrastructure.database.models import EnrollmentStatus


class CourseCreateRequest(BaseModel):
    """Request to create a course.

    Either ``directory_id`` of an existing directory or a
    ``directory_path`` for a new one must be given.
    """

    name: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=64)
    year: int = Field(ge=2000, le=3000)
    tag: str = Field(default="", max_length=64)
    provider: str = Field(min_length=1, max_length=20)
    directory_id: int | None = Field(default=None, gt=0)
    directory_name: str | None = Field(default=None, max_length=255)
    directory_path: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def validate_directory(self) -> Self:
        """Require a directory reference or the path of a new directory."""
        if self.directory_id is None and not self.directory_path:
            raise ValueError("either directory_id or directory_path is required")
        return self


class CourseUpdateRequest(BaseModel):
    """Changes to a course."""

    name: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=64)
    year: int = Field(ge=2000, le=3000)
    tag: str = Field(default="", max_length=64)


class CourseResponse(BaseModel):
    """Public view of a course."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    year: int
    tag: str
    provider: str
    directory_id: int
    organization_path: str
    course_creator_id: int


class CourseWithEnrollmentResponse(CourseResponse):
    """Course together with the caller's enrollment status, if any."""

    enrollment: EnrollmentStatus | None = None


class OrganizationResponse(BaseModel):
    """A remote directory available for a new course."""

    id: int
    path: str
    avatar_url: str = ""


class ProvidersResponse(BaseModel):
    """SCM providers enabled on this server."""

    providers: list[str]


class RepositoryURLResponse(BaseModel):
    """Browser URL of a course repository."""

    repo_type: str
    html_url: str


class EnrollmentUpdateRequest(BaseModel):
    """New status for an enrollment."""

    status: EnrollmentStatus


class EnrollmentResponse(BaseModel):
    """Public view of an enrollment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    user_id: int
    group_id: int | None = None
    status: EnrollmentStatus
