# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submission API endpoints.

- POST /{course_id}/submissions - Record a submission (teacher)
- GET /{course_id}/submissions - List submissions of the course, a user or a group
- GET /{course_id}/submissions/{submission_id} - Get a submission
- PATCH /{course_id}/submissions/{submission_id} - Approve or rescore (teacher)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from quickfeed.api.dependencies import (
    get_current_user,
    get_storage,
    require_course_teacher,
)
from quickfeed.domains.submission import SubmissionService
from quickfeed.infrastructure.database.models import User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.submission import (
    SubmissionCreateRequest,
    SubmissionResponse,
    SubmissionUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{course_id}/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record submission",
)
async def create_submission(
    course_id: int,
    data: SubmissionCreateRequest,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> SubmissionResponse:
    """Record a graded submission of an assignment."""
    return await SubmissionService(storage).create_submission(course_id, data)


@router.get(
    "/{course_id}/submissions",
    response_model=list[SubmissionResponse],
    summary="List submissions",
)
async def list_submissions(
    course_id: int,
    user_id: Annotated[int | None, Query(gt=0, description="Submitting student")] = None,
    group_id: Annotated[int | None, Query(gt=0, description="Submitting group")] = None,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> list[SubmissionResponse]:
    """List submissions.

    Students may list their own submissions and those of their group;
    listing the whole course requires teacher access.
    """
    return await SubmissionService(storage).get_submissions(
        course_id, caller, user_id=user_id, group_id=group_id
    )


@router.get(
    "/{course_id}/submissions/{submission_id}",
    response_model=SubmissionResponse,
    summary="Get submission",
)
async def get_submission(
    course_id: int,
    submission_id: int,
    caller: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> SubmissionResponse:
    return await SubmissionService(storage).get_submission(course_id, submission_id, caller)


@router.patch(
    "/{course_id}/submissions/{submission_id}",
    response_model=SubmissionResponse,
    summary="Update submission",
)
async def update_submission(
    course_id: int,
    submission_id: int,
    data: SubmissionUpdateRequest,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> SubmissionResponse:
    """Approve or rescore a submission."""
    return await SubmissionService(storage).update_submission(course_id, submission_id, data)
