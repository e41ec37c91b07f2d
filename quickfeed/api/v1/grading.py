# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading API endpoints.

Rubric import and editing (teacher):
- POST /{course_id}/assignments/{assignment_id}/criteria - Load criteria.json
- GET /{course_id}/assignments/{assignment_id}/benchmarks - List the rubric
- POST /{course_id}/assignments/{assignment_id}/benchmarks - Add a benchmark
- PUT /{course_id}/benchmarks/{benchmark_id} - Update a benchmark
- DELETE /{course_id}/benchmarks/{benchmark_id} - Delete a benchmark
- POST /{course_id}/benchmarks/{benchmark_id}/criteria - Add a criterion
- PUT /{course_id}/criteria/{criterion_id} - Update a criterion
- DELETE /{course_id}/criteria/{criterion_id} - Delete a criterion

Reviews (teacher):
- POST /{course_id}/reviews - Review a submission
- PUT /{course_id}/reviews/{review_id} - Update a review
"""

import logging

from fastapi import APIRouter, Depends, status

from quickfeed.api.dependencies import (
    get_scm_factory,
    get_storage,
    open_scm,
    require_course_member,
    require_course_teacher,
)
from quickfeed.domains.assignment import AssignmentService
from quickfeed.domains.course import CourseService
from quickfeed.domains.grading import GradingService
from quickfeed.infrastructure.database.models import User
from quickfeed.infrastructure.database.storage import Storage
from quickfeed.models.grading import (
    BenchmarkCreateRequest,
    BenchmarkResponse,
    BenchmarkUpdateRequest,
    CriterionCreateRequest,
    CriterionResponse,
    CriterionUpdateRequest,
    ReviewCreateRequest,
    ReviewResponse,
    ReviewUpdateRequest,
)
from quickfeed.services.scm import ScmFactory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{course_id}/assignments/{assignment_id}/criteria",
    response_model=list[BenchmarkResponse],
    summary="Load grading criteria",
)
async def load_criteria(
    course_id: int,
    assignment_id: int,
    caller: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
    factory: ScmFactory = Depends(get_scm_factory),
) -> list[BenchmarkResponse]:
    """Replace the rubric of an assignment with its criteria.json.

    All reviews of the assignment are removed together with the old rubric.
    """
    course = await CourseService(storage).get_course(course_id)
    async with open_scm(factory, caller, course.provider) as scm:
        return await AssignmentService(storage).load_criteria(scm, course_id, assignment_id)


@router.get(
    "/{course_id}/assignments/{assignment_id}/benchmarks",
    response_model=list[BenchmarkResponse],
    summary="List benchmarks",
)
async def list_benchmarks(
    course_id: int,
    assignment_id: int,
    _: User = Depends(require_course_member),
    storage: Storage = Depends(get_storage),
) -> list[BenchmarkResponse]:
    """List the rubric of an assignment."""
    return await GradingService(storage).list_benchmarks(course_id, assignment_id)


@router.post(
    "/{course_id}/assignments/{assignment_id}/benchmarks",
    response_model=BenchmarkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create benchmark",
)
async def create_benchmark(
    course_id: int,
    assignment_id: int,
    data: BenchmarkCreateRequest,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> BenchmarkResponse:
    """Add a benchmark to an assignment rubric."""
    return await GradingService(storage).create_benchmark(course_id, assignment_id, data)


@router.put(
    "/{course_id}/benchmarks/{benchmark_id}",
    response_model=BenchmarkResponse,
    summary="Update benchmark",
)
async def update_benchmark(
    course_id: int,
    benchmark_id: int,
    data: BenchmarkUpdateRequest,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> BenchmarkResponse:
    return await GradingService(storage).update_benchmark(course_id, benchmark_id, data)


@router.delete(
    "/{course_id}/benchmarks/{benchmark_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete benchmark",
)
async def delete_benchmark(
    course_id: int,
    benchmark_id: int,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> None:
    await GradingService(storage).delete_benchmark(course_id, benchmark_id)


@router.post(
    "/{course_id}/benchmarks/{benchmark_id}/criteria",
    response_model=CriterionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create criterion",
)
async def create_criterion(
    course_id: int,
    benchmark_id: int,
    data: CriterionCreateRequest,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> CriterionResponse:
    return await GradingService(storage).create_criterion(course_id, benchmark_id, data)


@router.put(
    "/{course_id}/criteria/{criterion_id}",
    response_model=CriterionResponse,
    summary="Update criterion",
)
async def update_criterion(
    course_id: int,
    criterion_id: int,
    data: CriterionUpdateRequest,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> CriterionResponse:
    return await GradingService(storage).update_criterion(course_id, criterion_id, data)


@router.delete(
    "/{course_id}/criteria/{criterion_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete criterion",
)
async def delete_criterion(
    course_id: int,
    criterion_id: int,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> None:
    await GradingService(storage).delete_criterion(course_id, criterion_id)


@router.post(
    "/{course_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create review",
)
async def create_review(
    course_id: int,
    data: ReviewCreateRequest,
    caller: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> ReviewResponse:
    """Review a submission as the caller."""
    return await GradingService(storage).create_review(course_id, data, caller.id)


@router.put(
    "/{course_id}/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update review",
)
async def update_review(
    course_id: int,
    review_id: int,
    data: ReviewUpdateRequest,
    _: User = Depends(require_course_teacher),
    storage: Storage = Depends(get_storage),
) -> ReviewResponse:
    return await GradingService(storage).update_review(course_id, review_id, data)
