# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for CourseService."""

import pytest

from quickfeed.domains.course import (
    CourseAlreadyExistsError,
    CourseNotFoundError,
    CourseService,
    RepositoryNotFoundError,
)
from quickfeed.infrastructure.database.connection import DatabaseError
from quickfeed.infrastructure.database.models import (
    Course,
    Enrollment,
    EnrollmentStatus,
    Group,
    RepoType,
    Repository as RepositoryRecord,
)
from quickfeed.models.course import CourseCreateRequest, CourseUpdateRequest
from quickfeed.services.scm import ScmError, ScmNotFoundError, ScmTimeoutError

COURSE_REPOS = ["assignments", "course-info", "solutions", "tests"]


@pytest.fixture
def service(storage):
    """Provide a CourseService over the fake storage."""
    return CourseService(storage)


def _request(**overrides) -> CourseCreateRequest:
    values = {
        "name": "Distributed Systems",
        "code": "DAT520",
        "year": 2025,
        "provider": "github",
        "directory_path": "dat520-2025",
    }
    values.update(overrides)
    return CourseCreateRequest(**values)


class TestCreateCourse:
    """Tests for course creation."""

    @pytest.mark.asyncio
    async def test_new_directory(self, service, storage, scm, teacher) -> None:
        storage.seed(teacher)

        course = await service.create_course(scm, _request(), teacher)

        [directory] = scm.directories.values()
        assert directory.path == "dat520-2025"
        assert scm.repository_paths(directory) == COURSE_REPOS
        assert course.directory_id == directory.id
        assert course.organization_path == "dat520-2025"
        assert course.provider == "github"
        assert course.course_creator_id == teacher.id

        records = storage.filter(RepositoryRecord, directory_id=directory.id)
        assert sorted(r.repo_type for r in records) == COURSE_REPOS
        enrollment = storage.find(Enrollment, course_id=course.id, user_id=teacher.id)
        assert enrollment.status == EnrollmentStatus.TEACHER.value
        assert storage.commits == 1

    @pytest.mark.asyncio
    async def test_existing_directory(self, service, storage, scm, teacher) -> None:
        directory = scm.add_directory("existing", directory_id=55)

        course = await service.create_course(scm, _request(directory_id=55, directory_path=None), teacher)

        assert course.directory_id == 55
        assert scm.repository_paths(directory) == COURSE_REPOS

    @pytest.mark.asyncio
    async def test_private_repositories(self, service, scm, teacher) -> None:
        await service.create_course(scm, _request(), teacher)

        assert scm.private == {
            "course-info": False,
            "assignments": False,
            "tests": True,
            "solutions": True,
        }

    @pytest.mark.asyncio
    async def test_unknown_directory(self, service, storage, scm, teacher) -> None:
        with pytest.raises(ScmNotFoundError):
            await service.create_course(scm, _request(directory_id=999, directory_path=None), teacher)

        assert storage.all(Course) == []
        assert scm.repositories == {}

    @pytest.mark.asyncio
    async def test_directory_used_by_course(self, service, storage, scm, course_setup, teacher) -> None:
        with pytest.raises(CourseAlreadyExistsError):
            await service.create_course(
                scm, _request(directory_id=course_setup.directory_id, directory_path=None), teacher
            )

        assert len(storage.all(Course)) == 1

    @pytest.mark.asyncio
    async def test_directory_with_course_repositories(self, service, storage, scm, teacher) -> None:
        directory = scm.add_directory("leftover", directory_id=60)
        scm.add_repository(directory, "tests")

        with pytest.raises(CourseAlreadyExistsError) as exc_info:
            await service.create_course(scm, _request(directory_id=60, directory_path=None), teacher)

        assert exc_info.value.details["repositories"] == ["tests"]
        assert scm.repository_paths(directory) == ["tests"]
        assert scm.deleted_directories == []

    @pytest.mark.asyncio
    async def test_repository_failure_rolls_back_remote(self, service, storage, scm, teacher) -> None:
        scm.failing_repositories.add("tests")

        with pytest.raises(ScmError):
            await service.create_course(scm, _request(), teacher)

        assert scm.deleted_repositories == ["dat520-2025/assignments", "dat520-2025/course-info"]
        assert scm.deleted_directories == ["dat520-2025"]
        assert storage.all(Course) == []

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back_remote(self, service, storage, scm, teacher) -> None:
        storage.fail_commit = True

        with pytest.raises(DatabaseError):
            await service.create_course(scm, _request(), teacher)

        assert scm.repositories == {}
        assert scm.deleted_directories == ["dat520-2025"]
        assert storage.all(Course) == []
        assert storage.all(RepositoryRecord) == []
        assert storage.rollbacks == 1

    @pytest.mark.asyncio
    async def test_existing_directory_is_kept_on_failure(self, service, storage, scm, teacher) -> None:
        scm.add_directory("existing", directory_id=55)
        storage.fail_commit = True

        with pytest.raises(DatabaseError):
            await service.create_course(scm, _request(directory_id=55, directory_path=None), teacher)

        assert 55 in scm.directories
        assert scm.deleted_directories == []


class TestListOrganizations:
    """Tests for listing free directories."""

    @pytest.mark.asyncio
    async def test_excludes_used_directories(self, service, scm, course_setup) -> None:
        scm.add_directory("free", directory_id=8)

        result = await service.list_organizations(scm, max_wait=1.0)

        assert [(o.id, o.path) for o in result] == [(8, "free")]

    @pytest.mark.asyncio
    async def test_timeout(self, service, scm) -> None:
        scm.list_delay = 0.5

        with pytest.raises(ScmTimeoutError):
            await service.list_organizations(scm, max_wait=0.01)


class TestCourseQueries:
    """Tests for course updates and lookups."""

    @pytest.mark.asyncio
    async def test_update_course(self, service, storage, scm, course_setup) -> None:
        request = CourseUpdateRequest(name="OS", code="DAT320", year=2026, tag="fall")

        result = await service.update_course(scm, course_setup.id, request)

        assert (result.name, result.year, result.tag) == ("OS", 2026, "fall")
        assert storage.find(Course, id=course_setup.id).year == 2026

    @pytest.mark.asyncio
    async def test_update_course_missing_directory(self, service, storage, scm, course_setup) -> None:
        del scm.directories[course_setup.directory_id]
        request = CourseUpdateRequest(name="OS", code="DAT320", year=2026)

        with pytest.raises(ScmNotFoundError):
            await service.update_course(scm, course_setup.id, request)

        assert storage.find(Course, id=course_setup.id).year == 2025

    @pytest.mark.asyncio
    async def test_get_and_list(self, service, course_setup) -> None:
        assert (await service.get_course(course_setup.id)).code == "DAT320"
        assert [c.id for c in await service.list_courses()] == [course_setup.id]

        with pytest.raises(CourseNotFoundError):
            await service.get_course(99)


class TestGetRepositoryUrl:
    """Tests for resolving repository URLs."""

    def _record(self, course: Course, repo_type: RepoType, **owner) -> RepositoryRecord:
        return RepositoryRecord(
            repository_id=500 + len(owner) + len(repo_type.value),
            directory_id=course.directory_id,
            html_url=f"https://scm.example.com/dat320/{repo_type.value}",
            repo_type=repo_type.value,
            user_id=owner.get("user_id"),
            group_id=owner.get("group_id"),
        )

    @pytest.mark.asyncio
    async def test_course_repository(self, service, storage, course_setup) -> None:
        storage.seed(self._record(course_setup, RepoType.ASSIGNMENTS))

        result = await service.get_repository_url(course_setup.id, 2, RepoType.ASSIGNMENTS)

        assert result.html_url == "https://scm.example.com/dat320/assignments"

    @pytest.mark.asyncio
    async def test_user_repository(self, service, storage, course_setup) -> None:
        storage.seed(self._record(course_setup, RepoType.USER, user_id=2))

        assert (await service.get_repository_url(course_setup.id, 2, RepoType.USER)).repo_type == "user"

        with pytest.raises(RepositoryNotFoundError):
            await service.get_repository_url(course_setup.id, 3, RepoType.USER)

    @pytest.mark.asyncio
    async def test_group_repository(self, service, storage, course_setup, enroll) -> None:
        group = Group(course_id=course_setup.id, name="team", status="approved")
        storage.seed(group)
        enroll(2, EnrollmentStatus.STUDENT).group_id = group.id
        enroll(3, EnrollmentStatus.STUDENT)
        storage.seed(self._record(course_setup, RepoType.GROUP, group_id=group.id))

        result = await service.get_repository_url(course_setup.id, 2, RepoType.GROUP)

        assert result.repo_type == "group"
        with pytest.raises(RepositoryNotFoundError):
            await service.get_repository_url(course_setup.id, 3, RepoType.GROUP)
