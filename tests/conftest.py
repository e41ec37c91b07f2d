# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests, which run services against in-memory storage and SCM fakes
- Integration tests, which drive the FastAPI application through TestClient

FakeStorage mirrors the query methods of the real repositories and keeps
rows in lists. A transaction snapshots row membership on entry and
restores it when the block fails, so tests can assert that nothing was
persisted. FakeSCM keeps directories, repositories and files in memory and
raises the same SCM exceptions as the HTTP clients.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from typing import Any, Self

import pytest

from quickfeed.core.config.settings import SCMSettings
from quickfeed.infrastructure.database.connection import DatabaseError
from quickfeed.infrastructure.database.models import (
    Assignment,
    Base,
    Course,
    Enrollment,
    EnrollmentStatus,
    GradingBenchmark,
    GradingCriterion,
    Group,
    RemoteIdentity,
    Repository as RepositoryRecord,
    Review,
    Submission,
    User,
)
from quickfeed.services.scm import (
    CreateDirectoryOptions,
    CreateRepositoryOptions,
    Directory,
    FileOptions,
    Repository,
    ScmAlreadyExistsError,
    ScmError,
    ScmNotFoundError,
    ScmProvider,
)


# =============================================================================
# In-memory storage
# =============================================================================


class _FakeUserRepository:
    def __init__(self, storage: "FakeStorage") -> None:
        self._storage = storage

    async def get(self, user_id: int) -> User | None:
        return self._storage.find(User, id=user_id)

    async def get_many(self, user_ids: list[int]) -> list[User]:
        return [u for u in self._storage.all(User) if u.id in set(user_ids)]

    async def list_all(self) -> list[User]:
        return self._storage.all(User)


class _FakeCourseRepository:
    def __init__(self, storage: "FakeStorage") -> None:
        self._storage = storage

    async def get(self, course_id: int) -> Course | None:
        return self._storage.find(Course, id=course_id)

    async def get_by_directory(self, directory_id: int) -> Course | None:
        return self._storage.find(Course, directory_id=directory_id)

    async def list_all(self) -> list[Course]:
        return self._storage.all(Course)

    async def list_directory_ids(self) -> set[int]:
        return {c.directory_id for c in self._storage.all(Course)}

    async def get_enrollment(self, course_id: int, user_id: int) -> Enrollment | None:
        return self._storage.find(Enrollment, course_id=course_id, user_id=user_id)

    async def list_enrollments(
        self,
        course_id: int,
        statuses: Iterable[str] | None = None,
    ) -> list[Enrollment]:
        wanted = set(statuses) if statuses is not None else None
        return [
            e
            for e in self._storage.filter(Enrollment, course_id=course_id)
            if wanted is None or e.status in wanted
        ]

    async def list_enrollments_by_user(self, user_id: int) -> list[Enrollment]:
        return self._storage.filter(Enrollment, user_id=user_id)

    async def list_repositories(
        self,
        directory_id: int,
        repo_type: str | None = None,
        user_id: int | None = None,
        group_id: int | None = None,
    ) -> list[RepositoryRecord]:
        filters: dict[str, Any] = {"directory_id": directory_id}
        if repo_type is not None:
            filters["repo_type"] = repo_type
        if user_id is not None:
            filters["user_id"] = user_id
        if group_id is not None:
            filters["group_id"] = group_id
        return self._storage.filter(RepositoryRecord, **filters)


class _FakeGroupRepository:
    def __init__(self, storage: "FakeStorage") -> None:
        self._storage = storage

    async def get(self, group_id: int) -> Group | None:
        return self._storage.find(Group, id=group_id)

    async def get_by_name(self, course_id: int, name: str) -> Group | None:
        return self._storage.find(Group, course_id=course_id, name=name)

    async def list_by_course(self, course_id: int) -> list[Group]:
        return self._storage.filter(Group, course_id=course_id)

    async def list_members(self, group_id: int) -> list[Enrollment]:
        members = self._storage.filter(Enrollment, group_id=group_id)
        return sorted(members, key=lambda e: e.user_id)


class _FakeAssignmentRepository:
    def __init__(self, storage: "FakeStorage") -> None:
        self._storage = storage

    async def get(self, assignment_id: int) -> Assignment | None:
        return self._storage.find(Assignment, id=assignment_id)

    async def list_by_course(self, course_id: int) -> list[Assignment]:
        rows = self._storage.filter(Assignment, course_id=course_id)
        return sorted(rows, key=lambda a: (a.order, a.assignment_id))

    async def list_benchmarks(self, assignment_id: int) -> list[GradingBenchmark]:
        return self._storage.filter(GradingBenchmark, assignment_id=assignment_id)

    async def list_criteria(self, benchmark_ids: list[int]) -> list[GradingCriterion]:
        return [c for c in self._storage.all(GradingCriterion) if c.benchmark_id in benchmark_ids]

    async def get_benchmark(self, benchmark_id: int) -> GradingBenchmark | None:
        return self._storage.find(GradingBenchmark, id=benchmark_id)

    async def get_criterion(self, criterion_id: int) -> GradingCriterion | None:
        return self._storage.find(GradingCriterion, id=criterion_id)

    async def delete_rubric(self, assignment_id: int) -> int:
        benchmarks = self._storage.filter(GradingBenchmark, assignment_id=assignment_id)
        ids = {b.id for b in benchmarks}
        self._storage.rows[GradingCriterion] = [
            c for c in self._storage.all(GradingCriterion) if c.benchmark_id not in ids
        ]
        self._storage.rows[GradingBenchmark] = [
            b for b in self._storage.all(GradingBenchmark) if b.id not in ids
        ]
        return len(ids)

    async def get_submission(self, submission_id: int) -> Submission | None:
        return self._storage.find(Submission, id=submission_id)

    async def list_submissions(
        self,
        course_id: int,
        user_id: int | None = None,
        group_id: int | None = None,
    ) -> list[Submission]:
        orders = {a.id: a.order for a in self._storage.filter(Assignment, course_id=course_id)}
        rows = [
            s
            for s in self._storage.all(Submission)
            if s.assignment_id in orders
            and (user_id is None or s.user_id == user_id)
            and (group_id is None or s.group_id == group_id)
        ]
        return sorted(rows, key=lambda s: (orders[s.assignment_id], s.id))

    async def get_review(self, review_id: int) -> Review | None:
        return self._storage.find(Review, id=review_id)

    async def count_reviews(self, submission_id: int) -> int:
        return len(self._storage.filter(Review, submission_id=submission_id))

    async def delete_reviews_for_assignment(self, assignment_id: int) -> int:
        submissions = {s.id for s in self._storage.filter(Submission, assignment_id=assignment_id)}
        kept = [r for r in self._storage.all(Review) if r.submission_id not in submissions]
        removed = len(self._storage.all(Review)) - len(kept)
        self._storage.rows[Review] = kept
        return removed


class FakeStorage:
    """In-memory stand-in for quickfeed.infrastructure.database.storage.Storage.

    Attributes:
        rows: Stored rows by model class.
        commits: Number of committed transactions.
        rollbacks: Number of rolled back transactions.
        fail_commit: When set, every transaction fails at commit time
            with DatabaseError.
    """

    def __init__(self) -> None:
        self.rows: dict[type[Base], list[Base]] = defaultdict(list)
        self.commits = 0
        self.rollbacks = 0
        self.fail_commit = False
        self.users = _FakeUserRepository(self)
        self.courses = _FakeCourseRepository(self)
        self.groups = _FakeGroupRepository(self)
        self.assignments = _FakeAssignmentRepository(self)

    def all(self, model: type[Base]) -> list[Any]:
        return sorted(self.rows[model], key=lambda row: row.id)

    def filter(self, model: type[Base], **values: Any) -> list[Any]:
        return [
            row
            for row in self.all(model)
            if all(getattr(row, key) == value for key, value in values.items())
        ]

    def find(self, model: type[Base], **values: Any) -> Any | None:
        matches = self.filter(model, **values)
        return matches[0] if matches else None

    def seed(self, *instances: Base) -> None:
        """Store rows directly, outside any transaction."""
        for instance in instances:
            self._store(instance)

    def _store(self, instance: Base) -> None:
        model = type(instance)
        if instance.id is None:
            instance.id = max((row.id for row in self.rows[model]), default=0) + 1
        self.rows[model].append(instance)

    async def add(self, instance: Base) -> None:
        self._store(instance)

    async def delete(self, instance: Base) -> None:
        self.rows[type(instance)].remove(instance)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        snapshot = {model: list(rows) for model, rows in self.rows.items()}
        try:
            yield
            if self.fail_commit:
                raise DatabaseError("Database operation failed")
            self.commits += 1
        except Exception:
            self.rows = defaultdict(list, snapshot)
            self.rollbacks += 1
            raise


# =============================================================================
# In-memory SCM
# =============================================================================


class FakeSCM:
    """In-memory SCM client with the behavior of the HTTP clients.

    Attributes:
        directories: Directories by ID.
        repositories: Repositories by ID.
        files: File contents by (owner, repository) and path.
        deleted_repositories: Paths of deleted repositories, in order.
        deleted_directories: Paths of deleted directories, in order.
        private: Visibility requested for each created repository.
        failing_repositories: Repository paths whose creation fails.
        list_delay: Seconds list_directories sleeps before answering.
    """

    provider = ScmProvider.GITHUB

    def __init__(self) -> None:
        self.directories: dict[int, Directory] = {}
        self.repositories: dict[int, Repository] = {}
        self.files: dict[tuple[str, str], dict[str, str]] = {}
        self.deleted_repositories: list[str] = []
        self.deleted_directories: list[str] = []
        self.failing_repositories: set[str] = set()
        self.private: dict[str, bool] = {}
        self.list_delay = 0.0
        self.closed = False
        self._next_id = 100

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.closed = True

    def add_directory(self, path: str, directory_id: int | None = None) -> Directory:
        directory = Directory(id=directory_id or self._new_id(), path=path)
        self.directories[directory.id] = directory
        return directory

    def add_repository(self, directory: Directory, path: str) -> Repository:
        repository = Repository(
            id=self._new_id(),
            path=path,
            owner=directory.path,
            web_url=f"https://scm.example.com/{directory.path}/{path}",
            ssh_url=f"git@scm.example.com:{directory.path}/{path}.git",
            http_url=f"https://scm.example.com/{directory.path}/{path}.git",
            directory_id=directory.id,
        )
        self.repositories[repository.id] = repository
        self.files.setdefault((directory.path, path), {})
        return repository

    def add_file(self, owner: str, repository: str, path: str, content: str) -> None:
        self.files.setdefault((owner, repository), {})[path] = content

    def repository_paths(self, directory: Directory) -> list[str]:
        return sorted(r.path for r in self.repositories.values() if r.directory_id == directory.id)

    async def list_directories(self) -> list[Directory]:
        if self.list_delay:
            await asyncio.sleep(self.list_delay)
        return list(self.directories.values())

    async def create_directory(self, opt: CreateDirectoryOptions) -> Directory:
        if any(d.path == opt.path for d in self.directories.values()):
            raise ScmAlreadyExistsError(f"directory {opt.path} already exists", "fake")
        return self.add_directory(opt.path)

    async def get_directory(self, directory_id: int) -> Directory:
        if directory_id not in self.directories:
            raise ScmNotFoundError(f"directory {directory_id} not found", "fake")
        return self.directories[directory_id]

    async def create_repository(self, opt: CreateRepositoryOptions) -> Repository:
        if opt.directory is None:
            raise ScmError("repository options carry no directory", "fake")
        directory = await self.get_directory(opt.directory.id)
        if opt.path in self.failing_repositories:
            raise ScmError(f"creating {opt.path} failed", "fake", "create_repository", 500)
        if opt.path in self.repository_paths(directory):
            raise ScmAlreadyExistsError(f"repository {opt.path} already exists", "fake")
        repository = self.add_repository(directory, opt.path)
        self.private[repository.path] = opt.private
        return repository

    async def get_repositories(self, directory: Directory) -> list[Repository]:
        return [r for r in self.repositories.values() if r.directory_id == directory.id]

    async def get_file_content(self, opt: FileOptions) -> str:
        content = self.files.get((opt.owner, opt.repository), {}).get(opt.path)
        if content is None:
            raise ScmNotFoundError(f"{opt.owner}/{opt.repository}/{opt.path} not found", "fake")
        return content

    async def list_files(self, opt: FileOptions) -> list[str]:
        if (opt.owner, opt.repository) not in self.files:
            raise ScmNotFoundError(f"{opt.owner}/{opt.repository} not found", "fake")
        return sorted(self.files[(opt.owner, opt.repository)])

    async def delete_repository(self, repository: Repository) -> None:
        self.repositories.pop(repository.id, None)
        self.files.pop((repository.owner, repository.path), None)
        self.deleted_repositories.append(f"{repository.owner}/{repository.path}")

    async def delete_directory(self, directory: Directory) -> None:
        self.directories.pop(directory.id, None)
        self.deleted_directories.append(directory.path)

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id


class FakeScmFactory:
    """Hands out one shared FakeSCM and records the tokens used."""

    def __init__(self, scm: FakeSCM, settings: SCMSettings | None = None) -> None:
        self.scm = scm
        self.settings = settings or SCMSettings(enabled_providers="github")
        self.tokens: list[tuple[str, str]] = []

    @property
    def enabled_providers(self) -> list[str]:
        return self.settings.providers_list

    def create(self, provider: str, token: str) -> FakeSCM:
        self.tokens.append((provider, token))
        return self.scm


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def storage() -> FakeStorage:
    """Provide an empty in-memory storage."""
    return FakeStorage()


@pytest.fixture
def scm() -> FakeSCM:
    """Provide an empty in-memory SCM."""
    return FakeSCM()


@pytest.fixture
def scm_factory(scm: FakeSCM) -> FakeScmFactory:
    """Provide a factory handing out the shared FakeSCM."""
    return FakeScmFactory(scm)


def _make_user(user_id: int, login: str, is_admin: bool = False, token: str | None = None) -> User:
    """Build a user row, optionally with a GitHub access token."""
    user = User(
        id=user_id,
        name=login.title(),
        login=login,
        email=f"{login}@example.com",
        student_id="",
        avatar_url="",
        is_admin=is_admin,
    )
    if token:
        user.remote_identities = [
            RemoteIdentity(
                user_id=user_id,
                provider=ScmProvider.GITHUB.value,
                remote_id=1000 + user_id,
                access_token=token,
            )
        ]
    return user


@pytest.fixture
def make_user():
    """Provide the user row builder."""
    return _make_user


@pytest.fixture
def teacher() -> User:
    """Provide an admin who teaches courses."""
    return _make_user(1, "teacher", is_admin=True, token="teacher-token")


@pytest.fixture
def course_setup(storage: FakeStorage, scm: FakeSCM, teacher: User) -> Course:
    """Provide a course in directory ``dat320`` with its tests repository.

    The teacher is enrolled as teacher; users ``alice`` (2), ``bob`` (3)
    and ``carol`` (4) are stored but not enrolled.
    """
    directory = scm.add_directory("dat320", directory_id=7)
    scm.add_repository(directory, "tests")
    course = Course(
        id=1,
        name="Operating Systems",
        code="DAT320",
        year=2025,
        tag="",
        provider=ScmProvider.GITHUB.value,
        directory_id=directory.id,
        organization_path=directory.path,
        course_creator_id=teacher.id,
    )
    storage.seed(
        teacher,
        _make_user(2, "alice", token="alice-token"),
        _make_user(3, "bob"),
        _make_user(4, "carol"),
        course,
        Enrollment(
            course_id=course.id,
            user_id=teacher.id,
            group_id=None,
            status=EnrollmentStatus.TEACHER.value,
        ),
    )
    return course


@pytest.fixture
def enroll(storage: FakeStorage, course_setup: Course):
    """Provide a helper storing an enrollment in the course with a status."""

    def _enroll(user_id: int, status: EnrollmentStatus) -> Enrollment:
        enrollment = Enrollment(
            course_id=course_setup.id,
            user_id=user_id,
            group_id=None,
            status=status.value,
        )
        storage.seed(enrollment)
        return enrollment

    return _enroll


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
