# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the GitLab SCM client."""

import json

import httpx
import pytest

from quickfeed.core.config.settings import SCMSettings
from quickfeed.services.scm import (
    CreateDirectoryOptions,
    CreateRepositoryOptions,
    Directory,
    FileOptions,
    GitlabSCM,
    Repository,
    ScmAlreadyExistsError,
    ScmError,
    ScmNotFoundError,
)

API = "/api/v4"
GROUP = {"id": 42, "path": "dat320", "avatar_url": None}


def _project(project_id: int, path: str) -> dict:
    return {
        "id": project_id,
        "path": path,
        "namespace": {"id": 42, "path": "dat320", "full_path": "dat320"},
        "web_url": f"https://gitlab.com/dat320/{path}",
        "ssh_url_to_repo": f"git@gitlab.com:dat320/{path}.git",
        "http_url_to_repo": f"https://gitlab.com/dat320/{path}.git",
    }


class GitlabStub:
    """Routes requests by method and encoded path and records them."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response: httpx.Response) -> None:
        self.routes[(method, API + path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        raw_path = request.url.raw_path.decode().split("?")[0]
        return self.routes.get((request.method, raw_path), httpx.Response(404))

    def client(self) -> GitlabSCM:
        return GitlabSCM("gl-token", SCMSettings(), transport=httpx.MockTransport(self))


@pytest.fixture
def stub() -> GitlabStub:
    return GitlabStub()


class TestGitlabDirectories:
    """Tests for group operations."""

    @pytest.mark.asyncio
    async def test_get_directory(self, stub: GitlabStub) -> None:
        stub.on("GET", "/groups/42", httpx.Response(200, json=GROUP))

        async with stub.client() as scm:
            directory = await scm.get_directory(42)

        assert directory == Directory(id=42, path="dat320", avatar_url="")
        assert stub.requests[0].headers["Authorization"] == "Bearer gl-token"

    @pytest.mark.asyncio
    async def test_create_directory_is_public(self, stub: GitlabStub) -> None:
        stub.on("POST", "/groups", httpx.Response(201, json=GROUP))

        async with stub.client() as scm:
            await scm.create_directory(CreateDirectoryOptions(name="DAT320", path="dat320"))

        assert json.loads(stub.requests[0].content) == {
            "name": "DAT320",
            "path": "dat320",
            "visibility": "public",
        }

    @pytest.mark.asyncio
    async def test_create_directory_path_taken(self, stub: GitlabStub) -> None:
        stub.on(
            "POST",
            "/groups",
            httpx.Response(400, json={"message": {"path": ["has already been taken"]}}),
        )

        async with stub.client() as scm:
            with pytest.raises(ScmAlreadyExistsError):
                await scm.create_directory(CreateDirectoryOptions(name="DAT320", path="dat320"))

    @pytest.mark.asyncio
    async def test_list_directories_follows_pages(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[{"id": 43, "path": "dat520"}])
            return httpx.Response(
                200,
                json=[GROUP],
                headers={"Link": '<https://gitlab.com/api/v4/groups?page=2&per_page=100>; rel="next"'},
            )

        async with GitlabSCM("t", SCMSettings(), transport=httpx.MockTransport(handler)) as scm:
            directories = await scm.list_directories()

        assert [d.id for d in directories] == [42, 43]
        assert len(seen) == 2


class TestGitlabRepositories:
    """Tests for project operations."""

    @pytest.mark.asyncio
    async def test_create_repository(self, stub: GitlabStub) -> None:
        stub.on("GET", "/groups/42", httpx.Response(200, json=GROUP))
        stub.on("POST", "/projects", httpx.Response(201, json=_project(900, "tests")))

        async with stub.client() as scm:
            repository = await scm.create_repository(
                CreateRepositoryOptions(path="tests", directory=Directory(id=42, path="dat320"), private=True)
            )

        assert repository.id == 900
        assert repository.owner == "dat320"
        assert repository.directory_id == 42
        assert repository.ssh_url == "git@gitlab.com:dat320/tests.git"
        assert json.loads(stub.requests[-1].content) == {
            "name": "tests",
            "path": "tests",
            "namespace_id": 42,
            "visibility": "private",
        }

    @pytest.mark.asyncio
    async def test_create_repository_unknown_directory(self, stub: GitlabStub) -> None:
        async with stub.client() as scm:
            with pytest.raises(ScmNotFoundError):
                await scm.create_repository(
                    CreateRepositoryOptions(path="tests", directory=Directory(id=99, path="gone"))
                )

        assert [r.method for r in stub.requests] == ["GET"]

    @pytest.mark.asyncio
    async def test_get_repositories(self, stub: GitlabStub) -> None:
        stub.on(
            "GET",
            "/groups/42/projects",
            httpx.Response(200, json=[_project(1, "info"), _project(2, "tests")]),
        )

        async with stub.client() as scm:
            repositories = await scm.get_repositories(Directory(id=42, path="dat320"))

        assert [r.path for r in repositories] == ["info", "tests"]

    @pytest.mark.asyncio
    async def test_delete_by_id(self, stub: GitlabStub) -> None:
        stub.on("DELETE", "/projects/900", httpx.Response(202))
        stub.on("DELETE", "/groups/42", httpx.Response(202))
        repository = Repository(
            id=900,
            path="tests",
            owner="dat320",
            web_url="",
            ssh_url="",
            http_url="",
            directory_id=42,
        )

        async with stub.client() as scm:
            await scm.delete_repository(repository)
            await scm.delete_directory(Directory(id=42, path="dat320"))

        assert [r.method for r in stub.requests] == ["DELETE", "DELETE"]


class TestGitlabFiles:
    """Tests for file operations."""

    @pytest.mark.asyncio
    async def test_get_file_content_encodes_paths(self, stub: GitlabStub) -> None:
        stub.on(
            "GET",
            "/projects/dat320%2Ftests/repository/files/lab1%2Fassignment.yml/raw",
            httpx.Response(200, text="assignmentid: 1\n"),
        )

        async with stub.client() as scm:
            text = await scm.get_file_content(
                FileOptions(owner="dat320", repository="tests", path="lab1/assignment.yml")
            )

        assert text == "assignmentid: 1\n"
        assert stub.requests[0].url.params["ref"] == "HEAD"

    @pytest.mark.asyncio
    async def test_get_file_content_missing(self, stub: GitlabStub) -> None:
        async with stub.client() as scm:
            with pytest.raises(ScmNotFoundError):
                await scm.get_file_content(FileOptions(owner="dat320", repository="tests", path="nope"))

    @pytest.mark.asyncio
    async def test_list_files(self, stub: GitlabStub) -> None:
        stub.on(
            "GET",
            "/projects/dat320%2Ftests/repository/tree",
            httpx.Response(
                200,
                json=[
                    {"path": "lab1", "type": "tree"},
                    {"path": "lab1/assignment.yml", "type": "blob"},
                ],
            ),
        )

        async with stub.client() as scm:
            paths = await scm.list_files(FileOptions(owner="dat320", repository="tests"))

        assert paths == ["lab1/assignment.yml"]
        assert stub.requests[0].url.params["recursive"] == "true"

    @pytest.mark.asyncio
    async def test_server_error(self, stub: GitlabStub) -> None:
        stub.on("GET", "/groups", httpx.Response(500, text="internal"))

        async with stub.client() as scm:
            with pytest.raises(ScmError) as exc_info:
                await scm.list_directories()

        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, ScmNotFoundError)
