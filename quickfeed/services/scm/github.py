# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""GitHub implementation of the SCM interface (REST API v3).

Directories map to GitHub organizations and repositories to organization
repositories. Creating an organization requires the enterprise admin
endpoint; on github.com the call is rejected and surfaces as ScmError.
"""

import base64
import logging
from typing import Any

import httpx

from quickfeed.core.config.settings import SCMSettings
from quickfeed.services.scm.base import (
    SCM,
    CreateDirectoryOptions,
    CreateRepositoryOptions,
    Directory,
    FileOptions,
    Repository,
    ScmProvider,
)
from quickfeed.services.scm.exceptions import ScmError

logger = logging.getLogger(__name__)

GITHUB_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


def _to_directory(org: dict[str, Any]) -> Directory:
    return Directory(
        id=org["id"],
        path=org["login"],
        avatar_url=org.get("avatar_url") or "",
    )


def _to_repository(repo: dict[str, Any], directory_id: int | None = None) -> Repository:
    owner = repo.get("owner") or {}
    return Repository(
        id=repo["id"],
        path=repo["name"],
        owner=owner.get("login", ""),
        web_url=repo.get("html_url", ""),
        ssh_url=repo.get("ssh_url", ""),
        http_url=repo.get("clone_url", ""),
        directory_id=directory_id if directory_id is not None else owner.get("id", 0),
    )


class GithubSCM(SCM):
    """SCM client for GitHub."""

    provider = ScmProvider.GITHUB

    def __init__(
        self,
        token: str,
        settings: SCMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            token=token,
            base_url=settings.github_api_url,
            settings=settings,
            headers=GITHUB_HEADERS,
            transport=transport,
        )

    async def list_directories(self) -> list[Directory]:
        orgs = await self._get_paginated("/user/orgs", "list_directories")
        return [_to_directory(org) for org in orgs]

    async def create_directory(self, opt: CreateDirectoryOptions) -> Directory:
        user = await self._request("GET", "/user", "create_directory")
        response = await self._request(
            "POST",
            "/admin/organizations",
            "create_directory",
            json={
                "login": opt.path,
                "profile_name": opt.name,
                "admin": user.json()["login"],
            },
        )
        directory = _to_directory(response.json())
        logger.info("Created GitHub organization %s (id=%s)", directory.path, directory.id)
        return directory

    async def get_directory(self, directory_id: int) -> Directory:
        response = await self._request("GET", f"/organizations/{directory_id}", "get_directory")
        return _to_directory(response.json())

    async def create_repository(self, opt: CreateRepositoryOptions) -> Repository:
        directory = await self.get_directory(self._require_directory(opt).id)

        response = await self._request(
            "POST",
            f"/orgs/{directory.path}/repos",
            "create_repository",
            json={"name": opt.path, "private": opt.private, "auto_init": True},
        )
        repository = _to_repository(response.json(), directory.id)
        logger.info("Created GitHub repository %s/%s", directory.path, repository.path)
        return repository

    async def get_repositories(self, directory: Directory) -> list[Repository]:
        path = directory.path or (await self.get_directory(directory.id)).path
        repos = await self._get_paginated(f"/orgs/{path}/repos", "get_repositories")
        return [_to_repository(repo, directory.id) for repo in repos]

    async def get_file_content(self, opt: FileOptions) -> str:
        response = await self._request(
            "GET",
            f"/repos/{opt.owner}/{opt.repository}/contents/{opt.path}",
            "get_file_content",
        )
        payload = response.json()
        if not isinstance(payload, dict) or payload.get("type") != "file":
            raise ScmError(
                f"'{opt.path}' in {opt.owner}/{opt.repository} is not a file",
                self.provider.value,
                "get_file_content",
            )
        return base64.b64decode(payload.get("content", "")).decode("utf-8")

    async def list_files(self, opt: FileOptions) -> list[str]:
        response = await self._request(
            "GET",
            f"/repos/{opt.owner}/{opt.repository}/git/trees/HEAD",
            "list_files",
            params={"recursive": "1"},
        )
        payload = response.json()
        if payload.get("truncated"):
            logger.warning(
                "File listing of %s/%s was truncated by GitHub",
                opt.owner,
                opt.repository,
            )
        return [entry["path"] for entry in payload.get("tree", []) if entry.get("type") == "blob"]

    async def delete_repository(self, repository: Repository) -> None:
        await self._request(
            "DELETE",
            f"/repos/{repository.owner}/{repository.path}",
            "delete_repository",
        )
        logger.info("Deleted GitHub repository %s/%s", repository.owner, repository.path)

    async def delete_directory(self, directory: Directory) -> None:
        await self._request("DELETE", f"/orgs/{directory.path}", "delete_directory")
        logger.info("Deleted GitHub organization %s", directory.path)
