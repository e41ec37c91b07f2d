# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""GitLab implementation of the SCM interface (REST API v4).

Directories map to GitLab groups and repositories to projects.
"""

import logging
from typing import Any
from urllib.parse import quote

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

logger = logging.getLogger(__name__)


def _encode(value: str) -> str:
    """URL-encode a project path or file path for use as a path segment."""
    return quote(value, safe="")


def _to_directory(group: dict[str, Any]) -> Directory:
    return Directory(
        id=group["id"],
        path=group["path"],
        avatar_url=group.get("avatar_url") or "",
    )


def _to_repository(project: dict[str, Any], directory_id: int | None = None) -> Repository:
    namespace = project.get("namespace") or {}
    return Repository(
        id=project["id"],
        path=project["path"],
        owner=namespace.get("full_path") or namespace.get("path", ""),
        web_url=project.get("web_url", ""),
        ssh_url=project.get("ssh_url_to_repo", ""),
        http_url=project.get("http_url_to_repo", ""),
        directory_id=directory_id if directory_id is not None else namespace.get("id", 0),
    )


class GitlabSCM(SCM):
    """SCM client for GitLab.

    Example:
        >>> async with GitlabSCM(token, settings.scm) as scm:
        ...     groups = await scm.list_directories()
    """

    provider = ScmProvider.GITLAB

    def __init__(
        self,
        token: str,
        settings: SCMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            token=token,
            base_url=settings.gitlab_api_url,
            settings=settings,
            transport=transport,
        )

    async def list_directories(self) -> list[Directory]:
        groups = await self._get_paginated("/groups", "list_directories")
        return [_to_directory(group) for group in groups]

    async def create_directory(self, opt: CreateDirectoryOptions) -> Directory:
        response = await self._request(
            "POST",
            "/groups",
            "create_directory",
            json={"name": opt.name, "path": opt.path, "visibility": "public"},
        )
        directory = _to_directory(response.json())
        logger.info("Created GitLab group %s (id=%s)", directory.path, directory.id)
        return directory

    async def get_directory(self, directory_id: int) -> Directory:
        response = await self._request("GET", f"/groups/{directory_id}", "get_directory")
        return _to_directory(response.json())

    async def create_repository(self, opt: CreateRepositoryOptions) -> Repository:
        directory = await self.get_directory(self._require_directory(opt).id)

        response = await self._request(
            "POST",
            "/projects",
            "create_repository",
            json={
                "name": opt.path,
                "path": opt.path,
                "namespace_id": directory.id,
                "visibility": "private" if opt.private else "public",
            },
        )
        repository = _to_repository(response.json(), directory.id)
        logger.info("Created GitLab project %s/%s", directory.path, repository.path)
        return repository

    async def get_repositories(self, directory: Directory) -> list[Repository]:
        projects = await self._get_paginated(
            f"/groups/{directory.id}/projects", "get_repositories"
        )
        return [_to_repository(project, directory.id) for project in projects]

    async def get_file_content(self, opt: FileOptions) -> str:
        project = _encode(f"{opt.owner}/{opt.repository}")
        response = await self._request(
            "GET",
            f"/projects/{project}/repository/files/{_encode(opt.path)}/raw",
            "get_file_content",
            params={"ref": "HEAD"},
        )
        return response.text

    async def list_files(self, opt: FileOptions) -> list[str]:
        project = _encode(f"{opt.owner}/{opt.repository}")
        entries = await self._get_paginated(
            f"/projects/{project}/repository/tree",
            "list_files",
            params={"recursive": "true"},
        )
        return [entry["path"] for entry in entries if entry.get("type") == "blob"]

    async def delete_repository(self, repository: Repository) -> None:
        await self._request("DELETE", f"/projects/{repository.id}", "delete_repository")
        logger.info("Deleted GitLab project %s/%s", repository.owner, repository.path)

    async def delete_directory(self, directory: Directory) -> None:
        await self._request("DELETE", f"/groups/{directory.id}", "delete_directory")
        logger.info("Deleted GitLab group %s", directory.path)
