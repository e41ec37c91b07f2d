# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Abstract base class for SCM provider clients.

This module defines the SCM ABC that every provider client implements.
The interface covers:
- Directory (GitHub organization / GitLab group) listing and creation
- Repository listing and creation under a directory
- File retrieval from a repository
- Deletion of directories and repositories for compensation

Business logic depends only on this interface and never on a concrete
provider. Each client owns one httpx.AsyncClient authenticated with the
caller's token and must be closed after use, preferably with
``async with``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

import httpx

from quickfeed.core.config.settings import SCMSettings
from quickfeed.services.scm.exceptions import (
    ScmError,
    ScmTimeoutError,
    error_from_response,
)

logger = logging.getLogger(__name__)


class ScmProvider(str, Enum):
    """Supported source control providers."""

    GITHUB = "github"
    GITLAB = "gitlab"


@dataclass
class Directory:
    """A remote grouping entity (GitHub organization or GitLab group).

    Attributes:
        id: Provider-assigned numeric ID.
        path: URL slug of the directory.
        avatar_url: Avatar image URL, empty if none.
    """

    id: int
    path: str
    avatar_url: str = ""


@dataclass
class Repository:
    """A remote repository nested under a directory.

    Attributes:
        id: Provider-assigned numeric ID.
        path: URL slug of the repository.
        owner: Path of the owning directory.
        web_url: Browser URL.
        ssh_url: SSH clone URL.
        http_url: HTTPS clone URL.
        directory_id: ID of the owning directory.
    """

    id: int
    path: str
    owner: str
    web_url: str
    ssh_url: str
    http_url: str
    directory_id: int


@dataclass
class CreateDirectoryOptions:
    """Options for creating a directory."""

    name: str
    path: str


@dataclass
class CreateRepositoryOptions:
    """Options for creating a repository.

    Attributes:
        path: Repository slug.
        directory: Directory the repository is created in. Must exist.
        private: Whether the repository is private.
    """

    path: str
    directory: Directory | None
    private: bool = False


@dataclass
class FileOptions:
    """Identifies a repository, and optionally a file inside it."""

    owner: str
    repository: str
    path: str = ""


class SCM(ABC):
    """Abstract base class for all SCM provider clients.

    Subclasses set ``provider`` and implement the abstract operations using
    ``_request`` and ``_get_paginated``, which take care of authentication,
    timeouts and error translation.

    Attributes:
        provider: The provider this client talks to.
    """

    provider: ScmProvider

    def __init__(
        self,
        token: str,
        base_url: str,
        settings: SCMSettings,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: OAuth access token of the caller.
            base_url: Root of the provider REST API.
            settings: SCM configuration (timeouts, page size).
            headers: Extra provider-specific headers.
            transport: Optional transport, used to stub the provider in tests.
        """
        self._page_size = settings.page_size
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}", **(headers or {})},
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and translate failures into SCM exceptions.

        Args:
            method: HTTP method.
            url: URL relative to the provider base URL.
            operation: Name of the calling operation, used in errors.
            **kwargs: Passed through to httpx.

        Returns:
            The successful response.

        Raises:
            ScmTimeoutError: If the provider did not answer in time.
            ScmNotFoundError: If the provider answered 404.
            ScmAlreadyExistsError: If the provider reported a name collision.
            ScmError: For any other transport or status failure.
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", self.provider.value, operation)
            raise ScmTimeoutError(
                f"{self.provider.value} {operation} timed out",
                self.provider.value,
                operation,
            ) from e
        except httpx.HTTPError as e:
            logger.error("%s %s transport error: %s", self.provider.value, operation, e)
            raise ScmError(
                f"{self.provider.value} {operation} failed: {e}",
                self.provider.value,
                operation,
            ) from e

        if response.is_error:
            raise error_from_response(response, self.provider.value, operation)
        return response

    async def _get_paginated(
        self,
        url: str,
        operation: str,
        params: dict[str, Any] | None = None,
    ) -> list[Any]:
        """Collect every page of a list endpoint.

        Both providers advertise the next page through the ``Link`` header.

        Args:
            url: URL of the first page.
            operation: Name of the calling operation, used in errors.
            params: Query parameters for the first page.

        Returns:
            Concatenated items of all pages.
        """
        items: list[Any] = []
        next_url: str | None = url
        next_params: dict[str, Any] | None = {"per_page": self._page_size, **(params or {})}

        while next_url:
            response = await self._request("GET", next_url, operation, params=next_params)
            items.extend(response.json())
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string.
            next_params = None

        return items

    @abstractmethod
    async def list_directories(self) -> list[Directory]:
        """List all directories visible to the authenticated user.

        Returns:
            Directories in provider order. Callers must not rely on ordering.
        """
        pass

    @abstractmethod
    async def create_directory(self, opt: CreateDirectoryOptions) -> Directory:
        """Create a public directory.

        Args:
            opt: Name and path of the new directory.

        Returns:
            The created directory.

        Raises:
            ScmAlreadyExistsError: If the path is taken.
        """
        pass

    @abstractmethod
    async def get_directory(self, directory_id: int) -> Directory:
        """Get a directory by ID.

        Raises:
            ScmNotFoundError: If the ID does not resolve.
        """
        pass

    @abstractmethod
    async def create_repository(self, opt: CreateRepositoryOptions) -> Repository:
        """Create a repository under an existing directory.

        Args:
            opt: Repository path, owning directory and visibility.

        Returns:
            The created repository.

        Raises:
            ScmError: If no directory is given.
            ScmNotFoundError: If the directory does not exist.
            ScmAlreadyExistsError: If the repository path is taken.
        """
        pass

    @abstractmethod
    async def get_repositories(self, directory: Directory) -> list[Repository]:
        """List repositories under a directory.

        Returns:
            Repositories of the directory, empty if there are none.
        """
        pass

    @abstractmethod
    async def get_file_content(self, opt: FileOptions) -> str:
        """Get the decoded text of a single file.

        Raises:
            ScmNotFoundError: If the file or repository does not exist.
        """
        pass

    @abstractmethod
    async def list_files(self, opt: FileOptions) -> list[str]:
        """List the paths of all files in a repository, recursively."""
        pass

    @abstractmethod
    async def delete_repository(self, repository: Repository) -> None:
        """Delete a repository."""
        pass

    @abstractmethod
    async def delete_directory(self, directory: Directory) -> None:
        """Delete a directory and everything in it."""
        pass

    def _require_directory(self, opt: CreateRepositoryOptions) -> Directory:
        if opt.directory is None:
            raise ScmError(
                f"cannot create repository '{opt.path}' without a directory",
                self.provider.value,
                "create_repository",
            )
        return opt.directory
