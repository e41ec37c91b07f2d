# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Remote provisioning of directories and repositories.

RemoteProvisioner wraps an SCM client and registers every resource it
creates with a CompensationSaga, so that course, enrollment and group
services follow the same create-then-persist ordering:

1. Create remote resources through the provisioner
2. Persist the matching rows in one storage transaction
3. On any failure, the saga deletes what was created remotely

Example:
    >>> async with CompensationSaga("approve group") as saga:
    ...     provisioner = RemoteProvisioner(scm, saga)
    ...     repo = await provisioner.create_repository("team-a", directory)
    ...     async with storage.transaction():
    ...         await storage.add(repository_record(repo, RepoType.GROUP, group_id=7))
"""

import logging

from quickfeed.domains.provisioning.saga import CompensationSaga
from quickfeed.infrastructure.database.models import RepoType
from quickfeed.infrastructure.database.models import Repository as RepositoryRecord
from quickfeed.services.scm import (
    SCM,
    CreateDirectoryOptions,
    CreateRepositoryOptions,
    Directory,
    Repository,
)

logger = logging.getLogger(__name__)


class RemoteProvisioner:
    """Creates remote resources and registers their compensation.

    Attributes:
        _scm: Client used for creation and deletion.
        _saga: Saga receiving the undo actions.
    """

    def __init__(self, scm: SCM, saga: CompensationSaga) -> None:
        """Initialize the provisioner.

        Args:
            scm: Client authenticated for the provider.
            saga: Saga of the surrounding operation.
        """
        self._scm = scm
        self._saga = saga

    async def create_directory(self, name: str, path: str) -> Directory:
        """Create a directory and register its deletion."""
        directory = await self._scm.create_directory(CreateDirectoryOptions(name=name, path=path))

        async def undo() -> None:
            await self._scm.delete_directory(directory)

        self._saga.add(f"delete directory {directory.path}", undo)
        return directory

    async def create_repository(
        self,
        path: str,
        directory: Directory,
        private: bool = False,
    ) -> Repository:
        """Create a repository and register its deletion."""
        repository = await self._scm.create_repository(
            CreateRepositoryOptions(path=path, directory=directory, private=private)
        )

        async def undo() -> None:
            await self._scm.delete_repository(repository)

        self._saga.add(f"delete repository {directory.path}/{repository.path}", undo)
        return repository


def repository_record(
    repository: Repository,
    repo_type: RepoType,
    user_id: int | None = None,
    group_id: int | None = None,
) -> RepositoryRecord:
    """Build the local mirror row of a remote repository."""
    return RepositoryRecord(
        repository_id=repository.id,
        directory_id=repository.directory_id,
        html_url=repository.web_url,
        repo_type=repo_type.value,
        user_id=user_id,
        group_id=group_id,
    )
