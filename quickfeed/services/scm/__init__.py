# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SCM provider clients.

This package exposes a single capability interface over source control
providers:
- SCM: Abstract client interface
- GithubSCM / GitlabSCM: Provider implementations over httpx
- ScmFactory: Builds a client per request from the caller's token
"""

from quickfeed.services.scm.base import (
    SCM,
    CreateDirectoryOptions,
    CreateRepositoryOptions,
    Directory,
    FileOptions,
    Repository,
    ScmProvider,
)
from quickfeed.services.scm.exceptions import (
    ScmAlreadyExistsError,
    ScmError,
    ScmNotFoundError,
    ScmTimeoutError,
    error_from_response,
)
from quickfeed.services.scm.factory import ScmFactory
from quickfeed.services.scm.github import GithubSCM
from quickfeed.services.scm.gitlab import GitlabSCM

__all__ = [
    # Interface
    "SCM",
    "ScmProvider",
    "Directory",
    "Repository",
    "CreateDirectoryOptions",
    "CreateRepositoryOptions",
    "FileOptions",
    # Implementations
    "GithubSCM",
    "GitlabSCM",
    "ScmFactory",
    # Exceptions
    "ScmError",
    "ScmNotFoundError",
    "ScmAlreadyExistsError",
    "ScmTimeoutError",
    "error_from_response",
]
