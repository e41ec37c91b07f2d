# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Factory building per-request SCM clients.

The factory is created once at application startup from SCMSettings and
kept on the application state. Each request asks it for a client bound to
the caller's own access token, so no provider credentials are shared
between requests.

Example:
    >>> factory = ScmFactory(get_settings().scm)
    >>> async with factory.create("gitlab", token) as scm:
    ...     directory = await scm.get_directory(42)
"""

import logging

import httpx

from quickfeed.core.config.settings import SCMSettings
from quickfeed.core.errors import InvalidArgumentError
from quickfeed.services.scm.base import SCM, ScmProvider
from quickfeed.services.scm.github import GithubSCM
from quickfeed.services.scm.gitlab import GitlabSCM

logger = logging.getLogger(__name__)

_CLIENTS: dict[ScmProvider, type[GithubSCM] | type[GitlabSCM]] = {
    ScmProvider.GITHUB: GithubSCM,
    ScmProvider.GITLAB: GitlabSCM,
}


class ScmFactory:
    """Creates SCM clients for enabled providers.

    Attributes:
        settings: SCM configuration shared by all clients.
    """

    def __init__(
        self,
        settings: SCMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            settings: SCM configuration.
            transport: Optional transport handed to every client.
        """
        self.settings = settings
        self._transport = transport

    @property
    def enabled_providers(self) -> list[str]:
        """Names of providers that are both supported and enabled."""
        supported = {provider.value for provider in ScmProvider}
        return [name for name in self.settings.providers_list if name in supported]

    def create(self, provider: str, token: str) -> SCM:
        """Create a client for a provider.

        Args:
            provider: Provider name, e.g. "github".
            token: Access token of the caller for that provider.

        Returns:
            A new client. The caller is responsible for closing it.

        Raises:
            InvalidArgumentError: If the provider is unknown or disabled,
                or the token is empty.
        """
        name = provider.lower()
        if name not in self.enabled_providers:
            raise InvalidArgumentError(f"unknown or disabled SCM provider: {provider}")
        if not token:
            raise InvalidArgumentError(f"missing access token for provider {name}")

        logger.debug("Creating %s SCM client", name)
        client_class = _CLIENTS[ScmProvider(name)]
        return client_class(token, self.settings, transport=self._transport)
