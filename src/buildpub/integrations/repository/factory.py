"""
buildpub.integrations.repository.factory - Repository Client Factory
======================================================================

Maps ``PublisherConfig.repository_client`` to a concrete client:

    - "memory" → InMemoryRepositoryClient (no network)
    - "http"   → HttpRepositoryClient (requests)

``create_repository_client`` satisfies the RepositoryClientFactory
signature, so the orchestrator can take it (or any test double) directly.

Usage:
    >>> client = create_repository_client(PublisherConfig(repository_client="memory"))
    >>> type(client)  # InMemoryRepositoryClient
"""

from __future__ import annotations

from buildpub.core.config import PublisherConfig
from buildpub.core.exceptions import ConfigurationError
from buildpub.integrations.repository.base import RepositoryClient


def create_repository_client(config: PublisherConfig) -> RepositoryClient:
    """Create a repository client session based on configuration.

    Raises:
        ConfigurationError: If the client name is unknown, or the HTTP client
            is selected without a repository URL.
    """
    client_name = config.repository_client.lower()

    if client_name == "memory":
        from buildpub.integrations.repository.memory import InMemoryRepositoryClient
        return InMemoryRepositoryClient(config)

    if client_name == "http":
        from buildpub.integrations.repository.http import HttpRepositoryClient
        return HttpRepositoryClient(config)

    raise ConfigurationError(
        message=f"Unknown repository client: '{client_name}'",
        error_code="UNKNOWN_REPOSITORY_CLIENT",
        details={"available": ["http", "memory"]},
    )
