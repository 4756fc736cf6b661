"""
buildpub.integrations.repository - Remote Repository Clients
==============================================================

Available Clients:
    - RepositoryClient:          Abstract contract used by the orchestrator.
    - InMemoryRepositoryClient:  Records calls in memory (tests, dry runs).
    - HttpRepositoryClient:      Artifactory-style HTTP client (requests).

Usage:
    >>> from buildpub.integrations.repository import create_repository_client
    >>> with create_repository_client(settings.publisher) as client:
    ...     client.send_build_info(build)
"""

from buildpub.integrations.repository.base import RepositoryClient, RepositoryClientFactory
from buildpub.integrations.repository.factory import create_repository_client
from buildpub.integrations.repository.http import HttpRepositoryClient
from buildpub.integrations.repository.memory import InMemoryRepositoryClient

__all__ = [
    "HttpRepositoryClient",
    "InMemoryRepositoryClient",
    "RepositoryClient",
    "RepositoryClientFactory",
    "create_repository_client",
]
