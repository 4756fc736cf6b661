"""
buildpub.integrations.repository.base - Repository Client Interface
=====================================================================

The contract the deployment pipeline requires from a remote artifact
repository. The orchestrator never talks HTTP itself; it calls these
methods on whichever client the factory produced.

Architecture Context:
    ┌──────────────────────────┐  deploy_artifact()   ┌────────────────────┐
    │  DeploymentOrchestrator  │ ───────────────────→ │  RepositoryClient  │
    │                          │  send_build_info()   │  (abstract)        │
    │                          │ ───────────────────→ │                    │
    │                          │  shutdown()          │                    │
    └──────────────────────────┘ ───────────────────→ └─────────┬──────────┘
                                                                │
                                                    ┌───────────┴───────────┐
                                               ┌────▼─────┐        ┌────────▼──────┐
                                               │ InMemory │        │ Http          │
                                               │ (tests)  │        │ (requests)    │
                                               └──────────┘        └───────────────┘

Session Semantics:
    A client is a scoped resource. Use it as a context manager so that
    ``shutdown()`` runs on every exit path, including a failed deploy:

        with factory(config) as client:
            client.deploy_artifact(artifact)
            client.send_build_info(build)

    ``shutdown()`` is idempotent. Calling deploy/send after shutdown raises
    TransportError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Callable, Optional

from buildpub.core.config import PublisherConfig
from buildpub.core.exceptions import TransportError
from buildpub.core.models import BuildRecord, DeployableArtifact


class RepositoryClient(ABC):
    """Abstract base class for repository clients.

    Subclasses implement ``deploy_artifact()``, ``send_build_info()`` and
    ``_close()``. The base class provides idempotent ``shutdown()`` and
    context-manager support.

    Attributes:
        _config: Publisher configuration (URL, credentials, timeout).
        _closed: Whether shutdown() has run.
    """

    def __init__(self, config: PublisherConfig) -> None:
        self._config = config
        self._closed = False

    @property
    def config(self) -> PublisherConfig:
        return self._config

    @property
    def is_shut_down(self) -> bool:
        return self._closed

    # =========================================================================
    # Abstract Methods (Subclasses MUST implement)
    # =========================================================================

    @abstractmethod
    def deploy_artifact(self, artifact: DeployableArtifact) -> None:
        """Upload one artifact to its target repository.

        Args:
            artifact: The reconciled artifact, checksums included.

        Raises:
            TransportError: If the upload fails for any reason.
        """

    @abstractmethod
    def send_build_info(self, build: BuildRecord) -> None:
        """Publish the build record.

        Args:
            build: The checksum-annotated build record.

        Raises:
            TransportError: If the publish fails for any reason.
        """

    @abstractmethod
    def _close(self) -> None:
        """Release connections. Called at most once by shutdown()."""

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def shutdown(self) -> None:
        """Release the client's resources. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransportError(
                message=f"{self.__class__.__name__} has been shut down",
                error_code="CLIENT_SHUT_DOWN",
            )

    def __enter__(self) -> "RepositoryClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"url={self._config.repository_url!r}, "
            f"closed={self._closed!r})"
        )


# A factory receives the publisher config and returns a fresh client session.
RepositoryClientFactory = Callable[[PublisherConfig], RepositoryClient]
