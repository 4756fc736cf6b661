"""
buildpub.integrations.repository.memory - In-Memory Repository Client
=======================================================================

A repository client that records every call instead of talking to a
server. It is the client behind ``repository_client: memory`` and the one
tests use to assert what the orchestrator did.

Features:
    - **Call History**: every deploy/send is recorded in order.
    - **Failure Simulation**: fail specific artifact paths, or the build-info send.
    - **Shutdown Tracking**: counts how often shutdown() actually released resources.

Usage:
    >>> client = InMemoryRepositoryClient()
    >>> client.fail_deploy_of("org/acme/app/1.0/app-1.0.jar")
    >>> client.deploy_artifact(jar)   # raises TransportError
    >>> client.call_history[0]["operation"]
    'deploy_artifact'
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from buildpub.core.config import PublisherConfig
from buildpub.core.exceptions import TransportError
from buildpub.core.models import BuildRecord, DeployableArtifact
from buildpub.integrations.repository.base import RepositoryClient


logger = structlog.get_logger()


class InMemoryRepositoryClient(RepositoryClient):
    """Records deploys and build-info sends in memory.

    Attributes:
        deployed: Successfully deployed artifacts, in call order.
        published_builds: Successfully sent build records, in call order.
        shutdown_count: Number of times resources were released (0 or 1).
    """

    def __init__(self, config: Optional[PublisherConfig] = None) -> None:
        if config is None:
            config = PublisherConfig(repository_client="memory")
        super().__init__(config)

        self.deployed: list[DeployableArtifact] = []
        self.published_builds: list[BuildRecord] = []
        self.shutdown_count = 0

        # Every call is recorded, including failed ones.
        self._call_history: list[dict[str, Any]] = []

        self._failing_paths: set[str] = set()
        self._fail_build_info = False
        self._failure_message = "Simulated repository failure"

        self._logger = logger.bind(component="in_memory_repository_client")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Ordered records of {"operation": ..., "target": ...}."""
        return self._call_history

    @property
    def deployed_paths(self) -> list[str]:
        return [artifact.artifact_path for artifact in self.deployed]

    # =========================================================================
    # Failure Simulation
    # =========================================================================

    def fail_deploy_of(self, *artifact_paths: str, message: Optional[str] = None) -> None:
        """Make deploy_artifact() raise TransportError for these paths."""
        self._failing_paths.update(artifact_paths)
        if message:
            self._failure_message = message

    def set_fail_build_info(self, should_fail: bool, message: Optional[str] = None) -> None:
        """Make send_build_info() raise TransportError."""
        self._fail_build_info = should_fail
        if message:
            self._failure_message = message

    # =========================================================================
    # RepositoryClient Implementation
    # =========================================================================

    def deploy_artifact(self, artifact: DeployableArtifact) -> None:
        self._ensure_open()
        self._call_history.append(
            {"operation": "deploy_artifact", "target": artifact.artifact_path}
        )

        if artifact.artifact_path in self._failing_paths:
            raise TransportError(
                message=f"{self._failure_message}: {artifact.artifact_path}",
                error_code="DEPLOY_FAILED",
                details={
                    "artifact_path": artifact.artifact_path,
                    "target_repository": artifact.target_repository,
                },
            )

        self.deployed.append(artifact)
        self._logger.debug(
            "artifact_recorded",
            artifact_path=artifact.artifact_path,
            target_repository=artifact.target_repository,
        )

    def send_build_info(self, build: BuildRecord) -> None:
        self._ensure_open()
        self._call_history.append(
            {"operation": "send_build_info", "target": f"{build.name}/{build.number}"}
        )

        if self._fail_build_info:
            raise TransportError(
                message=f"{self._failure_message}: build info {build.name}/{build.number}",
                error_code="BUILD_INFO_PUBLISH_FAILED",
                details={"build_name": build.name, "build_number": build.number},
            )

        self.published_builds.append(build.model_copy(deep=True))
        self._logger.debug("build_info_recorded", build_name=build.name, build_number=build.number)

    def _close(self) -> None:
        self.shutdown_count += 1
