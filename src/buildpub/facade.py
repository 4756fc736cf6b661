"""
buildpub.facade - BuildPublisher Top-Level Facade
===================================================

The single entry point build tooling calls at the end of a build. It wires
configuration, logging, persistence, checksums, and the repository client
factory into a DeploymentOrchestrator.

    ┌──────────────────────────────────────────────┐
    │              BuildPublisher (Facade)           │
    │                                               │
    │  BuildPublisherSettings → configure_logging   │
    │                                               │
    │  DeploymentOrchestrator                       │
    │    ├── ArtifactReconciler ← ChecksumProvider  │
    │    ├── BuildInfoMerger    ← BuildInfoStore    │
    │    ├── PatternFilter                          │
    │    └── RepositoryClientFactory                │
    └──────────────────────────────────────────────┘

Usage:
    >>> from buildpub import BuildPublisher
    >>> from buildpub.core.config import load_config
    >>>
    >>> publisher = BuildPublisher(load_config("buildpub.yaml"))
    >>> report = publisher.publish(build, candidates, base_dir="/work/app")
    >>> report.deployed
    ['org/acme/app/1.0/app-1.0.jar']
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

import structlog

from buildpub.core.config import BuildPublisherSettings
from buildpub.core.logging import configure_logging
from buildpub.core.models import BuildRecord, DeployCandidate, DeploymentReport
from buildpub.infrastructure.build_info_store import BuildInfoStore, JsonFileBuildInfoStore
from buildpub.infrastructure.checksums import ChecksumProvider
from buildpub.integrations.repository.base import RepositoryClientFactory
from buildpub.integrations.repository.factory import create_repository_client
from buildpub.orchestration.merger import BuildInfoMerger
from buildpub.orchestration.orchestrator import DeploymentOrchestrator
from buildpub.orchestration.reconciler import ArtifactReconciler


logger = structlog.get_logger()

Candidates = Union[Mapping[str, DeployCandidate], Iterable[DeployCandidate]]


class BuildPublisher:
    """Top-level facade for publishing one build's artifacts and build-info.

    Attributes:
        _config: Settings for every run made through this facade.
        _orchestrator: The wired DeploymentOrchestrator.

    Example:
        >>> publisher = BuildPublisher(
        ...     BuildPublisherSettings(publisher=PublisherConfig(repository_client="memory")),
        ...     configure_logs=False,
        ... )
        >>> report = publisher.publish(build, [jar_candidate])
    """

    def __init__(
        self,
        config: Optional[BuildPublisherSettings] = None,
        *,
        repository_client_factory: Optional[RepositoryClientFactory] = None,
        build_info_store: Optional[BuildInfoStore] = None,
        checksum_provider: Optional[ChecksumProvider] = None,
        configure_logs: bool = True,
    ) -> None:
        self._config = config or BuildPublisherSettings()
        if configure_logs:
            configure_logging(self._config.log_level, self._config.log_format)

        self._logger = logger.bind(component="build_publisher")

        store = build_info_store or JsonFileBuildInfoStore()
        self._orchestrator = DeploymentOrchestrator(
            repository_client_factory=repository_client_factory or create_repository_client,
            build_info_store=store,
            reconciler=ArtifactReconciler(checksum_provider or ChecksumProvider()),
            merger=BuildInfoMerger(store),
        )

    @property
    def config(self) -> BuildPublisherSettings:
        return self._config

    @property
    def orchestrator(self) -> DeploymentOrchestrator:
        return self._orchestrator

    def publish(
        self,
        build: BuildRecord,
        candidates: Candidates,
        were_there_test_failures: bool = False,
        base_dir: Union[Path, str] = ".",
    ) -> DeploymentReport:
        """Reconcile, persist, and accumulate or publish one build.

        Args:
            build: The build record (checksums are filled in place).
            candidates: Deploy candidates, either keyed by artifact id or as
                a plain iterable (keyed by each candidate's ``artifact_id``).
            were_there_test_failures: Whether the build is unstable.
            base_dir: Build base directory.

        Returns:
            The DeploymentReport of the completed run.

        Raises:
            BuildPublishError: Any fatal pipeline failure.
        """
        candidates_by_id = self._index_candidates(candidates)
        self._logger.info(
            "publish_started",
            build_name=build.name,
            build_number=build.number,
            candidates=len(candidates_by_id),
        )
        report = self._orchestrator.run(
            build,
            self._config,
            candidates_by_id,
            were_there_test_failures=were_there_test_failures,
            base_dir=base_dir,
        )
        self._logger.info(
            "publish_finished",
            mode=report.mode.value if report.mode else None,
            deployed=len(report.deployed),
            skipped_by_pattern=len(report.skipped_by_pattern),
            build_info_published=report.build_info_published,
        )
        return report

    @staticmethod
    def _index_candidates(candidates: Candidates) -> dict[str, DeployCandidate]:
        if isinstance(candidates, Mapping):
            return dict(candidates)
        return {candidate.artifact_id: candidate for candidate in candidates}

    def __repr__(self) -> str:
        return (
            f"BuildPublisher(environment={self._config.environment!r}, "
            f"repository_url={self._config.publisher.repository_url!r})"
        )
