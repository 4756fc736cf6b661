"""
buildpub.orchestration.orchestrator - Deployment Orchestration
================================================================

The DeploymentOrchestrator runs once per build invocation. It reconciles
artifacts, exports the build record, then either accumulates everything
locally or publishes through a repository client.

State Machine (one run):

    START ──→ RECONCILED ──→ PERSISTED ──┬──→ ACCUMULATING ──┐
                                         ├──→ PUBLISHING  ───┼──→ DONE
                                         └──→ IDLE ──────────┘
      any fatal failure ─────────────────────────────────────────→ ABORTED (raised)

Decision Sequence:
    1. Reconcile candidates (also in accumulation mode, so the copied
       artifacts match checksummed build-info).
    2. Persist the build record (export_file, or <base_dir>/target/build-info.json).
       PersistenceError aborts; nothing downstream runs.
    3. accumulate_artifacts_dir set → merge build-info into the directory and
       copy artifacts to <dir>/<artifact_path>. No repository client is created.
    4. else publish_artifacts or publish_build_info → open a client session:
         a. deploy artifacts (pattern-filtered) unless unstable and not even_unstable
         b. send build info, same stability gate
       The session is shut down on every exit path.
    5. else → idle (local export only).

Fail-Fast:
    The first failed deploy aborts the run. Remaining artifacts and the
    build-info send are not attempted, so a published build record never
    claims artifacts that did not make it to the repository.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

import structlog

from buildpub.core.config import BuildPublisherSettings, PublisherConfig
from buildpub.core.enums import DeploymentMode, DeploymentState
from buildpub.core.exceptions import ArtifactIOError, BuildPublishError, TransportError
from buildpub.core.models import (
    BuildRecord,
    DeployableArtifactSet,
    DeployCandidate,
    DeploymentReport,
)
from buildpub.infrastructure.build_info_store import BuildInfoStore, JsonFileBuildInfoStore
from buildpub.infrastructure.filesystem import copy_file
from buildpub.integrations.repository.base import RepositoryClient, RepositoryClientFactory
from buildpub.integrations.repository.factory import create_repository_client
from buildpub.orchestration.merger import BuildInfoMerger
from buildpub.orchestration.pattern_filter import PatternFilter
from buildpub.orchestration.reconciler import ArtifactReconciler


logger = structlog.get_logger()

DEFAULT_BUILD_INFO_FILE = Path("target") / "build-info.json"
ACCUMULATED_BUILD_INFO_FILE = "build-info.json"


class DeploymentOrchestrator:
    """Coordinates reconciliation, persistence, and accumulate-or-publish.

    Collaborators are injected so tests can substitute any of them.

    Attributes:
        _client_factory: Creates a repository client session per publish run.
        _store: Persists the build record.
        _reconciler: Produces the deployable artifact set.
        _merger: Merges build-info in accumulation mode.
        _pattern_filter: Include/exclude gate for deploys.
        _last_report: Report of the most recent run (also kept when it aborted).
    """

    def __init__(
        self,
        repository_client_factory: RepositoryClientFactory = create_repository_client,
        build_info_store: Optional[BuildInfoStore] = None,
        reconciler: Optional[ArtifactReconciler] = None,
        merger: Optional[BuildInfoMerger] = None,
        pattern_filter: Optional[PatternFilter] = None,
        log: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        self._logger = (log or logger).bind(component="deployment_orchestrator")
        self._client_factory = repository_client_factory
        self._store = build_info_store or JsonFileBuildInfoStore()
        self._reconciler = reconciler or ArtifactReconciler(log=log)
        self._merger = merger or BuildInfoMerger(self._store, log=log)
        self._pattern_filter = pattern_filter or PatternFilter()
        self._last_report: Optional[DeploymentReport] = None

    @property
    def last_report(self) -> Optional[DeploymentReport]:
        return self._last_report

    # =========================================================================
    # Public API
    # =========================================================================

    def run(
        self,
        build: BuildRecord,
        config: BuildPublisherSettings,
        candidates_by_id: Mapping[str, DeployCandidate],
        were_there_test_failures: bool = False,
        base_dir: Union[Path, str] = ".",
    ) -> DeploymentReport:
        """Run the pipeline for one build.

        Args:
            build: The build record. Artifact checksums are filled in place.
            config: Settings (publisher switches and export file override).
            candidates_by_id: Deploy candidates keyed by artifact_id().
            were_there_test_failures: Whether the build is unstable.
            base_dir: Build base directory; the default export location is
                relative to it.

        Returns:
            The DeploymentReport of a completed run.

        Raises:
            PersistenceError: If the build record cannot be persisted or merged.
            TransportError: If a deploy or the build-info publish fails.
            ConfigurationError: If no repository client can be created.
        """
        report = DeploymentReport()
        self._last_report = report
        publisher = config.publisher

        try:
            reconciliation = self._reconciler.reconcile(build, candidates_by_id)
            report.skipped_no_candidate = list(reconciliation.skipped)
            report.checksum_failures = list(reconciliation.checksum_failures)
            self._transition(report, DeploymentState.RECONCILED)

            build_info_file = self.build_info_file(config, base_dir)
            self._logger.info("saving_build_info", path=str(build_info_file))
            self._store.save_build_record(build, build_info_file)
            report.build_info_file = build_info_file
            self._transition(report, DeploymentState.PERSISTED)

            self._logger.debug(
                "publisher_settings",
                publish_build_info=publisher.publish_build_info,
                publish_artifacts=publisher.publish_artifacts,
                even_unstable=publisher.even_unstable,
                accumulate_artifacts_dir=(
                    str(publisher.accumulate_artifacts_dir)
                    if publisher.accumulate_artifacts_dir else None
                ),
            )

            if publisher.accumulate_artifacts_dir is not None:
                report.mode = DeploymentMode.ACCUMULATE
                self._transition(report, DeploymentState.ACCUMULATING)
                self._accumulate(
                    Path(publisher.accumulate_artifacts_dir),
                    build_info_file,
                    reconciliation.artifacts,
                    report,
                )
            elif publisher.publish_artifacts or publisher.publish_build_info:
                report.mode = DeploymentMode.PUBLISH
                self._transition(report, DeploymentState.PUBLISHING)
                self._publish(
                    build,
                    publisher,
                    reconciliation.artifacts,
                    were_there_test_failures,
                    report,
                )
            else:
                report.mode = DeploymentMode.IDLE
                self._transition(report, DeploymentState.IDLE)
        except Exception as exc:
            report.state = DeploymentState.ABORTED
            report.error = (
                exc.to_dict() if isinstance(exc, BuildPublishError)
                else {"error_type": exc.__class__.__name__, "message": str(exc)}
            )
            self._logger.error("deployment_aborted", **report.error)
            raise

        self._transition(report, DeploymentState.DONE)
        return report

    @staticmethod
    def build_info_file(config: BuildPublisherSettings, base_dir: Union[Path, str]) -> Path:
        """Where the build record is exported for this run."""
        if config.export_file is not None:
            return Path(config.export_file)
        return Path(base_dir) / DEFAULT_BUILD_INFO_FILE

    # =========================================================================
    # Accumulation
    # =========================================================================

    def _accumulate(
        self,
        accumulate_dir: Path,
        build_info_file: Path,
        artifacts: DeployableArtifactSet,
        report: DeploymentReport,
    ) -> None:
        self._logger.info("accumulating_artifacts", directory=str(accumulate_dir))
        self._merger.merge(build_info_file, accumulate_dir / ACCUMULATED_BUILD_INFO_FILE)

        for artifact in artifacts:
            relative_path = artifact.artifact_path.lstrip("/")
            try:
                copy_file(artifact.source_file, accumulate_dir / relative_path)
            except ArtifactIOError as exc:
                report.copy_failures.append(artifact.artifact_path)
                self._logger.warning(
                    "artifact_copy_failed",
                    artifact_path=artifact.artifact_path,
                    error=exc.message,
                )
                continue
            report.accumulated.append(artifact.artifact_path)

    # =========================================================================
    # Publishing
    # =========================================================================

    def _publish(
        self,
        build: BuildRecord,
        publisher: PublisherConfig,
        artifacts: DeployableArtifactSet,
        were_there_test_failures: bool,
        report: DeploymentReport,
    ) -> None:
        stable_enough = publisher.even_unstable or not were_there_test_failures
        if not stable_enough:
            self._logger.warning(
                "publishing_suppressed_test_failures",
                publish_artifacts=publisher.publish_artifacts,
                publish_build_info=publisher.publish_build_info,
            )

        with self._client_factory(publisher) as client:
            if publisher.publish_artifacts and len(artifacts) > 0 and stable_enough:
                self._deploy_artifacts(client, publisher, artifacts, report)

            if publisher.publish_build_info and stable_enough:
                self._logger.info(
                    "deploying_build_info",
                    build_name=build.name,
                    build_number=build.number,
                )
                client.send_build_info(build)
                report.build_info_published = True

    def _deploy_artifacts(
        self,
        client: RepositoryClient,
        publisher: PublisherConfig,
        artifacts: DeployableArtifactSet,
        report: DeploymentReport,
    ) -> None:
        self._logger.info(
            "deploying_artifacts",
            url=publisher.repository_url,
            count=len(artifacts),
        )
        patterns = publisher.deployment_patterns

        for artifact in artifacts:
            if self._pattern_filter.matches(artifact.artifact_path, patterns):
                self._logger.info(
                    "artifact_skipped_by_patterns",
                    artifact_path=artifact.artifact_path,
                )
                report.skipped_by_pattern.append(artifact.artifact_path)
                continue

            try:
                client.deploy_artifact(artifact)
            except TransportError as exc:
                raise TransportError(
                    message=(
                        f"Error occurred while publishing artifact {artifact.source_file}. "
                        f"Skipping deployment of remaining artifacts (if any) and build info."
                    ),
                    error_code=exc.error_code,
                    details={
                        **exc.details,
                        "artifact_path": artifact.artifact_path,
                        "source_file": str(artifact.source_file),
                    },
                ) from exc
            report.deployed.append(artifact.artifact_path)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _transition(self, report: DeploymentReport, state: DeploymentState) -> None:
        self._logger.debug("deployment_state_changed", previous=report.state.value, state=state.value)
        report.state = state
