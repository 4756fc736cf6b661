"""
buildpub.orchestration.reconciler - Build Artifact Reconciliation
===================================================================

Matches the logical artifacts declared in a build record against the
physical deploy candidates produced on disk, hashes the matched files,
and returns the ordered, de-duplicated set of DeployableArtifacts.

Reconciliation Flow:

    for module in build.modules:                 (declared order)
        for artifact in module.artifacts:        (declared order)
            key = "<module.id>:<artifact.name>"
            candidate = candidates[key] ──── missing → skipped (not an error)
            checksums = provider(candidate.source_file)
                          └── missing file → no hashing
                          └── ArtifactIOError → logged, fields stay unset
            artifact.md5/sha1 = checksums        (written back onto the record)
            result.add(DeployableArtifact(...))  (duplicates collapse)

The record is mutated in place on purpose: the orchestrator persists it
right after reconciling and consumers of build-info expect checksums.
Every write-back is also listed in ``ReconciliationResult.checksum_updates``.
"""

from __future__ import annotations

from typing import Mapping, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from buildpub.core.exceptions import ArtifactIOError
from buildpub.core.models import (
    BuildRecord,
    DeployableArtifact,
    DeployableArtifactSet,
    DeployCandidate,
    artifact_id,
)
from buildpub.infrastructure.checksums import ChecksumProvider


logger = structlog.get_logger()


class ReconciliationResult(BaseModel):
    """What reconcile() produced.

    Attributes:
        artifacts: Deployable artifacts in build-record order.
        skipped: Artifact ids without a deploy candidate (metadata-only).
        checksum_failures: Artifact ids whose files could not be hashed.
        checksum_updates: Artifact id → {"md5", "sha1"} written onto the record.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    artifacts: DeployableArtifactSet = Field(default_factory=DeployableArtifactSet)
    skipped: list[str] = Field(default_factory=list)
    checksum_failures: list[str] = Field(default_factory=list)
    checksum_updates: dict[str, dict[str, str]] = Field(default_factory=dict)


class ArtifactReconciler:
    """Turns a build record plus deploy candidates into deployable artifacts.

    Attributes:
        _checksum_provider: Computes md5/sha1 of candidate files.
    """

    def __init__(
        self,
        checksum_provider: Optional[ChecksumProvider] = None,
        log: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        self._checksum_provider = checksum_provider or ChecksumProvider()
        self._logger = (log or logger).bind(component="artifact_reconciler")

    def reconcile(
        self,
        build: BuildRecord,
        candidates_by_id: Mapping[str, DeployCandidate],
    ) -> ReconciliationResult:
        """Match build artifacts to candidates and attach checksums.

        Args:
            build: The build record. Checksum fields of matched artifacts are
                updated in place.
            candidates_by_id: Deploy candidates keyed by artifact_id().

        Returns:
            ReconciliationResult with the ordered deployable set and the
            tagged skip / failure outcomes.
        """
        result = ReconciliationResult()

        for module in build.modules:
            for artifact in module.artifacts:
                key = artifact_id(module.id, artifact.name)
                candidate = candidates_by_id.get(key)
                if candidate is None:
                    result.skipped.append(key)
                    continue

                checksums = self._checksums_for(key, candidate, result)
                if checksums:
                    artifact.md5 = checksums.get("md5", artifact.md5)
                    artifact.sha1 = checksums.get("sha1", artifact.sha1)
                    result.checksum_updates[key] = checksums

                deployable = DeployableArtifact(
                    artifact_path=candidate.artifact_path,
                    source_file=candidate.source_file,
                    md5=artifact.md5 or candidate.md5,
                    sha1=artifact.sha1 or candidate.sha1,
                    properties=dict(candidate.properties),
                    target_repository=candidate.target_repository,
                )
                if not result.artifacts.add(deployable):
                    self._logger.debug("duplicate_artifact_collapsed", artifact_id=key)

        self._logger.info(
            "artifacts_reconciled",
            build_name=build.name,
            build_number=build.number,
            deployable=len(result.artifacts),
            skipped=len(result.skipped),
            checksum_failures=len(result.checksum_failures),
        )
        return result

    def _checksums_for(
        self,
        key: str,
        candidate: DeployCandidate,
        result: ReconciliationResult,
    ) -> dict[str, str]:
        if not candidate.source_file.is_file():
            self._logger.debug(
                "checksum_skipped_missing_file",
                artifact_id=key,
                path=str(candidate.source_file),
            )
            return {}

        try:
            return self._checksum_provider.compute_checksums(candidate.source_file)
        except ArtifactIOError as exc:
            result.checksum_failures.append(key)
            self._logger.error(
                "checksum_failed",
                artifact_id=key,
                error_code=exc.error_code,
                error=exc.message,
            )
            return {}
