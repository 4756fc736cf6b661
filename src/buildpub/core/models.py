"""
buildpub.core.models - Core Data Models
=========================================

Pydantic data models that flow through every layer of buildpub.

Model Hierarchy:
    BuildRecord           → The build-info record (modules → artifacts)
    DeployCandidate       → A produced file proposed for publishing
    DeployableArtifact    → Reconciled, checksum-complete unit sent to transport
    DeployableArtifactSet → Insertion-ordered, de-duplicated DeployableArtifacts
    IncludeExcludePatterns→ Deployment path filter rules
    DeploymentReport      → What one orchestrator run did

Data Flow Through the Pipeline:
    ┌──────────────┐  artifact_id()   ┌─────────────────┐
    │ BuildRecord  │ ───────────────→ │ DeployCandidate │
    │  Module      │   "module:name"  │  (by id)        │
    │   Artifact   │                  └────────┬────────┘
    └──────┬───────┘                           │ reconcile + checksums
           │ md5/sha1 written back             ↓
           │                          ┌─────────────────────┐
           └────── persisted ←─────── │ DeployableArtifact  │ → RepositoryClient
                                      └─────────────────────┘

The build-info models are deliberately permissive (``extra="allow"``): the
record is produced upstream and may carry fields this package never reads.
They survive a load/save round trip untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from buildpub.core.enums import DeploymentMode, DeploymentState


# =============================================================================
# Helper: Artifact Identity Key
# =============================================================================
def artifact_id(module_id: str, artifact_name: str) -> str:
    """Build the key that links a build-info artifact to its deploy candidate.

    Args:
        module_id: The owning module's id (e.g. "org.acme:app:1.0").
        artifact_name: The artifact's file name (e.g. "app-1.0.jar").

    Returns:
        "<module_id>:<artifact_name>"
    """
    return f"{module_id}:{artifact_name}"


def split_patterns(value: Union[str, Iterable[str], None]) -> list[str]:
    """Normalize pattern input to a list of non-blank, trimmed rules.

    Accepts either an iterable of rules or a single comma-separated string
    ("*.jar, *.pom"), which is how pattern lists usually arrive from
    environment variables and CI job parameters.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [rule.strip() for rule in value if rule and rule.strip()]


# =============================================================================
# Build-Info Record
# =============================================================================
class ArtifactDescriptor(BaseModel):
    """A logical artifact declared by a build module.

    The reconciler fills ``md5``/``sha1`` in place once the physical file
    has been hashed, so the persisted record carries the checksums.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Artifact file name, unique within its module")
    type: Optional[str] = Field(default=None, description="Artifact type (jar, pom, ...)")
    md5: Optional[str] = Field(default=None, description="MD5 hex digest")
    sha1: Optional[str] = Field(default=None, description="SHA-1 hex digest")


class Dependency(BaseModel):
    """A dependency resolved by a build module."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Dependency coordinates")
    type: Optional[str] = None
    scopes: list[str] = Field(default_factory=list)
    md5: Optional[str] = None
    sha1: Optional[str] = None


class Module(BaseModel):
    """One module of a build, with its artifacts in declaration order."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Module id, e.g. 'org.acme:app:1.0'")
    artifacts: list[ArtifactDescriptor] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)


class BuildRecord(BaseModel):
    """Structured description of a build's outputs.

    Attributes:
        name: Build name (job name).
        number: Build number.
        started: Build start timestamp as recorded by the build tool.
        url: Link back to the CI job, if any.
        properties: Free-form build properties (environment, VCS revision...).
        modules: Ordered modules of the build.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(default="", description="Build name")
    number: str = Field(default="", description="Build number")
    started: Optional[str] = Field(default=None, description="Build start timestamp")
    url: Optional[str] = Field(default=None, description="CI build URL")
    properties: dict[str, str] = Field(default_factory=dict)
    modules: list[Module] = Field(default_factory=list)

    def get_module(self, module_id: str) -> Optional[Module]:
        """Return the module with the given id, or None."""
        for module in self.modules:
            if module.id == module_id:
                return module
        return None


# =============================================================================
# Deploy Candidate
# =============================================================================
# Produced upstream (by whatever knows where the build tool wrote its files)
# and handed to the pipeline keyed by artifact_id(module_id, name).
# =============================================================================
class DeployCandidate(BaseModel):
    """A physical file plus the repository coordinates it should go to.

    Attributes:
        artifact_id: "<module_id>:<artifact_name>" key of the build artifact.
        source_file: Where the file lives on disk.
        artifact_path: Repository-relative target path.
        target_repository: Repository key to deploy into.
        properties: Properties attached to the deployed file.
        md5: Optional precomputed MD5, used only when hashing is impossible.
        sha1: Optional precomputed SHA-1, same fallback role as md5.
    """

    artifact_id: str
    source_file: Path
    artifact_path: str
    target_repository: str
    properties: dict[str, str] = Field(default_factory=dict)
    md5: Optional[str] = None
    sha1: Optional[str] = None


# =============================================================================
# Deployable Artifact
# =============================================================================
# Identity is (artifact_path, source_file, md5, sha1, target_repository).
# Properties ride along but do not take part in equality, so two candidates
# that point at the same file/target collapse even if their property bags
# were assembled differently.
# =============================================================================
class DeployableArtifact(BaseModel):
    """The reconciled, checksum-complete unit handed to the repository client."""

    model_config = ConfigDict(frozen=True)

    artifact_path: str
    source_file: Path
    md5: Optional[str] = None
    sha1: Optional[str] = None
    properties: dict[str, str] = Field(default_factory=dict)
    target_repository: str

    @property
    def identity(self) -> tuple[str, Path, Optional[str], Optional[str], str]:
        return (
            self.artifact_path,
            self.source_file,
            self.md5,
            self.sha1,
            self.target_repository,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeployableArtifact):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)


class DeployableArtifactSet:
    """Insertion-ordered set of DeployableArtifacts.

    Adding an artifact equal to one already present is a no-op; the first
    inserted instance is kept.

    Example:
        >>> artifacts = DeployableArtifactSet()
        >>> artifacts.add(jar)
        True
        >>> artifacts.add(jar)
        False
        >>> len(artifacts)
        1
    """

    def __init__(self, artifacts: Iterable[DeployableArtifact] = ()) -> None:
        self._items: dict[DeployableArtifact, None] = {}
        for artifact in artifacts:
            self.add(artifact)

    def add(self, artifact: DeployableArtifact) -> bool:
        """Insert an artifact. Returns False if an equal one was already present."""
        if artifact in self._items:
            return False
        self._items[artifact] = None
        return True

    def to_list(self) -> list[DeployableArtifact]:
        return list(self._items)

    def __iter__(self) -> Iterator[DeployableArtifact]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, artifact: object) -> bool:
        return artifact in self._items

    def __repr__(self) -> str:
        paths = [artifact.artifact_path for artifact in self._items]
        return f"DeployableArtifactSet({paths!r})"


# =============================================================================
# Include / Exclude Patterns
# =============================================================================
class IncludeExcludePatterns(BaseModel):
    """Glob rules deciding which artifact paths may be deployed.

    An empty include list means "include everything not excluded".
    Either side may be given as a list or a comma-separated string.
    """

    model_config = ConfigDict(frozen=True)

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _split(cls, value: Any) -> tuple[str, ...]:
        return tuple(split_patterns(value))


# =============================================================================
# Deployment Report
# =============================================================================
# Records the tagged, non-error outcomes of a run (skips, copy failures) in
# addition to the final state. Skips are data, not exceptions.
# =============================================================================
class DeploymentReport(BaseModel):
    """Outcome of one DeploymentOrchestrator run.

    Attributes:
        state: Final (or, while running, current) state of the run.
        mode: Branch taken after persisting (None before the decision).
        build_info_file: Where the build record was exported.
        deployed: Artifact paths deployed to the repository, in order.
        skipped_by_pattern: Artifact paths skipped by include/exclude rules.
        skipped_no_candidate: Artifact ids with no matching deploy candidate.
        checksum_failures: Artifact ids whose checksums could not be computed.
        accumulated: Artifact paths copied into the accumulation directory.
        copy_failures: Artifact paths that could not be copied while accumulating.
        build_info_published: Whether the build record reached the repository.
        error: Serialized error if the run aborted.
    """

    state: DeploymentState = DeploymentState.START
    mode: Optional[DeploymentMode] = None
    build_info_file: Optional[Path] = None
    deployed: list[str] = Field(default_factory=list)
    skipped_by_pattern: list[str] = Field(default_factory=list)
    skipped_no_candidate: list[str] = Field(default_factory=list)
    checksum_failures: list[str] = Field(default_factory=list)
    accumulated: list[str] = Field(default_factory=list)
    copy_failures: list[str] = Field(default_factory=list)
    build_info_published: bool = False
    error: Optional[dict[str, Any]] = None
