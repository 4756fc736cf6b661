"""
buildpub.orchestration - Reconcile, Filter, Merge, Publish
============================================================

Pipeline (one build invocation):

    DeployCandidates ─┐
                      ├─→ ArtifactReconciler ─→ DeployableArtifactSet
    BuildRecord ──────┘            │
                                   ↓
                       DeploymentOrchestrator
                         ├─ accumulate: BuildInfoMerger + local copies
                         └─ publish:    PatternFilter → RepositoryClient

Components:
    - PatternFilter:          include/exclude glob evaluation
    - ArtifactReconciler:     candidate matching + checksums
    - BuildInfoMerger:        accumulated build-info merging
    - DeploymentOrchestrator: the run itself
"""

from buildpub.orchestration.merger import BuildInfoMerger, merge_build_records
from buildpub.orchestration.orchestrator import DeploymentOrchestrator
from buildpub.orchestration.pattern_filter import PatternFilter, path_conflicts
from buildpub.orchestration.reconciler import ArtifactReconciler, ReconciliationResult

__all__ = [
    "ArtifactReconciler",
    "BuildInfoMerger",
    "DeploymentOrchestrator",
    "PatternFilter",
    "ReconciliationResult",
    "merge_build_records",
    "path_conflicts",
]
