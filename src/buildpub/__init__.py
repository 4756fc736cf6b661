"""
buildpub - Build-Info Reconciliation & Publishing
===================================================

buildpub runs at the end of a build. It matches the artifacts a build
declares against the files it actually produced, attaches md5/sha1
checksums, exports the build-info record, and then either publishes
artifacts plus build-info to a remote repository or accumulates them in a
local directory for a later publishing step.

    Reconcile  →  Persist build-info  →  Accumulate  |  Publish  |  Idle

Architecture Layers (top to bottom):
    1. Facade          - BuildPublisher
    2. Orchestration   - DeploymentOrchestrator, ArtifactReconciler,
                         BuildInfoMerger, PatternFilter
    3. Infrastructure  - ChecksumProvider, BuildInfoStore, copy_file
    4. Integrations    - Repository clients (HTTP, in-memory)

Quick Start:
    >>> from buildpub import BuildPublisher
    >>> report = BuildPublisher().publish(build, candidates, base_dir=".")
"""

__version__ = "0.1.0"

from buildpub.facade import BuildPublisher

__all__ = ["BuildPublisher", "__version__"]
