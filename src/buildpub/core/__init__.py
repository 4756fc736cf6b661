"""
buildpub.core - Foundation Layer
==================================

Building blocks every other buildpub package depends on:

    - config:      Settings (BuildPublisherSettings, PublisherConfig) and load_config()
    - enums:       DeploymentState, DeploymentMode, ChecksumAlgorithm
    - models:      BuildRecord, DeployCandidate, DeployableArtifact, ...
    - exceptions:  BuildPublishError hierarchy
    - logging:     configure_logging() for structlog

Dependency Rule:
    core/ depends on NOTHING else in the buildpub package.
"""

from buildpub.core.config import (
    BuildPublisherSettings,
    PublisherConfig,
    get_default_config,
    load_config,
)
from buildpub.core.enums import ChecksumAlgorithm, DeploymentMode, DeploymentState
from buildpub.core.exceptions import (
    ArtifactIOError,
    BuildPublishError,
    ConfigurationError,
    PersistenceError,
    TransportError,
)
from buildpub.core.models import (
    ArtifactDescriptor,
    BuildRecord,
    Dependency,
    DeployableArtifact,
    DeployableArtifactSet,
    DeployCandidate,
    DeploymentReport,
    IncludeExcludePatterns,
    Module,
    artifact_id,
)

__all__ = [
    # Config
    "BuildPublisherSettings",
    "PublisherConfig",
    "load_config",
    "get_default_config",
    # Enums
    "ChecksumAlgorithm",
    "DeploymentMode",
    "DeploymentState",
    # Models
    "ArtifactDescriptor",
    "BuildRecord",
    "Dependency",
    "DeployableArtifact",
    "DeployableArtifactSet",
    "DeployCandidate",
    "DeploymentReport",
    "IncludeExcludePatterns",
    "Module",
    "artifact_id",
    # Exceptions
    "BuildPublishError",
    "ConfigurationError",
    "ArtifactIOError",
    "PersistenceError",
    "TransportError",
]
