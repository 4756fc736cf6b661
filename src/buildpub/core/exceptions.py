"""
buildpub.core.exceptions - Custom Exception Hierarchy
=======================================================

This module defines the structured exception hierarchy for buildpub.
Components raise and catch specific exception types that carry contextual
information instead of generic ``Exception`` or ``OSError``.

Exception Hierarchy:
    BuildPublishError (base)
        ├── ConfigurationError  - Invalid config, unknown repository client
        ├── ArtifactIOError     - Checksum read / artifact copy failure (recoverable)
        ├── PersistenceError    - Build-info read/write/merge failure (fatal)
        └── TransportError      - Repository deploy/publish failure (fatal)

Propagation Policy:
    ArtifactIOError is scoped to a single artifact. The reconciler and the
    accumulation step log it and move on to the next artifact.

    PersistenceError and TransportError abort the run. The orchestrator
    marks its report ABORTED and re-raises to the caller with the original
    cause chained (``raise ... from exc``).

Usage:
    >>> from buildpub.core.exceptions import TransportError
    >>> raise TransportError(
    ...     message="Deploy failed: 503 Service Unavailable",
    ...     error_code="DEPLOY_FAILED",
    ...     details={"artifact_path": "org/acme/app/1.0/app-1.0.jar"},
    ... )
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
# All buildpub exceptions inherit from this base class, so callers can catch
# every pipeline failure with a single except clause:
#
#   try:
#       publisher.publish(build, candidates)
#   except BuildPublishError as e:
#       logger.error(e.message, error_code=e.error_code, details=e.details)
# =============================================================================
class BuildPublishError(Exception):
    """Base exception for all buildpub errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code (UPPER_SNAKE_CASE).
        details: Additional debugging context (paths, URLs, status codes).
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary.

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
# Raised at startup when configuration is invalid. The publisher should not
# start with bad config.
# =============================================================================
class ConfigurationError(BuildPublishError):
    """Raised when buildpub configuration is invalid or incomplete.

    Common Causes:
        - Malformed YAML configuration file
        - Unknown repository client name
        - HTTP client selected without a repository URL
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Artifact I/O Error
# =============================================================================
# Scoped to ONE artifact. Raised by the checksum provider and the filesystem
# copy helper; callers log it and continue with the remaining artifacts.
# =============================================================================
class ArtifactIOError(BuildPublishError):
    """Raised when reading or copying a single artifact file fails.

    This error is recoverable: the reconciler leaves the artifact's
    checksum fields unset, and accumulation skips the artifact copy.

    Attributes:
        path: The file that could not be read or copied.

    Example:
        >>> raise ArtifactIOError(
        ...     message="Cannot read artifact: No such file or directory",
        ...     path="/work/target/app-1.0.jar",
        ...     error_code="CHECKSUM_READ_FAILED",
        ... )
    """

    def __init__(
        self,
        message: str,
        path: str,
        error_code: str = "ARTIFACT_IO_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["path"] = path

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.path = path


# =============================================================================
# Persistence Error
# =============================================================================
# Build-info export, accumulation copy and merge failures. Always fatal: a
# corrupt accumulated record would silently lose build history.
# =============================================================================
class PersistenceError(BuildPublishError):
    """Raised when a build-info record cannot be read, written, or merged.

    Attributes:
        path: The build-info file involved in the failed operation.

    Example:
        >>> raise PersistenceError(
        ...     message="Error occurred while persisting Build Info",
        ...     path="target/build-info.json",
        ...     error_code="BUILD_INFO_WRITE_FAILED",
        ... )
    """

    def __init__(
        self,
        message: str,
        path: str,
        error_code: str = "PERSISTENCE_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["path"] = path

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.path = path


# =============================================================================
# Transport Error
# =============================================================================
# Raised by repository clients. The orchestrator stops the publish branch on
# the first one it sees; the client session is still shut down.
# =============================================================================
class TransportError(BuildPublishError):
    """Raised when the repository client fails to deploy or publish.

    Common Causes:
        - Repository unreachable or timing out
        - Authentication rejected (401/403)
        - Server-side failure (5xx)
        - Client used after shutdown()
    """

    def __init__(
        self,
        message: str,
        error_code: str = "TRANSPORT_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)
