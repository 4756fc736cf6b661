"""
buildpub.core.enums - Type-Safe Enumerations
==============================================

All enums inherit from both ``str`` and ``Enum`` so they serialize to plain
strings in JSON/YAML and compare equal to their string values:

    >>> DeploymentState.DONE == "done"
    True

Mapping:
    DeploymentState:  orchestrator lifecycle for one invocation
    DeploymentMode:   which branch the orchestrator took after persisting
    ChecksumAlgorithm: digests attached to every deployable artifact
"""

from enum import Enum


# =============================================================================
# Deployment State
# =============================================================================
# One orchestrator invocation walks this state machine:
#
#   START → RECONCILED → PERSISTED → {ACCUMULATING | PUBLISHING | IDLE} → DONE
#
# Any fatal failure moves straight to ABORTED and the error is raised.
# =============================================================================
class DeploymentState(str, Enum):
    """Lifecycle states of a single deployment run."""

    START = "start"
    RECONCILED = "reconciled"
    PERSISTED = "persisted"
    ACCUMULATING = "accumulating"
    PUBLISHING = "publishing"
    IDLE = "idle"
    DONE = "done"
    ABORTED = "aborted"


class DeploymentMode(str, Enum):
    """Branch chosen after the build record has been persisted.

    ACCUMULATE and PUBLISH are mutually exclusive. An accumulation directory
    always wins, even when publish flags are set.
    """

    ACCUMULATE = "accumulate"
    PUBLISH = "publish"
    IDLE = "idle"


class ChecksumAlgorithm(str, Enum):
    """Digest algorithms recorded on build-info artifacts.

    Values are ``hashlib`` algorithm names.
    """

    MD5 = "md5"
    SHA1 = "sha1"
