"""
Shared Test Fixtures for buildpub
===================================

Fixtures are organized by layer:

    1. Build outputs on disk (tmp_path based)
    2. Build record and deploy candidates
    3. Configuration
    4. Repository client doubles
"""

from __future__ import annotations

from pathlib import Path

import pytest

from buildpub.core.config import BuildPublisherSettings, PublisherConfig
from buildpub.core.models import BuildRecord, DeployCandidate
from buildpub.integrations.repository.memory import InMemoryRepositoryClient
from tests.factories import ARTIFACT_NAMES, make_build, make_candidate


# =============================================================================
# Build Outputs
# =============================================================================

@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """A build base directory with target/ files for every artifact."""
    target = tmp_path / "workspace" / "target"
    target.mkdir(parents=True)
    for name in ARTIFACT_NAMES:
        (target / name).write_bytes(f"contents of {name}".encode())
    return tmp_path / "workspace"


@pytest.fixture
def build() -> BuildRecord:
    """Fresh build record with three declared artifacts."""
    return make_build()


@pytest.fixture
def candidates(build_dir: Path) -> dict[str, DeployCandidate]:
    """Deploy candidates for all three artifacts, keyed by artifact id."""
    result = {}
    for name in ARTIFACT_NAMES:
        candidate = make_candidate(build_dir / "target" / name, name)
        result[candidate.artifact_id] = candidate
    return result


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def publisher_config() -> PublisherConfig:
    """Publish everything through the in-memory client."""
    return PublisherConfig(
        repository_client="memory",
        repository_url="https://repo.example.com/artifactory",
    )


@pytest.fixture
def settings(publisher_config: PublisherConfig) -> BuildPublisherSettings:
    """Settings wrapping the in-memory publisher config."""
    return BuildPublisherSettings(publisher=publisher_config)


# =============================================================================
# Repository Client
# =============================================================================

@pytest.fixture
def memory_client() -> InMemoryRepositoryClient:
    """Fresh InMemoryRepositoryClient."""
    return InMemoryRepositoryClient()


@pytest.fixture
def client_factory(memory_client: InMemoryRepositoryClient):
    """Factory that always hands out ``memory_client`` and counts calls."""
    calls: list[PublisherConfig] = []

    def factory(config: PublisherConfig) -> InMemoryRepositoryClient:
        calls.append(config)
        return memory_client

    factory.calls = calls
    return factory
