"""
Tests for buildpub.facade - BuildPublisher Top-Level Facade
=============================================================

What's Being Tested:
    - Wiring: settings, logging, injected client factory and store
    - publish() accepts candidates as a mapping or a plain iterable
    - The DeploymentReport is returned and errors propagate

All tests use the in-memory repository client.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from buildpub import BuildPublisher
from buildpub.core.config import BuildPublisherSettings
from buildpub.core.enums import DeploymentState
from buildpub.core.exceptions import BuildPublishError
from buildpub.orchestration.orchestrator import DeploymentOrchestrator
from tests.factories import ARTIFACT_NAMES, REPO_DIR


@pytest.fixture
def publisher(settings, client_factory) -> BuildPublisher:
    return BuildPublisher(settings, repository_client_factory=client_factory, configure_logs=False)


class TestConstruction:

    def test_defaults(self) -> None:
        """No arguments: settings come from defaults and the environment."""
        facade = BuildPublisher(configure_logs=False)
        assert isinstance(facade.config, BuildPublisherSettings)
        assert isinstance(facade.orchestrator, DeploymentOrchestrator)

    def test_configures_logging_from_settings(self) -> None:
        settings = BuildPublisherSettings(log_level="DEBUG", log_format="json")
        with patch("buildpub.facade.configure_logging") as configure:
            BuildPublisher(settings)
        configure.assert_called_once_with("DEBUG", "json")

    def test_logging_left_alone_when_disabled(self) -> None:
        with patch("buildpub.facade.configure_logging") as configure:
            BuildPublisher(configure_logs=False)
        configure.assert_not_called()

    def test_repr(self, publisher) -> None:
        assert "https://repo.example.com/artifactory" in repr(publisher)


class TestPublish:

    def test_publish_with_mapping(self, publisher, memory_client, build, candidates, build_dir: Path) -> None:
        report = publisher.publish(build, candidates, base_dir=build_dir)

        assert report.state == DeploymentState.DONE
        assert report.deployed == [f"{REPO_DIR}/{n}" for n in ARTIFACT_NAMES]
        assert memory_client.published_builds[0].name == "acme-app"

    def test_publish_with_iterable(self, publisher, memory_client, build, candidates, build_dir: Path) -> None:
        report = publisher.publish(build, list(candidates.values()), base_dir=build_dir)

        assert len(report.deployed) == len(ARTIFACT_NAMES)

    def test_unstable_build(self, publisher, memory_client, build, candidates, build_dir: Path) -> None:
        report = publisher.publish(build, candidates, were_there_test_failures=True, base_dir=build_dir)

        assert report.deployed == []
        assert memory_client.call_history == []

    def test_failure_propagates(self, publisher, memory_client, build, candidates, build_dir: Path) -> None:
        memory_client.set_fail_build_info(True)

        with pytest.raises(BuildPublishError):
            publisher.publish(build, candidates, base_dir=build_dir)

        assert publisher.orchestrator.last_report.state == DeploymentState.ABORTED
