"""
Tests for buildpub.core.models
================================

What's Being Tested:
    - artifact_id() key derivation
    - BuildRecord keeps unknown fields (opaque record round trip)
    - DeployableArtifact identity: equality/hash ignore properties
    - DeployableArtifactSet ordering and de-duplication
    - IncludeExcludePatterns input normalization
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from buildpub.core.enums import DeploymentState
from buildpub.core.models import (
    ArtifactDescriptor,
    BuildRecord,
    DeployableArtifact,
    DeployableArtifactSet,
    DeploymentReport,
    IncludeExcludePatterns,
    Module,
    artifact_id,
)


# =============================================================================
# Helpers
# =============================================================================
def _deployable(**overrides) -> DeployableArtifact:
    defaults = {
        "artifact_path": "org/acme/app/1.0/app-1.0.jar",
        "source_file": Path("/work/target/app-1.0.jar"),
        "md5": "m" * 32,
        "sha1": "s" * 40,
        "properties": {"build.name": "acme-app"},
        "target_repository": "libs-release-local",
    }
    defaults.update(overrides)
    return DeployableArtifact(**defaults)


# =============================================================================
# Tests: Keys
# =============================================================================
class TestArtifactId:

    def test_joins_module_and_name(self) -> None:
        assert artifact_id("org.acme:app:1.0", "app-1.0.jar") == "org.acme:app:1.0:app-1.0.jar"


# =============================================================================
# Tests: Build Record
# =============================================================================
class TestBuildRecord:
    """The build record is opaque: unknown fields survive a round trip."""

    def test_extra_fields_preserved(self) -> None:
        raw = {
            "name": "acme-app",
            "number": "42",
            "agent": {"name": "maven", "version": "3.9.6"},
            "modules": [
                {
                    "id": "org.acme:app:1.0",
                    "artifacts": [{"name": "app-1.0.jar", "type": "jar", "remotePath": "x"}],
                }
            ],
        }

        record = BuildRecord.model_validate(raw)
        dumped = record.model_dump(exclude_none=True)

        assert dumped["agent"] == {"name": "maven", "version": "3.9.6"}
        assert dumped["modules"][0]["artifacts"][0]["remotePath"] == "x"

    def test_get_module(self) -> None:
        record = BuildRecord(modules=[Module(id="m1"), Module(id="m2")])
        assert record.get_module("m2").id == "m2"
        assert record.get_module("m3") is None

    def test_descriptor_checksums_default_to_none(self) -> None:
        descriptor = ArtifactDescriptor(name="a.jar")
        assert descriptor.md5 is None
        assert descriptor.sha1 is None


# =============================================================================
# Tests: Deployable Artifact
# =============================================================================
class TestDeployableArtifact:

    def test_is_immutable(self) -> None:
        artifact = _deployable()
        with pytest.raises(ValidationError):
            artifact.md5 = "changed"

    def test_equal_when_identity_matches(self) -> None:
        """Properties do not take part in equality."""
        a = _deployable(properties={"a": "1"})
        b = _deployable(properties={"b": "2"})
        assert a == b
        assert hash(a) == hash(b)

    def test_checksum_difference_breaks_equality(self) -> None:
        assert _deployable() != _deployable(sha1="t" * 40)

    def test_repository_difference_breaks_equality(self) -> None:
        assert _deployable() != _deployable(target_repository="libs-snapshot-local")


# =============================================================================
# Tests: Deployable Artifact Set
# =============================================================================
class TestDeployableArtifactSet:

    def test_preserves_insertion_order(self) -> None:
        paths = ["c.jar", "a.jar", "b.jar"]
        artifacts = DeployableArtifactSet(_deployable(artifact_path=p) for p in paths)
        assert [a.artifact_path for a in artifacts] == paths

    def test_duplicates_collapse_to_first(self) -> None:
        artifacts = DeployableArtifactSet()
        first = _deployable(properties={"first": "yes"})

        assert artifacts.add(first) is True
        assert artifacts.add(_deployable(properties={"second": "yes"})) is False

        assert len(artifacts) == 1
        assert artifacts.to_list()[0].properties == {"first": "yes"}

    def test_contains_and_empty(self) -> None:
        artifacts = DeployableArtifactSet()
        assert len(artifacts) == 0
        artifacts.add(_deployable())
        assert _deployable() in artifacts


# =============================================================================
# Tests: Patterns and Report
# =============================================================================
class TestIncludeExcludePatterns:

    def test_accepts_comma_separated_string(self) -> None:
        patterns = IncludeExcludePatterns(include="*.jar,  *.pom ,", exclude=None)
        assert patterns.include == ("*.jar", "*.pom")
        assert patterns.exclude == ()

    def test_accepts_lists(self) -> None:
        patterns = IncludeExcludePatterns(include=["*.jar"], exclude=["*-sources.jar"])
        assert patterns.exclude == ("*-sources.jar",)


class TestDeploymentReport:

    def test_starts_empty(self) -> None:
        report = DeploymentReport()
        assert report.state == DeploymentState.START
        assert report.mode is None
        assert report.deployed == []
        assert report.build_info_published is False
