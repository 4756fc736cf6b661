"""
Publish Example - Reconcile and Publish One Build
===================================================

Creates a tiny build on disk, then runs the full pipeline through the
in-memory repository client: checksums are attached, build-info is
exported to ``target/build-info.json``, artifacts are deployed (sources
excluded), and the build record is sent.

Usage:
    python examples/publish_build.py
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from buildpub import BuildPublisher
from buildpub.core.config import BuildPublisherSettings, PublisherConfig
from buildpub.core.models import (
    ArtifactDescriptor,
    BuildRecord,
    DeployCandidate,
    Module,
    artifact_id,
)
from buildpub.integrations.repository.memory import InMemoryRepositoryClient


MODULE_ID = "org.acme:greeter:1.0"
NAMES = ["greeter-1.0.jar", "greeter-1.0.pom", "greeter-1.0-sources.jar"]


def main() -> None:
    """Publish a three-artifact build and print what happened."""
    base_dir = Path(tempfile.mkdtemp(prefix="buildpub-"))
    target = base_dir / "target"
    target.mkdir()

    candidates = []
    for name in NAMES:
        (target / name).write_text(f"contents of {name}")
        candidates.append(
            DeployCandidate(
                artifact_id=artifact_id(MODULE_ID, name),
                source_file=target / name,
                artifact_path=f"org/acme/greeter/1.0/{name}",
                target_repository="libs-release-local",
                properties={"build.name": "greeter", "build.number": "1"},
            )
        )

    build = BuildRecord(
        name="greeter",
        number="1",
        modules=[Module(id=MODULE_ID, artifacts=[ArtifactDescriptor(name=n) for n in NAMES])],
    )

    # Keep a handle on the client so we can inspect it afterwards
    client = InMemoryRepositoryClient()
    settings = BuildPublisherSettings(
        publisher=PublisherConfig(
            repository_client="memory",
            exclude_patterns=["**/*-sources.jar"],
        ),
    )
    publisher = BuildPublisher(settings, repository_client_factory=lambda _config: client)

    report = publisher.publish(build, candidates, base_dir=base_dir)

    print(f"State:              {report.state.value}")
    print(f"Build-info file:    {report.build_info_file}")
    print(f"Deployed:           {report.deployed}")
    print(f"Skipped (patterns): {report.skipped_by_pattern}")
    print(f"Build-info sent:    {report.build_info_published}")
    for descriptor in build.modules[0].artifacts:
        print(f"  {descriptor.name:<26} sha1={descriptor.sha1}")


if __name__ == "__main__":
    main()
