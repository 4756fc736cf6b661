"""
Accumulation Example - Collect Two Builds Locally
===================================================

Two independent module builds write into one accumulation directory. The
second run merges its build-info into the first run's record instead of
overwriting it, so the directory ends up with both modules' artifacts and
a single combined ``build-info.json``.

Usage:
    python examples/accumulate_builds.py
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


def build_module(workspace: Path, module: str) -> tuple[BuildRecord, list[DeployCandidate], Path]:
    """Write one jar for ``module`` and describe it."""
    module_id = f"org.acme:{module}:1.0"
    name = f"{module}-1.0.jar"
    base_dir = workspace / module
    (base_dir / "target").mkdir(parents=True)
    source = base_dir / "target" / name
    source.write_text(f"{module} classes")

    build = BuildRecord(
        name="acme-platform",
        number="7",
        modules=[Module(id=module_id, artifacts=[ArtifactDescriptor(name=name, type="jar")])],
    )
    candidate = DeployCandidate(
        artifact_id=artifact_id(module_id, name),
        source_file=source,
        artifact_path=f"org/acme/{module}/1.0/{name}",
        target_repository="libs-release-local",
    )
    return build, [candidate], base_dir


def main() -> None:
    workspace = Path(tempfile.mkdtemp(prefix="buildpub-"))
    accumulate_dir = workspace / "accumulated"

    settings = BuildPublisherSettings(
        publisher=PublisherConfig(accumulate_artifacts_dir=accumulate_dir),
    )
    publisher = BuildPublisher(settings)

    for module in ("core", "web"):
        build, candidates, base_dir = build_module(workspace, module)
        report = publisher.publish(build, candidates, base_dir=base_dir)
        print(f"{module}: mode={report.mode.value} accumulated={report.accumulated}")

    print()
    print((accumulate_dir / "build-info.json").read_text())


if __name__ == "__main__":
    main()
