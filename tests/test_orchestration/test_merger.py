"""
Tests for buildpub.orchestration.merger
=========================================

What's Being Tested:
    - First accumulation copies the exported file byte for byte
    - Merge rules for modules, artifacts, dependencies, and properties
    - Merging the same record twice is stable
    - Corrupt files abort with PersistenceError
"""

from pathlib import Path

import pytest

from buildpub.core.exceptions import PersistenceError
from buildpub.core.models import ArtifactDescriptor, BuildRecord, Dependency, Module
from buildpub.infrastructure.build_info_store import JsonFileBuildInfoStore
from buildpub.orchestration.merger import BuildInfoMerger, merge_build_records


@pytest.fixture
def store() -> JsonFileBuildInfoStore:
    return JsonFileBuildInfoStore()


@pytest.fixture
def merger(store: JsonFileBuildInfoStore) -> BuildInfoMerger:
    return BuildInfoMerger(store)


def _record(number: str, *modules: Module) -> BuildRecord:
    return BuildRecord(name="acme", number=number, modules=list(modules))


def _module(module_id: str, *names: str, **artifact_fields) -> Module:
    return Module(
        id=module_id,
        artifacts=[ArtifactDescriptor(name=name, **artifact_fields) for name in names],
    )


# =============================================================================
# Tests: merge_build_records
# =============================================================================
class TestMergeBuildRecords:

    def test_disjoint_modules_concatenate(self) -> None:
        merged = merge_build_records(
            _record("1", _module("m1", "a.jar")),
            _record("2", _module("m2", "b.jar")),
        )
        assert [m.id for m in merged.modules] == ["m1", "m2"]

    def test_top_level_fields_from_incoming(self) -> None:
        existing = _record("1")
        existing.properties = {"vcs": "old", "env": "ci"}
        incoming = _record("2")
        incoming.properties = {"vcs": "new"}

        merged = merge_build_records(existing, incoming)

        assert merged.number == "2"
        assert merged.properties == {"vcs": "new", "env": "ci"}

    def test_shared_module_artifacts_merged(self) -> None:
        """Later artifact with the same name replaces the earlier one in place."""
        existing = _record("1", _module("m1", "a.jar", "a.pom", sha1="old"))
        incoming = _record("2", Module(
            id="m1",
            artifacts=[ArtifactDescriptor(name="a.pom", sha1="new"), ArtifactDescriptor(name="a-tests.jar")],
        ))

        module = merge_build_records(existing, incoming).modules[0]

        assert [a.name for a in module.artifacts] == ["a.jar", "a.pom", "a-tests.jar"]
        assert module.artifacts[1].sha1 == "new"
        assert module.artifacts[0].sha1 == "old"

    def test_dependencies_merged_by_id(self) -> None:
        existing = _record("1", Module(id="m1", dependencies=[Dependency(id="junit:junit:4.13", scopes=["test"])]))
        incoming = _record("2", Module(id="m1", dependencies=[
            Dependency(id="junit:junit:4.13", scopes=["test", "compile"]),
            Dependency(id="org.slf4j:slf4j-api:2.0.9"),
        ]))

        module = merge_build_records(existing, incoming).modules[0]

        assert [d.id for d in module.dependencies] == ["junit:junit:4.13", "org.slf4j:slf4j-api:2.0.9"]
        assert module.dependencies[0].scopes == ["test", "compile"]

    def test_inputs_not_mutated(self) -> None:
        existing = _record("1", _module("m1", "a.jar"))
        incoming = _record("2", _module("m1", "b.jar"))

        merge_build_records(existing, incoming)

        assert [a.name for a in existing.modules[0].artifacts] == ["a.jar"]
        assert [a.name for a in incoming.modules[0].artifacts] == ["b.jar"]

    def test_idempotent(self) -> None:
        existing = _record("1", _module("m1", "a.jar"))
        incoming = _record("2", _module("m1", "b.jar"), _module("m2", "c.jar"))

        once = merge_build_records(existing, incoming)
        twice = merge_build_records(once, incoming)

        assert twice == once


# =============================================================================
# Tests: BuildInfoMerger (files)
# =============================================================================
class TestBuildInfoMerger:

    def test_first_run_copies_file_verbatim(self, merger, store, tmp_path: Path) -> None:
        exported = store.save_build_record(_record("1", _module("m1", "a.jar")), tmp_path / "target" / "build-info.json")
        target = tmp_path / "acc" / "build-info.json"

        merger.merge(exported, target)

        assert target.read_bytes() == exported.read_bytes()

    def test_second_run_merges(self, merger, store, tmp_path: Path) -> None:
        target = tmp_path / "acc" / "build-info.json"
        first = store.save_build_record(_record("1", _module("m1", "a.jar")), tmp_path / "one.json")
        second = store.save_build_record(_record("2", _module("m2", "b.jar")), tmp_path / "two.json")

        merger.merge(first, target)
        result = merger.merge(second, target)

        on_disk = store.read_build_record(target)
        assert on_disk == result
        assert [m.id for m in on_disk.modules] == ["m1", "m2"]
        assert on_disk.number == "2"

    def test_corrupt_accumulated_file(self, merger, store, tmp_path: Path) -> None:
        target = tmp_path / "build-info.json"
        target.write_text("{ truncated")
        exported = store.save_build_record(_record("1"), tmp_path / "new.json")

        with pytest.raises(PersistenceError) as exc_info:
            merger.merge(exported, target)

        assert exc_info.value.error_code == "BUILD_INFO_INVALID"
        assert target.read_text() == "{ truncated"

    def test_missing_exported_file(self, merger, tmp_path: Path) -> None:
        with pytest.raises(PersistenceError) as exc_info:
            merger.merge(tmp_path / "never-written.json", tmp_path / "acc" / "build-info.json")
        assert exc_info.value.error_code == "BUILD_INFO_READ_FAILED"

    def test_copy_failure_is_persistence_error(self, merger, store, tmp_path: Path) -> None:
        exported = store.save_build_record(_record("1"), tmp_path / "new.json")
        blocker = tmp_path / "acc"
        blocker.write_text("not a directory")

        with pytest.raises(PersistenceError) as exc_info:
            merger.merge(exported, blocker / "build-info.json")

        assert exc_info.value.error_code == "BUILD_INFO_COPY_FAILED"
