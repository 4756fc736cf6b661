"""
Tests for buildpub.infrastructure.filesystem
"""

from pathlib import Path

import pytest

from buildpub.core.exceptions import ArtifactIOError
from buildpub.infrastructure.filesystem import copy_file


def test_copies_and_creates_parents(tmp_path: Path) -> None:
    src = tmp_path / "app-1.0.jar"
    src.write_bytes(b"jar")
    dst = tmp_path / "acc" / "org" / "acme" / "app-1.0.jar"

    assert copy_file(src, dst) == dst
    assert dst.read_bytes() == b"jar"


def test_replaces_existing_destination(tmp_path: Path) -> None:
    src = tmp_path / "new.txt"
    src.write_text("new")
    dst = tmp_path / "old.txt"
    dst.write_text("old")

    copy_file(str(src), str(dst))

    assert dst.read_text() == "new"


def test_missing_source(tmp_path: Path) -> None:
    with pytest.raises(ArtifactIOError) as exc_info:
        copy_file(tmp_path / "missing.jar", tmp_path / "out.jar")

    assert exc_info.value.error_code == "COPY_SOURCE_MISSING"
    assert exc_info.value.details["destination"] == str(tmp_path / "out.jar")


def test_unwritable_destination(tmp_path: Path) -> None:
    src = tmp_path / "a.jar"
    src.write_bytes(b"a")
    blocker = tmp_path / "file"
    blocker.write_text("")

    with pytest.raises(ArtifactIOError) as exc_info:
        copy_file(src, blocker / "a.jar")

    assert exc_info.value.error_code == "COPY_FAILED"
