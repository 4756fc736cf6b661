"""
Tests for buildpub.infrastructure.checksums
=============================================

Digests are compared against hashlib computed over the whole file at once.
"""

import hashlib
from pathlib import Path

import pytest

from buildpub.core.enums import ChecksumAlgorithm
from buildpub.core.exceptions import ArtifactIOError
from buildpub.infrastructure.checksums import ChecksumProvider


class TestComputeChecksums:

    def test_matches_hashlib(self, tmp_path: Path) -> None:
        """md5 and sha1 are both computed, lower-case hex."""
        payload = b"PK\x03\x04 fake jar contents"
        artifact = tmp_path / "app-1.0.jar"
        artifact.write_bytes(payload)

        checksums = ChecksumProvider().compute_checksums(artifact)

        assert checksums == {
            "md5": hashlib.md5(payload).hexdigest(),
            "sha1": hashlib.sha1(payload).hexdigest(),
        }

    def test_file_larger_than_one_chunk(self, tmp_path: Path) -> None:
        payload = bytes(range(256)) * 1024  # 256 KiB
        artifact = tmp_path / "big.bin"
        artifact.write_bytes(payload)

        checksums = ChecksumProvider().compute_checksums(str(artifact))

        assert checksums["sha1"] == hashlib.sha1(payload).hexdigest()

    def test_empty_file(self, tmp_path: Path) -> None:
        artifact = tmp_path / "empty.txt"
        artifact.write_bytes(b"")

        checksums = ChecksumProvider().compute_checksums(artifact)

        assert checksums["md5"] == "d41d8cd98f00b204e9800998ecf8427e"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ArtifactIOError) as exc_info:
            ChecksumProvider().compute_checksums(tmp_path / "nope.jar")
        assert exc_info.value.error_code == "CHECKSUM_FILE_MISSING"
        assert exc_info.value.path.endswith("nope.jar")

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ArtifactIOError):
            ChecksumProvider().compute_checksums(tmp_path)


class TestAlgorithms:

    def test_accepts_enum_and_string(self) -> None:
        provider = ChecksumProvider([ChecksumAlgorithm.SHA1, "SHA256"])
        assert provider.algorithms == ["sha1", "sha256"]

    def test_unknown_algorithm_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unsupported checksum algorithm"):
            ChecksumProvider(["crc-nope"])

    def test_only_configured_digests_returned(self, tmp_path: Path) -> None:
        artifact = tmp_path / "a.txt"
        artifact.write_text("abc")

        checksums = ChecksumProvider([ChecksumAlgorithm.SHA1]).compute_checksums(artifact)

        assert list(checksums) == ["sha1"]
