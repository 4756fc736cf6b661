"""
buildpub.infrastructure.checksums - File Digest Calculation
=============================================================

The ChecksumProvider computes the digests recorded on build-info artifacts
and sent alongside every deployed file. Files are streamed in fixed-size
chunks, so large archives are never held in memory.

Usage:
    >>> provider = ChecksumProvider()
    >>> provider.compute_checksums(Path("target/app-1.0.jar"))
    {'md5': '9e107d9d372bb6826bd81d3542a419d6', 'sha1': '2fd4e1c6...'}
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Union

import structlog

from buildpub.core.enums import ChecksumAlgorithm
from buildpub.core.exceptions import ArtifactIOError


logger = structlog.get_logger()

DEFAULT_ALGORITHMS = (ChecksumAlgorithm.MD5, ChecksumAlgorithm.SHA1)
_CHUNK_SIZE = 64 * 1024


class ChecksumProvider:
    """Computes content digests for artifact files.

    Attributes:
        algorithms: hashlib algorithm names computed by compute_checksums().
    """

    def __init__(
        self,
        algorithms: Iterable[Union[ChecksumAlgorithm, str]] = DEFAULT_ALGORITHMS,
    ) -> None:
        self.algorithms: list[str] = []
        for algorithm in algorithms:
            name = algorithm.value if isinstance(algorithm, ChecksumAlgorithm) else algorithm.lower()
            if name not in hashlib.algorithms_available:
                raise ValueError(f"Unsupported checksum algorithm: '{name}'")
            self.algorithms.append(name)
        self._logger = logger.bind(component="checksum_provider")

    def compute_checksums(self, file_path: Union[Path, str]) -> dict[str, str]:
        """Compute every configured digest of a file in a single pass.

        Args:
            file_path: The file to hash. Must be an existing regular file.

        Returns:
            Mapping of algorithm name to lower-case hex digest.

        Raises:
            ArtifactIOError: If the file is missing, not a regular file, or
                cannot be read.
        """
        path = Path(file_path)
        if not path.is_file():
            raise ArtifactIOError(
                message=f"Cannot compute checksums, not a file: {path}",
                path=str(path),
                error_code="CHECKSUM_FILE_MISSING",
            )

        digests = {name: hashlib.new(name) for name in self.algorithms}
        try:
            with path.open("rb") as f:
                for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                    for digest in digests.values():
                        digest.update(chunk)
        except OSError as exc:
            raise ArtifactIOError(
                message=f"Cannot read artifact for checksums: {exc}",
                path=str(path),
                error_code="CHECKSUM_READ_FAILED",
            ) from exc

        checksums = {name: digest.hexdigest() for name, digest in digests.items()}
        self._logger.debug("checksums_computed", path=str(path), **checksums)
        return checksums
