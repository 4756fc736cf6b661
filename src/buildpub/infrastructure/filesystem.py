"""
buildpub.infrastructure.filesystem - Local File Copy
======================================================

Used by accumulation mode to place artifacts and build-info next to each
other in the accumulation directory.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Union

import structlog

from buildpub.core.exceptions import ArtifactIOError


logger = structlog.get_logger()


def copy_file(src: Union[Path, str], dst: Union[Path, str]) -> Path:
    """Copy ``src`` to ``dst``, creating parent directories of ``dst``.

    An existing destination file is replaced.

    Returns:
        The destination path.

    Raises:
        ArtifactIOError: If the source is missing or the copy fails.
    """
    src_path = Path(src)
    dst_path = Path(dst)

    if not src_path.is_file():
        raise ArtifactIOError(
            message=f"Cannot copy, source is not a file: {src_path}",
            path=str(src_path),
            error_code="COPY_SOURCE_MISSING",
            details={"destination": str(dst_path)},
        )

    try:
        dst_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dst_path)
    except OSError as exc:
        raise ArtifactIOError(
            message=f"Failed to copy '{src_path}' to '{dst_path}': {exc}",
            path=str(src_path),
            error_code="COPY_FAILED",
            details={"destination": str(dst_path)},
        ) from exc

    logger.debug("file_copied", src=str(src_path), dst=str(dst_path))
    return dst_path
