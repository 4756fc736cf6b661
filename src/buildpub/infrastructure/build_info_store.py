"""
buildpub.infrastructure.build_info_store - Build-Info Persistence
===================================================================

The build record is exported to a JSON file on every run (even when
nothing is published) and, in accumulation mode, read back to be merged
with previously accumulated records.

Architecture Context:
    ┌──────────────────────────┐   save_build_record()   ┌──────────────────┐
    │  DeploymentOrchestrator  │ ──────────────────────→ │                  │
    └──────────────────────────┘                         │  BuildInfoStore  │
    ┌──────────────────────────┐   read/save             │                  │
    │  BuildInfoMerger         │ ←─────────────────────→ │                  │
    └──────────────────────────┘                         └──────────────────┘

Storage Implementations:
    - JsonFileBuildInfoStore: pydantic JSON serialization to local files

Every failure surfaces as PersistenceError; the pipeline treats it as fatal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

import structlog
from pydantic import ValidationError

from buildpub.core.exceptions import PersistenceError
from buildpub.core.models import BuildRecord


logger = structlog.get_logger()


# =============================================================================
# Abstract Base Class
# =============================================================================
class BuildInfoStore(ABC):
    """Abstract interface for build record persistence.

    Methods:
        save_build_record(record, path): Write a record, replacing the target.
        read_build_record(path): Load a record.
    """

    @abstractmethod
    def save_build_record(self, record: BuildRecord, path: Union[Path, str]) -> Path:
        """Persist a build record.

        Args:
            record: The record to write.
            path: Destination file. Parent directories are created.

        Returns:
            The path written.

        Raises:
            PersistenceError: If the record cannot be written.
        """

    @abstractmethod
    def read_build_record(self, path: Union[Path, str]) -> BuildRecord:
        """Load a build record.

        Args:
            path: File previously written by save_build_record().

        Returns:
            The parsed BuildRecord.

        Raises:
            PersistenceError: If the file is missing, unreadable, or invalid.
        """


# =============================================================================
# JSON File Implementation
# =============================================================================
class JsonFileBuildInfoStore(BuildInfoStore):
    """Stores build records as indented JSON files.

    Fields that were never set and are still None are left out, so a record
    read from disk is written back without gaining ``null`` entries.

    Attributes:
        indent: JSON indentation used when writing.
    """

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent
        self._logger = logger.bind(component="json_build_info_store")

    def save_build_record(self, record: BuildRecord, path: Union[Path, str]) -> Path:
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(
                record.model_dump_json(indent=self.indent, exclude_none=True),
                encoding="utf-8",
            )
        except OSError as exc:
            raise PersistenceError(
                message=f"Error occurred while persisting Build Info to '{target}'",
                path=str(target),
                error_code="BUILD_INFO_WRITE_FAILED",
                details={"reason": str(exc)},
            ) from exc

        self._logger.debug(
            "build_record_saved",
            path=str(target),
            build_name=record.name,
            build_number=record.number,
        )
        return target

    def read_build_record(self, path: Union[Path, str]) -> BuildRecord:
        source = Path(path)
        try:
            raw = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                message=f"Error occurred while reading Build Info from '{source}'",
                path=str(source),
                error_code="BUILD_INFO_READ_FAILED",
                details={"reason": str(exc)},
            ) from exc

        try:
            record = BuildRecord.model_validate_json(raw)
        except ValidationError as exc:
            raise PersistenceError(
                message=f"Invalid Build Info in '{source}'",
                path=str(source),
                error_code="BUILD_INFO_INVALID",
                details={"errors": exc.error_count()},
            ) from exc

        self._logger.debug("build_record_read", path=str(source), modules=len(record.modules))
        return record
