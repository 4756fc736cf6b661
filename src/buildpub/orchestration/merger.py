"""
buildpub.orchestration.merger - Accumulated Build-Info Merging
================================================================

In accumulation mode several build steps write into one directory. Each
step exports its own build-info file; this module folds it into the
accumulated ``build-info.json`` so nothing earlier steps recorded is lost.

Merge Rules:
    - No accumulated file yet    → the new file is copied verbatim.
    - Module in both records     → artifacts concatenated; a later artifact
                                   with the same name replaces the earlier
                                   one in place. Dependencies merge the same
                                   way, keyed by dependency id.
    - Module in only one record  → passes through unchanged (accumulated
                                   modules first, then new ones).
    - Top-level build fields     → taken from the new record.

Merging the same file twice yields the same record (no duplicate artifact
names within a module). Any read, parse, or write failure is fatal and
raised as PersistenceError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar, Union

import structlog

from buildpub.core.exceptions import ArtifactIOError, PersistenceError
from buildpub.core.models import BuildRecord, Module
from buildpub.infrastructure.build_info_store import BuildInfoStore, JsonFileBuildInfoStore
from buildpub.infrastructure.filesystem import copy_file


logger = structlog.get_logger()

T = TypeVar("T")


def _merge_by_key(existing: Iterable[T], incoming: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Concatenate two lists; later entries replace earlier ones with the same key."""
    merged: dict[str, T] = {}
    for item in existing:
        merged[key(item)] = item
    for item in incoming:
        merged[key(item)] = item
    return list(merged.values())


def merge_modules(existing: Module, incoming: Module) -> Module:
    """Combine two versions of the same module."""
    merged = incoming.model_copy(deep=True)
    merged.artifacts = _merge_by_key(
        (a.model_copy(deep=True) for a in existing.artifacts),
        merged.artifacts,
        key=lambda a: a.name,
    )
    merged.dependencies = _merge_by_key(
        (d.model_copy(deep=True) for d in existing.dependencies),
        merged.dependencies,
        key=lambda d: d.id,
    )
    merged.properties = {**existing.properties, **incoming.properties}
    return merged


def merge_build_records(existing: BuildRecord, incoming: BuildRecord) -> BuildRecord:
    """Merge ``incoming`` into ``existing`` and return a new record."""
    merged = incoming.model_copy(deep=True)

    incoming_by_id = {module.id: module for module in incoming.modules}
    existing_ids = set()
    modules: list[Module] = []
    for module in existing.modules:
        existing_ids.add(module.id)
        other = incoming_by_id.get(module.id)
        modules.append(merge_modules(module, other) if other else module.model_copy(deep=True))
    for module in incoming.modules:
        if module.id not in existing_ids:
            modules.append(module.model_copy(deep=True))

    merged.modules = modules
    merged.properties = {**existing.properties, **incoming.properties}
    return merged


class BuildInfoMerger:
    """Folds a freshly exported build-info file into the accumulated one.

    Attributes:
        _store: Reads and writes build records.
    """

    def __init__(
        self,
        store: Optional[BuildInfoStore] = None,
        log: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        self._store = store or JsonFileBuildInfoStore()
        self._logger = (log or logger).bind(component="build_info_merger")

    def merge(
        self,
        new_record_file: Union[Path, str],
        accumulated_file: Union[Path, str],
    ) -> BuildRecord:
        """Merge ``new_record_file`` into ``accumulated_file``, replacing it.

        Args:
            new_record_file: Build-info exported by the current run.
            accumulated_file: Target build-info in the accumulation directory.

        Returns:
            The record now stored in ``accumulated_file``.

        Raises:
            PersistenceError: If either file cannot be read or parsed, or the
                result cannot be written.
        """
        new_path = Path(new_record_file)
        target = Path(accumulated_file)

        incoming = self._store.read_build_record(new_path)

        if not target.is_file():
            try:
                copy_file(new_path, target)
            except ArtifactIOError as exc:
                raise PersistenceError(
                    message=f"Failed to copy Build Info to '{target}'",
                    path=str(target),
                    error_code="BUILD_INFO_COPY_FAILED",
                    details={"source": str(new_path), "reason": exc.message},
                ) from exc
            self._logger.info("build_info_copied", source=str(new_path), target=str(target))
            return incoming

        existing = self._store.read_build_record(target)
        merged = merge_build_records(existing, incoming)
        self._store.save_build_record(merged, target)

        self._logger.info(
            "build_info_merged",
            source=str(new_path),
            target=str(target),
            modules=len(merged.modules),
        )
        return merged
