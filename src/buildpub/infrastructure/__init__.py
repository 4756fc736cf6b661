"""
buildpub.infrastructure - Local I/O Layer
===========================================

Components:
    - ChecksumProvider:        md5/sha1 digests of artifact files
    - BuildInfoStore (ABC):    build record persistence interface
    - JsonFileBuildInfoStore:  JSON file implementation
    - copy_file():             parent-creating file copy for accumulation

Usage:
    from buildpub.infrastructure import ChecksumProvider, JsonFileBuildInfoStore
"""

from buildpub.infrastructure.build_info_store import BuildInfoStore, JsonFileBuildInfoStore
from buildpub.infrastructure.checksums import ChecksumProvider
from buildpub.infrastructure.filesystem import copy_file

__all__ = [
    "BuildInfoStore",
    "ChecksumProvider",
    "JsonFileBuildInfoStore",
    "copy_file",
]
