"""
stagepath.allocator
===================

ExternalTempPathAllocator turns the destination of a future write into a temp
path next to it:

    hdfs://nn1/warehouse/db/tbl
      -> hdfs://nn1/warehouse/db/tbl/.staging_<execution id>-<unit id>/_tmp.ext.10001

Design recap
------------
- Destinations on rename-unsafe (federated/view) schemes stage under their
  *parent*, keeping the staging area inside the namespace the final rename
  will happen in.
- The staging directory comes from a StagingDirCache (created at most once per
  key, registered for deletion when its filesystem session closes).
- The leaf is `<ext_prefix><id>` with ids from a PathIdCounter owned by the
  allocator. The leaf itself is never created here.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import TracebackType
from typing import Self

from stagepath._paths import FsPath, UserPath
from stagepath.config import StagingConfig
from stagepath.context import ExecutionContext
from stagepath.errors import MalformedPathError
from stagepath.fs.base import FileSystemRegistry
from stagepath.ids import PathIdCounter
from stagepath.staging import StagingDirCache


def staging_basis(destination: FsPath, rename_unsafe_schemes: Iterable[str]) -> FsPath:
    """Path the staging root is derived from for `destination`."""
    if destination.scheme in {s.lower() for s in rename_unsafe_schemes}:
        parent = destination.parent
        if parent is None:
            raise MalformedPathError(str(destination), "root of a federated mount has no parent")
        return parent
    return destination.qualified()


class ExternalTempPathAllocator:
    def __init__(
        self,
        config: StagingConfig | None = None,
        *,
        filesystems: FileSystemRegistry | None = None,
        context: ExecutionContext | None = None,
        cache: StagingDirCache | None = None,
        ids: PathIdCounter | None = None,
    ) -> None:
        if cache is not None and any(x is not None for x in (config, filesystems, context)):
            raise ValueError("Pass either a cache or its collaborators, not both")

        self._owns_filesystems = cache is None and filesystems is None
        self.cache = (
            StagingDirCache(config, filesystems=filesystems, context=context)
            if cache is None
            else cache
        )
        self.ids = PathIdCounter(self.config.id_seed) if ids is None else ids

    @property
    def config(self) -> StagingConfig:
        return self.cache.config

    @property
    def filesystems(self) -> FileSystemRegistry:
        return self.cache.filesystems

    def staging_dir_for(self, destination: UserPath) -> FsPath:
        """Staging directory that allocations for `destination` land in."""
        dest = FsPath.parse(destination)
        return self.cache.get_staging_dir(staging_basis(dest, self.config.rename_unsafe_schemes))

    def allocate(self, destination: UserPath) -> FsPath:
        """
        Return a fresh, fully qualified temp path for writing `destination`.

        The parent staging directory exists when this returns; creating the
        leaf is up to the caller.

        Raises
        ------
        MalformedPathError
            `destination` has no scheme or is not absolute. Nothing is created.
        FileSystemUnavailableError
            No client could be obtained for the destination's filesystem.
        StagingDirCreationError
            The staging directory could not be created.
        """
        staging = self.staging_dir_for(destination)
        return staging.joinpath(f"{self.config.ext_prefix}{self.ids.next_id()}")

    def close(self) -> None:
        """End the filesystem sessions this allocator created (deferred deletions run)."""
        if self._owns_filesystems:
            self.filesystems.close_all()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
