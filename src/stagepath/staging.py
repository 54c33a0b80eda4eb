# stagepath/staging.py
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from stagepath._paths import FsPath, UserPath
from stagepath.config import StagingConfig
from stagepath.constants import EXECUTION_SEP, UNIT_SEP
from stagepath.context import DefaultExecutionContext, ExecutionContext
from stagepath.errors import StagingDirCreationError
from stagepath.fs.base import FileSystem, FileSystemRegistry

"""
Staging directory cache.

A staging directory is materialized at most once per
(filesystem identity, staging root, execution unit). It is named

    <staging root>_<execution id>-<unit id>

so that the directory itself carries the execution, and nothing has to clean up
a shared parent afterwards. New directories are registered with their
filesystem session for deletion on close.
"""

LOG = logging.getLogger(__name__)


def _discard(fs: FileSystem, path: FsPath) -> None:
    try:
        fs.delete(path)
    except OSError as e:
        LOG.warning("Failed to remove staging dir %s after a failed allocation: %s", path, e)


def staging_root_name(basis_path: str, staging_dir: str) -> str:
    """
    Staging root (path component only) for `basis_path`.

    If the basis already lives under a staging tree, i.e. one of its segments
    is `staging_dir` or a materialized `<staging_dir>_...` directory, the root
    is cut at that segment. Otherwise `staging_dir` is appended.
    """
    segs = [seg for seg in basis_path.split("/") if seg]
    materialized = staging_dir + EXECUTION_SEP
    for i, seg in enumerate(segs):
        if seg == staging_dir or seg.startswith(materialized):
            segs = segs[:i]
            break
    return "/" + "/".join([*segs, staging_dir])


@dataclass(frozen=True, slots=True)
class StagingKey:
    fs_identity: str  # "scheme://authority"
    staging_root: str  # path component, e.g. "/warehouse/db/tbl/.staging"
    unit_id: str


class StagingDirCache:
    """
    In-memory map StagingKey -> materialized staging directory.

    Entries are never evicted. Lookup, creation and insertion for one key run
    under that key's lock; different keys do not wait on each other's I/O.
    A failed creation inserts nothing, so the next call for the key retries.
    """

    def __init__(
        self,
        config: StagingConfig | None = None,
        *,
        filesystems: FileSystemRegistry | None = None,
        context: ExecutionContext | None = None,
    ) -> None:
        self.config = StagingConfig() if config is None else config
        self.filesystems = FileSystemRegistry() if filesystems is None else filesystems
        self.context: ExecutionContext = (
            DefaultExecutionContext(self.config.execution_id_prefix) if context is None else context
        )
        self._entries: dict[StagingKey, FsPath] = {}
        self._locks: dict[StagingKey, threading.Lock] = {}
        self._guard = threading.Lock()

    # -- public API -----------------------------------------------------------

    def key_for(self, basis: UserPath) -> StagingKey:
        p = FsPath.parse(basis)
        root = staging_root_name(p.path, self.config.staging_dir)
        return StagingKey(p.fs_identity, root, self.context.current_unit_id())

    def get_staging_dir(self, basis: UserPath) -> FsPath:
        p = FsPath.parse(basis)
        key = self.key_for(p)

        with self._lock_for(key):
            with self._guard:
                hit = self._entries.get(key)
            if hit is not None:
                return hit

            staging = self._materialize(p, key)
            with self._guard:
                self._entries[key] = staging
            return staging

    def get(self, key: StagingKey) -> FsPath | None:
        with self._guard:
            return self._entries.get(key)

    def snapshot(self) -> Mapping[StagingKey, FsPath]:
        with self._guard:
            return MappingProxyType(dict(self._entries))

    def __contains__(self, key: object) -> bool:
        with self._guard:
            return key in self._entries

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    # -- internals ------------------------------------------------------------

    def _lock_for(self, key: StagingKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _materialize(self, basis: FsPath, key: StagingKey) -> FsPath:
        fs = self.filesystems.get(basis)

        # Suffix the root rather than nesting under it: one directory per execution.
        name = (
            f"{key.staging_root}{EXECUTION_SEP}{self.context.new_execution_id()}"
            f"{UNIT_SEP}{key.unit_id}"
        )
        staging = fs.make_qualified(basis.with_path(name))

        try:
            created = fs.mkdirs(staging, inherit_perms=self.config.inherit_perms)
        except OSError as e:
            raise StagingDirCreationError(str(staging), e) from e
        if not created:
            raise StagingDirCreationError(str(staging))

        try:
            fs.delete_on_close(staging)
        except OSError as e:
            # Nothing stays behind without a cleanup registration.
            _discard(fs, staging)
            raise StagingDirCreationError(str(staging), e) from e

        LOG.debug("Created staging dir %s for path %s", staging, basis)
        return staging
