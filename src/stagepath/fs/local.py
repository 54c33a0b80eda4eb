"""
stagepath.fs.local
==================

LocalFileSystem serves `file://` paths from the host filesystem via pathlib.

Directory creation tolerates concurrent creators of overlapping trees. With
`inherit_perms=True` every directory created by a call takes the permission
bits (and, best effort, the group) of the nearest ancestor that existed
before the call.
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
from pathlib import Path

from stagepath._paths import FsPath
from stagepath.constants import LOCAL_SCHEME

LOG = logging.getLogger(__name__)

_LOCAL_AUTHORITIES = ("", "localhost")


def _remove(p: Path) -> bool:
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    elif p.exists() or p.is_symlink():
        p.unlink()
    else:
        return False
    return True


def _nearest_existing(p: Path) -> Path:
    q = p
    while not q.exists() and q != q.parent:
        q = q.parent
    return q


class LocalFileSystem:
    def __init__(self, scheme: str = LOCAL_SCHEME, authority: str = "") -> None:
        if authority not in _LOCAL_AUTHORITIES:
            raise ValueError(f"Local filesystem cannot serve authority {authority!r}")
        self.scheme = scheme
        self.authority = authority
        self._pending_delete: list[FsPath] = []
        self._lock = threading.Lock()

    def _local(self, path: FsPath) -> Path:
        if path.scheme != self.scheme:
            raise ValueError(f"Wrong filesystem: {path} (expected {self.scheme}://)")
        return Path(path.path)

    def make_qualified(self, path: FsPath) -> FsPath:
        return FsPath(self.scheme, path.authority or self.authority, path.path)

    def exists(self, path: FsPath) -> bool:
        return self._local(path).exists()

    def is_dir(self, path: FsPath) -> bool:
        return self._local(path).is_dir()

    def mkdirs(self, path: FsPath, *, inherit_perms: bool = False) -> bool:
        target = self._local(path)
        if target.exists():
            return target.is_dir()

        anchor = _nearest_existing(target)
        if not anchor.is_dir():
            return False

        # Directories this call is about to create, top-down.
        missing: list[Path] = []
        q = target
        while q != anchor:
            missing.append(q)
            q = q.parent
        missing.reverse()

        try:
            target.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            # Lost a race against a creator of a non-directory.
            if not target.is_dir():
                return False

        if inherit_perms and missing:
            try:
                self._inherit(anchor, missing)
            except OSError:
                # Take back what this call created before reporting the failure.
                try:
                    shutil.rmtree(missing[0])
                except OSError as e:
                    LOG.warning("Failed to remove %s after a failed mkdirs: %s", missing[0], e)
                raise
        return True

    def _inherit(self, anchor: Path, created: list[Path]) -> None:
        st = anchor.stat()
        mode = st.st_mode & 0o7777
        for d in created:
            os.chmod(d, mode)
            if hasattr(os, "chown"):
                try:
                    os.chown(d, -1, st.st_gid)
                except PermissionError as e:
                    LOG.warning("Cannot set group of %s to %s: %s", d, st.st_gid, e)

    def delete(self, path: FsPath) -> bool:
        return _remove(self._local(path))

    def delete_on_close(self, path: FsPath) -> bool:
        if not self.exists(path):
            return False
        with self._lock:
            self._pending_delete.append(path)
        return True

    def close(self) -> None:
        with self._lock:
            pending = list(reversed(self._pending_delete))
            self._pending_delete.clear()
        for path in pending:
            try:
                _remove(self._local(path))
            except OSError as e:
                # Best-effort cleanup
                LOG.warning("Failed to delete %s on close: %s", path, e)

    def __repr__(self) -> str:
        return f"LocalFileSystem(scheme={self.scheme!r}, authority={self.authority!r})"
