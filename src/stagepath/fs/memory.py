"""
stagepath.fs.memory
===================

MemoryFileSystem keeps a directory tree in a dict. It can stand in for any
scheme/authority (hdfs, viewfs, ...) and records every `mkdirs` call, which
makes it the natural client for dry runs and tests.
"""

from __future__ import annotations

import posixpath
import threading

from stagepath._paths import FsPath
from stagepath.constants import MEMORY_SCHEME

DEFAULT_DIR_MODE = 0o755


def _ancestors(path: str) -> list[str]:
    """`path` and its ancestors, bottom-up, ending at '/'."""
    out = [path]
    while path != "/":
        path = posixpath.dirname(path)
        out.append(path)
    return out


class MemoryFileSystem:
    def __init__(
        self,
        scheme: str = MEMORY_SCHEME,
        authority: str = "",
        *,
        default_mode: int = DEFAULT_DIR_MODE,
    ) -> None:
        self.scheme = scheme
        self.authority = authority
        self.default_mode = default_mode
        self.closed = False
        self.mkdirs_calls: list[FsPath] = []
        self._dirs: dict[str, int] = {"/": default_mode}
        self._files: set[str] = set()
        self._pending_delete: list[str] = []
        self._lock = threading.Lock()

    def _key(self, path: FsPath) -> str:
        if path.scheme != self.scheme or path.authority not in ("", self.authority):
            raise ValueError(f"Wrong filesystem: {path} (expected {self.scheme}://{self.authority})")
        return path.path

    def make_qualified(self, path: FsPath) -> FsPath:
        return FsPath(self.scheme, path.authority or self.authority, path.path)

    def exists(self, path: FsPath) -> bool:
        key = self._key(path)
        with self._lock:
            return key in self._dirs or key in self._files

    def is_dir(self, path: FsPath) -> bool:
        key = self._key(path)
        with self._lock:
            return key in self._dirs

    def mode(self, path: FsPath) -> int:
        with self._lock:
            return self._dirs[self._key(path)]

    def chmod(self, path: FsPath, mode: int) -> None:
        key = self._key(path)
        with self._lock:
            if key not in self._dirs:
                raise FileNotFoundError(str(path))
            self._dirs[key] = mode

    def touch(self, path: FsPath) -> None:
        """Create an empty file; its parent directory must exist."""
        key = self._key(path)
        with self._lock:
            if posixpath.dirname(key) not in self._dirs:
                raise FileNotFoundError(str(path))
            if key in self._dirs:
                raise IsADirectoryError(str(path))
            self._files.add(key)

    def mkdirs(self, path: FsPath, *, inherit_perms: bool = False) -> bool:
        key = self._key(path)
        with self._lock:
            self.mkdirs_calls.append(path)
            chain = _ancestors(key)
            if any(p in self._files for p in chain):
                return False
            missing = [p for p in chain if p not in self._dirs]
            if not missing:
                return True
            anchor = posixpath.dirname(missing[-1])
            mode = self._dirs[anchor] if inherit_perms else self.default_mode
            for p in missing:
                self._dirs[p] = mode
            return True

    def delete(self, path: FsPath) -> bool:
        key = self._key(path)
        with self._lock:
            if key not in self._dirs and key not in self._files:
                return False
            self._remove_tree(key)
            return True

    def delete_on_close(self, path: FsPath) -> bool:
        key = self._key(path)
        with self._lock:
            if key not in self._dirs and key not in self._files:
                return False
            self._pending_delete.append(key)
            return True

    @property
    def pending_deletes(self) -> tuple[FsPath, ...]:
        with self._lock:
            return tuple(FsPath(self.scheme, self.authority, p) for p in self._pending_delete)

    def _remove_tree(self, key: str) -> None:
        prefix = key.rstrip("/") + "/"
        self._files = {f for f in self._files if f != key and not f.startswith(prefix)}
        for d in [d for d in self._dirs if d == key or d.startswith(prefix)]:
            if d != "/":
                del self._dirs[d]

    def close(self) -> None:
        with self._lock:
            for key in reversed(self._pending_delete):
                self._remove_tree(key)
            self._pending_delete.clear()
            self.closed = True

    def __repr__(self) -> str:
        return f"MemoryFileSystem(scheme={self.scheme!r}, authority={self.authority!r})"
