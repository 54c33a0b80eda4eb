"""
stagepath.fs.base
=================

Filesystem-side API consumed by the staging cache.

- FileSystem: the client protocol (qualification, directory creation with
  permission inheritance, deferred deletion tied to the session)
- FileSystemRegistry: one client per filesystem identity, resolved by scheme
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from importlib import import_module
from types import TracebackType
from typing import Protocol, Self, TypeAlias, runtime_checkable

from stagepath._paths import FsPath, UserPath
from stagepath.errors import FileSystemUnavailableError


@runtime_checkable
class FileSystem(Protocol):
    scheme: str
    authority: str

    def make_qualified(self, path: FsPath) -> FsPath: ...
    def exists(self, path: FsPath) -> bool: ...
    def is_dir(self, path: FsPath) -> bool: ...

    def mkdirs(self, path: FsPath, *, inherit_perms: bool = False) -> bool:
        """
        Create `path` and every missing parent. Returns False if creation was
        refused (e.g. a file is in the way); raises OSError on I/O failure.
        """
        ...

    def delete(self, path: FsPath) -> bool:
        """Remove `path` recursively now. Returns False if it did not exist."""
        ...

    def delete_on_close(self, path: FsPath) -> bool:
        """Register `path` for recursive removal when the session closes."""
        ...

    def close(self) -> None: ...


# A factory is called as factory(scheme=..., authority=...). Strings are
# "module:attr" targets imported on first use.
FileSystemFactory: TypeAlias = Callable[..., FileSystem] | str

_DEFAULT_FACTORIES: dict[str, FileSystemFactory] = {
    "file": "stagepath.fs.local:LocalFileSystem",
    "mem": "stagepath.fs.memory:MemoryFileSystem",
}


def _load_target(target: str) -> Callable[..., FileSystem]:
    mod_name, _, attr = target.partition(":")
    if not mod_name or not attr:
        raise ValueError(f"Filesystem target must look like 'module:attr', got {target!r}")
    return getattr(import_module(mod_name), attr)  # type: ignore[no-any-return]


class FileSystemRegistry:
    """
    Hands out one client per filesystem identity ("scheme://authority").

    Clients are created lazily and live until `close_all()`, which ends their
    sessions (running any deferred deletions).
    """

    def __init__(
        self,
        factories: Mapping[str, FileSystemFactory] | None = None,
        *,
        include_defaults: bool = True,
    ) -> None:
        self._factories: dict[str, FileSystemFactory] = (
            dict(_DEFAULT_FACTORIES) if include_defaults else {}
        )
        if factories:
            for scheme, factory in factories.items():
                self._factories[scheme.lower()] = factory
        self._clients: dict[str, FileSystem] = {}
        self._lock = threading.Lock()

    def register(self, scheme: str, factory: FileSystemFactory) -> None:
        with self._lock:
            self._factories[scheme.lower()] = factory

    def schemes(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._factories)

    def get(self, path: UserPath) -> FileSystem:
        p = FsPath.parse(path)
        key = p.fs_identity
        with self._lock:
            client = self._clients.get(key)
            if client is not None:
                return client

            factory = self._factories.get(p.scheme)
            if factory is None:
                raise FileSystemUnavailableError(
                    str(p), LookupError(f"no filesystem registered for scheme {p.scheme!r}")
                )
            try:
                make = _load_target(factory) if isinstance(factory, str) else factory
                client = make(scheme=p.scheme, authority=p.authority)
            except Exception as e:
                raise FileSystemUnavailableError(str(p), e) from e

            self._clients[key] = client
            return client

    def clients(self) -> dict[str, FileSystem]:
        with self._lock:
            return dict(self._clients)

    def close_all(self) -> None:
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close_all()
