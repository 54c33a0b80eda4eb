# stagepath/_paths.py
# Strong path type for filesystem URIs.
#
# Goals:
# - Accept easy user inputs (str | os.PathLike[str] | FsPath) at the edges.
# - Fail fast: validate & normalize once in FsPath.parse.
# - Store a stable form: lower-case scheme, raw authority, absolute POSIX path.
# - Never touch a filesystem here; qualification against a client lives in stagepath.fs.

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass
from typing import Self, TypeAlias
from urllib.parse import urlsplit

from stagepath.errors import MalformedPathError

UserPath: TypeAlias = "str | os.PathLike[str] | FsPath"


def _normalize(path: str) -> str:
    # Strip leading slashes first: normpath preserves a leading "//".
    return posixpath.normpath("/" + path.lstrip("/"))


# ---------------------------------------------------------------------------
# FsPath: fully qualified filesystem path (scheme://authority/path).
# Invariants:
#   - scheme is non-empty and lower-case
#   - path is absolute, normalized, no trailing '/' (except the root)
#   - no query / fragment
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class FsPath:
    scheme: str
    authority: str
    path: str

    @classmethod
    def parse(cls, value: UserPath) -> Self:
        if isinstance(value, FsPath):
            return cls(value.scheme, value.authority, value.path)

        raw = os.fspath(value)
        if not isinstance(raw, str):
            raise TypeError(f"FsPath expects str-like, got {type(raw).__name__}")

        parts = urlsplit(raw)
        if not parts.scheme:
            raise MalformedPathError(raw, "no filesystem scheme")
        # 'hdfs:foo' parses with an empty netloc and a relative path
        if not parts.path.startswith("/") and parts.path:
            raise MalformedPathError(raw, "path is not absolute")
        if not parts.netloc and not parts.path:
            raise MalformedPathError(raw, "no authority and no path")

        return cls(parts.scheme.lower(), parts.netloc, _normalize(parts.path or "/"))

    def qualified(self) -> FsPath:
        """Rebuild from scheme + authority + path only."""
        return FsPath(self.scheme, self.authority, _normalize(self.path))

    @property
    def fs_identity(self) -> str:
        return f"{self.scheme}://{self.authority}"

    @property
    def parent(self) -> FsPath | None:
        if self.path == "/":
            return None
        return self.with_path(posixpath.dirname(self.path))

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    def segments(self) -> tuple[str, ...]:
        return tuple(seg for seg in self.path.split("/") if seg)

    def with_path(self, path: str) -> FsPath:
        if not path.startswith("/"):
            raise MalformedPathError(path, "path is not absolute")
        return FsPath(self.scheme, self.authority, _normalize(path))

    def joinpath(self, *parts: str) -> FsPath:
        joined = self.path
        for part in parts:
            if part.startswith("/"):
                raise ValueError(f"Cannot join absolute segment {part!r} onto {self}")
            joined = posixpath.join(joined, part)
        return self.with_path(joined)

    def __truediv__(self, part: str) -> FsPath:
        return self.joinpath(part)

    # Interop: allow passing to local APIs that accept PathLike
    def __fspath__(self) -> str:
        return self.path

    def __str__(self) -> str:
        return f"{self.scheme}://{self.authority}{self.path}"
