"""
stagepath.fs
============

Unified import surface for filesystem clients.
"""

from __future__ import annotations

from stagepath.fs.base import FileSystem, FileSystemFactory, FileSystemRegistry
from stagepath.fs.local import LocalFileSystem
from stagepath.fs.memory import MemoryFileSystem

__all__ = [
    "FileSystem",
    "FileSystemFactory",
    "FileSystemRegistry",
    "LocalFileSystem",
    "MemoryFileSystem",
]
