"""
stagepath
=========

Staging-path allocation for data-movement jobs: temp paths colocated with their
destination's namespace, backed by per-execution staging directories.
"""

from __future__ import annotations

from stagepath._paths import FsPath
from stagepath.allocator import ExternalTempPathAllocator, staging_basis
from stagepath.config import StagingConfig
from stagepath.context import DefaultExecutionContext, ExecutionContext
from stagepath.errors import (
    ConfigError,
    FileSystemUnavailableError,
    MalformedPathError,
    StagingDirCreationError,
    StagingError,
)
from stagepath.fs import FileSystem, FileSystemRegistry, LocalFileSystem, MemoryFileSystem
from stagepath.ids import PathIdCounter
from stagepath.reporting import install_rich_logging
from stagepath.staging import StagingDirCache, StagingKey, staging_root_name

__all__ = [
    "FsPath",
    "ExternalTempPathAllocator",
    "staging_basis",
    "StagingConfig",
    "DefaultExecutionContext",
    "ExecutionContext",
    "StagingError",
    "MalformedPathError",
    "ConfigError",
    "FileSystemUnavailableError",
    "StagingDirCreationError",
    "FileSystem",
    "FileSystemRegistry",
    "LocalFileSystem",
    "MemoryFileSystem",
    "PathIdCounter",
    "install_rich_logging",
    "StagingDirCache",
    "StagingKey",
    "staging_root_name",
]
