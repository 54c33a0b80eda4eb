from __future__ import annotations

import itertools

import pytest

from stagepath.fs import FileSystemRegistry, MemoryFileSystem


class FixedContext:
    """Deterministic execution context: exec1, exec2, ... under a settable unit."""

    def __init__(self, unit: str = "u1") -> None:
        self.unit = unit
        self.issued: list[str] = []
        self._n = itertools.count(1)

    def new_execution_id(self) -> str:
        eid = f"exec{next(self._n)}"
        self.issued.append(eid)
        return eid

    def current_unit_id(self) -> str:
        return self.unit


@pytest.fixture
def ctx() -> FixedContext:
    return FixedContext()


@pytest.fixture
def registry() -> FileSystemRegistry:
    """hdfs/viewfs/mem all served from memory."""
    return FileSystemRegistry(
        {
            "hdfs": MemoryFileSystem,
            "viewfs": MemoryFileSystem,
        }
    )
