"""
stagepath.context
=================

Execution-context collaborator: who is asking, and under which execution.

- `new_execution_id()` is called once per staging-directory materialization.
- `current_unit_id()` names the concurrent worker/task making the request; it is
  part of the staging cache key, so two units never share a staging directory.

DefaultExecutionContext resolves the unit from a contextvar bound with
`bind_unit(...)`, falling back to a per-thread id handed out on first use.
"""

from __future__ import annotations

import contextvars
import itertools
import random
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Protocol, runtime_checkable

from stagepath.constants import EXECUTION_ID_PREFIX


@runtime_checkable
class ExecutionContext(Protocol):
    def new_execution_id(self) -> str: ...
    def current_unit_id(self) -> str: ...


class DefaultExecutionContext:
    def __init__(self, prefix: str = EXECUTION_ID_PREFIX) -> None:
        self.prefix = prefix
        self._thread_ids = itertools.count(1)
        self._local = threading.local()
        self._lock = threading.Lock()
        # Per instance: binding a unit on one context leaves others untouched.
        self._bound_unit: contextvars.ContextVar[str | None] = contextvars.ContextVar(
            f"stagepath_unit_{id(self):x}", default=None
        )

    def new_execution_id(self) -> str:
        now = datetime.now()
        stamp = now.strftime("%Y-%m-%d_%H-%M-%S") + f"_{now.microsecond // 1000:03d}"
        return f"{self.prefix}_{stamp}_{random.getrandbits(63)}"

    def current_unit_id(self) -> str:
        bound = self._bound_unit.get()
        if bound is not None:
            return bound
        unit = getattr(self._local, "unit_id", None)
        if unit is None:
            with self._lock:
                unit = str(next(self._thread_ids))
            self._local.unit_id = unit
        return unit

    @contextmanager
    def bind_unit(self, unit_id: str) -> Iterator[str]:
        """Run the enclosed block as execution unit `unit_id`."""
        if not unit_id:
            raise ValueError("unit_id may not be empty")
        token = self._bound_unit.set(unit_id)
        try:
            yield unit_id
        finally:
            self._bound_unit.reset(token)
