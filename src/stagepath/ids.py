from __future__ import annotations

import threading

from stagepath.constants import DEFAULT_ID_SEED


class PathIdCounter:
    """
    Monotonic id source for temp leaf names.

    Ids start at seed + 1 and are never reused: an id handed out for an
    allocation that later fails is simply retired.
    """

    def __init__(self, seed: int = DEFAULT_ID_SEED) -> None:
        if seed < 0:
            raise ValueError(f"seed must be >= 0, got {seed}")
        self._value = seed
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def last(self) -> int:
        """Most recently issued id (the seed if none was issued yet)."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"PathIdCounter(last={self.last})"
