from __future__ import annotations

import itertools


class IdGenerator:
    """Monotonic unit id source, one per game setup (ids start at 0)."""

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)
