"""
Deterministic random source for tests and scripted replays.

ScriptedRandom behaves like ``random.Random`` except that ``random()``
returns queued values first. Once the queue is empty it either falls back to
its seeded stream or raises, so a test can assert exactly how many draws an
action consumed.
"""

from __future__ import annotations

import random
from collections import deque
from typing import Iterable


class ScriptedRandom(random.Random):
    def __init__(self, values: Iterable[float] = (), seed: int | None = 0, strict: bool = True):
        super().__init__(seed)
        self._queue: deque[float] = deque()
        self.strict = strict
        self.draws = 0
        self.push(*values)

    def push(self, *values: float) -> None:
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Scripted roll must be in [0, 1): {value}")
            self._queue.append(value)

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def random(self) -> float:
        self.draws += 1
        if self._queue:
            return self._queue.popleft()
        if self.strict:
            raise RuntimeError("ScriptedRandom ran out of scripted values")
        return super().random()
