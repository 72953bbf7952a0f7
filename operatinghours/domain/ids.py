"""
Identifier sources for newly created windows and limits.
"""

import itertools
from typing import Callable, Protocol

import pendulum
from pendulum import DateTime


class IdSource(Protocol):
    """Anything that hands out unique integer ids."""

    def next_id(self) -> int:
        """Return an id not returned before by this source."""


class CounterIdSource:
    """Plain counter. Deterministic, meant for tests and fixtures."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)


class MonotonicIdSource:
    """
    Millisecond-timestamp ids that never repeat.

    Two calls within the same millisecond would collide on a raw timestamp,
    so the id is bumped past the last one handed out.
    """

    def __init__(self, clock: Callable[[], DateTime] = pendulum.now):
        self._clock = clock
        self._last = 0

    def next_id(self) -> int:
        candidate = int(self._clock().timestamp() * 1000)
        self._last = max(candidate, self._last + 1)
        return self._last
