"""Identifiers for records created without the hosted store.

Example:
    >>> from findr.utils.ids import LocalIdGenerator
    >>> gen = LocalIdGenerator(clock=lambda: 1700000000000)
    >>> gen.next(), gen.next()
    ('1700000000000', '1700000000001')
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class LocalIdGenerator:
    """Millisecond-timestamp ids that never repeat within a process.

    Two calls in the same millisecond would collide on the raw clock, so
    the counter moves forward past the last id handed out.
    """

    def __init__(self, clock: Callable[[], int] = epoch_millis) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            value = max(self._clock(), self._last + 1)
            self._last = value
        return str(value)


_default = LocalIdGenerator()


def local_id() -> str:
    """Next process-unique, time-derived id."""
    return _default.next()
