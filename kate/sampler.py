"""Rate sampler: lets the first N events of each interval through, then one in M."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta


def _nanoseconds(value: float | datetime | timedelta) -> int:
    if isinstance(value, timedelta):
        return (value // timedelta(microseconds=1)) * 1000
    if isinstance(value, datetime):
        return round(value.timestamp() * 1_000_000) * 1000
    return round(value * 1_000_000_000)


class _Counter:
    """Event counter that restarts once its interval has elapsed."""

    def __init__(self):
        self._reset_at = 0
        self._count = 0
        self._lock = threading.Lock()

    def inc_check_reset(self, now_ns: int, tick_ns: int) -> int:
        with self._lock:
            if self._reset_at > now_ns:
                self._count += 1
                return self._count
            self._count = 1
            self._reset_at = now_ns + tick_ns
            return 1


class Sampler:
    """Within each ``tick``, accept the first ``first`` events, then every ``thereafter``-th."""

    def __init__(self, tick: float | timedelta, first: int, thereafter: int):
        self._tick_ns = _nanoseconds(tick)
        self._first = first
        self._thereafter = thereafter
        self._counter = _Counter()

    def check(self, now: float | datetime) -> bool:
        """Record an event at ``now`` (seconds or datetime) and say whether to keep it."""
        n = self._counter.inc_check_reset(_nanoseconds(now), self._tick_ns)
        return not (n > self._first and (n - self._first) % self._thereafter != 0)