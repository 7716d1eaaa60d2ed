from __future__ import annotations

import threading
import time
from typing import Callable


class FixedIntervalRateLimiter:
    """
    Blocking pacing policy: two consecutive acquire() calls return at least
    `interval_sec` apart. drain() blocks until a full interval has passed
    since the last request; a batch that drains before returning owes
    nothing to the next caller, whichever limiter or process that is.

    `clock` and `sleep` are injectable so tests can run on a virtual clock.
    """

    def __init__(
        self,
        *,
        interval_sec: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval_sec < 0:
            raise ValueError("interval_sec must be >= 0")
        self._interval = interval_sec
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None
        self._lock = threading.Lock()

    @property
    def interval_sec(self) -> float:
        return self._interval

    def acquire(self) -> float:
        """Block until the next request may go out. Returns the time waited."""
        with self._lock:
            waited = self._wait_for_slot()
            now = self._clock()
            if self._last is not None:
                # a sleep may return a hair early
                now = max(now, self._last + self._interval)
            self._last = now
            return waited

    def drain(self) -> float:
        """Block until a full interval has passed since the last request."""
        with self._lock:
            return self._wait_for_slot()

    def _wait_for_slot(self) -> float:
        if self._last is None:
            return 0.0
        remaining = self._last + self._interval - self._clock()
        if remaining <= 0:
            return 0.0
        self._sleep(remaining)
        return remaining
