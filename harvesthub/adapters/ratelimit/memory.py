"""In-memory sliding window rate limiter - Implements RateLimiter protocol."""

import time
from collections import deque
from collections.abc import Callable
from threading import Lock


class SlidingWindowRateLimiter:
    """
    Thread-safe sliding window rate limiter.

    Each key may spend ``max_requests`` points within any rolling window of
    ``window_seconds``. Denied requests do not consume a point, so a caller
    that keeps hammering the endpoint is released exactly one window after
    its oldest accepted request.

    Keys are caller supplied, so idle keys are swept every
    ``sweep_interval`` calls; memory stays bounded by the keys active in
    the last window. One instance is shared by the whole process; counters
    are lost on restart.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: int = 1000,
    ) -> None:
        """
        Initialise limiter parameters and per-key storage.

        Args:
            max_requests: Points available per key and window
            window_seconds: Length of the rolling window
            clock: Monotonic time source, replaceable in tests
            sweep_interval: Calls between sweeps of expired keys
        """
        self._max_requests = max_requests
        self._window = window_seconds
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._calls = 0
        self._events: dict[str, deque[float]] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._events)

    def allow(self, key: str) -> bool:
        """Return ``True`` and consume a point when ``key`` is within its budget."""
        now = self._clock()
        with self._lock:
            self._calls += 1
            if self._calls >= self._sweep_interval:
                self._calls = 0
                self._sweep(now)

            queue = self._events.setdefault(key, deque())
            self._prune(queue, now)
            if len(queue) >= self._max_requests:
                return False
            queue.append(now)
            return True

    def _prune(self, queue: deque[float], now: float) -> None:
        while queue and now - queue[0] >= self._window:
            queue.popleft()

    def _sweep(self, now: float) -> None:
        # Caller holds the lock
        for key in list(self._events):
            queue = self._events[key]
            self._prune(queue, now)
            if not queue:
                del self._events[key]
