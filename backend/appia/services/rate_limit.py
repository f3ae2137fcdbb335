# appia/services/rate_limit.py
from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from appia.core.errors import RateLimitError

# Number of tracked clients above which idle ones are swept.
SWEEP_THRESHOLD = 1000


class RateLimiter:
    """Sliding one-minute window per client. ``limit_per_min <= 0`` disables it."""

    def __init__(
        self,
        limit_per_min: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = SWEEP_THRESHOLD,
    ):
        self.limit_per_min = limit_per_min
        self.window_seconds = window_seconds
        self.sweep_threshold = sweep_threshold
        self._clock = clock
        self._buckets: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, bucket: Deque[float], now: float) -> None:
        while bucket and now - bucket[0] > self.window_seconds:
            bucket.popleft()

    def _sweep(self, now: float) -> None:
        for client_id in list(self._buckets):
            bucket = self._buckets[client_id]
            self._prune(bucket, now)
            if not bucket:
                del self._buckets[client_id]

    def check(self, client_id: str) -> None:
        if self.limit_per_min <= 0:
            return

        now = self._clock()
        with self._lock:
            if len(self._buckets) >= self.sweep_threshold:
                self._sweep(now)

            bucket = self._buckets.get(client_id)
            if bucket is not None:
                self._prune(bucket, now)
            if not bucket:
                bucket = self._buckets[client_id] = deque()
            if len(bucket) >= self.limit_per_min:
                raise RateLimitError("Too many requests", {"message": "Please try again later"})
            bucket.append(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)
