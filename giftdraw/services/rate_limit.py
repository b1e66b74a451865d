from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict


@dataclass
class RateLimitResult:
    allowed: bool
    retry_after: float


class SlidingWindowLimiter:
    """Allows ``max_calls`` per client key within any ``period_seconds`` window."""

    def __init__(
        self,
        max_calls: int,
        period_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_calls = max_calls
        self.period_seconds = period_seconds
        self._clock = clock
        self._windows: Dict[str, Deque[float]] = {}

    def _prune(self, now: float) -> None:
        # Forget clients whose whole window has expired.
        stale = [
            key
            for key, window in self._windows.items()
            if not window or now - window[-1] > self.period_seconds
        ]
        for key in stale:
            del self._windows[key]

    def hit(self, client: str) -> RateLimitResult:
        now = self._clock()
        self._prune(now)
        window = self._windows.setdefault(client, deque())
        while window and now - window[0] > self.period_seconds:
            window.popleft()
        if len(window) >= self.max_calls:
            return RateLimitResult(False, max(self.period_seconds - (now - window[0]), 0))
        window.append(now)
        return RateLimitResult(True, 0)
