from __future__ import annotations

import math
import time
from collections import defaultdict, deque
from typing import Callable


class SimpleRateLimiter:
    """Sliding-window login throttle keyed by caller (email, IP, ...)."""

    def __init__(
        self,
        *,
        max_events: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_events = max_events
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: dict[str, deque[float]] = defaultdict(deque)

    def _recent(self, key: str, now: float) -> deque[float]:
        attempts = self._attempts[key]
        cutoff = now - self.window_seconds
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        return attempts

    def allow(self, key: str) -> bool:
        now = self._clock()
        attempts = self._recent(key, now)
        if len(attempts) >= self.max_events:
            return False
        attempts.append(now)
        return True

    def retry_after(self, key: str) -> int:
        """Whole seconds until the oldest attempt leaves the window; 0 when not throttled."""
        now = self._clock()
        attempts = self._recent(key, now)
        if len(attempts) < self.max_events:
            return 0
        return max(1, math.ceil(attempts[0] + self.window_seconds - now))

    def reset(self) -> None:
        self._attempts.clear()
