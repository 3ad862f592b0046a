# webapp_lib/ratelimit.py
"""
Per-client fixed-window rate limiter.

Each client id (the caller's IP) gets `limit` requests per `window_ms`.
The table is bounded: once `capacity` clients are tracked, expired windows
are evicted first, then the least recently started window.
"""
from __future__ import annotations
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from gstore.errors import RateLimitError


@dataclass
class _Window:
    count: int
    started_ms: float


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class RateLimiter:
    def __init__(
        self,
        limit: int = 1,
        window_ms: int = 1000,
        capacity: int = 10_000,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.limit = limit
        self.window_ms = window_ms
        self.capacity = capacity
        self._clock = clock or _monotonic_ms
        self._lock = threading.Lock()
        self._windows: "OrderedDict[str, _Window]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, client_id: str) -> None:
        """Count one request for `client_id`, raising RateLimitError when over budget."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(client_id)
            if window is None:
                self._make_room(now)
                self._windows[client_id] = _Window(count=1, started_ms=now)
                return
            if now - window.started_ms >= self.window_ms:
                window.count = 1
                window.started_ms = now
                self._windows.move_to_end(client_id)
                return
            if window.count >= self.limit:
                raise RateLimitError(client_id)
            window.count += 1

    def evict_expired(self, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        with self._lock:
            return self._evict_expired(now)

    def _evict_expired(self, now: float) -> int:
        stale = [cid for cid, w in self._windows.items() if now - w.started_ms >= self.window_ms]
        for cid in stale:
            del self._windows[cid]
        return len(stale)

    def _make_room(self, now: float) -> None:
        if len(self._windows) < self.capacity:
            return
        self._evict_expired(now)
        while len(self._windows) >= self.capacity:
            self._windows.popitem(last=False)
