"""Per-host rate limiter for polite page loading."""

from __future__ import annotations

import threading
import time


class RateLimiter:
    """Thread-safe minimum interval between requests to the same host.

    Products on different hosts are refreshed without waiting on each other.

    Args:
        requests_per_minute: Maximum requests allowed per minute and host.
    """

    def __init__(self, requests_per_minute: int = 20) -> None:
        self._interval = 60.0 / max(requests_per_minute, 1)
        self._next_allowed: dict[str, float] = {}
        self._lock = threading.Lock()

    def wait(self, host: str = "") -> None:
        """Block until the next request to ``host`` is allowed."""
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_allowed.get(host, 0.0))
            self._next_allowed[host] = slot + self._interval
        delay = slot - now
        if delay > 0:
            time.sleep(delay)
