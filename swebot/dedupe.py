"""Time-limited memory of comment ids already handled."""

from __future__ import annotations

import threading
import time
from typing import Callable

_DEFAULT_TTL = 3600.0


class CommentDeduper:
    """Remembers comment ids for ``ttl`` seconds (one hour if ``ttl`` <= 0)."""

    def __init__(self, ttl: float = _DEFAULT_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl if ttl > 0 else _DEFAULT_TTL
        self._clock = clock
        self._lock = threading.Lock()
        self._expiries: dict[int, float] = {}

    def mark_if_new(self, comment_id: int) -> bool:
        """Return True and record the id if it was not seen within the TTL."""
        now = self._clock()
        with self._lock:
            self._expiries = {
                key: expiry for key, expiry in self._expiries.items() if not now > expiry
            }
            expiry = self._expiries.get(comment_id)
            if expiry is not None and now < expiry:
                return False
            self._expiries[comment_id] = now + self.ttl
            return True