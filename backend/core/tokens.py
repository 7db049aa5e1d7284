# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Short-lived, single-use login tokens ("open this session on my phone").

The store is a process-local map and therefore best effort: tokens do not
survive a restart and are not shared between worker processes.  Callers only
use :meth:`TempTokenStore.issue` and :meth:`TempTokenStore.redeem`, so a
cache with native TTL support can replace it without touching them.
"""

import secrets
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from core.config import settings


class TempTokenStore:
    """Thread-safe expiring map of token → user id."""

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens: Dict[str, Tuple[str, float]] = {}

    def issue(self, user_id: str) -> str:
        """Create a new token for *user_id* that expires after ``ttl_seconds``."""
        token = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._purge(now)
            self._tokens[token] = (user_id, now + self.ttl_seconds)
        return token

    def redeem(self, token: str) -> Optional[str]:
        """
        Return the user id for *token* and invalidate it.  Unknown, already
        used and expired tokens all return ``None``.
        """
        with self._lock:
            entry = self._tokens.pop(token, None)
        if entry is None:
            return None
        user_id, expires_at = entry
        if expires_at < self._clock():
            return None
        return user_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def _purge(self, now: float) -> None:
        # caller holds the lock
        expired = [t for t, (_, exp) in self._tokens.items() if exp < now]
        for t in expired:
            del self._tokens[t]


# Module-level singleton used by the auth service
temp_tokens = TempTokenStore(settings.temp_token_ttl_seconds)
