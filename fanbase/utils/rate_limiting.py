# fanbase/utils/rate_limiting.py
import threading
import time
import logging
from typing import Callable, Dict, Tuple
from fanbase.config import settings

logger = logging.getLogger(__name__)

class RateLimiter:
    """Fixed-window request counter kept in process memory.

    Each key maps to (count, window_start). A request is allowed when the key
    has no live window or its count is below max_requests. Counts are not shared
    between processes and are lost on restart.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 10000
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check_and_consume(self, key: str) -> bool:
        """Record a hit for key and report whether it is within the limit"""
        with self._lock:
            now = self._clock()
            if len(self._entries) > self.max_entries:
                self._evict_stale(now)

            entry = self._entries.get(key)
            if entry is None or now - entry[1] >= self.window_seconds:
                self._entries[key] = (1, now)
                return True

            count, window_start = entry
            if count >= self.max_requests:
                return False

            self._entries[key] = (count + 1, window_start)
            return True

    def _evict_stale(self, now: float) -> None:
        stale = [
            key for key, (_, window_start) in self._entries.items()
            if now - window_start >= self.window_seconds
        ]
        for key in stale:
            del self._entries[key]
        logger.debug(f"Evicted {len(stale)} stale rate limit entries")

    def __len__(self) -> int:
        return len(self._entries)

def check_request_allowed(limiter: RateLimiter, email: str, client_ip: str) -> bool:
    """Consume one hit on both the email key and the ip key; allow only if both pass"""
    email_allowed = limiter.check_and_consume(email)
    ip_allowed = limiter.check_and_consume(f"ip:{client_ip}")
    if not (email_allowed and ip_allowed):
        logger.warning(f"Rate limit exceeded for {email} / {client_ip}")
    return email_allowed and ip_allowed

contact_limiter = RateLimiter(
    settings.rate_limit_max_requests,
    settings.rate_limit_window_seconds,
    max_entries=settings.rate_limit_max_entries
)
subscribe_limiter = RateLimiter(
    settings.rate_limit_max_requests,
    settings.rate_limit_window_seconds,
    max_entries=settings.rate_limit_max_entries
)
visit_limiter = RateLimiter(
    1,
    settings.visit_throttle_seconds,
    max_entries=settings.rate_limit_max_entries
)

def get_contact_limiter() -> RateLimiter:
    return contact_limiter

def get_subscribe_limiter() -> RateLimiter:
    return subscribe_limiter

def get_visit_limiter() -> RateLimiter:
    return visit_limiter
