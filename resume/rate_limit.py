# resume/rate_limit.py
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from resume.cache import now_ms

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateWindow:
    """Request count for one client in the current window"""
    count: int
    reset_at_ms: float


def client_identity(headers: Mapping[str, str], remote_addr: Optional[str] = None) -> str:
    """
    Identify the caller for rate limiting

    Uses the first X-Forwarded-For value, then the connection address.
    Callers with neither share the "unknown" bucket.
    """
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    return remote_addr or UNKNOWN_CLIENT


class FixedWindowRateLimiter:
    """
    Fixed-window request counter keyed by client identity

    The first request of a client (or the first after its window has
    elapsed) opens a new window with count 1. Within a window, requests
    are allowed until the count reaches `max_requests`; rejected requests
    do not increment the counter.
    """

    def __init__(
        self,
        window_ms: float,
        max_requests: int,
        message: str = "Too many requests, please try again later.",
        clock: Optional[Callable[[], float]] = None
    ):
        self.window_ms = window_ms
        self.max_requests = max_requests
        self.message = message
        self._clock = clock or now_ms
        self._windows: Dict[str, RateWindow] = {}

    def check(
        self,
        client_id: str,
        window_ms: Optional[float] = None,
        max_requests: Optional[int] = None
    ) -> bool:
        """
        Count a request for `client_id`

        Args:
            client_id: Client identity (IP or route-prefixed IP)
            window_ms: Override for this limiter's window length
            max_requests: Override for this limiter's ceiling

        Returns:
            True if the request is allowed
        """
        window_ms = self.window_ms if window_ms is None else window_ms
        max_requests = self.max_requests if max_requests is None else max_requests
        now = self._clock()

        self._sweep(now)

        window = self._windows.get(client_id)
        if window is None or now > window.reset_at_ms:
            self._windows[client_id] = RateWindow(count=1, reset_at_ms=now + window_ms)
            return True

        if window.count >= max_requests:
            logger.debug(f"Rate limit hit for {client_id} ({window.count}/{max_requests})")
            return False

        window.count += 1
        return True

    def retry_after(self, client_id: str) -> int:
        """Seconds until the client's current window resets"""
        window = self._windows.get(client_id)
        if window is None:
            return 0
        return max(0, math.ceil((window.reset_at_ms - self._clock()) / 1000))

    def reset(self):
        self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float):
        stale = [k for k, w in self._windows.items() if now > w.reset_at_ms]
        for key in stale:
            del self._windows[key]
