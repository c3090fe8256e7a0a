# resume/cache.py
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# TTLs in milliseconds
CACHE_TTL = {
    "resume_generation": 60 * 60 * 1000,  # 1 hour
}


def now_ms() -> float:
    return time.time() * 1000


def generation_cache_key(user_id: str, digest: str) -> str:
    """Cache key for a tailored resume, namespaced by user"""
    return f"resume:generation:{user_id}:{digest}"


@dataclass
class CacheEntry:
    """Cached value with absolute expiry"""
    value: Any
    expires_at_ms: float


class TTLCache:
    """
    In-process key/value cache with per-entry expiry

    Expired entries are dropped lazily on `get` and in bulk by a
    background sweep started with `start()`. State lives only as long
    as the process; last writer wins on concurrent `set`.
    """

    def __init__(
        self,
        default_ttl_ms: float = 5 * 60 * 1000,
        sweep_interval_s: float = 5 * 60,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Args:
            default_ttl_ms: TTL used when `set` is called without one
            sweep_interval_s: Seconds between background cleanups
            clock: Returns current time in milliseconds (epoch by default)
        """
        self.default_ttl_ms = default_ttl_ms
        self.sweep_interval_s = sweep_interval_s
        self._clock = clock or now_ms
        self._entries: Dict[str, CacheEntry] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def set(self, key: str, value: Any, ttl_ms: Optional[float] = None):
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        self._entries[key] = CacheEntry(value=value, expires_at_ms=self._clock() + ttl)

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for `key`, removing it if it has expired"""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() > entry.expires_at_ms:
            del self._entries[key]
            return None

        return entry.value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self):
        self._entries.clear()

    def cleanup(self) -> int:
        """Remove every expired entry, returning how many were dropped"""
        now = self._clock()
        expired = [k for k, entry in self._entries.items() if now > entry.expires_at_ms]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"Cache sweep removed {len(expired)} expired entries")
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        keys: List[str] = list(self._entries.keys())
        return {"size": len(keys), "keys": keys}

    def __len__(self) -> int:
        return len(self._entries)

    # ========== Background sweep ==========

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start(self):
        """Start the periodic sweep on the running event loop"""
        if self.is_sweeping:
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())
        logger.info(f"Cache sweeper started (every {self.sweep_interval_s}s)")

    async def stop(self):
        """Cancel the periodic sweep and wait for it to exit"""
        if self._sweeper is None:
            return

        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("Cache sweeper stopped")

    async def _sweep_forever(self):
        while True:
            await asyncio.sleep(self.sweep_interval_s)
            self.cleanup()
