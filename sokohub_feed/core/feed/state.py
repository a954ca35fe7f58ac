"""
Shared feed state: the cached feed document and rate-limit counters.

Two backends share one interface: an in-process store guarded by an
asyncio lock, and a Redis store for deployments running several workers.
"""

import json
import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Tuple

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


@dataclass
class CachedFeed:
    """Last successfully generated feed document."""
    xml: str
    generated_at: float
    items_count: int = 0

    def age(self, now: float) -> float:
        return now - self.generated_at

    def is_fresh(self, now: float, ttl: float) -> bool:
        return self.age(now) < ttl


class FeedStateStore:
    """Interface for the feed cache slot and rate-limit counters."""

    async def get_cached_feed(self) -> Optional[CachedFeed]:
        raise NotImplementedError

    async def set_cached_feed(self, entry: CachedFeed) -> None:
        raise NotImplementedError

    async def invalidate_feed(self) -> bool:
        """Drop the cached document. Returns True if one was present."""
        raise NotImplementedError

    async def hit_rate_limit(self, key: str, window: float, now: float) -> Tuple[int, float]:
        """
        Count one request for key.

        Returns:
            (count within the current window, window start timestamp)
        """
        raise NotImplementedError

    async def close(self) -> None:
        return None


class InMemoryFeedStateStore(FeedStateStore):
    """Process-local store. Counter keys are bounded LRU-style."""

    def __init__(self, max_keys: int = 10000):
        self.max_keys = max_keys
        self._lock = asyncio.Lock()
        self._cached: Optional[CachedFeed] = None
        self._counters: "OrderedDict[str, Tuple[int, float]]" = OrderedDict()

    async def get_cached_feed(self) -> Optional[CachedFeed]:
        async with self._lock:
            return self._cached

    async def set_cached_feed(self, entry: CachedFeed) -> None:
        async with self._lock:
            self._cached = entry

    async def invalidate_feed(self) -> bool:
        async with self._lock:
            had_entry = self._cached is not None
            self._cached = None
            return had_entry

    def _sweep(self, window: float, now: float) -> None:
        expired = [k for k, (_, start) in self._counters.items() if now - start >= window]
        for k in expired:
            del self._counters[k]

    async def hit_rate_limit(self, key: str, window: float, now: float) -> Tuple[int, float]:
        async with self._lock:
            count, window_start = self._counters.get(key, (0, now))
            if now - window_start >= window:
                count, window_start = 0, now

            count += 1
            self._counters[key] = (count, window_start)
            self._counters.move_to_end(key)

            if len(self._counters) > self.max_keys:
                self._sweep(window, now)
                while len(self._counters) > self.max_keys:
                    self._counters.popitem(last=False)

            return count, window_start

    @property
    def tracked_keys(self) -> int:
        return len(self._counters)


class RedisFeedStateStore(FeedStateStore):
    """Redis-backed store shared by every worker."""

    def __init__(self, redis_client: aioredis.Redis, prefix: str = "feed", cache_ttl: int = 86400):
        """
        Initialize Redis state store.

        Args:
            redis_client: Redis async client (decode_responses=True)
            prefix: Key prefix
            cache_ttl: Expiry for the stored document; freshness is decided by the caller
        """
        self.redis = redis_client
        self.prefix = prefix
        self.cache_ttl = cache_ttl

    def _cache_key(self) -> str:
        return f"{self.prefix}:document"

    def _counter_key(self, key: str) -> str:
        return f"{self.prefix}:ratelimit:{key}"

    async def get_cached_feed(self) -> Optional[CachedFeed]:
        raw = await self.redis.get(self._cache_key())
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return CachedFeed(
                xml=data["xml"],
                generated_at=float(data["generated_at"]),
                items_count=int(data.get("items_count", 0)),
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable cached feed: {e}")
            return None

    async def set_cached_feed(self, entry: CachedFeed) -> None:
        payload = json.dumps({
            "xml": entry.xml,
            "generated_at": entry.generated_at,
            "items_count": entry.items_count,
        })
        await self.redis.set(self._cache_key(), payload, ex=self.cache_ttl)

    async def invalidate_feed(self) -> bool:
        deleted = await self.redis.delete(self._cache_key())
        return bool(deleted)

    async def hit_rate_limit(self, key: str, window: float, now: float) -> Tuple[int, float]:
        counter_key = self._counter_key(key)
        window_seconds = max(1, int(window))

        # INCR is atomic; the first hit opens the window
        count = await self.redis.incr(counter_key)
        if count == 1:
            await self.redis.expire(counter_key, window_seconds)
            return count, now

        ttl = await self.redis.ttl(counter_key)
        if ttl is None or ttl < 0:
            await self.redis.expire(counter_key, window_seconds)
            ttl = window_seconds
        return count, now - (window_seconds - ttl)
