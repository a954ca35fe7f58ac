"""
Dependency injection for FastAPI.
"""

from typing import Optional
import redis.asyncio as aioredis

from sokohub_feed.config import get_settings
from sokohub_feed.core.feed.service import FeedService
from sokohub_feed.core.feed.state import FeedStateStore, InMemoryFeedStateStore, RedisFeedStateStore
from sokohub_feed.core.rate_limit import FeedRateLimiter
from sokohub_feed.core.supabase_client import SupabaseCatalogClient


_redis_client: Optional[aioredis.Redis] = None
_catalog_client: Optional[SupabaseCatalogClient] = None
_state_store: Optional[FeedStateStore] = None


def get_redis() -> aioredis.Redis:
    """Get Redis client (singleton) with lazy connection."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = aioredis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=1.0,
            socket_timeout=3.0,
            retry_on_timeout=True,
            health_check_interval=30,
        )
    return _redis_client


def get_catalog_client() -> SupabaseCatalogClient:
    """Get Supabase catalog client (singleton)."""
    global _catalog_client
    if _catalog_client is None:
        settings = get_settings()
        _catalog_client = SupabaseCatalogClient(
            base_url=settings.supabase_url,
            api_key=settings.supabase_key,
            timeout=settings.supabase_timeout,
            page_size=settings.supabase_page_size,
        )
    return _catalog_client


def get_state_store() -> FeedStateStore:
    """Get the feed state store for the configured backend (singleton)."""
    global _state_store
    if _state_store is None:
        settings = get_settings()
        if settings.feed_state_backend == "redis":
            _state_store = RedisFeedStateStore(get_redis())
        else:
            _state_store = InMemoryFeedStateStore(max_keys=settings.rate_limit_max_keys)
    return _state_store


def get_feed_service() -> FeedService:
    """Build the feed service over the shared catalog client and state store."""
    settings = get_settings()
    return FeedService(
        catalog=get_catalog_client(),
        config=settings.to_feed_config(),
        store=get_state_store(),
        cache_ttl=settings.feed_cache_ttl,
    )


def get_rate_limiter() -> FeedRateLimiter:
    """Build the feed rate limiter over the shared state store."""
    settings = get_settings()
    return FeedRateLimiter(
        store=get_state_store(),
        max_requests=settings.rate_limit_max_requests,
        window=settings.rate_limit_window,
    )


async def close_clients():
    """Close catalog and Redis connections."""
    global _redis_client, _catalog_client, _state_store
    if _catalog_client:
        await _catalog_client.close()
        _catalog_client = None
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None
    _state_store = None
