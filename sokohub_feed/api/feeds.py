"""
Product feed endpoints.
"""

import time
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status

from sokohub_feed.config import get_settings
from sokohub_feed.core.feed.service import FeedService, FeedUnavailableError
from sokohub_feed.core.feed.xml_writer import write_error_xml
from sokohub_feed.core.rate_limit import FeedRateLimiter, get_client_key
from sokohub_feed.core.security import verify_admin_key
from sokohub_feed.deps import get_feed_service, get_rate_limiter
from sokohub_feed.schemas.feed import FeedCacheStatus, FeedInvalidateRequest, FeedInvalidateResponse

logger = logging.getLogger(__name__)

# Public feed served at the site root
public_router = APIRouter(tags=["Feed"])

# Administration under /api/v1/feed
router = APIRouter(prefix="/feed", tags=["Feed"])

FEED_HEADERS = {
    "Cache-Control": "public, max-age=3600, stale-while-revalidate=86400",
}


@public_router.get("/feed.xml", response_class=Response)
async def get_product_feed(
    request: Request,
    service: FeedService = Depends(get_feed_service),
    limiter: FeedRateLimiter = Depends(get_rate_limiter)
):
    """
    Google Merchant Center product feed.

    Non-crawler clients are rate limited before any catalog read.
    """
    peer_host = request.client.host if request.client else None
    client_key = get_client_key(request.headers, peer_host, get_settings().trust_proxy_headers)
    decision = await limiter.check(client_key, request.headers.get("user-agent"))

    if not decision.allowed:
        return Response(
            content="Rate limit exceeded. Please try again later.",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            media_type="text/plain",
            headers={"Retry-After": str(decision.retry_after)},
        )

    try:
        xml, cache_hit = await service.get_feed()
    except FeedUnavailableError as e:
        logger.error(f"Feed unavailable: {e}")
        return Response(
            content=write_error_xml(),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            media_type="application/xml",
        )

    if cache_hit:
        logger.info(f"Feed cache hit for client={client_key}")

    return Response(content=xml, media_type="application/xml", headers=FEED_HEADERS)


def _require_admin_key(x_admin_key: Optional[str] = Header(None, alias="X-Admin-Key")) -> None:
    """Verify X-Admin-Key against the configured admin key."""
    expected = get_settings().admin_api_key
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Feed administration is disabled (ADMIN_API_KEY not set)",
            headers={"X-Error-Code": "admin_disabled"}
        )
    if not verify_admin_key(x_admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid X-Admin-Key",
            headers={"X-Error-Code": "invalid_admin_key"}
        )


@router.get("/status", response_model=FeedCacheStatus, dependencies=[Depends(_require_admin_key)])
async def get_feed_status(service: FeedService = Depends(get_feed_service)):
    """Report whether a cached feed exists and how old it is."""
    cached = await service.cache_status()
    if cached is None:
        return FeedCacheStatus(cached=False, ttl_seconds=service.cache_ttl)

    now = time.time()
    return FeedCacheStatus(
        cached=True,
        fresh=cached.is_fresh(now, service.cache_ttl),
        generated_at=datetime.fromtimestamp(cached.generated_at, tz=timezone.utc),
        age_seconds=int(cached.age(now)),
        ttl_seconds=service.cache_ttl,
        items_count=cached.items_count,
    )


@router.post("/invalidate", response_model=FeedInvalidateResponse, dependencies=[Depends(_require_admin_key)])
async def invalidate_feed(
    body: FeedInvalidateRequest,
    service: FeedService = Depends(get_feed_service)
):
    """
    Drop the cached feed so the next request regenerates it.

    Called after product changes; the whole document is discarded.
    """
    logger.info(f"Feed invalidation requested: product_id={body.product_id} action={body.action}")
    invalidated = await service.invalidate()
    return FeedInvalidateResponse(
        invalidated=invalidated,
        message="Feed cache cleared" if invalidated else "No cached feed to clear",
        timestamp=datetime.now(timezone.utc),
    )
