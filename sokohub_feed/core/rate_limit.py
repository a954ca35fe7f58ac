"""
Rate limiting for the public product feed.
"""

import re
import time
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from sokohub_feed.core.feed.state import FeedStateStore

logger = logging.getLogger(__name__)


# Shopping and search crawlers are never rate limited
CRAWLER_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r'Googlebot',
        r'Google-InspectionTool',
        r'GoogleMerchant',
        r'FeedFetcher-Google',
        r'AdsBot-Google',
        r'APIs-Google',
        r'Mediapartners-Google',
        r'Storebot-Google',
        r'bingbot',
        r'AdIdxBot',
    )
]

# Limits
MAX_REQUESTS_PER_WINDOW = 10
WINDOW_SECONDS = 3600


def is_crawler(user_agent: Optional[str]) -> bool:
    """Check the user agent against the crawler allow-list."""
    if not user_agent:
        return False
    return any(pattern.search(user_agent) for pattern in CRAWLER_PATTERNS)


def get_client_key(
    headers: Mapping[str, str],
    peer_host: Optional[str] = None,
    trust_proxy_headers: bool = True
) -> str:
    """
    Identify the client for rate limiting.

    Behind a reverse proxy uses the first X-Forwarded-For hop, then X-Real-IP,
    then the socket peer. Without a trusted proxy those headers are
    client-controlled, so only the socket peer is used.
    """
    if trust_proxy_headers:
        forwarded = headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
        real_ip = headers.get("x-real-ip")
        if real_ip and real_ip.strip():
            return real_ip.strip()
    return peer_host or "unknown"


@dataclass
class RateLimitDecision:
    """Outcome of one rate-limit check."""
    allowed: bool
    count: int = 0
    retry_after: int = 0
    exempt: bool = False


class FeedRateLimiter:
    """Fixed-window request counter per client, with a crawler exemption."""

    def __init__(
        self,
        store: FeedStateStore,
        max_requests: int = MAX_REQUESTS_PER_WINDOW,
        window: int = WINDOW_SECONDS
    ):
        """
        Initialize rate limiter.

        Args:
            store: State store holding the counters
            max_requests: Requests allowed per client per window
            window: Window length in seconds
        """
        self.store = store
        self.max_requests = max_requests
        self.window = window

    async def check(
        self,
        client_key: str,
        user_agent: Optional[str] = None,
        now: Optional[float] = None
    ) -> RateLimitDecision:
        """
        Count a request and decide whether it may proceed.

        Args:
            client_key: Client network identity
            user_agent: User-Agent header
            now: Current timestamp (defaults to time.time())

        Returns:
            RateLimitDecision
        """
        if is_crawler(user_agent):
            return RateLimitDecision(allowed=True, exempt=True)

        now = time.time() if now is None else now
        count, window_start = await self.store.hit_rate_limit(client_key, self.window, now)

        if count > self.max_requests:
            retry_after = self.window
            logger.warning(
                f"Feed rate limit exceeded: client={client_key} count={count} "
                f"window_start={int(window_start)}"
            )
            return RateLimitDecision(allowed=False, count=count, retry_after=retry_after)

        return RateLimitDecision(allowed=True, count=count)
