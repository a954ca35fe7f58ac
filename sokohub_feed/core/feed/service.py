"""
Feed generation service - orchestrates the entire feed generation process.
"""

import time
import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, Tuple

from sokohub_feed.core.security import sanitize_string_for_logging
from .builder import build_feed_items
from .categories import resolve_category_assignments
from .images import build_image_version_map
from .models import FeedConfig, FeedResult, Product
from .state import CachedFeed, FeedStateStore
from .xml_writer import write_feed_xml

logger = logging.getLogger(__name__)


class FeedUnavailableError(Exception):
    """The product catalog could not be read or is empty."""
    pass


class CatalogReader(Protocol):
    """Read API the generator needs from the catalog backend."""

    async def fetch_active_products(self) -> List[Dict[str, Any]]: ...

    async def fetch_product_categories(self, product_ids: List[str]) -> List[Dict[str, Any]]: ...

    async def fetch_categories(self, category_ids: List[str]) -> List[Dict[str, Any]]: ...

    async def fetch_image_versions(self, product_ids: List[str]) -> List[Dict[str, Any]]: ...


def _parse_products(rows: List[Dict[str, Any]]) -> List[Product]:
    products = []
    for row in rows:
        try:
            products.append(Product.from_row(row))
        except ValueError as e:
            logger.warning(f"Skipping malformed product row: {e}")
    return products


async def _secondary_lookup(name: str, coro) -> List[Dict[str, Any]]:
    """Run a lookup whose failure only degrades the feed."""
    try:
        return await coro
    except Exception as e:
        logger.warning(f"Feed {name} lookup failed, continuing without it: {sanitize_string_for_logging(str(e))}")
        return []


async def generate_feed(
    catalog: CatalogReader,
    config: FeedConfig,
    today: Optional[date] = None
) -> FeedResult:
    """
    Generate the product feed document from the live catalog.

    Args:
        catalog: Catalog read client
        config: FeedConfig
        today: Start date for sale price windows

    Returns:
        FeedResult with the XML document

    Raises:
        FeedUnavailableError: If the product read fails or yields no products
    """
    started = time.monotonic()

    try:
        rows = await catalog.fetch_active_products()
    except Exception as e:
        logger.error(f"Error fetching products for feed: {sanitize_string_for_logging(str(e))}")
        raise FeedUnavailableError(f"Product read failed: {e}") from e

    products = _parse_products(rows or [])
    if not products:
        logger.error("No active products found for feed")
        raise FeedUnavailableError("No active products found")

    product_ids = [p.id for p in products]
    category_ids = [p.category_id for p in products if p.category_id]

    join_rows, category_rows, version_rows = await asyncio.gather(
        _secondary_lookup("product category", catalog.fetch_product_categories(product_ids)),
        _secondary_lookup("category", catalog.fetch_categories(category_ids)),
        _secondary_lookup("image version", catalog.fetch_image_versions(product_ids)),
    )

    assignments = resolve_category_assignments(products, join_rows, category_rows)
    image_versions = build_image_version_map(version_rows)

    items = build_feed_items(products, config, assignments, image_versions, today)
    xml = write_feed_xml(items, config)

    logger.info(
        f"Generated feed: {len(items)} items from {len(products)} products "
        f"in {time.monotonic() - started:.2f}s"
    )

    return FeedResult(
        xml=xml,
        items_count=len(items),
        products_count=len(products),
        generated_at=datetime.now(timezone.utc),
    )


class FeedService:
    """Serves the feed document through the shared cache slot."""

    def __init__(
        self,
        catalog: CatalogReader,
        config: FeedConfig,
        store: FeedStateStore,
        cache_ttl: int = 3600
    ):
        self.catalog = catalog
        self.config = config
        self.store = store
        self.cache_ttl = cache_ttl

    async def get_feed(self, now: Optional[float] = None) -> Tuple[str, bool]:
        """
        Return the feed document, regenerating it when the cache is stale.

        Concurrent regenerations are allowed; the last one to finish wins.

        Returns:
            (xml, cache_hit)

        Raises:
            FeedUnavailableError: If regeneration is needed and fails
        """
        now = time.time() if now is None else now

        cached = await self.store.get_cached_feed()
        if cached and cached.is_fresh(now, self.cache_ttl):
            logger.debug(f"Serving cached feed ({int(cached.age(now))}s old)")
            return cached.xml, True

        result = await generate_feed(self.catalog, self.config)
        await self.store.set_cached_feed(CachedFeed(
            xml=result.xml,
            generated_at=now,
            items_count=result.items_count,
        ))
        return result.xml, False

    async def cache_status(self) -> Optional[CachedFeed]:
        return await self.store.get_cached_feed()

    async def invalidate(self) -> bool:
        invalidated = await self.store.invalidate_feed()
        logger.info(f"Feed cache invalidated (had entry: {invalidated})")
        return invalidated
