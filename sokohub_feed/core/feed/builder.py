"""
Convert catalog products into FeedItem objects.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from .description import build_merchant_description, get_availability
from .images import ImageVersionMap, resolve_feed_image_urls
from .models import CategoryAssignment, FeedConfig, FeedItem, Product
from .pricing import resolve_variant_price, sale_price_effective_date
from .variants import expand_variants

logger = logging.getLogger(__name__)


def build_product_items(
    product: Product,
    config: FeedConfig,
    assignment: Optional[CategoryAssignment] = None,
    image_versions: Optional[ImageVersionMap] = None,
    today: Optional[date] = None
) -> List[FeedItem]:
    """
    Build the feed items for one product.

    Products without sizes or colors produce ONE item. Otherwise one item
    per variant combination, all sharing the product id as item_group_id.

    Args:
        product: Product snapshot
        config: FeedConfig
        assignment: Resolved categories for the product
        image_versions: Optimized image lookup
        today: Start date for sale_price_effective_date

    Returns:
        List of FeedItem objects in variant order
    """
    today = today or date.today()
    assignment = assignment or CategoryAssignment()

    image_urls = resolve_feed_image_urls(
        product.id,
        product.images,
        config.storage_base_url,
        config.storage_bucket,
        config.placeholder_image_url,
        image_versions,
    )
    link = f"{config.site_url}/products/{product.slug}"
    availability = get_availability(product)
    description = build_merchant_description(
        product,
        config.site_name,
        max_length=config.description_max_length,
        min_length=config.description_min_length,
    )
    sale_window = sale_price_effective_date(today, config.sale_window_days, config.sale_timezone_offset)

    items: List[FeedItem] = []
    for combination in expand_variants(product):
        pricing = resolve_variant_price(product, combination.size, combination.color)
        on_sale = pricing.on_sale

        items.append(FeedItem(
            id=f"{product.id}{combination.id_suffix}",
            item_group_id=product.id,
            mpn=product.id,
            title=f"{product.name}{combination.title_suffix}",
            description=description,
            link=link,
            image_link=image_urls[0],
            additional_images=image_urls[1:1 + config.max_additional_images],
            price=pricing.price,
            sale_price=pricing.sale_price if on_sale else None,
            sale_price_effective_date=sale_window if on_sale else None,
            availability=availability,
            brand=config.site_name,
            size=combination.size.label if combination.size else None,
            color=combination.color.label if combination.color else None,
            google_product_category=product.google_product_category.strip(),
            product_type=assignment.primary_name,
        ))

    return items


def build_feed_items(
    products: List[Product],
    config: FeedConfig,
    assignments: Optional[Dict[str, CategoryAssignment]] = None,
    image_versions: Optional[ImageVersionMap] = None,
    today: Optional[date] = None
) -> List[FeedItem]:
    """
    Build feed items for the whole catalog.

    A product that fails to build is logged and skipped. Items whose id
    was already emitted are dropped so ids stay unique across the feed.
    """
    assignments = assignments or {}
    feed_items: List[FeedItem] = []
    seen_ids = set()
    failed_products = []

    for product in products:
        try:
            product_items = build_product_items(
                product,
                config,
                assignments.get(product.id),
                image_versions,
                today,
            )
        except Exception as e:
            failed_products.append(product.id)
            logger.warning(f"Skipping product {product.id} in feed: {e}")
            continue

        for item in product_items:
            if item.id in seen_ids:
                logger.warning(f"Duplicate feed item id {item.id} for product {product.id}, skipping")
                continue
            seen_ids.add(item.id)
            feed_items.append(item)

    if failed_products:
        logger.warning(f"Failed products: {', '.join(failed_products)}")

    return feed_items
