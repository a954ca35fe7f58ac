"""Shared fixtures for feed tests."""

from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from sokohub_feed.core.feed.models import FeedConfig


class FakeCatalog:
    """In-memory catalog reader with call counting and failure injection."""

    def __init__(
        self,
        products: Optional[List[Dict[str, Any]]] = None,
        product_categories: Optional[List[Dict[str, Any]]] = None,
        categories: Optional[List[Dict[str, Any]]] = None,
        image_versions: Optional[List[Dict[str, Any]]] = None,
    ):
        self.products = products or []
        self.product_categories = product_categories or []
        self.categories = categories or []
        self.image_versions = image_versions or []
        self.fail_products: Optional[Exception] = None
        self.fail_secondary: Optional[Exception] = None
        self.product_reads = 0

    async def fetch_active_products(self) -> List[Dict[str, Any]]:
        self.product_reads += 1
        if self.fail_products:
            raise self.fail_products
        return list(self.products)

    async def fetch_product_categories(self, product_ids: List[str]) -> List[Dict[str, Any]]:
        if self.fail_secondary:
            raise self.fail_secondary
        return [r for r in self.product_categories if str(r["product_id"]) in product_ids]

    async def fetch_categories(self, category_ids: List[str]) -> List[Dict[str, Any]]:
        if self.fail_secondary:
            raise self.fail_secondary
        return [r for r in self.categories if str(r["id"]) in category_ids]

    async def fetch_image_versions(self, product_ids: List[str]) -> List[Dict[str, Any]]:
        if self.fail_secondary:
            raise self.fail_secondary
        return [r for r in self.image_versions if str(r["product_id"]) in product_ids]

    async def close(self) -> None:
        return None


def make_product_row(**overrides: Any) -> Dict[str, Any]:
    """Active product row with sensible defaults."""
    row = {
        "id": "P1",
        "name": "Kids Bicycle",
        "description": "<p>A sturdy bicycle</p>",
        "slug": "kids-bicycle",
        "price": 1000,
        "compare_at_price": None,
        "stock": 5,
        "status": "active",
        "images": ["product-images/bike.jpg"],
        "sizes": [],
        "colors": [],
        "category_id": None,
        "google_product_category": "",
    }
    row.update(overrides)
    return row


@pytest.fixture
def feed_config() -> FeedConfig:
    return FeedConfig(
        site_name="Sokohub Kenya",
        site_url="https://sokohubkenya.com",
        storage_base_url="https://abc.supabase.co",
        storage_bucket="product-images",
        placeholder_image_url="https://sokohubkenya.com/images/placeholder.png",
        currency="KES",
    )


@pytest.fixture
def today() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog(products=[make_product_row()])
