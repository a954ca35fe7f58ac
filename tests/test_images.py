"""Tests for feed image URL resolution."""

from sokohub_feed.core.feed.images import (
    build_image_version_map,
    resolve_feed_image_urls,
    resolve_storage_url,
)

BASE = "https://abc.supabase.co"
PLACEHOLDER = "https://sokohubkenya.com/images/placeholder.png"


def _resolve(images, versions=None):
    return resolve_feed_image_urls("P1", images, BASE, "product-images", PLACEHOLDER, versions)


class TestResolveStorageUrl:
    """Tests for storage path resolution."""

    def test_relative_path_uses_default_bucket(self) -> None:
        assert resolve_storage_url("web/P1/bike.jpg", BASE, "product-images") == (
            f"{BASE}/storage/v1/object/public/product-images/web/P1/bike.jpg"
        )

    def test_leading_slash_stripped(self) -> None:
        assert resolve_storage_url("/bike.png", BASE, "product-images") == (
            f"{BASE}/storage/v1/object/public/product-images/bike.png"
        )

    def test_bucket_prefix_not_doubled(self) -> None:
        assert resolve_storage_url("product-images/bike.webp", BASE, "product-images") == (
            f"{BASE}/storage/v1/object/public/product-images/bike.webp"
        )

    def test_nested_bucket_prefix_collapsed(self) -> None:
        assert resolve_storage_url("product-images/product-images/bike.jpeg", BASE, "product-images") == (
            f"{BASE}/storage/v1/object/public/product-images/bike.jpeg"
        )

    def test_other_known_bucket_honoured(self) -> None:
        assert resolve_storage_url("categories/toys.jpg", BASE, "product-images") == (
            f"{BASE}/storage/v1/object/public/categories/toys.jpg"
        )

    def test_non_standard_format_uses_render_endpoint(self) -> None:
        assert resolve_storage_url("bike.avif", BASE, "product-images") == (
            f"{BASE}/storage/v1/render/image/public/product-images/bike.avif?format=jpg&quality=90"
        )


class TestResolveFeedImageUrls:
    """Tests for the per-product image list."""

    def test_absolute_urls_unchanged(self) -> None:
        urls = _resolve(["https://cdn.example.com/a.jpg", {"url": "HTTP://cdn.example.com/b"}])
        assert urls == ["https://cdn.example.com/a.jpg", "HTTP://cdn.example.com/b"]

    def test_mixed_descriptors(self) -> None:
        urls = _resolve([{"url": "a.jpg"}, {"web_image_url": "b.png"}, None, {"alt": "x"}, 42])
        assert urls == [
            f"{BASE}/storage/v1/object/public/product-images/a.jpg",
            f"{BASE}/storage/v1/object/public/product-images/b.png",
        ]

    def test_undefined_references_discarded(self) -> None:
        assert _resolve(["undefined", "images/undefined.jpg"]) == [PLACEHOLDER]

    def test_placeholder_when_no_images(self) -> None:
        assert _resolve([]) == [PLACEHOLDER]
        assert _resolve(None) == [PLACEHOLDER]

    def test_optimized_version_preferred(self) -> None:
        versions = build_image_version_map([
            {"product_id": "P1", "web_image_url": "web/P1/bike.webp", "feed_image_url": "feed/P1/bike.jpg"},
            {"product_id": "P2", "web_image_url": "web/P1/bike.webp", "feed_image_url": "feed/P2/other.jpg"},
        ])
        urls = _resolve(["web/P1/bike.webp"], versions)
        assert urls == [f"{BASE}/storage/v1/object/public/product-images/feed/P1/bike.jpg"]

    def test_incomplete_version_rows_ignored(self) -> None:
        versions = build_image_version_map([
            {"product_id": "P1", "web_image_url": "a.jpg"},
            "not-a-row",
        ])
        assert versions == {}
