"""
Image resolver for Supabase Storage paths and external URLs.
Normalizes product image references into absolute feed image URLs.
"""

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

KNOWN_BUCKETS = ("product-images", "categories", "hero-slides", "blog")

_ABSOLUTE_URL = re.compile(r'^https?://', re.IGNORECASE)
_STANDARD_FORMAT = re.compile(r'\.(jpe?g|png|gif|webp)$', re.IGNORECASE)

ImageVersionMap = Dict[Tuple[str, str], str]


def build_image_version_map(rows: Iterable[Dict[str, Any]]) -> ImageVersionMap:
    """
    Index product_image_versions rows by (product_id, web_image_url).

    Args:
        rows: Rows with product_id, web_image_url, feed_image_url

    Returns:
        Dict mapping (product_id, web path) to the optimized feed path
    """
    versions: ImageVersionMap = {}
    for row in rows:
        if not isinstance(row, dict):
            continue
        product_id = row.get("product_id")
        web_url = row.get("web_image_url")
        feed_url = row.get("feed_image_url")
        if product_id is not None and web_url and feed_url:
            versions[(str(product_id), str(web_url))] = str(feed_url)
    return versions


def _raw_image_path(image: Any) -> Optional[str]:
    """Extract the path or URL from an image descriptor."""
    if not image:
        return None
    if isinstance(image, str):
        raw = image
    elif isinstance(image, dict):
        raw = image.get("url") or image.get("web_image_url")
    else:
        return None

    if not raw or not isinstance(raw, str) or "undefined" in raw:
        return None
    return raw.strip() or None


def resolve_storage_url(path: str, storage_base_url: str, default_bucket: str) -> str:
    """
    Resolve a storage path to a public Supabase Storage URL.

    Strips a leading slash, collapses accidental "bucket/bucket/" nesting and
    honours a leading known bucket segment. Standard web formats use the
    public object URL; anything else goes through the render endpoint as JPEG.

    Args:
        path: Relative storage path, optionally prefixed with a bucket
        storage_base_url: Supabase project URL
        default_bucket: Bucket used when the path names none

    Returns:
        Absolute image URL
    """
    final_path = path.lstrip("/")

    for bucket in KNOWN_BUCKETS:
        doubled = f"{bucket}/{bucket}/"
        if final_path.startswith(doubled):
            final_path = final_path.replace(doubled, f"{bucket}/", 1)

    bucket = default_bucket
    parts = final_path.split("/")
    if len(parts) > 1 and parts[0] in KNOWN_BUCKETS:
        bucket = parts[0]
        final_path = "/".join(parts[1:])

    base = storage_base_url.rstrip("/")
    if _STANDARD_FORMAT.search(final_path):
        return f"{base}/storage/v1/object/public/{bucket}/{final_path}"
    return f"{base}/storage/v1/render/image/public/{bucket}/{final_path}?format=jpg&quality=90"


def resolve_feed_image_urls(
    product_id: str,
    images: Any,
    storage_base_url: str,
    default_bucket: str,
    placeholder_url: str,
    image_versions: Optional[ImageVersionMap] = None
) -> List[str]:
    """
    Resolve all feed image URLs for a product.

    Absolute URLs are kept unchanged. Relative paths prefer an optimized
    feed rendition when one is registered. Falls back to the placeholder
    when nothing resolves.

    Returns:
        Non-empty list of absolute URLs; the first is the primary image
    """
    image_versions = image_versions or {}
    urls: List[str] = []

    if isinstance(images, list):
        for image in images:
            raw = _raw_image_path(image)
            if not raw:
                continue
            if _ABSOLUTE_URL.match(raw):
                urls.append(raw)
                continue
            optimized = image_versions.get((product_id, raw))
            urls.append(resolve_storage_url(optimized or raw, storage_base_url, default_bucket))

    if not urls:
        urls.append(placeholder_url)

    return urls
