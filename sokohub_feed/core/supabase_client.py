"""
Supabase PostgREST read client with retry logic.
"""

import random
import asyncio
import logging
from typing import Optional, Dict, List, Any
import httpx

from sokohub_feed.core.security import sanitize_dict_for_logging
from sokohub_feed.core.utils import chunked

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = (
    "id,name,description,price,compare_at_price,stock,status,"
    "slug,images,sizes,colors,category_id,google_product_category"
)

# Keep in.(...) filters short enough for URL limits
IN_FILTER_CHUNK = 200


class CatalogError(Exception):
    """Backend read failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _in_filter(values: List[str]) -> str:
    quoted = ",".join(f'"{v}"' for v in values)
    return f"in.({quoted})"


class SupabaseCatalogClient:
    """
    Async read-only client for the products/categories tables.

    Talks to the Supabase REST endpoint (/rest/v1) with the project key.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 15.0,
        page_size: int = 1000,
        max_retries: int = 2,
        initial_delay: float = 0.5,
        backoff_factor: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Supabase client.

        Args:
            base_url: Supabase project URL (e.g., https://xyz.supabase.co)
            api_key: anon or service-role key
            timeout: Request timeout in seconds
            page_size: Rows per page for paginated reads
            max_retries: Retry attempts on 429/5xx/network errors
            initial_delay: Initial retry delay in seconds
            backoff_factor: Backoff multiplier
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.page_size = page_size
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.backoff_factor = backoff_factor

        self.client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            timeout=timeout,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def _request(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        GET rows from a table with retry logic.

        Args:
            table: Table name
            params: PostgREST query parameters

        Returns:
            List of row dicts

        Raises:
            CatalogError: If the read fails after retries
        """
        last_error = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.get(f"/{table}", params=params)

                if response.status_code == 200:
                    try:
                        data = response.json()
                    except ValueError as e:
                        raise CatalogError(f"Invalid JSON reading {table}: {e}", status_code=200)
                    return data if isinstance(data, list) else []

                # Non-retryable errors
                if response.status_code in (400, 401, 403, 404, 406, 416):
                    raise CatalogError(
                        f"HTTP {response.status_code} reading {table}: {response.text[:200]}",
                        status_code=response.status_code
                    )

                last_error = CatalogError(
                    f"HTTP {response.status_code} reading {table}: {response.text[:200]}",
                    status_code=response.status_code
                )

            except httpx.TimeoutException as e:
                last_error = CatalogError(f"Timeout reading {table}: {e}")

            except httpx.RequestError as e:
                last_error = CatalogError(f"Request error reading {table}: {e}")

            if attempt < self.max_retries:
                delay = min(self.initial_delay * (self.backoff_factor ** attempt), 10.0)
                delay += random.uniform(0, 0.1) if delay else 0
                logger.debug(
                    f"Retrying {table} read (attempt {attempt + 1}/{self.max_retries}): {last_error} | "
                    f"params={sanitize_dict_for_logging(params)}"
                )
                await asyncio.sleep(delay)

        raise last_error

    async def fetch_active_products(self) -> List[Dict[str, Any]]:
        """
        Fetch all active products, page by page.

        Returns:
            List of product rows
        """
        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = await self._request("products", {
                "select": PRODUCT_COLUMNS,
                "status": "eq.active",
                "order": "id.asc",
                "limit": self.page_size,
                "offset": offset,
            })
            rows.extend(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size
        return rows

    async def _fetch_in(self, table: str, select: str, column: str, values: List[str]) -> List[Dict[str, Any]]:
        unique = list(dict.fromkeys(str(v) for v in values if v not in (None, "")))
        rows: List[Dict[str, Any]] = []
        for chunk in chunked(unique, IN_FILTER_CHUNK):
            rows.extend(await self._request(table, {"select": select, column: _in_filter(chunk)}))
        return rows

    async def fetch_product_categories(self, product_ids: List[str]) -> List[Dict[str, Any]]:
        """Join rows with the embedded category for each product."""
        return await self._fetch_in(
            "product_categories",
            "product_id,categories!inner(id,name,slug)",
            "product_id",
            product_ids,
        )

    async def fetch_categories(self, category_ids: List[str]) -> List[Dict[str, Any]]:
        """Category rows for the direct category_id column."""
        return await self._fetch_in("categories", "id,name,slug", "id", category_ids)

    async def fetch_image_versions(self, product_ids: List[str]) -> List[Dict[str, Any]]:
        """Optimized feed image renditions for the given products."""
        return await self._fetch_in(
            "product_image_versions",
            "product_id,web_image_url,feed_image_url",
            "product_id",
            product_ids,
        )

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
