"""
Feed data models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from sokohub_feed.core.utils import safe_float, safe_int


@dataclass(frozen=True)
class FeedConfig:
    """Feed generation configuration."""
    # Store identity
    site_name: str
    site_url: str

    # Image storage
    storage_base_url: str
    storage_bucket: str = 'product-images'
    placeholder_image_url: str = ''

    # Pricing and shipping
    currency: str = 'KES'
    shipping_country: str = 'KE'
    sale_timezone_offset: str = '+03:00'
    sale_window_days: int = 30

    # Limits
    max_additional_images: int = 10
    description_max_length: int = 5000
    description_min_length: int = 120

    @property
    def feed_title(self) -> str:
        return f"{self.site_name} Product Feed"


@dataclass
class VariantOption:
    """A size or color option of a product."""
    label: str
    value: str = ''
    price: float = 0.0

    @property
    def has_price(self) -> bool:
        return self.price > 0

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["VariantOption"]:
        """
        Parse a variant descriptor.

        Descriptors are either plain strings or objects carrying
        label/value/name and an optional price.

        Returns:
            VariantOption, or None if the descriptor has no usable label
        """
        if isinstance(raw, str):
            label = raw.strip()
            return cls(label=label, value=label) if label else None
        if not isinstance(raw, dict):
            return None

        label = raw.get('label') or raw.get('name') or raw.get('value') or ''
        value = raw.get('value') or label
        label = str(label).strip()
        if not label:
            return None
        return cls(label=label, value=str(value).strip(), price=safe_float(raw.get('price'), 0.0))


@dataclass
class Category:
    """Category lookup row."""
    id: str
    name: str
    slug: str = ''

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> Optional["Category"]:
        if not isinstance(row, dict) or row.get('id') is None:
            return None
        return cls(id=str(row['id']), name=str(row.get('name') or ''), slug=str(row.get('slug') or ''))


@dataclass
class CategoryAssignment:
    """Merged, de-duplicated category list for one product."""
    categories: List[Category] = field(default_factory=list)

    @property
    def primary_name(self) -> str:
        """Name of the first category, or empty string if none."""
        if not self.categories:
            return ''
        return self.categories[0].name or ''


@dataclass
class Product:
    """Read-only product snapshot consumed by the feed generator."""
    id: str
    name: str = ''
    description: str = ''
    slug: str = ''
    price: float = 0.0
    compare_at_price: Optional[float] = None
    stock: Optional[int] = None
    stock_malformed: bool = False
    status: str = ''
    images: List[Any] = field(default_factory=list)
    sizes: List[VariantOption] = field(default_factory=list)
    colors: List[VariantOption] = field(default_factory=list)
    google_product_category: str = ''
    category_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        """
        Build a Product from a backend row, substituting safe defaults for
        missing or malformed fields.

        Raises:
            ValueError: If the row has no id
        """
        if not isinstance(row, dict) or row.get('id') in (None, ''):
            raise ValueError("Product row has no id")

        compare_at = row.get('compare_at_price')
        compare_at_price = safe_float(compare_at, 0.0) if compare_at not in (None, '') else None

        raw_stock = row.get('stock')
        stock = safe_int(raw_stock) if raw_stock not in (None, '') else None
        stock_malformed = raw_stock not in (None, '') and stock is None

        def _options(raw: Any) -> List[VariantOption]:
            if not isinstance(raw, list):
                return []
            parsed = (VariantOption.from_raw(item) for item in raw)
            return [opt for opt in parsed if opt is not None]

        images = row.get('images')
        category_id = row.get('category_id')

        return cls(
            id=str(row['id']),
            name=str(row.get('name') or ''),
            description=str(row.get('description') or ''),
            slug=str(row.get('slug') or ''),
            price=max(0.0, safe_float(row.get('price'), 0.0)),
            compare_at_price=compare_at_price,
            stock=stock,
            stock_malformed=stock_malformed,
            status=str(row.get('status') or ''),
            images=images if isinstance(images, list) else [],
            sizes=_options(row.get('sizes')),
            colors=_options(row.get('colors')),
            google_product_category=str(row.get('google_product_category') or ''),
            category_id=str(category_id) if category_id not in (None, '') else None,
        )


@dataclass
class PriceResolution:
    """Listed price and optional sale price for one feed item."""
    price: float
    sale_price: Optional[float] = None

    @property
    def on_sale(self) -> bool:
        return self.sale_price is not None and self.sale_price < self.price


@dataclass
class FeedItem:
    """Normalized feed item data structure."""
    # Identifiers
    id: str
    item_group_id: str
    mpn: str = ''

    # Product information
    title: str = ''
    description: str = ''
    link: str = ''
    image_link: str = ''
    additional_images: List[str] = field(default_factory=list)

    # Pricing
    price: float = 0.0
    sale_price: Optional[float] = None
    sale_price_effective_date: Optional[str] = None

    # Attributes
    availability: str = 'out of stock'
    condition: str = 'new'
    brand: str = ''
    size: Optional[str] = None
    color: Optional[str] = None
    google_product_category: str = ''
    product_type: str = ''


@dataclass
class FeedResult:
    """Output of one feed generation run."""
    xml: str
    items_count: int
    products_count: int
    generated_at: datetime
