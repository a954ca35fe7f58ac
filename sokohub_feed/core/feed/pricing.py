"""
Price and discount resolution for feed items.
"""

from datetime import date, timedelta
from typing import Optional

from .models import PriceResolution, Product, VariantOption


def resolve_base_price(product: Product) -> PriceResolution:
    """
    Resolve the listed/sale price pair for the base product.

    When compare_at_price is strictly greater than price, the compare-at
    price is listed and the current price becomes the sale price.
    """
    current = product.price
    compare_at = product.compare_at_price

    if compare_at is not None and compare_at > current:
        return PriceResolution(price=compare_at, sale_price=current)
    return PriceResolution(price=current)


def resolve_variant_price(
    product: Product,
    size: Optional[VariantOption] = None,
    color: Optional[VariantOption] = None
) -> PriceResolution:
    """
    Resolve the price pair for one variant combination.

    Size prices are absolute replacements. Color prices are offsets added
    to the listed price (the size price when one applies). Any explicit
    variant price drops the sale price for that entry; otherwise the base
    listed/sale pair is inherited.
    """
    base = resolve_base_price(product)

    size_priced = size is not None and size.has_price
    color_priced = color is not None and color.has_price

    if not size_priced and not color_priced:
        return base

    price = size.price if size_priced else base.price
    if color_priced:
        price += color.price
    return PriceResolution(price=round(price, 2))


def format_price(amount: float, currency: str) -> str:
    """Format amount with two decimals followed by the currency code."""
    return f"{amount:.2f} {currency}"


def sale_price_effective_date(today: date, days: int, tz_offset: str) -> str:
    """
    Build a g:sale_price_effective_date interval starting today.

    Example:
        2026-10-19T00:00+03:00/2026-11-18T23:59+03:00
    """
    end = today + timedelta(days=days)
    return f"{today.isoformat()}T00:00{tz_offset}/{end.isoformat()}T23:59{tz_offset}"
