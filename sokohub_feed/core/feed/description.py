"""
Availability and merchant description rules.
"""

import re

from sokohub_feed.core.utils import strip_html
from .models import Product

IN_STOCK = 'in stock'
OUT_OF_STOCK = 'out of stock'


def get_availability(product: Product) -> str:
    """
    Availability for every feed entry of a product.

    In stock when the product is active and its stock is either unknown
    or positive. A stock value that could not be parsed counts as out of stock.
    """
    if product.status.strip().lower() != 'active':
        return OUT_OF_STOCK
    if product.stock_malformed:
        return OUT_OF_STOCK
    if product.stock is None or product.stock > 0:
        return IN_STOCK
    return OUT_OF_STOCK


def build_merchant_description(
    product: Product,
    site_name: str,
    max_length: int = 5000,
    min_length: int = 120
) -> str:
    """
    Build a plain-text description for Merchant Center.

    The description is stripped of HTML with whitespace collapsed.
    Short results get a fallback sentence naming the product and store;
    long results are cut at the last word boundary before max_length and
    end with an ellipsis.
    """
    text = strip_html(product.description) if product.description else ''
    combined = re.sub(r'\s+', ' ', text).strip()

    if len(combined) < min_length:
        fallback = f"{product.name} available at {site_name}. Order online for fast delivery in Kenya."
        combined = f"{combined} {fallback}" if combined else fallback

    if len(combined) > max_length:
        combined = combined[:max_length]
        last_space = combined.rfind(' ')
        if last_space > 0:
            combined = combined[:last_space]
        combined += '...'

    return combined
