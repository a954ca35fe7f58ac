"""
XML Writer for the Google Merchant Center product feed.
"""

import re
from typing import List
from xml.sax.saxutils import escape

from .models import FeedItem, FeedConfig
from .pricing import format_price


# Google Shopping namespace
G_NS = 'http://base.google.com/ns/1.0'

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_QUOTE_ENTITIES = {'"': '&quot;', "'": '&apos;'}

# Code points XML 1.0 does not allow in character data
_ILLEGAL_XML_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')


def escape_xml(value) -> str:
    """Drop control characters and escape &, <, >, " and ' for XML text."""
    if value is None:
        return ''
    return escape(_ILLEGAL_XML_CHARS.sub('', str(value)), _QUOTE_ENTITIES)


def _element(name: str, value, indent: str = '      ') -> str:
    return f"{indent}<g:{name}>{escape_xml(value)}</g:{name}>"


def _item_xml(item: FeedItem, config: FeedConfig) -> str:
    lines = ['    <item>']
    lines.append(_element('id', item.id))
    lines.append(_element('item_group_id', item.item_group_id))
    lines.append(_element('title', item.title))
    lines.append(_element('description', item.description))
    lines.append(_element('link', item.link))
    lines.append(_element('image_link', item.image_link))

    for add_src in item.additional_images:
        if add_src:
            lines.append(_element('additional_image_link', add_src))

    lines.append(_element('availability', item.availability))
    lines.append(_element('price', format_price(item.price, config.currency)))

    # Sale price only when strictly below the listed price
    if item.sale_price is not None and 0 <= item.sale_price < item.price:
        lines.append(_element('sale_price', format_price(item.sale_price, config.currency)))
        if item.sale_price_effective_date:
            lines.append(_element('sale_price_effective_date', item.sale_price_effective_date))

    lines.append(_element('condition', item.condition))
    lines.append(_element('brand', item.brand or config.site_name))

    if item.size and item.size.strip():
        lines.append(_element('size', item.size))
    if item.color and item.color.strip():
        lines.append(_element('color', item.color))

    lines.append('      <g:shipping>')
    lines.append(_element('country', config.shipping_country, indent='        '))
    lines.append(_element('service', 'Standard', indent='        '))
    lines.append(_element('price', f"0 {config.currency}", indent='        '))
    lines.append('      </g:shipping>')

    lines.append(_element('mpn', item.mpn or item.item_group_id))
    if item.google_product_category:
        lines.append(_element('google_product_category', item.google_product_category))
    if item.product_type:
        lines.append(_element('product_type', item.product_type))
    lines.append(_element('adult', 'no'))
    lines.append(_element('identifier_exists', 'no'))
    lines.append('    </item>')
    return '\n'.join(lines)


def write_feed_xml(items: List[FeedItem], config: FeedConfig) -> str:
    """
    Generate Google Shopping Feed XML from feed items.

    Every interpolated value is escaped after it is fully built, so
    truncation never splits an entity. An empty item list still yields a
    well-formed document with an empty channel.

    Args:
        items: List of FeedItem objects
        config: FeedConfig with feed metadata

    Returns:
        XML string
    """
    parts = [
        XML_DECLARATION,
        f'<rss version="2.0" xmlns:g="{G_NS}">',
        '  <channel>',
        f'    <title>{escape_xml(config.feed_title)}</title>',
        f'    <link>{escape_xml(config.site_url)}</link>',
        '    <description>Live product feed for Google Shopping</description>',
    ]
    parts.extend(_item_xml(item, config) for item in items)
    parts.append('  </channel>')
    parts.append('</rss>')
    return '\n'.join(parts) + '\n'


def write_error_xml() -> str:
    """Minimal valid feed document returned when the catalog is unavailable."""
    return (
        f'{XML_DECLARATION}\n'
        f'<rss version="2.0" xmlns:g="{G_NS}"><channel><title>Error</title></channel></rss>\n'
    )
