"""
Utility functions.
"""

import re
from typing import Optional, List, Any


def safe_float(value: Any, default: float = 0.0) -> float:
    """Convert value to float safely."""
    try:
        if value is None or isinstance(value, bool):
            return default
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            s = value.strip()
            if not s:
                return default
            s = s.replace(',', '').replace('KES', '').replace('Ksh.', '').strip()
            return float(s)
        return default
    except (ValueError, TypeError):
        return default


def safe_int(value: Any) -> Optional[int]:
    """Convert value to int, or None if it is not a whole number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        s = value.strip()
        if re.fullmatch(r'-?\d+', s):
            return int(s)
    return None


def slugify_variant_label(label: str) -> str:
    """Replace runs of whitespace with a single hyphen; case and punctuation are kept."""
    return re.sub(r'\s+', '-', label)


def strip_html(html: str) -> str:
    """Replace every HTML tag with a single space."""
    if not html:
        return ''
    return re.sub(r'<[^>]*>', ' ', html)


def chunked(lst: List[Any], size: int):
    """
    Split list into chunks of specified size.
    """
    for i in range(0, len(lst), size):
        yield lst[i:i + size]
