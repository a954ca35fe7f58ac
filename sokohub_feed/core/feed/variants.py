"""
Variant expansion: one feed entry per size/color combination.
"""

from dataclasses import dataclass
from typing import List, Optional

from sokohub_feed.core.utils import slugify_variant_label
from .models import Product, VariantOption


@dataclass
class VariantCombination:
    """One expanded (size, color) pair; either side may be absent."""
    size: Optional[VariantOption] = None
    color: Optional[VariantOption] = None

    @property
    def id_suffix(self) -> str:
        suffix = ''
        if self.size:
            suffix += f"-{slugify_variant_label(self.size.label)}"
        if self.color:
            suffix += f"-{slugify_variant_label(self.color.label)}"
        return suffix

    @property
    def title_suffix(self) -> str:
        suffix = ''
        if self.size:
            suffix += f" - {self.size.label}"
        if self.color:
            suffix += f" - {self.color.label}"
        return suffix


def expand_variants(product: Product) -> List[VariantCombination]:
    """
    Expand a product into its variant combinations.

    No sizes and no colors yields a single empty combination. With both,
    the result is the cartesian product with sizes outer and colors inner.
    """
    sizes: List[Optional[VariantOption]] = list(product.sizes) or [None]
    colors: List[Optional[VariantOption]] = list(product.colors) or [None]

    return [
        VariantCombination(size=size, color=color)
        for size in sizes
        for color in colors
    ]
