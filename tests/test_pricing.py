"""Tests for price and discount resolution."""

from datetime import date

from sokohub_feed.core.feed.models import Product, VariantOption
from sokohub_feed.core.feed.pricing import (
    format_price,
    resolve_base_price,
    resolve_variant_price,
    sale_price_effective_date,
)


def _product(price: float, compare_at=None) -> Product:
    return Product(id="P1", price=price, compare_at_price=compare_at)


class TestResolveBasePrice:
    """Tests for base product pricing."""

    def test_compare_at_above_price_is_a_sale(self) -> None:
        result = resolve_base_price(_product(1000, 1200))
        assert result.price == 1200
        assert result.sale_price == 1000
        assert result.on_sale is True

    def test_compare_at_equal_to_price_is_not_a_sale(self) -> None:
        result = resolve_base_price(_product(1000, 1000))
        assert result.price == 1000
        assert result.sale_price is None
        assert result.on_sale is False

    def test_compare_at_below_price_is_ignored(self) -> None:
        result = resolve_base_price(_product(1000, 800))
        assert result.price == 1000
        assert result.sale_price is None

    def test_no_compare_at(self) -> None:
        result = resolve_base_price(_product(500))
        assert result.price == 500
        assert result.sale_price is None


class TestResolveVariantPrice:
    """Tests for variant pricing rules."""

    def test_size_without_price_inherits_base_pair(self) -> None:
        size = VariantOption(label="Blue")
        result = resolve_variant_price(_product(1000, 1200), size=size)
        assert result.price == 1200
        assert result.sale_price == 1000

    def test_size_price_is_absolute_and_drops_sale(self) -> None:
        size = VariantOption(label="XL", price=1500)
        result = resolve_variant_price(_product(1000, 1200), size=size)
        assert result.price == 1500
        assert result.sale_price is None

    def test_color_price_is_offset_on_selling_price(self) -> None:
        color = VariantOption(label="Red", price=150)
        result = resolve_variant_price(_product(1000), color=color)
        assert result.price == 1150
        assert result.sale_price is None

    def test_color_offset_on_sale_product_drops_sale(self) -> None:
        color = VariantOption(label="Red", price=100)
        result = resolve_variant_price(_product(1000, 1200), color=color)
        assert result.price == 1300
        assert result.sale_price is None

    def test_zero_color_price_means_no_offset(self) -> None:
        color = VariantOption(label="Red", price=0)
        result = resolve_variant_price(_product(1000, 1200), color=color)
        assert result.price == 1200
        assert result.sale_price == 1000

    def test_size_price_plus_color_offset(self) -> None:
        size = VariantOption(label="L", price=2000)
        color = VariantOption(label="Green", price=250)
        result = resolve_variant_price(_product(1000), size=size, color=color)
        assert result.price == 2250


class TestFormatting:
    """Tests for price and date formatting."""

    def test_format_price_two_decimals(self) -> None:
        assert format_price(1200, "KES") == "1200.00 KES"
        assert format_price(99.5, "KES") == "99.50 KES"
        assert format_price(0, "USD") == "0.00 USD"

    def test_sale_price_effective_date(self) -> None:
        value = sale_price_effective_date(date(2026, 10, 19), 30, "+03:00")
        assert value == "2026-10-19T00:00+03:00/2026-11-18T23:59+03:00"
