"""Tests for availability and merchant descriptions."""

from sokohub_feed.core.feed.description import (
    IN_STOCK,
    OUT_OF_STOCK,
    build_merchant_description,
    get_availability,
)
from sokohub_feed.core.feed.models import Product


class TestAvailability:
    """Tests for the availability rule."""

    def test_active_with_stock(self) -> None:
        assert get_availability(Product(id="P1", status="active", stock=3)) == IN_STOCK

    def test_active_with_unknown_stock(self) -> None:
        assert get_availability(Product(id="P1", status="active", stock=None)) == IN_STOCK

    def test_active_with_zero_stock(self) -> None:
        assert get_availability(Product(id="P1", status="active", stock=0)) == OUT_OF_STOCK

    def test_inactive_with_stock(self) -> None:
        assert get_availability(Product(id="P1", status="draft", stock=10)) == OUT_OF_STOCK

    def test_malformed_stock_is_out_of_stock(self) -> None:
        product = Product.from_row({"id": "P1", "status": "active", "stock": "lots"})
        assert get_availability(product) == OUT_OF_STOCK

    def test_numeric_string_stock(self) -> None:
        product = Product.from_row({"id": "P1", "status": "active", "stock": "4"})
        assert get_availability(product) == IN_STOCK


class TestMerchantDescription:
    """Tests for description building."""

    def test_html_stripped_and_whitespace_collapsed(self) -> None:
        long_text = "word " * 40
        product = Product(
            id="P1",
            name="Bike",
            description=f"<p>Great<br/>bike</p>\n\n<ul><li>{long_text}</li></ul>",
        )
        result = build_merchant_description(product, "Sokohub Kenya")
        assert result.startswith("Great bike word word")
        assert "<" not in result
        assert "  " not in result

    def test_short_description_gets_fallback(self) -> None:
        product = Product(id="P1", name="Kids Bicycle", description="Sturdy.")
        result = build_merchant_description(product, "Sokohub Kenya")
        assert result == (
            "Sturdy. Kids Bicycle available at Sokohub Kenya. "
            "Order online for fast delivery in Kenya."
        )

    def test_empty_description_is_only_fallback(self) -> None:
        product = Product(id="P1", name="Mug")
        result = build_merchant_description(product, "Sokohub Kenya")
        assert result == "Mug available at Sokohub Kenya. Order online for fast delivery in Kenya."

    def test_truncated_at_word_boundary_with_ellipsis(self) -> None:
        product = Product(id="P1", name="Bike", description="alpha beta gamma delta " * 20)
        result = build_merchant_description(product, "Sokohub Kenya", max_length=30, min_length=10)
        assert result == "alpha beta gamma delta alpha..."
        assert len(result) <= 33
