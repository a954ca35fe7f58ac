"""Tests for category resolution."""

from sokohub_feed.core.feed.categories import (
    group_product_category_rows,
    merge_categories,
    resolve_category_assignments,
)
from sokohub_feed.core.feed.models import Category, Product


class TestMergeCategories:
    """Tests for merging join-table and direct categories."""

    def test_join_order_kept_and_direct_appended(self) -> None:
        linked = [Category(id="c1", name="Toys"), Category(id="c2", name="Outdoor")]
        direct = Category(id="c3", name="Bikes")
        result = merge_categories(linked, direct)
        assert [c.id for c in result.categories] == ["c1", "c2", "c3"]
        assert result.primary_name == "Toys"

    def test_direct_category_not_duplicated(self) -> None:
        linked = [Category(id="c2", name="Outdoor")]
        result = merge_categories(linked, Category(id="c2", name="Outdoor (old)"))
        assert [c.name for c in result.categories] == ["Outdoor"]

    def test_first_seen_wins_within_join_rows(self) -> None:
        linked = [Category(id="c1", name="First"), Category(id="c1", name="Second")]
        result = merge_categories(linked)
        assert [c.name for c in result.categories] == ["First"]

    def test_direct_only(self) -> None:
        result = merge_categories([], Category(id="c9", name="Home"))
        assert result.primary_name == "Home"

    def test_no_categories_gives_empty_name(self) -> None:
        assert merge_categories([]).primary_name == ""


class TestResolveCategoryAssignments:
    """Tests for resolving assignments across the catalog."""

    def test_resolves_both_relationship_models(self) -> None:
        products = [
            Product(id="P1", category_id="c3"),
            Product(id="P2"),
            Product(id="P3", category_id="c1"),
        ]
        join_rows = [
            {"product_id": "P1", "categories": {"id": "c1", "name": "Toys", "slug": "toys"}},
            {"product_id": "P3", "categories": {"id": "c1", "name": "Toys", "slug": "toys"}},
        ]
        category_rows = [
            {"id": "c1", "name": "Toys", "slug": "toys"},
            {"id": "c3", "name": "Bikes", "slug": "bikes"},
        ]

        result = resolve_category_assignments(products, join_rows, category_rows)

        assert [c.id for c in result["P1"].categories] == ["c1", "c3"]
        assert result["P2"].categories == []
        assert [c.id for c in result["P3"].categories] == ["c1"]

    def test_embedded_category_as_list(self) -> None:
        rows = [{"product_id": 7, "categories": [{"id": 4, "name": "Kitchen"}]}]
        grouped = group_product_category_rows(rows)
        assert grouped["7"][0].name == "Kitchen"
        assert grouped["7"][0].id == "4"

    def test_rows_without_category_are_ignored(self) -> None:
        rows = [{"product_id": "P1", "categories": None}, {"categories": {"id": "c1"}}]
        assert group_product_category_rows(rows) == {}
