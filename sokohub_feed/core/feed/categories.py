"""
Category resolution across the direct category_id column and the
product_categories join table.
"""

from typing import Dict, List, Iterable, Optional, Any

from .models import Category, CategoryAssignment, Product


def merge_categories(
    linked: Iterable[Category],
    direct: Optional[Category] = None
) -> CategoryAssignment:
    """
    Merge many-to-many categories with the direct foreign-key category.

    Join rows keep their order and the first occurrence of an id wins.
    The direct category is appended only when its id is not already present.

    Args:
        linked: Categories from the join table, in backend order
        direct: Category referenced by products.category_id, if any

    Returns:
        CategoryAssignment with no duplicate ids
    """
    seen = set()
    categories: List[Category] = []

    for category in linked:
        if category is None or category.id in seen:
            continue
        seen.add(category.id)
        categories.append(category)

    if direct is not None and direct.id not in seen:
        categories.append(direct)

    return CategoryAssignment(categories=categories)


def group_product_category_rows(rows: Iterable[Dict[str, Any]]) -> Dict[str, List[Category]]:
    """
    Group product_categories join rows by product id.

    Each row looks like {"product_id": ..., "categories": {"id", "name", "slug"}};
    the embedded category may also arrive as a single-element list.
    """
    grouped: Dict[str, List[Category]] = {}
    for row in rows:
        if not isinstance(row, dict) or row.get('product_id') is None:
            continue
        embedded = row.get('categories')
        if isinstance(embedded, list):
            embedded = embedded[0] if embedded else None
        category = Category.from_row(embedded) if embedded else None
        if category is None:
            continue
        grouped.setdefault(str(row['product_id']), []).append(category)
    return grouped


def resolve_category_assignments(
    products: Iterable[Product],
    join_rows: Iterable[Dict[str, Any]],
    category_rows: Iterable[Dict[str, Any]]
) -> Dict[str, CategoryAssignment]:
    """
    Resolve one CategoryAssignment per product id.

    Args:
        products: Products in the feed
        join_rows: Rows from product_categories with embedded categories
        category_rows: Rows from categories for the direct category_id column

    Returns:
        Dict mapping product id to its merged CategoryAssignment
    """
    linked_by_product = group_product_category_rows(join_rows)

    categories_by_id: Dict[str, Category] = {}
    for row in category_rows:
        category = Category.from_row(row)
        if category is not None:
            categories_by_id[category.id] = category

    assignments: Dict[str, CategoryAssignment] = {}
    for product in products:
        direct = categories_by_id.get(product.category_id) if product.category_id else None
        assignments[product.id] = merge_categories(linked_by_product.get(product.id, []), direct)
    return assignments
