# src/filters/product_filter.py

"""Conjunctive product filtering for search requests."""

import logging
from collections.abc import Callable

from src.models.product import Product
from src.models.search_filters import SearchFilters

logger = logging.getLogger("price_compare.filters")

Predicate = Callable[[Product], bool]


class ProductFilter:
    """Apply every active predicate of a SearchFilters request."""

    @staticmethod
    def predicates(filters: SearchFilters) -> list[Predicate]:
        """Build the list of predicates the request switches on.

        Unset bounds and ``"all"`` selectors contribute nothing.
        """
        active: list[Predicate] = []

        platform = filters.single_platform
        if platform:
            active.append(lambda p: p.platform.lower() == platform)

        category = filters.category_filter
        if category:
            active.append(lambda p: p.category.lower() == category)

        if filters.min_price is not None:
            min_price = filters.min_price
            active.append(lambda p: p.price >= min_price)

        if filters.max_price is not None:
            max_price = filters.max_price
            active.append(lambda p: p.price <= max_price)

        if filters.min_rating is not None:
            min_rating = filters.min_rating
            active.append(lambda p: p.rating >= min_rating)

        brand = (filters.brand or "").strip().lower()
        if brand:
            active.append(lambda p: brand in p.brand.lower())

        if filters.in_stock_only:
            active.append(lambda p: p.in_stock)

        return active

    @staticmethod
    def apply(
        products: list[Product],
        filters: SearchFilters,
    ) -> tuple[list[Product], int]:
        """Keep products satisfying all active predicates.

        Returns the kept products and the count excluded.
        """
        active = ProductFilter.predicates(filters)
        if not active:
            return list(products), 0

        kept = [p for p in products if all(pred(p) for pred in active)]
        excluded = len(products) - len(kept)
        if excluded:
            logger.info(
                "Filtered out %d of %d products", excluded, len(products)
            )
        return kept, excluded

    @staticmethod
    def filter_by_query(
        products: list[Product], query: str,
    ) -> list[Product]:
        """Products whose name or description contains ``query``."""
        if not query.strip():
            return list(products)
        return [p for p in products if p.matches_query(query)]
