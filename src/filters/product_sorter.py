# src/filters/product_sorter.py

"""Sort keys for search results."""

import logging
from collections.abc import Callable
from typing import Any

from src.models.product import Product

logger = logging.getLogger("price_compare.filters")

# sort_by value -> (key function, descending)
SORT_KEYS: dict[str, tuple[Callable[[Product], Any], bool]] = {
    "price-low": (lambda p: p.price, False),
    "price-high": (lambda p: p.price, True),
    "rating": (lambda p: p.rating, True),
    "popularity": (lambda p: p.reviews, True),
    "reviews": (lambda p: p.reviews, True),
    "discount": (lambda p: p.discount_percent, True),
    "newest": (lambda p: p.last_updated, True),
}


class ProductSorter:
    """Order products by one of the supported ``sort_by`` values."""

    @staticmethod
    def sort(
        products: list[Product], sort_by: str | None,
    ) -> list[Product]:
        """Return products ordered by ``sort_by``.

        ``None``, ``"relevance"`` and unknown values keep the incoming
        order.  Python's sort is stable, so ties keep it too.
        """
        if not sort_by:
            return list(products)
        entry = SORT_KEYS.get(sort_by.lower())
        if entry is None:
            if sort_by.lower() != "relevance":
                logger.debug("Unknown sort key '%s', order kept", sort_by)
            return list(products)
        key, descending = entry
        return sorted(products, key=key, reverse=descending)
