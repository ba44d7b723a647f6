# src/models/search_filters.py

"""Ephemeral filter/sort request built by callers for one search."""

from dataclasses import dataclass

ALL = "all"


@dataclass
class SearchFilters:
    """Filter and sort options for a product search.

    ``platform`` and ``category`` accept ``"all"`` (or ``None``) as a
    wildcard.  Unset numeric bounds disable their predicate.
    """

    query: str = ""
    platform: str | None = ALL
    category: str | None = ALL
    min_price: int | None = None
    max_price: int | None = None
    min_rating: float | None = None
    brand: str | None = None
    in_stock_only: bool = False
    sort_by: str | None = None

    @property
    def single_platform(self) -> str | None:
        """The named marketplace, or ``None`` for the wildcard."""
        if not self.platform or self.platform.lower() == ALL:
            return None
        return self.platform.lower()

    @property
    def category_filter(self) -> str | None:
        if not self.category or self.category.lower() == ALL:
            return None
        return self.category.lower()
