# src/models/product.py

"""Product data model shared by sources, store, and services."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def discount_percent(price: int, original_price: int | None) -> int:
    """Percentage saved against ``original_price``, never negative."""
    if not original_price or original_price <= 0:
        return 0
    pct = round((original_price - price) / original_price * 100)
    return max(pct, 0)


@dataclass
class Product:
    """Represents a single product listing from any marketplace.

    Prices are whole rupees.
    """

    id: str
    name: str
    price: int
    platform: str
    sku: str = ""
    description: str = ""
    category: str = "General"
    brand: str = ""
    image: str = ""
    images: list[str] = field(default_factory=lambda: list[str]())
    original_price: int | None = None
    rating: float = 0.0
    reviews: int = 0
    in_stock: bool = False
    seller: str = ""
    shipping: str = ""
    specifications: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )
    affiliate_url: str = ""
    currency: str = "INR"
    last_updated: datetime = field(default_factory=utc_now)

    @property
    def discount_percent(self) -> int:
        """Discount against the list price, clamped at zero."""
        return discount_percent(self.price, self.original_price)

    def matches_query(self, query: str) -> bool:
        """Case-insensitive substring match on name or description."""
        needle = query.strip().lower()
        return (
            needle in self.name.lower()
            or needle in self.description.lower()
        )
