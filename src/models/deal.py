# src/models/deal.py

"""Time-boxed promotional deal derived from a product."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from src.models.product import Product, discount_percent, utc_now


class DealType(str, Enum):
    """Promotion category shown on the deals page."""

    FLASH = "flash"
    FESTIVAL = "festival"
    CLEARANCE = "clearance"
    BULK = "bulk"


@dataclass
class Deal:
    """A promotional view of a product with an advisory expiry."""

    id: str
    product_id: str
    title: str
    original_price: int
    sale_price: int
    discount: int
    platform: str
    category: str
    expires_at: datetime
    deal_type: DealType
    image: str = ""
    rating: float = 0.0
    is_hot: bool = False
    is_trending: bool = False

    @classmethod
    def from_product(
        cls,
        deal_id: str,
        product: Product,
        expires_at: datetime,
        deal_type: DealType,
        is_hot: bool = False,
        is_trending: bool = False,
    ) -> "Deal":
        """Build a deal from a product's current and list prices."""
        original = product.original_price or product.price
        return cls(
            id=deal_id,
            product_id=product.id,
            title=product.name,
            original_price=original,
            sale_price=product.price,
            discount=discount_percent(product.price, original),
            platform=product.platform,
            category=product.category,
            expires_at=expires_at,
            deal_type=deal_type,
            image=product.image,
            rating=product.rating,
            is_hot=is_hot,
            is_trending=is_trending,
        )

    def time_left(self, now: datetime | None = None) -> str:
        """Render the remaining time as ``"1d 5h"`` or ``"2h 15m"``."""
        current = now or utc_now()
        remaining = int((self.expires_at - current).total_seconds())
        if remaining <= 0:
            return "Expired"
        days, rest = divmod(remaining, 86400)
        hours, rest = divmod(rest, 3600)
        minutes = rest // 60
        if days:
            return f"{days}d {hours}h"
        return f"{hours}h {minutes}m"

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or utc_now())
