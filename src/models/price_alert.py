# src/models/price_alert.py

"""User price-drop alert model."""

from dataclasses import dataclass, field
from datetime import datetime

from src.models.product import utc_now


@dataclass
class PriceAlert:
    """Standing instruction to notify ``user_id`` at ``target_price``.

    ``notification_sent`` only ever goes from False to True; the store
    enforces this when it records a notification.
    """

    id: str
    product_id: str
    product_name: str
    target_price: int
    current_price: int
    platform: str
    user_id: str
    is_active: bool = True
    notification_sent: bool = False
    created_at: datetime = field(default_factory=utc_now)

    @property
    def is_pending(self) -> bool:
        """Active and not yet notified."""
        return self.is_active and not self.notification_sent
