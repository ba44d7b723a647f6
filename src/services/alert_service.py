# src/services/alert_service.py

"""Create, list, and remove user price alerts."""

import logging
import uuid

from src.errors import (
    AlertNotFoundError,
    InvalidRequestError,
    ProductNotFoundError,
)
from src.models.price_alert import PriceAlert
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("price_compare.alerts")


class AlertService:
    """User-facing operations on price alerts."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def create_price_alert(
        self,
        product_id: str,
        target_price: int | float,
        user_id: str,
    ) -> PriceAlert:
        """Create an active alert for ``user_id`` on a catalog product.

        Raises:
            InvalidRequestError: target is not positive or user is blank.
            ProductNotFoundError: ``product_id`` is not in the catalog.
        """
        target = int(round(target_price))
        if target <= 0:
            raise InvalidRequestError(
                f"target price must be positive, got {target_price}"
            )
        if not user_id.strip():
            raise InvalidRequestError("user id is required")

        product = self.store.get_product(product_id)
        if product is None:
            logger.info(
                "Alert rejected for unknown product %s", product_id
            )
            raise ProductNotFoundError(product_id)

        alert = PriceAlert(
            id=uuid.uuid4().hex,
            product_id=product.id,
            product_name=product.name,
            target_price=target,
            current_price=product.price,
            platform=product.platform,
            user_id=user_id,
        )
        self.store.add_alert(alert)
        logger.info(
            "Created alert %s: %s <= %d for user %s",
            alert.id,
            product.id,
            target,
            user_id,
        )
        return alert

    def get_price_alerts(
        self, user_id: str | None = None,
    ) -> list[PriceAlert]:
        return self.store.alerts(user_id)

    def delete_price_alert(self, alert_id: str) -> None:
        if not self.store.remove_alert(alert_id):
            raise AlertNotFoundError(alert_id)
        logger.info("Deleted alert %s", alert_id)

    def deactivate_price_alert(self, alert_id: str) -> PriceAlert:
        """Stop evaluating an alert without deleting it."""
        updated = self.store.set_alert_active(alert_id, False)
        if updated is None:
            raise AlertNotFoundError(alert_id)
        logger.info("Deactivated alert %s", alert_id)
        return updated
