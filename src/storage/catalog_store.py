# src/storage/catalog_store.py

"""In-memory catalog of products, deals, and price alerts.

The store is the single owner of mutable catalog state.  Services get
one injected instead of reaching for module globals, so every test can
build a fresh store.

Records are never edited in place: each update swaps in a new record
built with :func:`dataclasses.replace` while holding the lock.  Readers
therefore always see either the old or the new record, never a mix.
The lock matters because live sources run in worker threads.
"""

import json
import logging
import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.models.deal import Deal, DealType
from src.models.price_alert import PriceAlert
from src.models.product import Product, utc_now
from src.models.stats import Recommendation

logger = logging.getLogger("price_compare.store")


def _product_from_seed(raw: dict[str, Any], now: datetime) -> Product:
    """Build a Product from one seed catalog entry."""
    image = raw.get("image") or (
        f"{Settings.PLACEHOLDER_IMAGE}?height=400&width=400"
    )
    return Product(
        id=str(raw["id"]),
        name=raw["name"],
        price=int(raw["price"]),
        platform=raw["platform"],
        sku=raw.get("sku", ""),
        description=raw.get("description", ""),
        category=raw.get("category", Settings.DEFAULT_CATEGORY),
        brand=raw.get("brand", ""),
        image=image,
        images=list(raw.get("images") or [image, image]),
        original_price=(
            int(raw["original_price"])
            if raw.get("original_price") is not None
            else None
        ),
        rating=float(raw.get("rating", 0)),
        reviews=int(raw.get("reviews", 0)),
        in_stock=bool(raw.get("in_stock", False)),
        seller=raw.get("seller", ""),
        shipping=raw.get("shipping", ""),
        specifications=dict(raw.get("specifications", {})),
        affiliate_url=raw.get("affiliate_url", ""),
        last_updated=now,
    )


class CatalogStore:
    """Thread-safe in-memory repository for catalog and alert state."""

    def __init__(
        self,
        products: Iterable[Product] = (),
        deals: Iterable[Deal] = (),
        recommendations: Iterable[Recommendation] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._products: dict[str, Product] = {
            p.id: p for p in products
        }
        self._deals: list[Deal] = list(deals)
        self._recommendations: list[Recommendation] = list(
            recommendations
        )
        self._alerts: dict[str, PriceAlert] = {}

    @classmethod
    def from_seed(
        cls,
        path: Path | None = None,
        now: datetime | None = None,
    ) -> "CatalogStore":
        """Load the static fallback catalog from ``seed_catalog.json``.

        Deal expiry times are relative to ``now`` so a freshly loaded
        catalog always has live deals.
        """
        seed_path = path or Settings.SEED_CATALOG_PATH
        loaded_at = now or utc_now()
        with open(seed_path, encoding="utf-8") as f:
            data: dict[str, Any] = json.load(f)

        products = [
            _product_from_seed(raw, loaded_at)
            for raw in data.get("products", [])
        ]
        by_id = {p.id: p for p in products}

        deals: list[Deal] = []
        for raw in data.get("deals", []):
            product = by_id.get(str(raw["product_id"]))
            if product is None:
                logger.warning(
                    "Seed deal %s references unknown product %s",
                    raw.get("id"),
                    raw["product_id"],
                )
                continue
            deals.append(
                Deal.from_product(
                    str(raw["id"]),
                    product,
                    expires_at=loaded_at
                    + timedelta(hours=float(raw["expires_in_hours"])),
                    deal_type=DealType(raw["deal_type"]),
                    is_hot=bool(raw.get("is_hot", False)),
                    is_trending=bool(raw.get("is_trending", False)),
                )
            )

        recommendations = [
            Recommendation(
                id=str(raw["id"]),
                product_id=str(raw["product_id"]),
                reason=raw["reason"],
                confidence=float(raw["confidence"]),
                category=raw["category"],
            )
            for raw in data.get("recommendations", [])
        ]

        logger.info(
            "Loaded seed catalog: %d products, %d deals, "
            "%d recommendations",
            len(products),
            len(deals),
            len(recommendations),
        )
        return cls(products, deals, recommendations)

    # ── Products ─────────────────────────────────────────

    def products(self) -> list[Product]:
        """Snapshot of every product in catalog order."""
        with self._lock:
            return list(self._products.values())

    def get_product(self, product_id: str) -> Product | None:
        with self._lock:
            return self._products.get(product_id)

    def get_products_by_ids(
        self, product_ids: Iterable[str],
    ) -> list[Product]:
        """Return the known products among ``product_ids``, catalog order."""
        wanted = set(product_ids)
        with self._lock:
            return [
                p for p in self._products.values() if p.id in wanted
            ]

    def add_product(self, product: Product) -> None:
        """Insert or replace a product."""
        with self._lock:
            self._products[product.id] = product

    def update_price(
        self,
        product_id: str,
        new_price: int,
        now: datetime | None = None,
    ) -> Product | None:
        """Set a product's price and stamp ``last_updated``.

        Returns the updated product, or ``None`` for unknown ids.
        """
        with self._lock:
            current = self._products.get(product_id)
            if current is None:
                return None
            updated = replace(
                current,
                price=int(new_price),
                last_updated=now or utc_now(),
            )
            self._products[product_id] = updated
            return updated

    def bulk_update_prices(
        self, updates: Iterable[tuple[str, int]],
    ) -> int:
        """Apply ``(product_id, new_price)`` pairs, skipping unknown ids.

        Returns the number of products updated.
        """
        updated = 0
        for product_id, new_price in updates:
            if self.update_price(product_id, new_price) is not None:
                updated += 1
            else:
                logger.debug(
                    "Bulk price update skipped unknown product %s",
                    product_id,
                )
        logger.info("Bulk price update applied to %d products", updated)
        return updated

    # ── Deals & recommendations ──────────────────────────

    def deals(self) -> list[Deal]:
        with self._lock:
            return list(self._deals)

    def recommendations(self) -> list[Recommendation]:
        with self._lock:
            return list(self._recommendations)

    # ── Alerts ───────────────────────────────────────────

    def alerts(self, user_id: str | None = None) -> list[PriceAlert]:
        """Every alert, or only those owned by ``user_id``."""
        with self._lock:
            return [
                a
                for a in self._alerts.values()
                if user_id is None or a.user_id == user_id
            ]

    def get_alert(self, alert_id: str) -> PriceAlert | None:
        with self._lock:
            return self._alerts.get(alert_id)

    def add_alert(self, alert: PriceAlert) -> None:
        with self._lock:
            self._alerts[alert.id] = alert

    def remove_alert(self, alert_id: str) -> bool:
        """Delete an alert; returns False when it did not exist."""
        with self._lock:
            return self._alerts.pop(alert_id, None) is not None

    def set_alert_active(
        self, alert_id: str, active: bool,
    ) -> PriceAlert | None:
        with self._lock:
            current = self._alerts.get(alert_id)
            if current is None:
                return None
            updated = replace(current, is_active=active)
            self._alerts[alert_id] = updated
            return updated

    def refresh_alert_price(
        self, alert_id: str, current_price: int,
    ) -> PriceAlert | None:
        """Record the latest observed product price on an alert."""
        with self._lock:
            current = self._alerts.get(alert_id)
            if current is None:
                return None
            updated = replace(current, current_price=int(current_price))
            self._alerts[alert_id] = updated
            return updated

    def mark_alert_notified(self, alert_id: str) -> bool:
        """Flip ``notification_sent`` to True exactly once.

        Returns True only for the call that performed the flip, so a
        caller may dispatch a notification if and only if this returns
        True.  Inactive alerts are never flipped.
        """
        with self._lock:
            current = self._alerts.get(alert_id)
            if (
                current is None
                or not current.is_active
                or current.notification_sent
            ):
                return False
            self._alerts[alert_id] = replace(
                current, notification_sent=True
            )
            return True
