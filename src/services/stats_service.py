# src/services/stats_service.py

"""Dashboard statistics, recommendations, and price history."""

import logging
import random
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from src.config.settings import Settings
from src.models.price_snapshot import PriceHistoryPoint
from src.models.product import utc_now
from src.models.stats import Recommendation, UserStats
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("price_compare.stats")

_DAYS_PER_MONTH = 30


class StatsService:
    """Derives aggregates from the store; nothing here is persisted."""

    def __init__(
        self,
        store: CatalogStore,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self._rng = rng or random.Random()

    def get_user_stats(
        self, user_id: str, now: datetime | None = None,
    ) -> UserStats:
        """Compute dashboard counters for ``user_id``.

        Savings are measured per distinct alerted product as the gap
        between its list price and current price.
        """
        catalog = self.store.products()
        alerts = self.store.alerts(user_id)
        alerted = self.store.get_products_by_ids(
            a.product_id for a in alerts
        )

        total_savings = sum(
            max(0, (p.original_price or p.price) - p.price)
            for p in alerted
        )

        if alerts:
            first = min(a.created_at for a in alerts)
            age_days = ((now or utc_now()) - first).days
            months = max(1, age_days // _DAYS_PER_MONTH)
        else:
            months = 1

        basis = alerted or catalog
        top_category = _most_common(p.category for p in basis)
        platform_id = _most_common(p.platform for p in basis)
        entry = self.settings.get_marketplace(platform_id)

        return UserStats(
            total_savings=total_savings,
            products_tracked=len(catalog),
            active_alerts=sum(1 for a in alerts if a.is_active),
            platforms_connected=len(self.settings.MARKETPLACES),
            avg_savings_per_month=total_savings // months,
            top_category=top_category,
            favorite_platform=entry["label"] if entry else platform_id,
        )

    def get_recommendations(
        self,
        user_id: str,
        category: str | None = None,
    ) -> list[Recommendation]:
        """Static suggestions, optionally limited to one category.

        ``user_id`` is accepted for interface stability; suggestions are
        not personalised.
        """
        candidates = self.store.recommendations()
        if category:
            wanted = category.lower()
            candidates = [
                r for r in candidates if r.category.lower() == wanted
            ]
        logger.debug(
            "%d recommendations for user %s", len(candidates), user_id
        )
        return candidates

    def get_price_history(
        self,
        product_id: str,
        days: int = 30,
        today: date | None = None,
    ) -> list[PriceHistoryPoint]:
        """Synthetic daily history for the last ``days`` days plus today.

        Each point varies up to 20% around the current price and never
        drops below 80% of it.  Unknown products yield an empty list.
        """
        product = self.store.get_product(product_id)
        if product is None:
            return []

        end = today or utc_now().date()
        base = product.price
        history: list[PriceHistoryPoint] = []
        for offset in range(days, -1, -1):
            variation = (self._rng.random() - 0.5) * 0.2 * base
            price = max(base * 0.8, base + variation)
            history.append(
                PriceHistoryPoint(
                    date=end - timedelta(days=offset),
                    price=round(price),
                    platform=product.platform,
                )
            )
        return history


def _most_common(values: Iterable[str]) -> str:
    counts = Counter(values)
    if not counts:
        return ""
    return str(counts.most_common(1)[0][0])
