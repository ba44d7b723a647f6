# src/services/alert_evaluator.py

"""Periodic price refresh and price-alert evaluation."""

import asyncio
import contextlib
import logging
import random
from types import TracebackType

from src.config.settings import Settings
from src.models.price_alert import PriceAlert
from src.models.product import Product
from src.services.notifier import LogNotifier, Notifier
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("price_compare.alerts")


class PriceAlertEvaluator:
    """Refreshes prices and fires each price alert at most once.

    One evaluation cycle perturbs a random subset of catalog prices and
    then checks every pending alert against its product's price.  The
    pending -> notified transition goes through
    :meth:`CatalogStore.mark_alert_notified`, so concurrent cycles or a
    manual :meth:`run_cycle` never notify the same alert twice.

    Args:
        store: Catalog whose products and alerts are evaluated.
        notifier: Receives triggered alerts (defaults to the log).
        settings: Supplies refresh interval and price-change tuning.
        rng: Random source, injectable for reproducible tests.
    """

    def __init__(
        self,
        store: CatalogStore,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier or LogNotifier()
        self.settings = settings or Settings()
        self._rng = rng or random.Random()
        self._task: asyncio.Task[None] | None = None
        self.cycles_run = 0

    # ── One cycle ────────────────────────────────────────

    def refresh_prices(self) -> list[Product]:
        """Randomly move some prices, never below PRICE_FLOOR.

        Returns the products whose price was updated.
        """
        changed: list[Product] = []
        swing = self.settings.PRICE_SWING
        floor = self.settings.PRICE_FLOOR
        for product in self.store.products():
            if self._rng.random() >= self.settings.PRICE_CHANGE_PROBABILITY:
                continue
            change = (self._rng.random() - 0.5) * swing
            new_price = max(floor, round(product.price + change))
            updated = self.store.update_price(product.id, new_price)
            if updated is not None:
                logger.debug(
                    "Price of %s moved %d -> %d",
                    product.id,
                    product.price,
                    updated.price,
                )
                changed.append(updated)
        if changed:
            logger.info("Price refresh updated %d products", len(changed))
        return changed

    def evaluate_alerts(self) -> list[PriceAlert]:
        """Fire pending alerts whose product is at or below target.

        Alerts whose product has disappeared are left untouched.
        Returns the alerts triggered by this call.
        """
        triggered: list[PriceAlert] = []
        for alert in self.store.alerts():
            if not alert.is_active:
                continue
            product = self.store.get_product(alert.product_id)
            if product is None:
                logger.debug(
                    "Skipping alert %s: product %s no longer exists",
                    alert.id,
                    alert.product_id,
                )
                continue
            if alert.current_price != product.price:
                self.store.refresh_alert_price(alert.id, product.price)
            if alert.notification_sent:
                continue
            if product.price > alert.target_price:
                continue
            if not self.store.mark_alert_notified(alert.id):
                continue
            fired = self.store.get_alert(alert.id)
            if fired is None:
                # Deleted between the flip and the read
                continue
            triggered.append(fired)
            self._dispatch(fired, product)
        return triggered

    def _dispatch(self, alert: PriceAlert, product: Product) -> None:
        """Send a notification; a failed send does not unflag the alert."""
        try:
            self.notifier.notify(alert, product)
        except Exception:
            logger.error(
                "Notification failed for alert %s",
                alert.id,
                exc_info=True,
            )

    def run_cycle(self) -> list[PriceAlert]:
        """Refresh prices, then evaluate alerts."""
        self.refresh_prices()
        triggered = self.evaluate_alerts()
        self.cycles_run += 1
        if triggered:
            logger.info(
                "Cycle %d triggered %d alerts",
                self.cycles_run,
                len(triggered),
            )
        return triggered

    # ── Scheduling ───────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self) -> None:
        interval = self.settings.PRICE_REFRESH_INTERVAL
        while True:
            await asyncio.sleep(interval)
            try:
                self.run_cycle()
            except Exception:
                logger.error("Alert evaluation cycle failed", exc_info=True)

    def start(self) -> None:
        """Schedule the periodic cycle on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info(
            "Price alert evaluator started (every %.0fs)",
            self.settings.PRICE_REFRESH_INTERVAL,
        )

    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Price alert evaluator stopped")

    async def __aenter__(self) -> "PriceAlertEvaluator":
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
