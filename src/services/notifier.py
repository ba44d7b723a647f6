# src/services/notifier.py

"""Notification dispatchers for triggered price alerts."""

import logging
from abc import ABC, abstractmethod

from rich.console import Console

from src.models.price_alert import PriceAlert
from src.models.product import Product

logger = logging.getLogger("price_compare.notifier")


def format_inr(amount: int) -> str:
    """Format whole rupees with Indian digit grouping, e.g. ₹1,34,900."""
    sign = "-" if amount < 0 else ""
    digits = str(abs(int(amount)))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups: list[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups) + "," + tail
    return f"{sign}₹{digits}"


class Notifier(ABC):
    """Delivers a message when a price alert fires."""

    @abstractmethod
    def notify(self, alert: PriceAlert, product: Product) -> None:
        ...

    @staticmethod
    def message(alert: PriceAlert, product: Product) -> str:
        return (
            f"Price alert triggered for {alert.product_name}: "
            f"{format_inr(product.price)} on {product.platform} "
            f"(target {format_inr(alert.target_price)})"
        )


class LogNotifier(Notifier):
    """Writes triggered alerts to the application log."""

    def notify(self, alert: PriceAlert, product: Product) -> None:
        logger.info(
            "%s [alert=%s user=%s]",
            self.message(alert, product),
            alert.id,
            alert.user_id,
        )


class ConsoleNotifier(Notifier):
    """Prints triggered alerts to a Rich console (used by ``--watch``)."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def notify(self, alert: PriceAlert, product: Product) -> None:
        LogNotifier().notify(alert, product)
        self.console.print(
            f"[bold green]🔔 {self.message(alert, product)}[/bold green]"
        )
