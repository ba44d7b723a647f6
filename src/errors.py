# src/errors.py

"""Exception hierarchy for the price_compare core."""


class PriceCompareError(Exception):
    """Base class for every error raised by price_compare."""


class SourceUnavailableError(PriceCompareError):
    """A live marketplace source could not produce results.

    Raised by sources to the orchestrator, which recovers by falling
    back to catalog data.  Never propagated past the orchestrator.
    """

    def __init__(self, platform: str, reason: str) -> None:
        super().__init__(f"{platform} unavailable: {reason}")
        self.platform = platform
        self.reason = reason


class NotFoundError(PriceCompareError):
    """A requested record does not exist."""


class ProductNotFoundError(NotFoundError):
    """No product matches the requested id."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class AlertNotFoundError(NotFoundError):
    """No price alert matches the requested id."""

    def __init__(self, alert_id: str) -> None:
        super().__init__(f"Price alert not found: {alert_id}")
        self.alert_id = alert_id


class InvalidRequestError(PriceCompareError):
    """A request carried values the core cannot act on."""
