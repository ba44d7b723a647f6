# src/sources/flipkart_source.py

"""Live source for the Flipkart affiliate product search API."""

from typing import Any

from src.models.product import Product
from src.sources.base_source import BaseSource
from src.sources.normalizers import normalize_flipkart


class FlipkartSource(BaseSource):
    """Flipkart affiliate API, authenticated with id + token headers."""

    ITEMS_PATH = ("products",)

    def __init__(self) -> None:
        super().__init__("flipkart")

    def _has_credentials(self) -> bool:
        return bool(
            self.settings.FLIPKART_API_KEY
            and self.settings.FLIPKART_TRACKING_ID
        )

    def _search_url(self) -> str:
        return f"{self.settings.FLIPKART_BASE_URL}/search"

    def _headers(self) -> dict[str, str]:
        return {
            "Fk-Affiliate-Id": self.settings.FLIPKART_TRACKING_ID,
            "Fk-Affiliate-Token": self.settings.FLIPKART_API_KEY,
            "Content-Type": "application/json",
        }

    def _payload(self, query: str) -> dict[str, Any]:
        return {
            "query": query,
            "resultCount": self.settings.RESULT_COUNT,
        }

    def normalize(self, item: dict[str, Any]) -> Product:
        return normalize_flipkart(item)
