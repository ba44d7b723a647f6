# src/services/deal_service.py

"""Read-only access to promotional deals."""

from src.models.deal import Deal
from src.models.search_filters import ALL
from src.storage.catalog_store import CatalogStore


class DealService:
    """Filters the store's deals by category and deal type."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def get_deals(
        self,
        category: str | None = None,
        deal_type: str | None = None,
    ) -> list[Deal]:
        """Deals matching ``category`` and ``deal_type`` (``"all"`` = any)."""
        deals = self.store.deals()
        if category and category.lower() != ALL:
            wanted = category.lower()
            deals = [d for d in deals if d.category.lower() == wanted]
        if deal_type and deal_type.lower() != ALL:
            kind = deal_type.lower()
            deals = [d for d in deals if d.deal_type.value == kind]
        return deals

    def get_hot_deals(self) -> list[Deal]:
        return [d for d in self.store.deals() if d.is_hot]

    def get_trending_deals(self) -> list[Deal]:
        return [d for d in self.store.deals() if d.is_trending]
