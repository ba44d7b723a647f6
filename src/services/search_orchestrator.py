# src/services/search_orchestrator.py

"""Orchestrates multi-marketplace product searches with filtering."""

import asyncio
import importlib
import logging
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings
from src.filters.deduplicator import ProductDeduplicator
from src.filters.product_filter import ProductFilter
from src.filters.product_sorter import ProductSorter
from src.filters.product_validator import ProductValidator
from src.models.product import Product
from src.models.search_filters import SearchFilters
from src.storage.catalog_store import CatalogStore

logger = logging.getLogger("price_compare.orchestrator")


@dataclass
class SearchResult:
    """Container for a completed search across marketplaces.

    ``searched`` is False when the request was short-circuited (empty
    query) and no source was contacted.
    """

    query: str
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    searched: bool = True
    live_count: int = 0
    fallback_count: int = 0
    excluded_count: int = 0
    deduplicated_count: int = 0
    invalid_count: int = 0
    total_before_filter: int = 0
    failed_sources: list[str] = field(
        default_factory=lambda: list[str]()
    )
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )


def _load_source_class(dotted_path: str) -> type[Any]:
    """Dynamically import a source class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class SearchOrchestrator:
    """Fans a query out to live sources and merges catalog fallback.

    Args:
        store: Catalog used for fallback results and advanced search.
        sources: Optional ``platform -> source`` mapping.  When omitted,
            sources are built on first use from ``Settings.MARKETPLACES``.
        settings: Configuration override.
    """

    def __init__(
        self,
        store: CatalogStore,
        sources: dict[str, Any] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self._sources: dict[str, Any] = dict(sources or {})
        self._explicit_sources = sources is not None

    # ── Private helpers ──────────────────────────────────

    def _source_for(self, platform: str) -> Any | None:
        """Return the live source for ``platform``, or ``None``."""
        if platform in self._sources:
            return self._sources[platform]
        if self._explicit_sources:
            return None
        entry = self.settings.get_marketplace(platform)
        if entry is None or not entry["source"]:
            return None
        source = _load_source_class(entry["source"])()
        self._sources[platform] = source
        return source

    def _has_live_source(self, platform: str) -> bool:
        """Whether a live source serves ``platform``; nothing is built."""
        if platform in self._sources:
            return True
        if self._explicit_sources:
            return False
        entry = self.settings.get_marketplace(platform)
        return entry is not None and bool(entry["source"])

    def _live_platforms(self) -> list[str]:
        if self._explicit_sources:
            return list(self._sources)
        return [m["id"] for m in self.settings.live_marketplaces()]

    async def _run_sources(
        self,
        query: str,
        platforms: list[str],
    ) -> tuple[list[Product], list[str], list[str]]:
        """Query sources concurrently and wait for every outcome.

        One source failing or timing out never affects the others.
        Returns the products, the failed platform ids, and error
        messages.
        """
        timeout = self.settings.SOURCE_TIMEOUT

        async def run_one(platform: str) -> list[Product]:
            source = self._source_for(platform)
            if source is None:
                msg = f"no live source for {platform}"
                raise LookupError(msg)
            products: list[Product] = await asyncio.wait_for(
                asyncio.to_thread(source.search, query),
                timeout=timeout,
            )
            return products

        batches = await asyncio.gather(
            *(run_one(p) for p in platforms), return_exceptions=True
        )

        products: list[Product] = []
        failed: list[str] = []
        errors: list[str] = []
        for platform, batch in zip(platforms, batches):
            if isinstance(batch, list):
                products.extend(batch)
                continue
            failed.append(platform)
            if isinstance(batch, asyncio.TimeoutError):
                message = f"{platform}: timed out after {timeout:g}s"
                logger.warning(
                    "Source %s timed out for query '%s'", platform, query
                )
            else:
                message = f"{platform}: {batch}"
                logger.warning(
                    "Source %s failed for query '%s': %s",
                    platform,
                    query,
                    batch,
                    exc_info=batch,
                )
            errors.append(message)

        return products, failed, errors

    def _catalog_matches(
        self, query: str, platform: str | None = None,
    ) -> list[Product]:
        """Catalog products matching the query, optionally one platform."""
        products = self.store.products()
        if platform is not None:
            products = [p for p in products if p.platform == platform]
        return ProductFilter.filter_by_query(products, query)

    def _finish(
        self,
        result: SearchResult,
        merged: list[Product],
        filters: SearchFilters,
    ) -> SearchResult:
        """Deduplicate, filter, and sort the merged product list."""
        result.total_before_filter = len(merged)
        unique, result.deduplicated_count = (
            ProductDeduplicator.deduplicate(merged)
        )
        kept, result.excluded_count = ProductFilter.apply(
            unique, filters
        )
        result.products = ProductSorter.sort(kept, filters.sort_by)
        logger.info(
            "Search '%s': %d products (%d live, %d fallback, "
            "%d filtered, %d deduped)",
            result.query,
            len(result.products),
            result.live_count,
            result.fallback_count,
            result.excluded_count,
            result.deduplicated_count,
        )
        return result

    # ── Public API ───────────────────────────────────────

    async def search(
        self,
        query: str,
        filters: SearchFilters | None = None,
    ) -> SearchResult:
        """Search one or all marketplaces and apply filters.

        - Empty query: returns immediately with ``searched=False``.
        - Platform ``"all"``: every live source concurrently, plus the
          catalog products matching the query.
        - Single platform: that live source only; on failure (or when
          the marketplace has no live source) the catalog products of
          that platform matching the query.
        """
        request = filters or SearchFilters()
        result = SearchResult(query=query)

        if not query.strip():
            result.searched = False
            logger.debug("Empty query, search skipped")
            return result

        platform = request.single_platform

        if platform is None:
            live, result.failed_sources, errors = (
                await self._run_sources(query, self._live_platforms())
            )
            result.errors.extend(errors)
            live, result.invalid_count = ProductValidator.validate(live)
            fallback = self._catalog_matches(query)
        else:
            if self.settings.get_marketplace(platform) is None:
                result.errors.append(f"unknown platform: {platform}")
                logger.warning("Search for unknown platform '%s'", platform)
                return result

            live = []
            fallback = []
            has_source = self._has_live_source(platform)
            if has_source:
                live, result.failed_sources, errors = (
                    await self._run_sources(query, [platform])
                )
                result.errors.extend(errors)
                live, result.invalid_count = (
                    ProductValidator.validate(live)
                )
            if not has_source or result.failed_sources:
                fallback = self._catalog_matches(query, platform)
                logger.info(
                    "Serving %d catalog products for %s",
                    len(fallback),
                    platform,
                )

        result.live_count = len(live)
        result.fallback_count = len(fallback)
        return self._finish(result, live + fallback, request)

    def advanced_search(self, filters: SearchFilters) -> list[Product]:
        """Filter and sort the catalog without contacting live sources.

        An empty query matches every product.
        """
        matched = ProductFilter.filter_by_query(
            self.store.products(), filters.query
        )
        kept, _excluded = ProductFilter.apply(matched, filters)
        return ProductSorter.sort(kept, filters.sort_by)
