# src/filters/deduplicator.py

"""Remove repeated listings from merged live + catalog results."""

import logging
import re

from src.models.product import Product

logger = logging.getLogger("price_compare.filters")


class ProductDeduplicator:
    """Drop repeat listings, keeping the first occurrence.

    Live results are merged ahead of catalog results, so keeping the
    first occurrence prefers fresh marketplace data.
    """

    _STRIP_PARAMS_RE = re.compile(r"[?#].*$")
    _SCHEME_RE = re.compile(r"^https?://(www\.)?")

    @staticmethod
    def _normalise_url(url: str) -> str:
        """Strip scheme, ``www.``, query, fragment and trailing slash."""
        if not url:
            return ""
        cleaned = ProductDeduplicator._STRIP_PARAMS_RE.sub("", url)
        cleaned = ProductDeduplicator._SCHEME_RE.sub("", cleaned.lower())
        return cleaned.rstrip("/")

    @staticmethod
    def _listing_key(product: Product) -> str:
        """``platform:sku`` (falling back to id), lowercased."""
        ident = (product.sku or product.id).strip().lower()
        if not ident:
            return ""
        return f"{product.platform.lower()}:{ident}"

    @staticmethod
    def deduplicate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Remove duplicates by listing key or normalised affiliate URL.

        Returns the deduplicated list and the count of removed dupes.
        """
        if not products:
            return [], 0

        seen_keys: set[str] = set()
        seen_urls: set[str] = set()
        kept: list[Product] = []
        removed = 0

        for product in products:
            key = ProductDeduplicator._listing_key(product)
            url = ProductDeduplicator._normalise_url(
                product.affiliate_url
            )
            if (key and key in seen_keys) or (url and url in seen_urls):
                removed += 1
                continue
            if key:
                seen_keys.add(key)
            if url:
                seen_urls.add(url)
            kept.append(product)

        if removed:
            logger.info(
                "Deduplication removed %d duplicate products",
                removed,
            )

        return kept, removed
