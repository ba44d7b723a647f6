# tests/test_deduplicator.py

"""Tests for ProductDeduplicator live + catalog deduplication."""

import unittest

from src.filters.deduplicator import ProductDeduplicator
from src.models.product import Product


def _make(
    product_id: str,
    platform: str = "flipkart",
    sku: str = "",
    url: str = "",
    price: int = 100,
) -> Product:
    """Create a minimal Product."""
    return Product(
        id=product_id,
        name=f"Product {product_id}",
        price=price,
        platform=platform,
        sku=sku,
        affiliate_url=url,
    )


class TestDeduplicate(unittest.TestCase):
    """ProductDeduplicator.deduplicate behaviour."""

    def test_empty_list(self) -> None:
        """Empty input returns empty output."""
        kept, removed = ProductDeduplicator.deduplicate([])
        self.assertEqual(len(kept), 0)
        self.assertEqual(removed, 0)

    def test_no_duplicates(self) -> None:
        products = [_make("1"), _make("2"), _make("1", platform="amazon")]
        kept, removed = ProductDeduplicator.deduplicate(products)
        self.assertEqual(len(kept), 3)
        self.assertEqual(removed, 0)

    def test_same_platform_and_id_removed(self) -> None:
        """The first occurrence wins."""
        products = [_make("1", price=90), _make("1", price=100)]
        kept, removed = ProductDeduplicator.deduplicate(products)
        self.assertEqual(len(kept), 1)
        self.assertEqual(kept[0].price, 90)
        self.assertEqual(removed, 1)

    def test_sku_takes_precedence_over_id(self) -> None:
        products = [
            _make("live-1", sku="MOB123"),
            _make("catalog-9", sku="mob123"),
        ]
        kept, removed = ProductDeduplicator.deduplicate(products)
        self.assertEqual([p.id for p in kept], ["live-1"])
        self.assertEqual(removed, 1)

    def test_url_normalisation(self) -> None:
        """Scheme, www, query string and trailing slash are ignored."""
        products = [
            _make("1", url="https://www.flipkart.com/iphone/p/itm1?pid=X"),
            _make("2", url="http://flipkart.com/iphone/p/itm1/"),
        ]
        kept, removed = ProductDeduplicator.deduplicate(products)
        self.assertEqual([p.id for p in kept], ["1"])
        self.assertEqual(removed, 1)

    def test_different_urls_kept(self) -> None:
        products = [
            _make("1", url="https://flipkart.com/a"),
            _make("2", url="https://flipkart.com/b"),
        ]
        kept, removed = ProductDeduplicator.deduplicate(products)
        self.assertEqual(len(kept), 2)
        self.assertEqual(removed, 0)

    def test_output_has_unique_keys(self) -> None:
        products = [_make(str(i % 3)) for i in range(9)]
        kept, removed = ProductDeduplicator.deduplicate(products)
        self.assertEqual(len(kept), 3)
        self.assertEqual(removed, 6)
        keys = [(p.platform, p.id) for p in kept]
        self.assertEqual(len(keys), len(set(keys)))


if __name__ == "__main__":
    unittest.main()
