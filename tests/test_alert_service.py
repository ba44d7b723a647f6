# tests/test_alert_service.py

"""Tests for AlertService."""

import unittest

from src.errors import (
    AlertNotFoundError,
    InvalidRequestError,
    ProductNotFoundError,
)
from src.services.alert_service import AlertService
from src.storage.catalog_store import CatalogStore


class TestAlertService(unittest.TestCase):
    """Create, list, and remove alerts."""

    def setUp(self) -> None:
        self.store = CatalogStore.from_seed()
        self.service = AlertService(self.store)

    def test_create_alert(self) -> None:
        alert = self.service.create_price_alert("1", 120000, "u1")
        self.assertEqual(alert.product_id, "1")
        self.assertEqual(
            alert.product_name, "Apple iPhone 15 Pro 128GB Natural Titanium"
        )
        self.assertEqual(alert.target_price, 120000)
        self.assertEqual(alert.current_price, 134900)
        self.assertEqual(alert.platform, "flipkart")
        self.assertTrue(alert.is_active)
        self.assertFalse(alert.notification_sent)
        self.assertIs(self.store.get_alert(alert.id), alert)

    def test_alert_ids_unique(self) -> None:
        first = self.service.create_price_alert("1", 120000, "u1")
        second = self.service.create_price_alert("1", 120000, "u1")
        self.assertNotEqual(first.id, second.id)

    def test_fractional_target_rounded(self) -> None:
        alert = self.service.create_price_alert("6", 999.6, "u1")
        self.assertEqual(alert.target_price, 1000)

    def test_non_positive_target_rejected(self) -> None:
        for target in (0, -10):
            with self.subTest(target=target):
                with self.assertRaises(InvalidRequestError):
                    self.service.create_price_alert("1", target, "u1")
        self.assertEqual(self.store.alerts(), [])

    def test_blank_user_rejected(self) -> None:
        with self.assertRaises(InvalidRequestError):
            self.service.create_price_alert("1", 100, "  ")

    def test_unknown_product_rejected(self) -> None:
        with self.assertRaises(ProductNotFoundError) as ctx:
            self.service.create_price_alert("999", 100, "u1")
        self.assertEqual(ctx.exception.product_id, "999")

    def test_alerts_listed_per_user(self) -> None:
        self.service.create_price_alert("1", 120000, "u1")
        self.service.create_price_alert("3", 15000, "u2")
        self.assertEqual(len(self.service.get_price_alerts("u1")), 1)
        self.assertEqual(len(self.service.get_price_alerts()), 2)

    def test_delete_alert(self) -> None:
        alert = self.service.create_price_alert("1", 120000, "u1")
        self.service.delete_price_alert(alert.id)
        self.assertEqual(self.service.get_price_alerts("u1"), [])
        with self.assertRaises(AlertNotFoundError):
            self.service.delete_price_alert(alert.id)

    def test_deactivate_alert(self) -> None:
        alert = self.service.create_price_alert("1", 120000, "u1")
        updated = self.service.deactivate_price_alert(alert.id)
        self.assertFalse(updated.is_active)
        with self.assertRaises(AlertNotFoundError):
            self.service.deactivate_price_alert("missing")


if __name__ == "__main__":
    unittest.main()
