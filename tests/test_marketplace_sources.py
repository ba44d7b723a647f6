# tests/test_marketplace_sources.py

"""Tests for the Flipkart and Amazon sources using mocked HTTP responses."""

import json
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

from src.errors import SourceUnavailableError
from src.sources.amazon_source import AmazonSource, sigv4_headers
from src.sources.flipkart_source import FlipkartSource

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _make_mock_response(fixture_name: str) -> MagicMock:
    """Create a mock response from a fixture JSON file."""
    fixture_path = FIXTURES_DIR / fixture_name
    mock_resp = MagicMock()
    mock_resp.status_code = 200
    with open(fixture_path, encoding="utf-8") as f:
        data = json.load(f)
    mock_resp.json.return_value = data
    mock_resp.text = json.dumps(data)
    return mock_resp


def _flipkart() -> FlipkartSource:
    source = FlipkartSource()
    source.settings.FLIPKART_API_KEY = "token"
    source.settings.FLIPKART_TRACKING_ID = "affiliate"
    return source


def _amazon() -> AmazonSource:
    source = AmazonSource()
    source.settings.AMAZON_ACCESS_KEY = "AKIA"
    source.settings.AMAZON_SECRET_KEY = "secret"
    source.settings.AMAZON_PARTNER_TAG = "pricecompare-21"
    return source


@patch("src.sources.base_source.curl_requests.Session")
class TestFlipkartSource(unittest.TestCase):
    """Flipkart affiliate API source."""

    def test_search_returns_products(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """search() parses the fixture into Product objects."""
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.post.return_value = _make_mock_response(
            "flipkart_search.json"
        )

        products = _flipkart().search("iphone")

        self.assertEqual(len(products), 3)
        self.assertTrue(all(p.platform == "flipkart" for p in products))

    def test_product_fields_parsed_correctly(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.post.return_value = _make_mock_response(
            "flipkart_search.json"
        )

        first, boat, macbook = _flipkart().search("iphone")

        self.assertEqual(
            first.name, "Apple iPhone 15 Pro (Natural Titanium, 128 GB)"
        )
        self.assertEqual(first.price, 134900)
        self.assertEqual(first.original_price, 139900)
        self.assertEqual(first.discount_percent, 4)
        self.assertEqual(first.currency, "INR")
        self.assertIn("MOBGTAGPTB3VS24W", first.affiliate_url)
        self.assertEqual(boat.original_price, 2990)
        self.assertFalse(macbook.in_stock)
        self.assertEqual(macbook.category, "General")

    def test_affiliate_headers_sent(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.post.return_value = _make_mock_response(
            "flipkart_search.json"
        )

        _flipkart().search("iphone")

        args, kwargs = mock_session.post.call_args
        self.assertTrue(args[0].endswith("/search"))
        self.assertEqual(kwargs["headers"]["Fk-Affiliate-Id"], "affiliate")
        self.assertEqual(kwargs["headers"]["Fk-Affiliate-Token"], "token")
        self.assertEqual(json.loads(kwargs["data"])["query"], "iphone")

    def test_unconfigured_source_unavailable(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Without credentials the source never hits the network."""
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session

        source = FlipkartSource()
        source.settings.FLIPKART_API_KEY = ""
        with self.assertRaises(SourceUnavailableError):
            source.search("iphone")
        mock_session.post.assert_not_called()

    def test_forbidden_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        resp = MagicMock()
        resp.status_code = 403
        mock_session.post.return_value = resp

        with self.assertRaises(SourceUnavailableError):
            _flipkart().search("iphone")


@patch("src.sources.base_source.curl_requests.Session")
class TestAmazonSource(unittest.TestCase):
    """Amazon PA-API source."""

    def test_search_returns_products(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.post.return_value = _make_mock_response(
            "amazon_search.json"
        )

        products = _amazon().search("samsung")

        self.assertEqual(len(products), 2)
        self.assertTrue(all(p.platform == "amazon" for p in products))

    def test_product_fields_parsed_correctly(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.post.return_value = _make_mock_response(
            "amazon_search.json"
        )

        galaxy, sony = _amazon().search("samsung")

        self.assertEqual(galaxy.id, "B0CS5XW6TN")
        self.assertEqual(galaxy.price, 124999)
        self.assertEqual(galaxy.brand, "Samsung")
        self.assertEqual(galaxy.category, "Smartphones")
        self.assertTrue(galaxy.in_stock)
        self.assertEqual(sony.discount_percent, 33)
        self.assertFalse(sony.in_stock)

    def test_payload_targets_indian_marketplace(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.post.return_value = _make_mock_response(
            "amazon_search.json"
        )

        _amazon().search("samsung")

        _, kwargs = mock_session.post.call_args
        payload = json.loads(kwargs["data"])
        self.assertEqual(payload["Keywords"], "samsung")
        self.assertEqual(payload["Marketplace"], "www.amazon.in")
        self.assertEqual(payload["PartnerTag"], "pricecompare-21")
        self.assertLessEqual(payload["ItemCount"], 10)
        self.assertEqual(
            kwargs["headers"]["X-Amz-Target"], AmazonSource.TARGET
        )

    def test_request_is_signed(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """SearchItems carries a SigV4 Authorization for the sent body."""
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.post.return_value = _make_mock_response(
            "amazon_search.json"
        )

        _amazon().search("samsung")

        _, kwargs = mock_session.post.call_args
        headers = kwargs["headers"]
        auth = headers["Authorization"]
        date = headers["X-Amz-Date"][:8]
        self.assertTrue(auth.startswith("AWS4-HMAC-SHA256 Credential=AKIA/"))
        self.assertIn(
            f"/{date}/eu-west-1/ProductAdvertisingAPI/aws4_request", auth
        )
        self.assertIn(
            "SignedHeaders=content-encoding;content-type;host;"
            "x-amz-date;x-amz-target",
            auth,
        )
        self.assertNotIn("secret", auth)

    def test_unconfigured_source_unavailable(
        self, mock_session_cls: MagicMock,
    ) -> None:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session

        source = AmazonSource()
        source.settings.AMAZON_PARTNER_TAG = ""
        with self.assertRaises(SourceUnavailableError):
            source.search("samsung")
        mock_session.post.assert_not_called()


class TestSigV4Headers(unittest.TestCase):
    """Signature Version 4 header construction."""

    URL = "https://webservices.amazon.in/paapi5/searchitems"
    HEADERS = {
        "Accept": "application/json",
        "Content-Type": "application/json; charset=utf-8",
        "Content-Encoding": "amz-1.0",
        "X-Amz-Target": AmazonSource.TARGET,
    }
    NOW = datetime(2026, 3, 1, 12, 30, 5, tzinfo=timezone.utc)

    def _sign(self, body: str = '{"Keywords":"iphone"}') -> dict[str, str]:
        return sigv4_headers(
            self.URL,
            self.HEADERS,
            body,
            access_key="AKIDEXAMPLE",
            secret_key="wJalrXUtnFEMI",
            region="eu-west-1",
            service="ProductAdvertisingAPI",
            now=self.NOW,
        )

    def test_date_and_credential_scope(self) -> None:
        headers = self._sign()
        self.assertEqual(headers["X-Amz-Date"], "20260301T123005Z")
        self.assertIn(
            "Credential=AKIDEXAMPLE/20260301/eu-west-1/"
            "ProductAdvertisingAPI/aws4_request",
            headers["Authorization"],
        )

    def test_accept_header_not_signed(self) -> None:
        """Only host, Content-* and X-Amz-* headers are signed."""
        auth = self._sign()["Authorization"]
        self.assertIn(
            "SignedHeaders=content-encoding;content-type;host;"
            "x-amz-date;x-amz-target,",
            auth,
        )

    def test_signature_is_deterministic_hex(self) -> None:
        signature = self._sign()["Authorization"].rsplit("=", 1)[1]
        self.assertEqual(len(signature), 64)
        int(signature, 16)
        self.assertEqual(
            self._sign()["Authorization"], self._sign()["Authorization"]
        )

    def test_signature_covers_body(self) -> None:
        self.assertNotEqual(
            self._sign('{"Keywords":"iphone"}')["Authorization"],
            self._sign('{"Keywords":"pixel"}')["Authorization"],
        )


if __name__ == "__main__":
    unittest.main()
