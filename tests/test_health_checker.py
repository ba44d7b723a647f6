# tests/test_health_checker.py

"""Tests for the marketplace health checker service."""

import unittest
from unittest.mock import MagicMock, patch

from src.services.health_checker import (
    HealthChecker,
    HealthResult,
    probe_marketplace,
)


def _marketplace(
    source_id: str = "flipkart",
    homepage: str = "https://www.flipkart.com",
) -> dict[str, str]:
    """Build a minimal marketplace config dict."""
    return {"id": source_id, "label": source_id, "source": "",
            "homepage": homepage}


def _session(status: int = 200) -> MagicMock:
    session = MagicMock()
    resp = MagicMock()
    resp.status_code = status
    session.get.return_value = resp
    return session


class TestProbeMarketplace(unittest.TestCase):
    """Tests for the per-marketplace health probe function."""

    def test_ok_status(self) -> None:
        """A fast 200 response should return 'ok' status."""
        session = _session(200)
        result = probe_marketplace(_marketplace(), session)
        self.assertEqual(result.status, "ok")
        self.assertTrue(result.is_up)
        self.assertGreaterEqual(result.latency_ms, 0)
        args, _ = session.get.call_args
        self.assertEqual(args[0], "https://www.flipkart.com")

    def test_down_on_http_error(self) -> None:
        """A 4xx/5xx response should return 'down' status."""
        result = probe_marketplace(_marketplace(), _session(403))
        self.assertEqual(result.status, "down")
        self.assertFalse(result.is_up)
        self.assertIn("403", result.message)

    def test_down_on_exception(self) -> None:
        """A network error should return 'down' status."""
        session = MagicMock()
        session.get.side_effect = ConnectionError("Connection refused")
        result = probe_marketplace(_marketplace(), session)
        self.assertEqual(result.status, "down")
        self.assertIn("Connection refused", result.message)

    @patch("src.services.health_checker.time")
    def test_slow_response(self, mock_time: MagicMock) -> None:
        """Responses over five seconds are flagged as slow."""
        mock_time.monotonic.side_effect = [0.0, 6.0]
        result = probe_marketplace(_marketplace(), _session(200))
        self.assertEqual(result.status, "slow")
        self.assertTrue(result.is_up)
        self.assertEqual(result.latency_ms, 6000.0)

    def test_down_without_homepage(self) -> None:
        session = _session(200)
        result = probe_marketplace(_marketplace(homepage=""), session)
        self.assertEqual(result.status, "down")
        session.get.assert_not_called()


class TestHealthChecker(unittest.IsolatedAsyncioTestCase):
    """Tests for the HealthChecker orchestrator."""

    @patch("src.services.health_checker.probe_marketplace")
    async def test_check_all_returns_all_marketplaces(
        self, mock_probe: MagicMock,
    ) -> None:
        """check_all should return one result per marketplace."""
        mock_probe.return_value = HealthResult(
            source_id="test",
            status="ok",
            latency_ms=100.0,
            message="",
        )

        checker = HealthChecker()
        results = await checker.check_all()

        self.assertEqual(len(results), len(checker.marketplaces))
        self.assertEqual(len(results), 8)

    @patch("src.services.health_checker.probe_marketplace")
    async def test_platform_status(self, mock_probe: MagicMock) -> None:
        """platform_status maps each id to reachability."""
        mock_probe.side_effect = lambda m: HealthResult(
            source_id=m["id"],
            status="down" if m["id"] == "amazon" else "slow",
            latency_ms=1.0,
            message="",
        )
        checker = HealthChecker(
            marketplaces=[_marketplace("flipkart"), _marketplace("amazon")]
        )
        status = await checker.platform_status()
        self.assertEqual(status, {"flipkart": True, "amazon": False})


if __name__ == "__main__":
    unittest.main()
