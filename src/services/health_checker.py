# src/services/health_checker.py

"""Marketplace connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from src.config.settings import Settings

logger = logging.getLogger("price_compare.health")

_HEALTH_TIMEOUT = 10  # seconds per marketplace
_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single marketplace health check."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str

    @property
    def is_up(self) -> bool:
        return self.status != "down"


def probe_marketplace(
    marketplace: dict[str, str],
    session: curl_requests.Session | None = None,
) -> HealthResult:
    """GET a marketplace homepage and classify the response."""
    source_id = marketplace["id"]
    homepage = marketplace.get("homepage", "")
    if not homepage:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message="No homepage configured",
        )

    http = session or curl_requests.Session(
        impersonate=Settings.IMPERSONATE_BROWSER
    )
    start = time.monotonic()
    try:
        resp = http.get(
            homepage,
            headers={"Accept-Language": "en-IN,en;q=0.9"},
            timeout=_HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code >= 400:
            return HealthResult(
                source_id=source_id,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > _SLOW_MS:
            return HealthResult(
                source_id=source_id,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            source_id=source_id,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent health probes against all marketplaces."""

    def __init__(
        self, marketplaces: list[dict[str, str]] | None = None,
    ) -> None:
        self.marketplaces = (
            marketplaces
            if marketplaces is not None
            else Settings.MARKETPLACES
        )

    async def check_all(self) -> list[HealthResult]:
        """Probe every marketplace concurrently."""
        tasks = [
            asyncio.to_thread(probe_marketplace, m)
            for m in self.marketplaces
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results

    async def platform_status(self) -> dict[str, bool]:
        """Map each marketplace id to whether it is reachable."""
        return {r.source_id: r.is_up for r in await self.check_all()}
