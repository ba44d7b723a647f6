# src/sources/base_source.py

"""Abstract base class for live marketplace API sources."""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.errors import SourceUnavailableError
from src.models.product import Product
from src.sources.normalizers import dig


class BaseSource(ABC):
    """Abstract base class for live marketplace sources.

    ``search()`` either returns normalised products or raises
    :class:`SourceUnavailableError`.  Every transport, HTTP, and payload
    problem is logged here and converted to that single error type, which
    the orchestrator turns into catalog fallback data.
    """

    #: Path to the list of raw items inside the decoded response body.
    ITEMS_PATH: tuple[str, ...] = ()

    def __init__(self, platform: str) -> None:
        self.platform = platform
        self.logger = logging.getLogger(f"price_compare.{platform}")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._consecutive_failures: int = 0
        self._circuit_open: bool = False
        self._circuit_opened_at: float = 0.0
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    # ── Circuit breaker ──────────────────────────────────

    def _check_circuit(self) -> bool:
        """Return True if the circuit breaker blocks this request.

        After CIRCUIT_BREAKER_COOLDOWN seconds the breaker goes
        half-open and lets a single probe request through.
        """
        if not self._circuit_open:
            return False
        elapsed = time.time() - self._circuit_opened_at
        if elapsed >= self.settings.CIRCUIT_BREAKER_COOLDOWN:
            self.logger.info(
                "[%s] Circuit breaker half-open after %.0fs",
                self.platform,
                elapsed,
            )
            self._circuit_open = False
            return False
        return True

    def _record_success(self) -> None:
        self._consecutive_failures = 0
        self._circuit_open = False
        self._circuit_opened_at = 0.0

    def _record_failure(self) -> None:
        """Track failure and open circuit breaker if needed."""
        self._consecutive_failures += 1
        if (
            self._consecutive_failures
            >= self.settings.CIRCUIT_BREAKER_THRESHOLD
        ):
            self._circuit_open = True
            self._circuit_opened_at = time.time()
            self.logger.error(
                "[%s] Circuit breaker opened after %d "
                "consecutive failures",
                self.platform,
                self._consecutive_failures,
            )

    # ── Transport ────────────────────────────────────────

    def _fetch_post(
        self,
        url: str,
        headers: dict[str, str],
        body: str,
    ) -> curl_requests.Response | None:
        """POST with bounded retries; ``None`` when every attempt failed."""
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.post(
                    url,
                    headers=headers,
                    data=body,
                    timeout=self._request_timeout,
                )
                if resp.status_code == 200:
                    return resp
                self.logger.warning(
                    "[%s] HTTP %d on attempt %d",
                    self.platform,
                    resp.status_code,
                    attempt + 1,
                )
                if resp.status_code in (401, 403):
                    # Credentials problem, retrying will not help
                    return None
            except Exception as exc:
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.platform,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
            time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))
        return None

    # ── Public API ───────────────────────────────────────

    def search(self, query: str) -> list[Product]:
        """Search this marketplace and return normalised products."""
        if not self._has_credentials():
            raise SourceUnavailableError(
                self.platform, "credentials not configured"
            )
        if self._check_circuit():
            raise SourceUnavailableError(
                self.platform, "circuit breaker open"
            )

        url = self._search_url()
        body = json.dumps(self._payload(query), separators=(",", ":"))
        headers = {
            **self.settings.DEFAULT_HEADERS,
            **self._headers(),
        }
        headers.update(self._sign(url, headers, body))
        resp = self._fetch_post(url, headers, body)
        if resp is None:
            self._record_failure()
            raise SourceUnavailableError(
                self.platform, "no successful response"
            )

        try:
            data: Any = json.loads(resp.text)
            raw_items = dig(data, *self.ITEMS_PATH) or []
            if not isinstance(raw_items, list):
                raise TypeError(
                    f"expected a list of items, got {type(raw_items).__name__}"
                )
        except (ValueError, TypeError) as exc:
            self.logger.error(
                "[%s] Malformed search response: %s",
                self.platform,
                exc,
                exc_info=True,
            )
            self._record_failure()
            raise SourceUnavailableError(
                self.platform, "malformed response"
            ) from exc

        products = self._normalize_items(raw_items)
        self._record_success()
        self.logger.info(
            "[%s] %d products for '%s'",
            self.platform,
            len(products),
            query,
        )
        return products

    def _normalize_items(self, raw_items: list[Any]) -> list[Product]:
        """Normalise each item, skipping the ones that cannot be mapped."""
        products: list[Product] = []
        for index, item in enumerate(raw_items):
            if not isinstance(item, dict):
                continue
            try:
                products.append(self.normalize(item))
            except Exception as exc:
                self.logger.warning(
                    "[%s] Skipping item %d: %s",
                    self.platform,
                    index,
                    exc,
                    exc_info=True,
                )
        return products

    @abstractmethod
    def _has_credentials(self) -> bool:
        """Return True when the credentials this source needs are set."""
        ...

    @abstractmethod
    def _search_url(self) -> str:
        ...

    @abstractmethod
    def _headers(self) -> dict[str, str]:
        """Marketplace-specific authentication headers."""
        ...

    @abstractmethod
    def _payload(self, query: str) -> dict[str, Any]:
        ...

    def _sign(
        self, url: str, headers: dict[str, str], body: str,
    ) -> dict[str, str]:
        """Extra headers that authenticate this exact request body."""
        return {}

    @abstractmethod
    def normalize(self, item: dict[str, Any]) -> Product:
        """Map one raw result item to a Product."""
        ...
