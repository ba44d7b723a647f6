# src/config/settings.py

"""Central configuration for the price_compare engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the price_compare engine."""

    # --- Live sources ---
    REQUEST_DELAY: float = 1.0          # Seconds between retry attempts
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    MAX_RETRIES: int = 2                # Retry count on transient failures
    SOURCE_TIMEOUT: float = 5.0         # Overall budget per source call
    RESULT_COUNT: int = 20              # Items requested per source

    # --- Resilience ---
    CIRCUIT_BREAKER_THRESHOLD: int = 3  # Consecutive failures to trip
    CIRCUIT_BREAKER_COOLDOWN: float = 300.0

    # --- Price refresh / alerts (demo tuning) ---
    PRICE_REFRESH_INTERVAL: float = 30.0
    PRICE_CHANGE_PROBABILITY: float = 0.1
    PRICE_SWING: int = 1000             # Total range, i.e. +/- 500
    PRICE_FLOOR: int = 100

    # --- Normalisation ---
    CURRENCY: str = "INR"
    PLACEHOLDER_IMAGE: str = "/placeholder.svg"
    DEFAULT_CATEGORY: str = "General"

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-IN,en;q=0.9",
    }

    # --- Credentials (resolved once from the environment) ---
    FLIPKART_API_KEY: str = os.getenv("FLIPKART_API_KEY", "")
    FLIPKART_TRACKING_ID: str = os.getenv("FLIPKART_TRACKING_ID", "")
    AMAZON_ACCESS_KEY: str = os.getenv("AMAZON_ACCESS_KEY", "")
    AMAZON_SECRET_KEY: str = os.getenv("AMAZON_SECRET_KEY", "")
    AMAZON_PARTNER_TAG: str = os.getenv("AMAZON_PARTNER_TAG", "")

    FLIPKART_BASE_URL: str = (
        "https://affiliate-api.flipkart.net/affiliate/api"
    )
    AMAZON_BASE_URL: str = "https://webservices.amazon.in/paapi5"
    # PA-API signing scope for the www.amazon.in marketplace
    AMAZON_REGION: str = "eu-west-1"
    AMAZON_SERVICE: str = "ProductAdvertisingAPI"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SEED_CATALOG_PATH: Path = (
        BASE_DIR / "src" / "storage" / "seed_catalog.json"
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Marketplaces (one entry per supported platform) ---
    # "source" is the dotted path of the live adapter, empty when the
    # marketplace is served from the seed catalog only.
    MARKETPLACES: list[dict[str, str]] = [
        {
            "id": "flipkart",
            "label": "Flipkart",
            "source": "src.sources.flipkart_source.FlipkartSource",
            "homepage": "https://www.flipkart.com/",
        },
        {
            "id": "amazon",
            "label": "Amazon",
            "source": "src.sources.amazon_source.AmazonSource",
            "homepage": "https://www.amazon.in/",
        },
        {
            "id": "myntra",
            "label": "Myntra",
            "source": "",
            "homepage": "https://www.myntra.com/",
        },
        {
            "id": "snapdeal",
            "label": "Snapdeal",
            "source": "",
            "homepage": "https://www.snapdeal.com/",
        },
        {
            "id": "paytm",
            "label": "Paytm Mall",
            "source": "",
            "homepage": "https://paytmmall.com/",
        },
        {
            "id": "ajio",
            "label": "AJIO",
            "source": "",
            "homepage": "https://www.ajio.com/",
        },
        {
            "id": "nykaa",
            "label": "Nykaa",
            "source": "",
            "homepage": "https://www.nykaa.com/",
        },
        {
            "id": "meesho",
            "label": "Meesho",
            "source": "",
            "homepage": "https://www.meesho.com/",
        },
    ]

    @classmethod
    def marketplace_ids(cls) -> list[str]:
        """Return the ids of every registered marketplace."""
        return [m["id"] for m in cls.MARKETPLACES]

    @classmethod
    def get_marketplace(cls, platform: str) -> dict[str, str] | None:
        """Look up a marketplace entry by id (case-insensitive)."""
        wanted = platform.lower()
        for entry in cls.MARKETPLACES:
            if entry["id"] == wanted:
                return entry
        return None

    @classmethod
    def live_marketplaces(cls) -> list[dict[str, str]]:
        """Return the marketplaces that have a live adapter."""
        return [m for m in cls.MARKETPLACES if m["source"]]
