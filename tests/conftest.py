# tests/conftest.py

"""Shared pytest fixtures for the price_compare test suite."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[None, None, None]:
    """Patch time.sleep globally so retry loops run instantly."""
    with patch("time.sleep"):
        yield


@pytest.fixture(autouse=True)
def no_marketplace_credentials() -> Generator[None, None, None]:
    """Blank credentials a local .env may provide.

    Keeps live sources offline unless a test configures them itself.
    """
    with patch.multiple(
        Settings,
        FLIPKART_API_KEY="",
        FLIPKART_TRACKING_ID="",
        AMAZON_ACCESS_KEY="",
        AMAZON_SECRET_KEY="",
        AMAZON_PARTNER_TAG="",
    ):
        yield
