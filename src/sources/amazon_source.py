# src/sources/amazon_source.py

"""Live source for the Amazon.in Product Advertising API 5.0."""

import hashlib
import hmac
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit

from src.models.product import Product
from src.sources.base_source import BaseSource
from src.sources.normalizers import normalize_amazon

SIGNING_ALGORITHM = "AWS4-HMAC-SHA256"


def _hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def sigv4_headers(
    url: str,
    headers: dict[str, str],
    body: str,
    *,
    access_key: str,
    secret_key: str,
    region: str,
    service: str,
    now: datetime | None = None,
) -> dict[str, str]:
    """Return ``X-Amz-Date`` and ``Authorization`` for a signed POST.

    Signs the host plus every ``Content-*`` and ``X-Amz-*`` header in
    ``headers`` together with the SHA-256 of ``body``.
    """
    stamp = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    amz_date = stamp.strftime("%Y%m%dT%H%M%SZ")
    date = stamp.strftime("%Y%m%d")
    parts = urlsplit(url)

    signed: dict[str, str] = {"host": parts.netloc, "x-amz-date": amz_date}
    for name, value in headers.items():
        lowered = name.lower()
        if lowered.startswith(("content-", "x-amz-")):
            signed[lowered] = " ".join(value.split())
    names = sorted(signed)
    signed_headers = ";".join(names)

    canonical_request = "\n".join(
        [
            "POST",
            parts.path or "/",
            parts.query,
            "".join(f"{name}:{signed[name]}\n" for name in names),
            signed_headers,
            _sha256_hex(body),
        ]
    )
    scope = f"{date}/{region}/{service}/aws4_request"
    string_to_sign = "\n".join(
        [SIGNING_ALGORITHM, amz_date, scope, _sha256_hex(canonical_request)]
    )

    key = _hmac_sha256(f"AWS4{secret_key}".encode("utf-8"), date)
    for step in (region, service, "aws4_request"):
        key = _hmac_sha256(key, step)
    signature = hmac.new(
        key, string_to_sign.encode("utf-8"), hashlib.sha256
    ).hexdigest()

    return {
        "X-Amz-Date": amz_date,
        "Authorization": (
            f"{SIGNING_ALGORITHM} Credential={access_key}/{scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        ),
    }


class AmazonSource(BaseSource):
    """Amazon PA-API ``SearchItems`` for the www.amazon.in marketplace.

    Requests are signed with AWS Signature Version 4 using
    ``AMAZON_ACCESS_KEY`` and ``AMAZON_SECRET_KEY``.
    """

    ITEMS_PATH = ("SearchResult", "Items")

    TARGET = "com.amazon.paapi5.v1.ProductAdvertisingAPIv1.SearchItems"

    def __init__(self) -> None:
        super().__init__("amazon")

    def _has_credentials(self) -> bool:
        return bool(
            self.settings.AMAZON_ACCESS_KEY
            and self.settings.AMAZON_SECRET_KEY
            and self.settings.AMAZON_PARTNER_TAG
        )

    def _search_url(self) -> str:
        return f"{self.settings.AMAZON_BASE_URL}/searchitems"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json; charset=utf-8",
            "Content-Encoding": "amz-1.0",
            "X-Amz-Target": self.TARGET,
        }

    def _sign(
        self, url: str, headers: dict[str, str], body: str,
    ) -> dict[str, str]:
        return sigv4_headers(
            url,
            headers,
            body,
            access_key=self.settings.AMAZON_ACCESS_KEY,
            secret_key=self.settings.AMAZON_SECRET_KEY,
            region=self.settings.AMAZON_REGION,
            service=self.settings.AMAZON_SERVICE,
        )

    def _payload(self, query: str) -> dict[str, Any]:
        return {
            "Keywords": query,
            "SearchIndex": "All",
            "ItemCount": min(self.settings.RESULT_COUNT, 10),
            "PartnerTag": self.settings.AMAZON_PARTNER_TAG,
            "PartnerType": "Associates",
            "Marketplace": "www.amazon.in",
            "Resources": [
                "Images.Primary.Large",
                "Images.Variants.Large",
                "ItemInfo.Title",
                "ItemInfo.Features",
                "ItemInfo.ByLineInfo",
                "ItemInfo.TechnicalInfo",
                "BrowseNodeInfo.BrowseNodes",
                "CustomerReviews.Count",
                "CustomerReviews.StarRating",
                "Offers.Listings.Price",
                "Offers.Listings.SavingBasis",
                "Offers.Listings.Availability.Type",
            ],
        }

    def normalize(self, item: dict[str, Any]) -> Product:
        return normalize_amazon(item)
