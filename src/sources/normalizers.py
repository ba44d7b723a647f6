# src/sources/normalizers.py

"""Map marketplace API payloads onto the unified Product schema.

Every field gets a safe default when the payload omits it, so filtering
and sorting downstream never see missing values.
"""

import math
from typing import Any

from src.config.settings import Settings
from src.models.product import Product, utc_now


def dig(data: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists, returning ``None`` on any missing step."""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if current is None:
            return None
    return current


def _text(value: Any, default: str = "") -> str:
    return str(value) if value not in (None, "") else default


def _number(value: Any) -> float:
    """Coerce to a finite float (0.0 when unusable)."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _rupees(value: Any) -> int:
    """Coerce an API amount to whole rupees (0 when unusable)."""
    return int(round(_number(value)))


def _optional_rupees(value: Any) -> int | None:
    if value in (None, ""):
        return None
    amount = _rupees(value)
    return amount if amount > 0 else None


def _count(value: Any) -> int:
    return max(0, int(_number(value)))


def _rating(value: Any) -> float:
    """Star rating clamped to the 0-5 scale."""
    return min(5.0, max(0.0, _number(value)))


def _string_map(value: Any) -> dict[str, str]:
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items()}
    if isinstance(value, list):
        # Flipkart keySpecs arrive as a plain list of strings
        return {str(i + 1): str(v) for i, v in enumerate(value)}
    return {}


def normalize_flipkart(item: dict[str, Any]) -> Product:
    """Normalise one Flipkart affiliate API product."""
    info = dig(item, "productBaseInfoV1")
    if not isinstance(info, dict):
        info = {}
    image_urls = info.get("imageUrls")
    images = (
        [str(u) for u in image_urls.values() if u]
        if isinstance(image_urls, dict)
        else []
    )
    product_id = _text(item.get("productId"))
    brand = _text(info.get("brand"))
    return Product(
        id=product_id,
        sku=product_id,
        name=_text(info.get("title")),
        description=_text(info.get("productDescription")),
        price=_rupees(dig(info, "flipkartSellingPrice", "amount")),
        original_price=_optional_rupees(
            dig(info, "maximumRetailPrice", "amount")
            or dig(info, "flipkartSpecialPrice", "amount")
        ),
        platform="flipkart",
        category=_text(
            info.get("productFamily") or info.get("categoryPath"),
            Settings.DEFAULT_CATEGORY,
        ),
        brand=brand,
        image=_text(
            dig(info, "imageUrls", "400x400"),
            Settings.PLACEHOLDER_IMAGE,
        ),
        images=images,
        rating=_rating(info.get("averageRating")),
        reviews=_count(info.get("totalRatingCount")),
        in_stock=bool(info.get("inStock", False)),
        seller=brand or "Flipkart",
        shipping="Free delivery",
        specifications=_string_map(info.get("keySpecs")),
        affiliate_url=_text(info.get("productUrl")),
        currency=Settings.CURRENCY,
        last_updated=utc_now(),
    )


def normalize_amazon(item: dict[str, Any]) -> Product:
    """Normalise one Amazon PA-API 5 ``SearchItems`` result."""
    listing = dig(item, "Offers", "Listings", 0) or {}
    brand = _text(
        dig(item, "ItemInfo", "ByLineInfo", "Brand", "DisplayValue")
    )
    features = dig(item, "ItemInfo", "Features", "DisplayValues")
    variants = dig(item, "Images", "Variants")
    images = (
        [
            str(url)
            for url in (dig(v, "Large", "URL") for v in variants)
            if url
        ]
        if isinstance(variants, list)
        else []
    )
    asin = _text(item.get("ASIN"))
    return Product(
        id=asin,
        sku=asin,
        name=_text(dig(item, "ItemInfo", "Title", "DisplayValue")),
        description=(
            ", ".join(str(f) for f in features)
            if isinstance(features, list)
            else ""
        ),
        price=_rupees(dig(listing, "Price", "Amount")),
        original_price=_optional_rupees(
            dig(listing, "SavingBasis", "Amount")
        ),
        platform="amazon",
        category=_text(
            dig(item, "BrowseNodeInfo", "BrowseNodes", 0, "DisplayName"),
            Settings.DEFAULT_CATEGORY,
        ),
        brand=brand,
        image=_text(
            dig(item, "Images", "Primary", "Large", "URL"),
            Settings.PLACEHOLDER_IMAGE,
        ),
        images=images,
        rating=_rating(
            dig(item, "CustomerReviews", "StarRating", "Value")
        ),
        reviews=_count(dig(item, "CustomerReviews", "Count")),
        in_stock=dig(listing, "Availability", "Type") == "Now",
        seller=brand or "Amazon",
        shipping="Free delivery",
        specifications=_string_map(
            dig(item, "ItemInfo", "TechnicalInfo")
        ),
        affiliate_url=_text(item.get("DetailPageURL")),
        currency=Settings.CURRENCY,
        last_updated=utc_now(),
    )
