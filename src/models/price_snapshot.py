# src/models/price_snapshot.py

"""Daily price observation used for price history charts."""

from dataclasses import dataclass
from datetime import date


@dataclass
class PriceHistoryPoint:
    """A single day's price for a product on one marketplace."""

    date: date
    price: int
    platform: str
