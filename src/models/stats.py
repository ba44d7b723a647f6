# src/models/stats.py

"""Dashboard aggregates and recommendation records."""

from dataclasses import dataclass


@dataclass
class UserStats:
    """Counters shown on a user's dashboard."""

    total_savings: int
    products_tracked: int
    active_alerts: int
    platforms_connected: int
    avg_savings_per_month: int
    top_category: str
    favorite_platform: str


@dataclass
class Recommendation:
    """A non-personalised product suggestion."""

    id: str
    product_id: str
    reason: str
    confidence: float
    category: str
