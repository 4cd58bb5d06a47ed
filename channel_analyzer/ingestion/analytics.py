from __future__ import annotations

"""Channel analytics computed from a batch of fetched videos.

Average views and engagement are measured from the videos. Everything that
would need history (new subscribers and the month-over-month changes) comes
from a TrendEstimator. The default RandomTrendEstimator produces placeholder
numbers for display only: they are random on every call and are not trends.
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

ZERO_RATE = "0%"


def format_rate(value: float) -> str:
    return f"{value:.1f}%"


class TrendEstimator(ABC):
    """Estimates the metrics that need a previous period to compare against."""

    @abstractmethod
    def new_subscribers(self, subscriber_count: int) -> int:
        ...

    @abstractmethod
    def change(self, base: float) -> float:
        """Change versus the previous month for a metric currently at ``base``."""


class RandomTrendEstimator(TrendEstimator):
    """Placeholder estimator: uniform random values scaled by the base metric.

    New subscribers are 1-5% of the subscriber count; each change is within
    +/-10% of its base value.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 subscriber_share: tuple[float, float] = (0.01, 0.05),
                 max_change: float = 0.10):
        self.rng = rng or random.Random()
        self.subscriber_share = subscriber_share
        self.max_change = max_change

    def new_subscribers(self, subscriber_count: int) -> int:
        low, high = self.subscriber_share
        return round(subscriber_count * self.rng.uniform(low, high))

    def change(self, base: float) -> float:
        return self.rng.uniform(-self.max_change, self.max_change) * base


class StaticTrendEstimator(TrendEstimator):
    """No history, no movement: zero new subscribers and zero change."""

    def new_subscribers(self, subscriber_count: int) -> int:
        return 0

    def change(self, base: float) -> float:
        return 0.0


def synthesize(channel: dict, videos: list[dict],
               estimator: Optional[TrendEstimator] = None) -> dict:
    """Build the analytics row for a channel from its fetched videos."""
    estimator = estimator or RandomTrendEstimator()

    total_views = sum(v.get("view_count") or 0 for v in videos)
    total_likes = sum(v.get("like_count") or 0 for v in videos)
    total_comments = sum(v.get("comment_count") or 0 for v in videos)

    avg_views = round(total_views / max(1, len(videos)))

    if total_views > 0:
        engagement = (total_likes + total_comments) / total_views * 100
        engagement_rate = format_rate(engagement)
    else:
        logger.debug(f"No views for channel {channel['channel_id']}, engagement is 0%")
        engagement = 0.0
        engagement_rate = ZERO_RATE

    new_subscribers = estimator.new_subscribers(channel.get("subscriber_count") or 0)

    return {
        "channel_id": channel["channel_id"],
        "avg_views": avg_views,
        "engagement_rate": engagement_rate,
        "new_subscribers": new_subscribers,
        "avg_views_change": round(estimator.change(avg_views)),
        "engagement_rate_change": format_rate(estimator.change(engagement)),
        "new_subscribers_change": round(estimator.change(new_subscribers)),
    }
