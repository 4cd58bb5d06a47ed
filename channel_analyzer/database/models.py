from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

IDEA_TYPES = ("trending", "high_engagement", "quick_win", "audience_request")
RECOMMENDATION_TYPES = ("audience_growth", "content_optimization", "audience_engagement")


@dataclass
class Channel:
    channel_id: str
    title: str
    description: Optional[str] = None
    custom_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    subscriber_count: Optional[int] = None
    video_count: Optional[int] = None
    view_count: Optional[int] = None
    join_date: Optional[str] = None
    last_updated: Optional[str] = None
    id: Optional[int] = None


@dataclass
class Video:
    video_id: str
    channel_id: str
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    published_at: Optional[str] = None
    view_count: Optional[int] = None
    like_count: Optional[int] = None
    comment_count: Optional[int] = None
    id: Optional[int] = None


@dataclass
class Analytics:
    channel_id: str
    avg_views: int = 0
    engagement_rate: str = "0%"
    new_subscribers: int = 0
    avg_views_change: int = 0
    engagement_rate_change: str = "0%"
    new_subscribers_change: int = 0
    id: Optional[int] = None
