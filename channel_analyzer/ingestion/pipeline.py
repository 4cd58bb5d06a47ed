from __future__ import annotations

import sqlite3
import logging
from datetime import datetime, timezone
from typing import Optional

from ..database.repository import Repository
from .analytics import TrendEstimator, synthesize
from .categorizer import categorize
from .channel_fetcher import ChannelFetcher

logger = logging.getLogger(__name__)

DEFAULT_MAX_VIDEOS = 20


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class IngestionPipeline:
    """Orchestrates channel ingestion: resolve -> videos -> categories -> analytics.

    Runs once per request with no retries. Video and category rows are
    appended on every run. The channel row is created once and only its
    last_updated stamp changes afterwards; the analytics row is created once.
    Idea generation is not part of ingestion.
    """

    def __init__(
        self,
        channel_fetcher: ChannelFetcher,
        repo: Repository,
        max_videos: int = DEFAULT_MAX_VIDEOS,
        trend_estimator: Optional[TrendEstimator] = None,
    ):
        self.channel_fetcher = channel_fetcher
        self.repo = repo
        self.max_videos = max_videos
        self.trend_estimator = trend_estimator

    def ingest(self, channel_input: str) -> str:
        """Analyse a channel and persist the results. Returns its channel ID.

        Raises ChannelNotFoundError when the input cannot be resolved and
        UpstreamError when the YouTube API fails.
        """
        # 1. Resolve channel metadata from YouTube
        channel = self.channel_fetcher.resolve_channel(channel_input)
        channel_id = channel["channel_id"]

        # 2. Create the channel, or just touch it if we have seen it before
        self._store_channel(channel)

        # 3. Most recent uploads
        videos = self.channel_fetcher.list_recent_videos(channel_id, self.max_videos)

        # 4. Append video rows
        for video in videos:
            self.repo.create_video({**video, "channel_id": channel_id})

        # 5. Categories from titles
        categories = categorize([v["title"] for v in videos])
        for category in categories:
            self.repo.create_category({"channel_id": channel_id, **category})

        # 6. Analytics, created once per channel
        if self.repo.get_analytics(channel_id) is None:
            self.repo.create_analytics(
                synthesize(channel, videos, self.trend_estimator)
            )
        else:
            logger.debug(f"Keeping existing analytics for {channel_id}")

        logger.info(
            f"Ingested {channel['title']} ({channel_id}): "
            f"{len(videos)} videos, {len(categories)} categories"
        )
        return channel_id

    def _store_channel(self, channel: dict):
        channel_id = channel["channel_id"]
        if self.repo.get_channel(channel_id) is None:
            try:
                self.repo.create_channel({**channel, "last_updated": _now()})
                return
            except sqlite3.IntegrityError:
                # Another request created it in the meantime
                logger.debug(f"Channel {channel_id} created concurrently")
        self.repo.update_channel(channel_id, {"last_updated": _now()})
