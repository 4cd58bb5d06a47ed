from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

import requests

from ..database.models import Channel, Video
from ..errors import ChannelNotFoundError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.googleapis.com/youtube/v3"

# URL path prefixes followed by a channel ID, legacy username or custom name
PATH_PREFIXES = ("/channel/", "/user/", "/c/")

CHANNEL_ID_PREFIX = "UC"


def normalize_channel_input(channel_input: str) -> str:
    """Reduce a URL, @handle, username or channel ID to a bare identifier.

    Examples:
        https://www.youtube.com/channel/UCxyz  -> UCxyz
        https://www.youtube.com/@mkbhd         -> mkbhd
        @mkbhd                                 -> mkbhd
        Marques Brownlee                       -> Marques Brownlee
    """
    value = channel_input.strip()

    if "/" in value:
        path = urlparse(value).path.rstrip("/")
        for prefix in PATH_PREFIXES:
            if prefix in path:
                return path.split(prefix, 1)[1].split("/")[0]
        if "/@" in path:
            return path.split("/@", 1)[1].split("/")[0]

    if looks_like_channel_id(value):
        return value

    if value.startswith("@"):
        return value[1:]

    return value


def looks_like_channel_id(value: str) -> bool:
    return value.startswith(CHANNEL_ID_PREFIX) and len(value) > 20


def _to_int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _pick_thumbnail(thumbnails: dict, sizes: tuple) -> Optional[str]:
    for size in sizes:
        url = thumbnails.get(size, {}).get("url")
        if url:
            return url
    return None


def _format_join_date(published_at: Optional[str]) -> Optional[str]:
    """'2008-03-21T15:25:54Z' -> 'Mar 2008'."""
    if not published_at:
        return None
    try:
        return datetime.strptime(published_at[:10], "%Y-%m-%d").strftime("%b %Y")
    except ValueError:
        logger.debug(f"Unparseable channel publish date: {published_at}")
        return None


class ChannelFetcher:
    """Fetches channel and video metadata from the YouTube Data API v3."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, timeout: float = 15):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_channel(self, channel_input: str) -> dict:
        """Accept a channel URL, @handle, username, search term or channel ID.

        Returns the channel record. Raises ChannelNotFoundError if nothing
        matches and UpstreamError if the API call itself fails.
        """
        identifier = normalize_channel_input(channel_input)
        if not identifier:
            raise ChannelNotFoundError(channel_input)

        if looks_like_channel_id(identifier):
            channel = self.fetch_channel_by_id(identifier)
        else:
            channel = self.fetch_channel_by_username(identifier)
            if channel is None:
                logger.debug(f"No channel for username '{identifier}', searching")
                found_id = self.search_channel_id(identifier)
                if found_id:
                    channel = self.fetch_channel_by_id(found_id)

        if channel is None:
            raise ChannelNotFoundError(channel_input)

        logger.info(f"Resolved '{channel_input}' to {channel['channel_id']}")
        return channel

    def fetch_channel_by_id(self, channel_id: str) -> Optional[dict]:
        data = self._get("channels", {"part": "snippet,statistics", "id": channel_id})
        items = data.get("items") or []
        return self._parse_channel(items[0]) if items else None

    def fetch_channel_by_username(self, username: str) -> Optional[dict]:
        data = self._get(
            "channels", {"part": "snippet,statistics", "forUsername": username}
        )
        items = data.get("items") or []
        return self._parse_channel(items[0]) if items else None

    def search_channel_id(self, keyword: str) -> Optional[str]:
        """Return the ID of the single best keyword match, if any."""
        data = self._get(
            "search",
            {"part": "snippet", "q": keyword, "type": "channel", "maxResults": 1},
        )
        items = data.get("items") or []
        if not items:
            return None
        return items[0].get("id", {}).get("channelId") or None

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------

    def fetch_uploads_playlist_id(self, channel_id: str) -> Optional[str]:
        data = self._get("channels", {"part": "contentDetails", "id": channel_id})
        items = data.get("items") or []
        if not items:
            return None
        return (
            items[0].get("contentDetails", {})
            .get("relatedPlaylists", {})
            .get("uploads")
        )

    def fetch_videos_by_ids(self, video_ids: list[str]) -> list[dict]:
        if not video_ids:
            return []
        data = self._get(
            "videos", {"part": "snippet,statistics", "id": ",".join(video_ids)}
        )
        return [self._parse_video(item) for item in data.get("items") or []]

    def list_recent_videos(self, channel_id: str, max_results: int = 20) -> list[dict]:
        """Most recent uploads via the channel's uploads playlist."""
        playlist_id = self.fetch_uploads_playlist_id(channel_id)
        if not playlist_id:
            logger.info(f"No uploads playlist for channel {channel_id}")
            return []

        data = self._get(
            "playlistItems",
            {"part": "snippet", "playlistId": playlist_id, "maxResults": max_results},
        )
        video_ids = [
            item.get("snippet", {}).get("resourceId", {}).get("videoId")
            for item in data.get("items") or []
        ]
        video_ids = [vid for vid in video_ids if vid][:max_results]

        videos = self.fetch_videos_by_ids(video_ids)
        for video in videos:
            # The videos endpoint reports the uploader; keep the resolved ID
            video["channel_id"] = channel_id

        logger.info(f"Found {len(videos)} videos for channel {channel_id}")
        return videos

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get(self, endpoint: str, params: dict) -> dict:
        """GET an API endpoint. Transport, HTTP and JSON errors become UpstreamError."""
        url = f"{self.base_url}/{endpoint}"
        try:
            resp = requests.get(
                url, params={**params, "key": self.api_key}, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UpstreamError("youtube", f"{endpoint} request failed: {e}") from e

        if resp.status_code >= 400:
            message = self._error_message(resp)
            raise UpstreamError(
                "youtube", f"{endpoint} returned {resp.status_code}: {message}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError("youtube", f"{endpoint} returned invalid JSON") from e

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        """The API puts a readable message under error.message; fall back to the reason."""
        try:
            body = resp.json()
        except ValueError:
            return resp.reason
        if isinstance(body, dict):
            return body.get("error", {}).get("message") or resp.reason
        return resp.reason

    def _parse_channel(self, item: dict) -> dict:
        snippet = item.get("snippet", {})
        stats = item.get("statistics", {})
        return asdict(Channel(
            channel_id=item["id"],
            title=snippet.get("title", "Unknown"),
            description=snippet.get("description"),
            custom_url=snippet.get("customUrl"),
            thumbnail_url=_pick_thumbnail(
                snippet.get("thumbnails", {}), ("high", "medium", "default")
            ),
            subscriber_count=_to_int(stats.get("subscriberCount")),
            video_count=_to_int(stats.get("videoCount")),
            view_count=_to_int(stats.get("viewCount")),
            join_date=_format_join_date(snippet.get("publishedAt")),
        ))

    def _parse_video(self, item: dict) -> dict:
        snippet = item.get("snippet", {})
        stats = item.get("statistics", {})
        return asdict(Video(
            video_id=item["id"],
            channel_id=snippet.get("channelId", ""),
            title=snippet.get("title", ""),
            description=snippet.get("description"),
            thumbnail_url=_pick_thumbnail(
                snippet.get("thumbnails", {}), ("medium", "default")
            ),
            published_at=snippet.get("publishedAt"),
            view_count=_to_int(stats.get("viewCount")),
            like_count=_to_int(stats.get("likeCount")),
            comment_count=_to_int(stats.get("commentCount")),
        ))
