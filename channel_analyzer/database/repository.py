from __future__ import annotations

import sqlite3
import logging
import threading
from dataclasses import asdict
from typing import Optional

from .connection import IN_MEMORY_DB, init_database
from .models import Analytics

logger = logging.getLogger(__name__)

CHANNEL_FIELDS = (
    "channel_id", "title", "description", "custom_url", "thumbnail_url",
    "subscriber_count", "video_count", "view_count", "join_date", "last_updated",
)
ANALYTICS_FIELDS = (
    "avg_views", "engagement_rate", "new_subscribers",
    "avg_views_change", "engagement_rate_change", "new_subscribers_change",
)


class Repository:
    """All store CRUD plus the joined full-analysis read.

    One instance is created at startup and shared by every request; writes
    are serialized through a lock because the connection is shared across
    threads.
    """

    def __init__(self, db_path: str = IN_MEMORY_DB):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = init_database(self.db_path)
        return self._conn

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def _write(self, sql: str, params=()) -> int:
        with self._lock:
            cur = self.conn.execute(sql, params)
            self.conn.commit()
            return cur.lastrowid

    def _fetch_one(self, sql: str, params=()) -> Optional[dict]:
        with self._lock:
            row = self.conn.execute(sql, params).fetchone()
        return dict(row) if row else None

    def _fetch_all(self, sql: str, params=()) -> list[dict]:
        with self._lock:
            rows = self.conn.execute(sql, params).fetchall()
        return [dict(r) for r in rows]

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    def get_channel(self, channel_id: str) -> Optional[dict]:
        return self._fetch_one(
            "SELECT * FROM channels WHERE channel_id = ?", (channel_id,)
        )

    def get_all_channels(self) -> list[dict]:
        return self._fetch_all(
            """SELECT c.*,
                      (SELECT COUNT(*) FROM videos v WHERE v.channel_id = c.channel_id) as total_videos,
                      (SELECT COUNT(*) FROM content_ideas i WHERE i.channel_id = c.channel_id) as total_ideas
               FROM channels c ORDER BY c.title"""
        )

    def create_channel(self, data: dict) -> dict:
        """Insert a new channel. Raises sqlite3.IntegrityError if it exists."""
        row = {f: data.get(f) for f in CHANNEL_FIELDS}
        self._write(
            f"""INSERT INTO channels ({", ".join(CHANNEL_FIELDS)})
                VALUES ({", ".join(":" + f for f in CHANNEL_FIELDS)})""",
            row,
        )
        logger.debug(f"Created channel {row['channel_id']}")
        return self.get_channel(row["channel_id"])

    def update_channel(self, channel_id: str, changes: dict) -> Optional[dict]:
        """Apply a partial update. Returns the updated channel or None if missing."""
        fields = [f for f in changes if f in CHANNEL_FIELDS and f != "channel_id"]
        if fields:
            assignments = ", ".join(f"{f} = :{f}" for f in fields)
            params = {f: changes[f] for f in fields}
            params["channel_id"] = channel_id
            self._write(
                f"UPDATE channels SET {assignments} WHERE channel_id = :channel_id",
                params,
            )
        return self.get_channel(channel_id)

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------

    def get_video(self, video_db_id: int) -> Optional[dict]:
        return self._fetch_one("SELECT * FROM videos WHERE id = ?", (video_db_id,))

    def get_videos_by_channel(self, channel_id: str) -> list[dict]:
        return self._fetch_all(
            "SELECT * FROM videos WHERE channel_id = ? ORDER BY id", (channel_id,)
        )

    def create_video(self, data: dict) -> int:
        """Append a video row. The same video_id may be stored more than once."""
        return self._write(
            """INSERT INTO videos (video_id, channel_id, title, description,
                                   thumbnail_url, published_at, view_count,
                                   like_count, comment_count)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                data["video_id"],
                data["channel_id"],
                data["title"],
                data.get("description"),
                data.get("thumbnail_url"),
                data.get("published_at"),
                data.get("view_count"),
                data.get("like_count"),
                data.get("comment_count"),
            ),
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def get_category(self, category_id: int) -> Optional[dict]:
        return self._fetch_one("SELECT * FROM categories WHERE id = ?", (category_id,))

    def get_categories_by_channel(self, channel_id: str) -> list[dict]:
        return self._fetch_all(
            "SELECT * FROM categories WHERE channel_id = ? ORDER BY id", (channel_id,)
        )

    def create_category(self, data: dict) -> int:
        return self._write(
            "INSERT INTO categories (channel_id, name, percentage) VALUES (?, ?, ?)",
            (data["channel_id"], data["name"], data["percentage"]),
        )

    # ------------------------------------------------------------------
    # Content ideas
    # ------------------------------------------------------------------

    def get_content_idea(self, idea_id: int) -> Optional[dict]:
        return self._fetch_one("SELECT * FROM content_ideas WHERE id = ?", (idea_id,))

    def get_content_ideas_by_channel(self, channel_id: str) -> list[dict]:
        return self._fetch_all(
            "SELECT * FROM content_ideas WHERE channel_id = ? ORDER BY id", (channel_id,)
        )

    def create_content_idea(self, data: dict) -> int:
        return self._write(
            """INSERT INTO content_ideas (channel_id, title, description, potential, idea_type)
               VALUES (?, ?, ?, ?, ?)""",
            (
                data["channel_id"],
                data["title"],
                data["description"],
                data.get("potential"),
                data["idea_type"],
            ),
        )

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def get_recommendation(self, recommendation_id: int) -> Optional[dict]:
        return self._fetch_one(
            "SELECT * FROM recommendations WHERE id = ?", (recommendation_id,)
        )

    def get_recommendations_by_channel(self, channel_id: str) -> list[dict]:
        return self._fetch_all(
            "SELECT * FROM recommendations WHERE channel_id = ? ORDER BY id", (channel_id,)
        )

    def create_recommendation(self, data: dict) -> int:
        return self._write(
            """INSERT INTO recommendations (channel_id, title, content, type)
               VALUES (?, ?, ?, ?)""",
            (data["channel_id"], data["title"], data["content"], data["type"]),
        )

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def get_analytics(self, channel_id: str) -> Optional[dict]:
        return self._fetch_one(
            "SELECT * FROM analytics WHERE channel_id = ?", (channel_id,)
        )

    def create_analytics(self, data: dict) -> int:
        """Insert the analytics row. Raises sqlite3.IntegrityError if one exists."""
        params = {f: data.get(f) for f in ANALYTICS_FIELDS}
        params["channel_id"] = data["channel_id"]
        return self._write(
            f"""INSERT INTO analytics (channel_id, {", ".join(ANALYTICS_FIELDS)})
                VALUES (:channel_id, {", ".join(":" + f for f in ANALYTICS_FIELDS)})""",
            params,
        )

    def update_analytics(self, channel_id: str, changes: dict) -> Optional[dict]:
        """Apply a partial update in place. Returns None if there is no row."""
        fields = [f for f in changes if f in ANALYTICS_FIELDS]
        if fields:
            assignments = ", ".join(f"{f} = :{f}" for f in fields)
            params = {f: changes[f] for f in fields}
            params["channel_id"] = channel_id
            self._write(
                f"UPDATE analytics SET {assignments} WHERE channel_id = :channel_id",
                params,
            )
        return self.get_analytics(channel_id)

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    def get_full_analysis(self, channel_id: str) -> Optional[dict]:
        """Join every table for one channel. None only if the channel is unknown."""
        channel = self.get_channel(channel_id)
        if channel is None:
            return None

        analytics = self.get_analytics(channel_id) or asdict(Analytics(channel_id))

        return {
            "channel": {
                "id": channel["channel_id"],
                "title": channel["title"],
                "description": channel["description"] or "",
                "custom_url": channel["custom_url"],
                "thumbnail_url": channel["thumbnail_url"],
                "subscriber_count": channel["subscriber_count"],
                "video_count": channel["video_count"],
                "view_count": channel["view_count"],
                "join_date": channel["join_date"],
                "last_updated": channel["last_updated"],
            },
            "analytics": {f: analytics[f] for f in ANALYTICS_FIELDS},
            "top_videos": [
                {
                    "id": v["video_id"],
                    "title": v["title"],
                    "thumbnail_url": v["thumbnail_url"],
                    "view_count": v["view_count"],
                    "like_count": v["like_count"],
                }
                for v in self.get_videos_by_channel(channel_id)
            ],
            "categories": [
                {"name": c["name"], "percentage": c["percentage"]}
                for c in self.get_categories_by_channel(channel_id)
            ],
            "content_ideas": [
                {
                    "title": i["title"],
                    "description": i["description"],
                    "potential": i["potential"],
                    "idea_type": i["idea_type"],
                }
                for i in self.get_content_ideas_by_channel(channel_id)
            ],
            "recommendations": [
                {"title": r["title"], "content": r["content"], "type": r["type"]}
                for r in self.get_recommendations_by_channel(channel_id)
            ],
        }

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_store_stats(self) -> dict:
        """Row counts per table."""
        stats = {}
        for table in ("channels", "videos", "categories", "content_ideas",
                      "recommendations", "analytics"):
            row = self._fetch_one(f"SELECT COUNT(*) as cnt FROM {table}")
            stats[table] = row["cnt"]
        return stats
