from __future__ import annotations

"""Display shaping for the channel report, shared by the HTML page and the CLI.

The stored read model keeps every appended row in insertion order; the report
shows the most viewed videos, categories by share, and optionally one idea
type.
"""

from typing import Optional

from ..database.models import IDEA_TYPES

TOP_VIDEO_COUNT = 3

IDEA_FILTER_ALL = "all"

# Filter tabs shown above the idea list, in display order
IDEA_FILTERS = (
    (IDEA_FILTER_ALL, "All Ideas"),
    ("trending", "Trending"),
    ("high_engagement", "High Engagement"),
    ("quick_win", "Quick Wins"),
)

IDEA_TYPE_LABELS = {
    "trending": "Trending Topic",
    "high_engagement": "High Engagement",
    "quick_win": "Quick Win",
    "audience_request": "Audience Request",
}


def top_videos(videos: list, limit: int = TOP_VIDEO_COUNT) -> list:
    """Most viewed videos first, one entry per video ID (its latest row)."""
    seen = set()
    unique = []
    for video in reversed(videos):
        if video.id in seen:
            continue
        seen.add(video.id)
        unique.append(video)
    return sorted(unique, key=lambda v: v.view_count or 0, reverse=True)[:limit]


def sorted_categories(categories: list) -> list:
    """Largest share first. The sort is stable, so ties keep stored order."""
    return sorted(categories, key=lambda c: c.percentage, reverse=True)


def normalize_idea_filter(value: Optional[str]) -> str:
    """Map a ?type= query value to a known idea type, or 'all'."""
    if value in IDEA_TYPES:
        return value
    return IDEA_FILTER_ALL


def filter_ideas(ideas: list, idea_type: str = IDEA_FILTER_ALL) -> list:
    if idea_type == IDEA_FILTER_ALL:
        return list(ideas)
    return [idea for idea in ideas if idea.idea_type == idea_type]
