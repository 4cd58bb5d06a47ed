from __future__ import annotations

"""Local content generator used when the LLM is unavailable or misbehaves.

Ideas are seeded from the channel's categories and video titles; view
estimates are randomized. Never raises for well-formed inputs, always
returns at least four ideas and exactly one recommendation of each type.
"""

import random
from datetime import date
from typing import Optional

from ..database.models import IDEA_TYPES, RECOMMENDATION_TYPES

MIN_FALLBACK_IDEAS = 4

FALLBACK_RECOMMENDATIONS = [
    {
        "title": "Consistent Posting Schedule",
        "content": (
            "Based on your channel's content, we recommend establishing and maintaining "
            "a consistent posting schedule to build viewer expectations and improve "
            "channel performance."
        ),
        "type": "audience_growth",
    },
    {
        "title": "Thumbnail Optimization",
        "content": (
            "Consider redesigning your thumbnails with bright colors, clear text, and "
            "expressive facial expressions (if applicable) to increase click-through rates."
        ),
        "type": "content_optimization",
    },
    {
        "title": "Community Engagement",
        "content": (
            "Respond to comments more frequently and consider creating content addressing "
            "viewer questions to build a more engaged community around your channel."
        ),
        "type": "audience_engagement",
    },
]


def _views(rng: random.Random, spread: int, floor: int) -> str:
    return f"Est. views: {rng.randrange(spread) + floor}K+"


def generate_fallback_ideas(
    channel_title: str,
    video_titles: list[str],
    categories: list[dict],
    rng: Optional[random.Random] = None,
) -> list[dict]:
    rng = rng or random.Random()
    ideas = []

    # Two ideas for each of the top two categories with a meaningful share
    for index, category in enumerate(categories[:2]):
        if category["percentage"] <= 10:
            continue
        name = category["name"]
        ideas.append({
            "title": f"{name} Deep Dive: Expert Analysis and Tips",
            "description": (
                f"Create an in-depth video analyzing key aspects of {name} based on "
                "your expertise and channel focus."
            ),
            "potential": _views(rng, 50, 50),
            "idea_type": IDEA_TYPES[index % len(IDEA_TYPES)],
        })
        ideas.append({
            "title": f"{name} Trends for {date.today().year}",
            "description": (
                f"Cover the latest trends and developments in {name} to establish your "
                "channel as current and relevant."
            ),
            "potential": _views(rng, 50, 75),
            "idea_type": IDEA_TYPES[(index + 1) % len(IDEA_TYPES)],
        })

    if video_titles:
        sample_title = rng.choice(video_titles)
        ideas.append({
            "title": f"Revisiting {sample_title} - One Year Later",
            "description": (
                "Create a follow-up to one of your popular videos, discussing what's "
                "changed and providing updated insights."
            ),
            "potential": _views(rng, 50, 100),
            "idea_type": "high_engagement",
        })
        ideas.append({
            "title": "Behind The Scenes: How I Create My Videos",
            "description": (
                "Show your audience your creative process and equipment setup to build a "
                "deeper connection with your viewers."
            ),
            "potential": _views(rng, 30, 50),
            "idea_type": "audience_request",
        })

    topic = (channel_title or "").split()[:1] or ["Your Niche"]
    while len(ideas) < MIN_FALLBACK_IDEAS:
        ideas.append({
            "title": f"Top 10 Myths About {topic[0]}",
            "description": (
                "Debunk common misconceptions in your field to position yourself as an "
                "authority and provide value to your audience."
            ),
            "potential": "Est. views: 75K+",
            "idea_type": IDEA_TYPES[len(ideas) % len(IDEA_TYPES)],
        })

    return ideas


def pad_recommendations(recommendations: list[dict], count: int = 3) -> list[dict]:
    """Trim to ``count``, or add a generic entry for each missing type."""
    result = list(recommendations[:count])
    present = {r["type"] for r in result}
    for rec_type in RECOMMENDATION_TYPES:
        if len(result) >= count:
            break
        if rec_type in present:
            continue
        label = " ".join(word.capitalize() for word in rec_type.split("_"))
        result.append({
            "title": f"{label} Strategy",
            "content": (
                f"Based on your channel's content, we recommend focusing on "
                f"{rec_type.replace('_', ' ')} to improve your channel performance."
            ),
            "type": rec_type,
        })
    return result


def generate_fallback_content(
    channel_title: str,
    video_titles: list[str],
    categories: list[dict],
    rng: Optional[random.Random] = None,
) -> dict:
    return {
        "content_ideas": generate_fallback_ideas(channel_title, video_titles, categories, rng),
        "recommendations": [dict(r) for r in FALLBACK_RECOMMENDATIONS],
    }
