from __future__ import annotations

"""Keyword-ladder classification of video titles into content categories.

Each title lands in exactly one category: the first rule whose keywords
appear in the lowercased title. Rules are checked top to bottom, so order
matters ("iPhone 15 review" is a review, not smartphone content).
"""

import logging
from collections import Counter

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "Other Content"

# (keywords, category). Plain substring checks, evaluated in order.
CATEGORY_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("review",), "Reviews"),
    (("how to", "tutorial", "guide"), "Tutorials & Guides"),
    (("unboxing",), "Unboxing"),
    (("comparison", "vs"), "Comparisons"),
    (("news", "update"), "News & Updates"),
    # Product types, only consulted when no format keyword matched
    (("phone", "android", "iphone", "smartphone"), "Smartphone Content"),
    (("laptop", "macbook", "pc"), "Laptop & PC Content"),
    (("camera", "photography"), "Camera & Photography"),
    (("headphone", "earbuds", "audio"), "Audio Products"),
    (("gaming",), "Gaming Content"),
)


def classify_title(title: str, rules=CATEGORY_RULES) -> str:
    """Return the category of a single title."""
    lowered = title.lower()
    for keywords, category in rules:
        if any(kw in lowered for kw in keywords):
            return category
    return FALLBACK_CATEGORY


def categorize(titles: list[str], rules=CATEGORY_RULES) -> list[dict]:
    """Classify titles and return [{"name", "percentage"}] sorted by share.

    Percentages are rounded independently, so they may not sum to exactly 100.
    Ties keep the order in which categories were first seen.
    """
    if not titles:
        return []

    counts = Counter(classify_title(t, rules) for t in titles)
    total = sum(counts.values())

    categories = [
        {"name": name, "percentage": round(count / total * 100)}
        for name, count in counts.items()
    ]
    categories.sort(key=lambda c: c["percentage"], reverse=True)

    logger.debug(f"Categorized {total} titles into {len(categories)} categories")
    return categories
