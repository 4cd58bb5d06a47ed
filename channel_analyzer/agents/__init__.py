from __future__ import annotations

from .strategist import ContentStrategist
from .fallback import generate_fallback_content

__all__ = [
    "ContentStrategist",
    "generate_fallback_content",
]
