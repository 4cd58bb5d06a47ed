from __future__ import annotations

"""Pydantic models for LLM output and the channel analysis read model."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

IdeaType = Literal["trending", "high_engagement", "quick_win", "audience_request"]
RecommendationType = Literal["audience_growth", "content_optimization", "audience_engagement"]


class ContentIdeaSchema(BaseModel):
    title: str = Field(min_length=1)
    description: str
    potential: Optional[str] = None
    idea_type: IdeaType


class RecommendationSchema(BaseModel):
    title: str = Field(min_length=1)
    content: str
    type: RecommendationType


class GeneratedContent(BaseModel):
    """What the strategist LLM is asked to return."""
    content_ideas: List[ContentIdeaSchema]
    recommendations: List[RecommendationSchema] = []


# --- READ MODEL ---

class ChannelSummary(BaseModel):
    id: str
    title: str
    description: str = ""
    custom_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    subscriber_count: Optional[int] = None
    video_count: Optional[int] = None
    view_count: Optional[int] = None
    join_date: Optional[str] = None
    last_updated: Optional[str] = None


class AnalyticsSummary(BaseModel):
    avg_views: Optional[int] = None
    engagement_rate: Optional[str] = None
    new_subscribers: Optional[int] = None
    avg_views_change: Optional[int] = None
    engagement_rate_change: Optional[str] = None
    new_subscribers_change: Optional[int] = None


class TopVideo(BaseModel):
    id: str
    title: str
    thumbnail_url: Optional[str] = None
    view_count: Optional[int] = None
    like_count: Optional[int] = None


class CategoryShare(BaseModel):
    name: str
    percentage: int = Field(ge=0, le=100)


class ChannelAnalysis(BaseModel):
    channel: ChannelSummary
    analytics: AnalyticsSummary
    top_videos: List[TopVideo]
    categories: List[CategoryShare]
    content_ideas: List[ContentIdeaSchema]
    recommendations: List[RecommendationSchema]


def validate_analysis(data: dict) -> ChannelAnalysis:
    """Validate a joined read model. Raises ValidationError naming the bad field."""
    try:
        return ChannelAnalysis.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid channel analysis at '{field}': {first['msg']}",
                              field=field) from e
