from __future__ import annotations

"""Prompt templates for the content strategist."""

IDEA_COUNT = 8
RECOMMENDATION_COUNT = 3

STRATEGIST_SYSTEM_PROMPT = """\
You are a YouTube content strategist who helps creators optimize their channel \
and generate engaging content ideas. You provide data-driven insights to help \
creators grow.

You must respond ONLY with valid JSON matching the schema below. No other text.

Output JSON Schema:
{
  "content_ideas": [
    {
      "title": "Title of the video idea",
      "description": "Brief description of what the video would cover",
      "potential": "Estimated potential viewership (e.g. 'Est. views: 150K+')",
      "idea_type": "trending | high_engagement | quick_win | audience_request"
    }
  ],
  "recommendations": [
    {
      "title": "Title of recommendation",
      "content": "Detailed explanation of the recommendation",
      "type": "audience_growth | content_optimization | audience_engagement"
    }
  ]
}"""


def build_ideas_prompt(
    channel_title: str,
    channel_description: str,
    video_titles: list[str],
    categories: list[dict],
) -> str:
    desc = channel_description[:500] if channel_description else "N/A"
    titles_text = "\n".join(f"- {t}" for t in video_titles) or "- (no videos)"
    categories_text = (
        "\n".join(f"- {c['name']}: {c['percentage']}%" for c in categories)
        or "- (no categories)"
    )

    return f"""Analyze this YouTube channel and generate content ideas and recommendations.

Channel name: {channel_title}
Channel description: {desc}

Recent video titles:
{titles_text}

Content categories:
{categories_text}

Based on this data, generate:
1. Exactly {IDEA_COUNT} content ideas that would perform well for this channel
2. Exactly {RECOMMENDATION_COUNT} strategic recommendations for channel growth, \
one of each type

Respond with JSON."""
