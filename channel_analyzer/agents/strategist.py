from __future__ import annotations

"""Content Strategist: asks the LLM for video ideas and growth
recommendations, falling back to local heuristics whenever the LLM call
fails or returns something unusable."""

import json
import logging
import random
from typing import Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from ..errors import UpstreamError
from ..prompts.content_ideas import (
    IDEA_COUNT,
    RECOMMENDATION_COUNT,
    STRATEGIST_SYSTEM_PROMPT,
    build_ideas_prompt,
)
from ..schemas import GeneratedContent
from .fallback import generate_fallback_content, pad_recommendations

logger = logging.getLogger(__name__)


class ContentStrategist:
    """Generates content ideas and recommendations for a channel."""

    def __init__(self, ollama_url: str = "http://localhost:11434",
                 model: str = "llama3.2", timeout: float = 120,
                 temperature: float = 0.7, rng: Optional[random.Random] = None):
        self.ollama_url = ollama_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.rng = rng or random.Random()

    def generate(
        self,
        channel_title: str,
        channel_description: str,
        video_titles: list[str],
        categories: list[dict],
    ) -> dict:
        """Return {"content_ideas": [...], "recommendations": [...]}.

        Up to 8 ideas and exactly 3 recommendations from the LLM, or the
        local fallback (>= 4 ideas, 3 recommendations) on any failure.
        """
        prompt = build_ideas_prompt(
            channel_title, channel_description, video_titles, categories
        )
        try:
            raw = self._call_ollama(prompt)
            return self._parse_response(raw)
        except Exception as e:
            logger.warning(f"Content generation failed, using fallback ideas: {e}")
            return generate_fallback_content(
                channel_title, video_titles, categories, self.rng
            )

    def _parse_response(self, raw: str) -> dict:
        """Validate the LLM JSON. Raises ValueError if it is unusable."""
        try:
            data = json.loads(raw)
            generated = GeneratedContent.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise ValueError(f"Malformed strategist response: {e}") from e

        ideas = [idea.model_dump() for idea in generated.content_ideas[:IDEA_COUNT]]
        if not ideas:
            raise ValueError("Strategist response contained no content ideas")

        recommendations = pad_recommendations(
            [r.model_dump() for r in generated.recommendations], RECOMMENDATION_COUNT
        )
        logger.info(
            f"Generated {len(ideas)} ideas and {len(recommendations)} recommendations"
        )
        return {"content_ideas": ideas, "recommendations": recommendations}

    def _call_ollama(self, prompt: str) -> str:
        """Send a prompt to Ollama and return the response content."""
        try:
            resp = requests.post(
                f"{self.ollama_url}/api/chat",
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": STRATEGIST_SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    "stream": False,
                    "format": "json",
                    "options": {"temperature": self.temperature, "num_predict": 2048},
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json().get("message", {}).get("content", "{}")
        except requests.RequestException as e:
            status = getattr(e.response, "status_code", None)
            raise UpstreamError("ollama", str(e), status_code=status) from e
