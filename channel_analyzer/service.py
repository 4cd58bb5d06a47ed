from __future__ import annotations

"""The three user-facing operations: submit a channel, read its analysis,
ask for more ideas. Shared by the web routes and the CLI."""

import logging

from .agents.strategist import ContentStrategist
from .database.repository import Repository
from .errors import NotFoundError, ValidationError
from .ingestion.pipeline import IngestionPipeline
from .schemas import ChannelAnalysis, validate_analysis

logger = logging.getLogger(__name__)


class AnalysisService:
    """Ties the ingestion pipeline, the strategist and the store together."""

    def __init__(self, repo: Repository, pipeline: IngestionPipeline,
                 strategist: ContentStrategist):
        self.repo = repo
        self.pipeline = pipeline
        self.strategist = strategist

    def submit_channel(self, channel_input: str) -> str:
        """Ingest a channel from free text. Returns its channel ID."""
        if channel_input is None:
            channel_input = ""
        if not isinstance(channel_input, str):
            raise ValidationError("Channel name must be a string", field="channel_name")
        if not channel_input.strip():
            raise ValidationError("Channel name is required", field="channel_name")
        return self.pipeline.ingest(channel_input)

    def get_full_analysis(self, channel_id: str) -> ChannelAnalysis:
        """Joined read model. Ideas and recommendations are generated on first read."""
        analysis = self.repo.get_full_analysis(channel_id)
        if analysis is None:
            raise NotFoundError("Channel analysis not found")

        if not analysis["content_ideas"] or not analysis["recommendations"]:
            logger.info(f"Generating first ideas for {channel_id}")
            generated = self._generate(channel_id)
            self._store_ideas(channel_id, generated["content_ideas"])
            for rec in generated["recommendations"]:
                self.repo.create_recommendation({"channel_id": channel_id, **rec})
            analysis = self.repo.get_full_analysis(channel_id)

        return validate_analysis(analysis)

    def request_more_ideas(self, channel_id: str) -> list[dict]:
        """Append a fresh batch of ideas and return just that batch."""
        if self.repo.get_channel(channel_id) is None:
            raise NotFoundError("Channel not found")

        ideas = self._generate(channel_id)["content_ideas"]
        self._store_ideas(channel_id, ideas)
        logger.info(f"Added {len(ideas)} ideas for {channel_id}")
        return ideas

    def _generate(self, channel_id: str) -> dict:
        channel = self.repo.get_channel(channel_id)
        videos = self.repo.get_videos_by_channel(channel_id)
        categories = self.repo.get_categories_by_channel(channel_id)
        return self.strategist.generate(
            channel["title"],
            channel["description"] or "",
            [v["title"] for v in videos],
            [{"name": c["name"], "percentage": c["percentage"]} for c in categories],
        )

    def _store_ideas(self, channel_id: str, ideas: list[dict]):
        for idea in ideas:
            self.repo.create_content_idea({"channel_id": channel_id, **idea})
