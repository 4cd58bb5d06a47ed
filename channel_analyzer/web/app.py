from __future__ import annotations

"""Flask application factory for the Channel Analyzer web UI."""

import logging
from pathlib import Path
from typing import Optional

from flask import Flask

from ..agents.strategist import ContentStrategist
from ..config import load_config, get_ollama_config, get_youtube_config
from ..database.repository import Repository
from ..ingestion.channel_fetcher import ChannelFetcher
from ..ingestion.pipeline import IngestionPipeline
from ..service import AnalysisService

logger = logging.getLogger(__name__)


def create_app(config: dict = None, service: Optional[AnalysisService] = None) -> Flask:
    """Create and configure the Flask application.

    The store and the service are created once here and shared by every
    request. Pass ``service`` to inject pre-built collaborators.
    """
    if config is None:
        config = load_config()

    app = Flask(
        __name__,
        static_folder=str(Path(__file__).parent / "static"),
        template_folder=str(Path(__file__).parent / "templates"),
    )

    app.config["DB_PATH"] = config.get("db_path", ":memory:")
    app.config["YOUTUBE"] = get_youtube_config(config)
    app.config["OLLAMA"] = get_ollama_config(config)

    if not app.config["YOUTUBE"]["api_key"] and service is None:
        logger.warning("YOUTUBE_API_KEY is not set; channel lookups will fail")

    app._service = service

    from .routes.analysis import analysis_bp
    from .routes.pages import pages_bp
    from .routes.status import status_bp

    app.register_blueprint(analysis_bp, url_prefix="/api")
    app.register_blueprint(status_bp, url_prefix="/api")
    app.register_blueprint(pages_bp)

    return app


def build_service(repo: Repository, youtube_cfg: dict, ollama_cfg: dict) -> AnalysisService:
    """Wire the real YouTube and Ollama clients around a repository."""
    fetcher = ChannelFetcher(
        api_key=youtube_cfg["api_key"],
        base_url=youtube_cfg["base_url"],
        timeout=youtube_cfg["timeout"],
    )
    pipeline = IngestionPipeline(fetcher, repo, max_videos=youtube_cfg["max_videos"])
    strategist = ContentStrategist(
        ollama_url=ollama_cfg["ollama_url"],
        model=ollama_cfg["model"],
        timeout=ollama_cfg["timeout"],
        temperature=ollama_cfg["temperature"],
    )
    return AnalysisService(repo, pipeline, strategist)


def get_service(app: Flask) -> AnalysisService:
    """Get or create the AnalysisService instance for the app."""
    if getattr(app, "_service", None) is None:
        repo = Repository(app.config["DB_PATH"])
        app._service = build_service(repo, app.config["YOUTUBE"], app.config["OLLAMA"])
    return app._service


def get_repo(app: Flask) -> Repository:
    return get_service(app).repo
