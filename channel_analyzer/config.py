import os
import logging
from pathlib import Path

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

IN_MEMORY_DB = ":memory:"


def load_config() -> dict:
    """Load configuration from .env and config.yaml. Env vars take precedence."""
    load_dotenv(PROJECT_ROOT / ".env")

    config_path = PROJECT_ROOT / "config.yaml"
    if config_path.exists():
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
    else:
        config = {}

    # The store lives in memory unless a file path is configured
    db_rel = config.get("database", {}).get("path", IN_MEMORY_DB)
    if db_rel == IN_MEMORY_DB:
        config["db_path"] = IN_MEMORY_DB
    else:
        config["db_path"] = str(PROJECT_ROOT / db_rel)

    # Resolve log file path
    log_rel = config.get("logging", {}).get("file")
    if log_rel:
        config["log_file"] = str(PROJECT_ROOT / log_rel)
    else:
        config["log_file"] = None

    config["log_level"] = os.getenv(
        "LOG_LEVEL", config.get("logging", {}).get("level", "INFO")
    )

    return config


def get_youtube_config(config: dict) -> dict:
    """Extract YouTube Data API settings with defaults."""
    yt = config.get("youtube", {})
    return {
        "api_key": os.getenv("YOUTUBE_API_KEY", yt.get("api_key", "")),
        "base_url": yt.get("base_url", "https://www.googleapis.com/youtube/v3"),
        "timeout": yt.get("timeout", 15),
        "max_videos": yt.get("max_videos", 20),
    }


def get_ollama_config(config: dict) -> dict:
    """Extract Ollama-specific settings with defaults."""
    ollama = config.get("ollama", {})
    return {
        "model": os.getenv("OLLAMA_MODEL", ollama.get("model", "llama3.2")),
        "ollama_url": os.getenv("OLLAMA_URL", ollama.get("url", "http://localhost:11434")),
        "timeout": ollama.get("timeout", 120),
        "temperature": ollama.get("temperature", 0.7),
    }
