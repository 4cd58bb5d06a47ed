from __future__ import annotations

"""Channel analysis API routes: submit, read, generate more ideas."""

import logging

from flask import Blueprint, request, jsonify, current_app

from ...errors import NotFoundError, ValidationError
from ..app import get_service

logger = logging.getLogger(__name__)

analysis_bp = Blueprint("analysis", __name__)


@analysis_bp.route("/analyze-channel", methods=["POST"])
def analyze_channel():
    """Resolve and ingest a channel.

    Body: {"channel_name": str}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    channel_name = data.get("channel_name", "")

    try:
        channel_id = get_service(current_app).submit_channel(channel_name)
    except ValidationError as e:
        return jsonify({"error": str(e), "field": e.field}), 400
    except NotFoundError:
        return jsonify({
            "error": "Channel not found. Please check the channel name and try again."
        }), 404
    except Exception:
        logger.exception(f"Error analyzing channel '{channel_name}'")
        return jsonify({
            "error": "Failed to analyze channel. Please try again later."
        }), 500

    return jsonify({"success": True, "channel_id": channel_id})


@analysis_bp.route("/channel-analysis/<channel_id>", methods=["GET"])
def channel_analysis(channel_id):
    """Full analysis for a channel, generating ideas on first read."""
    try:
        analysis = get_service(current_app).get_full_analysis(channel_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e), "field": e.field}), 400
    except Exception:
        logger.exception(f"Error getting channel analysis for {channel_id}")
        return jsonify({
            "error": "Failed to get channel analysis. Please try again later."
        }), 500

    return jsonify(analysis.model_dump())


@analysis_bp.route("/generate-more-ideas/<channel_id>", methods=["POST"])
def generate_more_ideas(channel_id):
    """Append a fresh batch of content ideas and return it."""
    try:
        ideas = get_service(current_app).request_more_ideas(channel_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        logger.exception(f"Error generating more ideas for {channel_id}")
        return jsonify({
            "error": "Failed to generate more ideas. Please try again later."
        }), 500

    return jsonify({"success": True, "content_ideas": ideas})
