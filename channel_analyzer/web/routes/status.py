from __future__ import annotations

"""Status API route."""

from flask import Blueprint, jsonify, current_app

from ..app import get_repo

status_bp = Blueprint("status", __name__)


@status_bp.route("/status", methods=["GET"])
def get_status():
    """Row counts for every table in the store."""
    repo = get_repo(current_app)
    return jsonify({
        "store": repo.get_store_stats(),
        "channels": [
            {
                "channel_id": c["channel_id"],
                "title": c["title"],
                "total_videos": c["total_videos"],
                "total_ideas": c["total_ideas"],
                "last_updated": c["last_updated"],
            }
            for c in repo.get_all_channels()
        ],
    })
