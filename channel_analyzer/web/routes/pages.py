from __future__ import annotations

"""Server-rendered pages: search form and channel report."""

import logging

from flask import Blueprint, current_app, redirect, render_template, request, url_for

from ...errors import NotFoundError, ValidationError
from ..app import get_service
from ..presenters import (
    IDEA_FILTERS,
    IDEA_TYPE_LABELS,
    filter_ideas,
    normalize_idea_filter,
    sorted_categories,
    top_videos,
)

logger = logging.getLogger(__name__)

pages_bp = Blueprint("pages", __name__)


@pages_bp.route("/", methods=["GET"])
def index():
    return render_template("index.html")


@pages_bp.route("/analyze", methods=["POST"])
def analyze():
    channel_name = request.form.get("channel_name", "")
    try:
        channel_id = get_service(current_app).submit_channel(channel_name)
    except ValidationError as e:
        return render_template("index.html", error=str(e), channel_name=channel_name), 400
    except NotFoundError:
        return render_template(
            "index.html",
            error="Channel not found. Please check the channel name and try again.",
            channel_name=channel_name,
        ), 404
    except Exception:
        logger.exception(f"Error analyzing channel '{channel_name}'")
        return render_template(
            "index.html",
            error="Failed to analyze channel. Please try again later.",
            channel_name=channel_name,
        ), 500
    return redirect(url_for("pages.channel", channel_id=channel_id))


@pages_bp.route("/channel/<channel_id>", methods=["GET"])
def channel(channel_id):
    idea_filter = normalize_idea_filter(request.args.get("type"))
    try:
        analysis = get_service(current_app).get_full_analysis(channel_id)
    except NotFoundError:
        return render_template("index.html", error="Channel analysis not found"), 404
    except ValidationError as e:
        logger.warning(f"Invalid analysis for {channel_id}: {e}")
        return render_template(
            "index.html",
            error=f"Stored analysis is invalid at {e.field}. Please analyze the channel again.",
        ), 400
    except Exception:
        logger.exception(f"Error rendering channel {channel_id}")
        return render_template(
            "index.html", error="Failed to get channel analysis. Please try again later."
        ), 500
    return render_template(
        "channel.html",
        analysis=analysis,
        top_videos=top_videos(analysis.top_videos),
        categories=sorted_categories(analysis.categories),
        ideas=filter_ideas(analysis.content_ideas, idea_filter),
        idea_filter=idea_filter,
        idea_filters=IDEA_FILTERS,
        idea_labels=IDEA_TYPE_LABELS,
    )


@pages_bp.route("/channel/<channel_id>/ideas", methods=["POST"])
def more_ideas(channel_id):
    try:
        get_service(current_app).request_more_ideas(channel_id)
    except NotFoundError:
        return render_template("index.html", error="Channel not found"), 404
    except Exception:
        logger.exception(f"Error generating more ideas for {channel_id}")
        return render_template(
            "index.html", error="Failed to generate more ideas. Please try again later."
        ), 500
    return redirect(url_for("pages.channel", channel_id=channel_id) + "#ideas")
