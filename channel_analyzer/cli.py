from __future__ import annotations

import sys
import logging

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from .config import load_config, get_ollama_config, get_youtube_config
from .database.repository import Repository
from .errors import NotFoundError, UpstreamError, ValidationError
from .schemas import ChannelAnalysis
from .service import AnalysisService
from .utils.logging_config import setup_logging
from .web.app import build_service, create_app
from .web.presenters import sorted_categories, top_videos

console = Console()
logger = logging.getLogger(__name__)


def _build_service(config: dict) -> AnalysisService:
    """Construct the store, pipeline and strategist from config."""
    youtube_cfg = get_youtube_config(config)
    if not youtube_cfg["api_key"]:
        console.print("[yellow]Warning:[/yellow] YOUTUBE_API_KEY is not set")
    repo = Repository(config["db_path"])
    return build_service(repo, youtube_cfg, get_ollama_config(config))


def _print_analysis(analysis: ChannelAnalysis):
    ch = analysis.channel
    stats = analysis.analytics

    header = (
        f"[bold]{ch.title}[/bold]  {ch.custom_url or ''}\n"
        f"{ch.subscriber_count or 0:,} subscribers  |  "
        f"{ch.video_count or 0:,} videos  |  {ch.view_count or 0:,} views"
    )
    if ch.join_date:
        header += f"  |  joined {ch.join_date}"
    console.print(Panel(header, title=ch.id))

    table = Table(title="Analytics (changes are estimates)")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("vs last month", justify="right")
    table.add_row("Avg. views", f"{stats.avg_views or 0:,}", f"{stats.avg_views_change or 0:+,}")
    table.add_row("Engagement rate", stats.engagement_rate or "0%",
                  stats.engagement_rate_change or "0%")
    table.add_row("New subscribers", f"{stats.new_subscribers or 0:,}",
                  f"{stats.new_subscribers_change or 0:+,}")
    console.print(table)

    if analysis.categories:
        cats = Table(title="Content Categories")
        cats.add_column("Category")
        cats.add_column("Share", justify="right")
        for cat in sorted_categories(analysis.categories):
            cats.add_row(cat.name, f"{cat.percentage}%")
        console.print(cats)

    videos = top_videos(analysis.top_videos)
    if videos:
        vids = Table(title="Top Videos")
        vids.add_column("Title")
        vids.add_column("Views", justify="right")
        vids.add_column("Likes", justify="right")
        for video in videos:
            vids.add_row(video.title, f"{video.view_count or 0:,}", f"{video.like_count or 0:,}")
        console.print(vids)

    _print_ideas([idea.model_dump() for idea in analysis.content_ideas])

    console.print()
    for rec in analysis.recommendations:
        console.print(f"[bold]{rec.title}[/bold] [dim]({rec.type})[/dim]")
        console.print(f"  {rec.content}")


def _print_ideas(ideas: list[dict]):
    table = Table(title="Content Ideas")
    table.add_column("#", justify="right")
    table.add_column("Idea")
    table.add_column("Type")
    table.add_column("Potential")
    for i, idea in enumerate(ideas, 1):
        table.add_row(str(i), idea["title"], idea["idea_type"], idea.get("potential") or "")
    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose):
    """Channel Analyzer - Content ideas and growth recommendations for YouTube channels."""
    ctx.ensure_object(dict)
    config = load_config()
    if verbose:
        config["log_level"] = "DEBUG"
    setup_logging(config.get("log_file"), config["log_level"])
    ctx.obj["config"] = config


@cli.command()
@click.argument("channel")
@click.pass_context
def analyze(ctx, channel):
    """Analyze a YouTube channel and print the report.

    CHANNEL can be a URL, @handle, username, search term or channel ID.

    \b
    Examples:
        chanalyze analyze "Marques Brownlee"
        chanalyze analyze @mkbhd
        chanalyze analyze https://www.youtube.com/channel/UCBJycsmduvYEL83R_U4JriQ
    """
    service = _build_service(ctx.obj["config"])

    try:
        with console.status(f"[bold]Analyzing channel: {channel}...[/bold]"):
            channel_id = service.submit_channel(channel)
        with console.status("[bold]Generating content ideas...[/bold]"):
            analysis = service.get_full_analysis(channel_id)
    except (NotFoundError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except UpstreamError as e:
        console.print(f"[red]Error:[/red] YouTube request failed: {e}")
        logger.debug("Upstream failure", exc_info=True)
        sys.exit(1)
    finally:
        service.repo.close()

    console.print()
    _print_analysis(analysis)


@cli.command()
@click.argument("channel_id")
@click.pass_context
def show(ctx, channel_id):
    """Print the stored analysis for a channel ID (file-backed stores only)."""
    service = _build_service(ctx.obj["config"])
    try:
        analysis = service.get_full_analysis(channel_id)
    except (NotFoundError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        service.repo.close()

    _print_analysis(analysis)


@cli.command("more-ideas")
@click.argument("channel_id")
@click.pass_context
def more_ideas(ctx, channel_id):
    """Generate another batch of content ideas for a stored channel."""
    service = _build_service(ctx.obj["config"])
    try:
        with console.status("[bold]Generating content ideas...[/bold]"):
            ideas = service.request_more_ideas(channel_id)
    except NotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        service.repo.close()

    _print_ideas(ideas)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", "-p", type=int, default=5000, help="Port")
@click.option("--debug", is_flag=True, help="Flask debug mode")
@click.pass_context
def serve(ctx, host, port, debug):
    """Run the web UI."""
    app = create_app(ctx.obj["config"])
    console.print(f"[green]Channel Analyzer[/green] running at http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    cli()
