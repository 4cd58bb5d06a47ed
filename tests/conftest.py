"""Shared test fixtures for Channel Analyzer tests."""
from __future__ import annotations

import json
import random

import pytest

from channel_analyzer.agents.strategist import ContentStrategist
from channel_analyzer.database.repository import Repository
from channel_analyzer.errors import UpstreamError
from channel_analyzer.ingestion.analytics import StaticTrendEstimator
from channel_analyzer.ingestion.channel_fetcher import ChannelFetcher
from channel_analyzer.ingestion.pipeline import IngestionPipeline
from channel_analyzer.service import AnalysisService

MKBHD_ID = "UCBJycsmduvYEL83R_U4JriQ"

MKBHD_TITLES = [
    "iPhone 15 Pro Review: Titanium Tested",
    "Galaxy S24 Ultra vs iPhone 15 Pro Max",
    "How to Set Up Your Desk: The Guide",
    "Unboxing the Vision Pro",
    "Tech News Roundup: Big Update",
    "The Best Android Phone Right Now",
    "MacBook Air M3 Impressions",
    "Camera Shootout in the Desert",
    "Studio Headphone Setup",
    "Gaming Handhelds Are Back",
    "Dope Tech: Electric Bikes",
]


def make_channel_item(channel_id, title, subscribers=1000, videos=10, views=50000,
                      custom_url=None, description="A test channel"):
    """A channels#list item as the YouTube Data API returns it."""
    return {
        "id": channel_id,
        "snippet": {
            "title": title,
            "description": description,
            "customUrl": custom_url,
            "publishedAt": "2008-03-21T15:25:54Z",
            "thumbnails": {
                "default": {"url": f"https://img.example.com/{channel_id}/default.jpg"},
                "high": {"url": f"https://img.example.com/{channel_id}/high.jpg"},
            },
        },
        "statistics": {
            "subscriberCount": str(subscribers),
            "videoCount": str(videos),
            "viewCount": str(views),
        },
    }


def make_video_item(video_id, title, views=1000, likes=50, comments=10, channel_id=MKBHD_ID):
    """A videos#list item as the YouTube Data API returns it."""
    return {
        "id": video_id,
        "snippet": {
            "channelId": channel_id,
            "title": title,
            "description": f"Description of {title}",
            "publishedAt": "2024-01-01T00:00:00Z",
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "medium": {"url": f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg"},
            },
        },
        "statistics": {
            "viewCount": str(views),
            "likeCount": str(likes),
            "commentCount": str(comments),
        },
    }


class FakeChannelFetcher(ChannelFetcher):
    """ChannelFetcher whose HTTP layer answers from in-memory API fixtures."""

    def __init__(self, channels=None, videos=None, usernames=None, search=None,
                 fail_with=None):
        super().__init__(api_key="test-key", base_url="https://yt.invalid/v3")
        self.channels = {c["id"]: c for c in (channels or [])}
        self.videos = videos or {}
        self.usernames = usernames or {}
        self.search_index = {k.lower(): v for k, v in (search or {}).items()}
        self.fail_with = fail_with
        self.calls = []

    def _get(self, endpoint, params):
        self.calls.append((endpoint, dict(params)))
        if self.fail_with is not None:
            raise self.fail_with

        if endpoint == "channels":
            if "forUsername" in params:
                channel_id = self.usernames.get(params["forUsername"])
            else:
                channel_id = params["id"]
            item = self.channels.get(channel_id)
            if item is None:
                # The real API omits "items" entirely when nothing matches
                return {"pageInfo": {"totalResults": 0}}
            if params["part"] == "contentDetails":
                return {"items": [{
                    "id": channel_id,
                    "contentDetails": {"relatedPlaylists": {"uploads": "UU" + channel_id[2:]}},
                }]}
            return {"items": [item]}

        if endpoint == "search":
            channel_id = self.search_index.get(params["q"].lower())
            if channel_id is None:
                return {"items": []}
            return {"items": [{"id": {"kind": "youtube#channel", "channelId": channel_id}}]}

        if endpoint == "playlistItems":
            channel_id = "UC" + params["playlistId"][2:]
            items = self.videos.get(channel_id, [])[: params["maxResults"]]
            return {"items": [
                {"snippet": {"resourceId": {"kind": "youtube#video", "videoId": v["id"]}}}
                for v in items
            ]}

        if endpoint == "videos":
            wanted = params["id"].split(",")
            by_id = {v["id"]: v for vids in self.videos.values() for v in vids}
            return {"items": [by_id[vid] for vid in wanted if vid in by_id]}

        raise AssertionError(f"Unexpected endpoint {endpoint}")


class FakeStrategist(ContentStrategist):
    """ContentStrategist that returns a canned LLM reply instead of calling Ollama."""

    def __init__(self, reply=None, error=None):
        super().__init__(ollama_url="http://ollama.invalid", rng=random.Random(7))
        self.reply = reply
        self.error = error
        self.prompts = []

    def _call_ollama(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply if isinstance(self.reply, str) else json.dumps(self.reply)


def llm_reply(n_ideas=8, n_recs=3):
    idea_types = ["trending", "high_engagement", "quick_win", "audience_request"]
    rec_types = ["audience_growth", "content_optimization", "audience_engagement"]
    return {
        "content_ideas": [
            {
                "title": f"Idea {i}",
                "description": f"Description for idea {i}",
                "potential": "Est. views: 150K+",
                "idea_type": idea_types[i % 4],
            }
            for i in range(n_ideas)
        ],
        "recommendations": [
            {"title": f"Rec {i}", "content": f"Do thing {i}", "type": rec_types[i % 3]}
            for i in range(n_recs)
        ],
    }



def read_model(**overrides):
    """A valid joined read model for MKBHD; keyword arguments replace sections."""
    reply = llm_reply()
    model = {
        "channel": {"id": MKBHD_ID, "title": "Marques Brownlee", "description": ""},
        "analytics": {"avg_views": 1000, "engagement_rate": "4.0%"},
        "top_videos": [{"id": "v00", "title": "Phone Review", "view_count": 1000}],
        "categories": [{"name": "Reviews", "percentage": 100}],
        "content_ideas": reply["content_ideas"],
        "recommendations": reply["recommendations"],
    }
    model.update(overrides)
    return model

@pytest.fixture
def repo():
    """A fresh in-memory Repository."""
    r = Repository(":memory:")
    yield r
    r.close()


@pytest.fixture
def seeded_repo(repo):
    """Repository pre-loaded with one channel, videos, categories and analytics."""
    repo.create_channel({
        "channel_id": "UC_test_channel_000000001",
        "title": "Test Tech Channel",
        "description": "Gadget reviews and tutorials",
        "custom_url": "@testtech",
        "subscriber_count": 100000,
        "video_count": 50,
        "view_count": 5000000,
        "join_date": "Jan 2015",
        "last_updated": "2024-01-01T00:00:00+00:00",
    })
    for i, title in enumerate(["Phone Review", "Laptop Guide", "Camera Unboxing"], 1):
        repo.create_video({
            "video_id": f"vid_{i}",
            "channel_id": "UC_test_channel_000000001",
            "title": title,
            "view_count": 1000 * i,
            "like_count": 100,
            "comment_count": 10,
        })
    for name, pct in [("Reviews", 34), ("Tutorials & Guides", 33), ("Unboxing", 33)]:
        repo.create_category({
            "channel_id": "UC_test_channel_000000001", "name": name, "percentage": pct,
        })
    repo.create_analytics({
        "channel_id": "UC_test_channel_000000001",
        "avg_views": 2000,
        "engagement_rate": "5.5%",
        "new_subscribers": 2000,
        "avg_views_change": 100,
        "engagement_rate_change": "0.2%",
        "new_subscribers_change": -50,
    })
    return repo


@pytest.fixture
def fetcher():
    """Fake YouTube API knowing one tech channel reachable by search only."""
    videos = [
        make_video_item(f"v{i:02d}", title, views=10000 + i * 1000, likes=500, comments=50)
        for i, title in enumerate(MKBHD_TITLES)
    ]
    # More uploads than the pipeline will fetch
    videos += [make_video_item(f"x{i:02d}", f"Extra upload {i}") for i in range(15)]
    return FakeChannelFetcher(
        channels=[make_channel_item(MKBHD_ID, "Marques Brownlee", subscribers=19000000,
                                    videos=1600, views=4000000000, custom_url="@mkbhd")],
        videos={MKBHD_ID: videos},
        usernames={"marquesbrownlee": MKBHD_ID},
        search={"Marques Brownlee": MKBHD_ID, "mkbhd": MKBHD_ID},
    )


@pytest.fixture
def strategist():
    return FakeStrategist(reply=llm_reply())


@pytest.fixture
def pipeline(fetcher, repo):
    return IngestionPipeline(fetcher, repo, trend_estimator=StaticTrendEstimator())


@pytest.fixture
def service(repo, pipeline, strategist):
    return AnalysisService(repo, pipeline, strategist)


@pytest.fixture
def flask_app(service):
    """Flask test app wired to the fake YouTube API and fake LLM."""
    from channel_analyzer.web.app import create_app

    config = {"db_path": ":memory:", "youtube": {"api_key": "test-key"}}
    app = create_app(config, service=service)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(flask_app):
    """Flask test client."""
    return flask_app.test_client()
