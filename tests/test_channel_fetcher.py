"""Tests for channel input normalization and YouTube API resolution."""
from __future__ import annotations

import pytest
import requests

from channel_analyzer.errors import ChannelNotFoundError, UpstreamError
from channel_analyzer.ingestion.channel_fetcher import (
    ChannelFetcher,
    looks_like_channel_id,
    normalize_channel_input,
)

from conftest import MKBHD_ID, FakeChannelFetcher, make_channel_item


class TestNormalize:
    @pytest.mark.parametrize("raw,expected", [
        ("@foo", "foo"),
        ("  @foo  ", "foo"),
        ("https://www.youtube.com/channel/UCxyz", "UCxyz"),
        (".../channel/UCxyz", "UCxyz"),
        ("https://www.youtube.com/@bar", "bar"),
        ("https://www.youtube.com/@bar/videos", "bar"),
        ("youtube.com/@bar", "bar"),
        ("https://www.youtube.com/user/marquesbrownlee", "marquesbrownlee"),
        ("https://www.youtube.com/c/LinusTechTips/", "LinusTechTips"),
        ("https://www.youtube.com/channel/UCBJycsmduvYEL83R_U4JriQ?view=0", MKBHD_ID),
        (MKBHD_ID, MKBHD_ID),
        ("Marques Brownlee", "Marques Brownlee"),
    ])
    def test_inputs(self, raw, expected):
        assert normalize_channel_input(raw) == expected

    @pytest.mark.parametrize("raw", [
        MKBHD_ID, "@foo", "https://www.youtube.com/@bar", "Marques Brownlee",
        "https://www.youtube.com/channel/UCxyz",
    ])
    def test_idempotent(self, raw):
        once = normalize_channel_input(raw)
        assert normalize_channel_input(once) == once

    def test_channel_id_detection(self):
        assert looks_like_channel_id(MKBHD_ID)
        assert not looks_like_channel_id("UCshort")
        assert not looks_like_channel_id("Marques Brownlee")


class TestResolveChannel:
    def test_literal_id_fetched_directly(self, fetcher):
        channel = fetcher.resolve_channel(MKBHD_ID)
        assert channel["channel_id"] == MKBHD_ID
        assert [c[0] for c in fetcher.calls] == ["channels"]
        assert fetcher.calls[0][1]["id"] == MKBHD_ID

    def test_username_lookup(self, fetcher):
        channel = fetcher.resolve_channel("https://www.youtube.com/user/marquesbrownlee")
        assert channel["channel_id"] == MKBHD_ID
        assert fetcher.calls[0][1]["forUsername"] == "marquesbrownlee"
        assert all(c[0] != "search" for c in fetcher.calls)

    def test_search_fallback(self, fetcher):
        channel = fetcher.resolve_channel("Marques Brownlee")
        assert channel["channel_id"] == MKBHD_ID
        endpoints = [c[0] for c in fetcher.calls]
        assert endpoints == ["channels", "search", "channels"]
        assert fetcher.calls[1][1]["maxResults"] == 1

    def test_handle_search_fallback(self, fetcher):
        assert fetcher.resolve_channel("@mkbhd")["channel_id"] == MKBHD_ID

    def test_not_found(self, fetcher):
        with pytest.raises(ChannelNotFoundError) as exc:
            fetcher.resolve_channel("nonexistent-channel-xyz-123")
        assert exc.value.channel_input == "nonexistent-channel-xyz-123"

    def test_unknown_literal_id_not_found(self, fetcher):
        with pytest.raises(ChannelNotFoundError):
            fetcher.resolve_channel("UC0000000000000000000000")
        assert all(c[0] != "search" for c in fetcher.calls)

    def test_short_uc_value_treated_as_name(self, fetcher):
        # Too short for a channel ID, so it goes through username then search
        with pytest.raises(ChannelNotFoundError):
            fetcher.resolve_channel("https://www.youtube.com/channel/UCshort")
        assert [c[0] for c in fetcher.calls] == ["channels", "search"]
        assert fetcher.calls[0][1]["forUsername"] == "UCshort"

    def test_blank_input_not_found(self, fetcher):
        with pytest.raises(ChannelNotFoundError):
            fetcher.resolve_channel("   ")

    def test_upstream_failure_propagates(self):
        broken = FakeChannelFetcher(fail_with=UpstreamError("youtube", "boom"))
        with pytest.raises(UpstreamError):
            broken.resolve_channel("anything")

    def test_channel_record_shape(self, fetcher):
        channel = fetcher.resolve_channel(MKBHD_ID)
        assert channel["title"] == "Marques Brownlee"
        assert channel["custom_url"] == "@mkbhd"
        assert channel["subscriber_count"] == 19000000
        assert channel["video_count"] == 1600
        assert channel["join_date"] == "Mar 2008"
        assert channel["thumbnail_url"].endswith("/high.jpg")


class TestListRecentVideos:
    def test_limit_and_shape(self, fetcher):
        videos = fetcher.list_recent_videos(MKBHD_ID, 20)
        assert len(videos) == 20
        first = videos[0]
        assert first["video_id"] == "v00"
        assert first["channel_id"] == MKBHD_ID
        assert first["view_count"] == 10000
        assert first["like_count"] == 500
        assert first["comment_count"] == 50
        assert first["thumbnail_url"].endswith("mqdefault.jpg")

    def test_uses_uploads_playlist(self, fetcher):
        fetcher.list_recent_videos(MKBHD_ID, 5)
        endpoints = [c[0] for c in fetcher.calls]
        assert endpoints == ["channels", "playlistItems", "videos"]
        assert fetcher.calls[1][1]["playlistId"] == "UU" + MKBHD_ID[2:]

    def test_no_videos(self):
        empty = FakeChannelFetcher(channels=[make_channel_item(MKBHD_ID, "Empty")])
        assert empty.list_recent_videos(MKBHD_ID) == []

    def test_unknown_channel_has_no_videos(self, fetcher):
        assert fetcher.list_recent_videos("UC0000000000000000000000") == []

    def test_missing_statistics_default_to_zero(self):
        item = {"id": "v1", "snippet": {"title": "Hidden stats"}}
        parsed = ChannelFetcher(api_key="k")._parse_video(item)
        assert parsed["view_count"] == 0
        assert parsed["like_count"] == 0
        assert parsed["thumbnail_url"] is None


class _Response:
    def __init__(self, status_code, body=None, reason=""):
        self.status_code = status_code
        self._body = body
        self.reason = reason

    def json(self):
        if self._body is None:
            raise ValueError("No JSON")
        return self._body


class TestHttpErrors:
    def test_transport_error(self, monkeypatch):
        def boom(*args, **kwargs):
            raise requests.ConnectionError("network down")

        monkeypatch.setattr(requests, "get", boom)
        with pytest.raises(UpstreamError) as exc:
            ChannelFetcher(api_key="k").fetch_channel_by_id(MKBHD_ID)
        assert exc.value.service == "youtube"

    def test_http_error_uses_api_message(self, monkeypatch):
        body = {"error": {"code": 403, "message": "The request cannot be completed "
                                                 "because you have exceeded your quota."}}
        monkeypatch.setattr(requests, "get", lambda *a, **k: _Response(403, body, "Forbidden"))
        with pytest.raises(UpstreamError) as exc:
            ChannelFetcher(api_key="k").search_channel_id("anything")
        assert exc.value.status_code == 403
        assert "quota" in str(exc.value)

    def test_invalid_json(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda *a, **k: _Response(200, None, "OK"))
        with pytest.raises(UpstreamError):
            ChannelFetcher(api_key="k").fetch_channel_by_username("someone")

    def test_api_key_and_timeout_sent(self, monkeypatch):
        seen = {}

        def fake_get(url, params=None, timeout=None):
            seen.update(url=url, params=params, timeout=timeout)
            return _Response(200, {"items": []})

        monkeypatch.setattr(requests, "get", fake_get)
        fetcher = ChannelFetcher(api_key="secret", base_url="https://api.test/v3/", timeout=3)
        assert fetcher.fetch_channel_by_id(MKBHD_ID) is None
        assert seen["url"] == "https://api.test/v3/channels"
        assert seen["params"]["key"] == "secret"
        assert seen["timeout"] == 3
