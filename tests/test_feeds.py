"""Tests for the feed fetchers, against canned HTTP responses."""

import httpx
import pytest

from feedtui.feeds import FeedFetchError
from feedtui.feeds.github import GithubFetcher, api_to_web_url, parse_push_events
from feedtui.feeds.hackernews import HackerNewsFetcher
from feedtui.feeds.rss import RssFetcher, parse_feed
from feedtui.feeds.sports import SportsFetcher, parse_scoreboard
from feedtui.feeds.stocks import StocksFetcher, parse_chart
from feedtui.feeds.youtube import YoutubeFetcher, format_duration, format_view_count

RSS_FEED = b"""<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>Example Blog</title>
    <item>
      <title>Older post</title>
      <link>https://example.com/older</link>
      <pubDate>Mon, 05 Jan 2026 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Newer post</title>
      <link>https://example.com/newer</link>
      <pubDate>Tue, 06 Jan 2026 10:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


def _transport(routes: dict[str, object], status: int = 200) -> httpx.MockTransport:
    """Serve JSON (or bytes) by URL path; unknown paths return 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = routes.get(request.url.path)
        if body is None:
            return httpx.Response(404)
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


def _scoreboard(home_score: str, away_score: str) -> dict:
    return {
        "events": [
            {
                "status": {"type": {"description": "Final"}},
                "competitions": [
                    {
                        "startDate": "2026-01-05T00:00Z",
                        "competitors": [
                            {"homeAway": "home", "score": home_score, "team": {"displayName": "Lakers"}},
                            {"homeAway": "away", "score": away_score, "team": {"displayName": "Celtics"}},
                        ],
                    }
                ],
            }
        ]
    }


class TestHackerNews:
    """Tests for HackerNewsFetcher."""

    @pytest.mark.asyncio
    async def test_fetches_stories_in_list_order(self) -> None:
        transport = _transport(
            {
                "/v0/beststories.json": [3, 1, 2],
                "/v0/item/3.json": {"id": 3, "title": "Three", "score": 30, "by": "a"},
                "/v0/item/1.json": {"id": 1, "title": "One", "url": "https://one.example"},
                "/v0/item/2.json": {"id": 2, "title": "Two"},
            }
        )
        data = await HackerNewsFetcher("best", 2, transport=transport).fetch()
        assert [s.title for s in data.stories] == ["Three", "One"]
        assert data.stories[1].url == "https://one.example"

    @pytest.mark.asyncio
    async def test_skips_dead_items(self) -> None:
        transport = _transport(
            {
                "/v0/topstories.json": [1, 2],
                "/v0/item/1.json": {"id": 1, "dead": True},
                "/v0/item/2.json": {"id": 2, "title": "Alive"},
            }
        )
        data = await HackerNewsFetcher(transport=transport).fetch()
        assert [s.id for s in data.stories] == [2]

    @pytest.mark.asyncio
    async def test_http_error_propagates(self) -> None:
        with pytest.raises(httpx.HTTPStatusError):
            await HackerNewsFetcher(transport=_transport({})).fetch()


class TestStocks:
    """Tests for quotes."""

    def test_parse_chart_computes_change(self) -> None:
        quote = parse_chart(
            "AAPL",
            {"chart": {"result": [{"meta": {
                "symbol": "AAPL", "regularMarketPrice": 110.0, "chartPreviousClose": 100.0,
            }}]}},
        )
        assert quote.change == pytest.approx(10.0)
        assert quote.change_percent == pytest.approx(10.0)

    def test_parse_chart_without_data_raises(self) -> None:
        with pytest.raises(FeedFetchError):
            parse_chart("NOPE", {"chart": {"result": []}})

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_good_quotes(self) -> None:
        transport = _transport(
            {"/v8/finance/chart/AAPL": {"chart": {"result": [{"meta": {"regularMarketPrice": 5.0}}]}}}
        )
        data = await StocksFetcher(["AAPL", "BAD"], transport=transport).fetch()
        assert [q.symbol for q in data.quotes] == ["AAPL"]

    @pytest.mark.asyncio
    async def test_total_failure_raises(self) -> None:
        with pytest.raises(FeedFetchError):
            await StocksFetcher(["BAD"], transport=_transport({})).fetch()


class TestRss:
    """Tests for feeds parsed with feedparser."""

    def test_parse_feed(self) -> None:
        items = parse_feed(RSS_FEED, 10)
        assert [i.title for i in items] == ["Older post", "Newer post"]
        assert items[0].source == "Example Blog"
        assert items[0].published == "2026-01-05 10:00"

    @pytest.mark.asyncio
    async def test_merges_newest_first_and_caps(self) -> None:
        transport = _transport({"/feed.xml": RSS_FEED})
        fetcher = RssFetcher(
            ["https://example.com/feed.xml", "https://example.com/missing.xml"],
            max_items=1,
            transport=transport,
        )
        data = await fetcher.fetch()
        assert [i.title for i in data.items] == ["Newer post"]


class TestSports:
    """Tests for scoreboards."""

    def test_scores_follow_home_and_away(self) -> None:
        events = parse_scoreboard("nba", _scoreboard("101", "99"))
        assert events[0].home_team == "Lakers"
        assert events[0].home_score == 101
        assert events[0].away_score == 99
        assert events[0].league == "NBA"

    def test_missing_scores_are_none(self) -> None:
        events = parse_scoreboard("nba", _scoreboard("", ""))
        assert events[0].home_score is None

    @pytest.mark.asyncio
    async def test_fetch_known_league(self) -> None:
        transport = _transport(
            {"/apis/site/v2/sports/basketball/nba/scoreboard": _scoreboard("1", "2")}
        )
        data = await SportsFetcher(["NBA"], transport=transport).fetch()
        assert len(data.events) == 1

    @pytest.mark.asyncio
    async def test_only_unknown_leagues_raises(self) -> None:
        with pytest.raises(FeedFetchError):
            await SportsFetcher(["quidditch"], transport=_transport({})).fetch()


class TestGithub:
    """Tests for GitHub parsing and fetching."""

    def test_api_to_web_url(self) -> None:
        url = api_to_web_url("https://api.github.com/repos/o/r/pulls/4", "o/r")
        assert url == "https://github.com/o/r/pull/4"
        assert api_to_web_url(None, "o/r") == "https://github.com/o/r"

    def test_push_events_limited(self) -> None:
        events = [
            {
                "type": "PushEvent",
                "repo": {"name": "o/r"},
                "created_at": "2026-01-01T00:00:00Z",
                "payload": {
                    "ref": "refs/heads/main",
                    "commits": [
                        {"sha": "a" * 40, "message": "First\n\nbody", "author": {"name": "me"}},
                        {"sha": "b" * 40, "message": "Second", "author": {"name": "me"}},
                    ],
                },
            },
            {"type": "WatchEvent", "repo": {"name": "o/r"}},
        ]
        commits = parse_push_events(events, limit=1)
        assert len(commits) == 1
        assert commits[0].sha == "aaaaaaa"
        assert commits[0].message == "First"
        assert commits[0].branch == "main"

    @pytest.mark.asyncio
    async def test_missing_token_raises(self) -> None:
        with pytest.raises(FeedFetchError):
            await GithubFetcher(token="", username="me").fetch()

    @pytest.mark.asyncio
    async def test_fetch_sends_token(self) -> None:
        seen_auth = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen_auth.append(request.headers.get("Authorization"))
            return httpx.Response(
                200,
                json=[
                    {
                        "id": "1",
                        "repository": {"full_name": "o/r"},
                        "subject": {"title": "Bug", "type": "Issue",
                                    "url": "https://api.github.com/repos/o/r/issues/1"},
                        "unread": True,
                        "reason": "mention",
                    }
                ],
            )

        fetcher = GithubFetcher(
            token="secret", username="", show_pull_requests=False, show_commits=False,
            transport=httpx.MockTransport(handler),
        )
        data = await fetcher.fetch()

        assert seen_auth == ["token secret"]
        assert data.notifications[0].url == "https://github.com/o/r/issues/1"


class TestYoutube:
    """Tests for YouTube helpers and fetching."""

    def test_format_duration(self) -> None:
        assert format_duration("PT1H2M3S") == "1:02:03"
        assert format_duration("PT4M5S") == "4:05"
        assert format_duration("garbage") == ""

    def test_format_view_count(self) -> None:
        assert format_view_count("1500000") == "1.5M views"
        assert format_view_count("2500") == "2.5K views"
        assert format_view_count("12") == "12 views"
        assert format_view_count(None) == ""

    @pytest.mark.asyncio
    async def test_missing_key_raises(self) -> None:
        with pytest.raises(FeedFetchError):
            await YoutubeFetcher(api_key="", channels=["UC1"]).fetch()

    @pytest.mark.asyncio
    async def test_search_then_details(self) -> None:
        transport = _transport(
            {
                "/youtube/v3/search": {"items": [{"id": {"videoId": "v1"}}]},
                "/youtube/v3/videos": {
                    "items": [
                        {
                            "id": "v1",
                            "snippet": {"title": "Talk", "channelTitle": "Conf",
                                        "publishedAt": "2026-01-02T00:00:00Z"},
                            "contentDetails": {"duration": "PT10M"},
                            "statistics": {"viewCount": "42"},
                        }
                    ]
                },
            }
        )
        data = await YoutubeFetcher("key", [], search_query="python", transport=transport).fetch()
        video = data.videos[0]
        assert video.title == "Talk"
        assert video.published == "2026-01-02"
        assert video.duration == "10:00"
        assert video.views == "42 views"
