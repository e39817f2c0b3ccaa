"""Latest videos from YouTube channels or a search query (Data API v3)."""

from __future__ import annotations

import re

import httpx

from feedtui.feeds import FeedFetchError, HttpFetcher, YoutubeData, YoutubeVideo

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={}"
MAX_IDS_PER_REQUEST = 50

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def format_duration(iso_duration: str) -> str:
    """PT1H2M3S -> 1:02:03, PT4M5S -> 4:05."""
    match = _DURATION_RE.fullmatch(iso_duration or "")
    if not match:
        return ""
    hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    if hours:
        return f"{hours}:{minutes:02}:{seconds:02}"
    return f"{minutes}:{seconds:02}"


def format_view_count(count: str | None) -> str:
    try:
        num = int(count or "")
    except ValueError:
        return ""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M views"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K views"
    return f"{num} views"


def parse_videos(data: dict) -> list[YoutubeVideo]:
    videos = []
    for item in data.get("items", []):
        snippet = item.get("snippet", {})
        videos.append(
            YoutubeVideo(
                id=item["id"],
                title=snippet.get("title", ""),
                channel=snippet.get("channelTitle", ""),
                published=snippet.get("publishedAt", "")[:10],
                description=(snippet.get("description") or "")[:100],
                duration=format_duration(item.get("contentDetails", {}).get("duration", "")),
                views=format_view_count(item.get("statistics", {}).get("viewCount")),
            )
        )
    return videos


class YoutubeFetcher(HttpFetcher):
    def __init__(
        self,
        api_key: str,
        channels: list[str],
        search_query: str | None = None,
        max_videos: int = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(transport)
        self._api_key = api_key
        self._channels = list(channels)
        self._search_query = search_query
        self._max_videos = max_videos

    async def _search(self, client: httpx.AsyncClient, **params) -> list[str]:
        resp = await client.get(
            f"{YOUTUBE_API_BASE}/search",
            params={
                "part": "snippet",
                "type": "video",
                "maxResults": self._max_videos,
                "key": self._api_key,
                **params,
            },
        )
        if resp.status_code != 200:
            raise FeedFetchError(f"YouTube API error (status {resp.status_code})")
        return [
            item["id"]["videoId"]
            for item in resp.json().get("items", [])
            if "videoId" in item.get("id", {})
        ]

    async def fetch(self) -> YoutubeData:
        if not self._api_key:
            raise FeedFetchError("YouTube API key not configured")

        async with self._client() as client:
            video_ids: list[str] = []
            if self._search_query:
                video_ids += await self._search(client, q=self._search_query)
            for channel in self._channels:
                video_ids += await self._search(client, channelId=channel, order="date")

            if not video_ids:
                return YoutubeData(())

            resp = await client.get(
                f"{YOUTUBE_API_BASE}/videos",
                params={
                    "part": "snippet,statistics,contentDetails",
                    "id": ",".join(list(dict.fromkeys(video_ids))[:MAX_IDS_PER_REQUEST]),
                    "key": self._api_key,
                },
            )
            if resp.status_code != 200:
                raise FeedFetchError(f"YouTube API error (status {resp.status_code})")
            videos = parse_videos(resp.json())

        videos.sort(key=lambda v: v.published, reverse=True)
        return YoutubeData(tuple(videos[: self._max_videos]))


def watch_url(video: YoutubeVideo) -> str:
    return YOUTUBE_WATCH_URL.format(video.id)
