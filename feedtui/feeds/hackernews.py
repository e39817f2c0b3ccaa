"""Hacker News stories via the public Firebase API."""

from __future__ import annotations

import asyncio

import httpx

from feedtui.feeds import FeedFetchError, HackerNewsData, HnStory, HttpFetcher

HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
HN_ITEM_URL = "https://news.ycombinator.com/item?id={}"

STORY_LISTS = {
    "top": "topstories",
    "new": "newstories",
    "best": "beststories",
    "ask": "askstories",
    "show": "showstories",
    "job": "jobstories",
}


class HackerNewsFetcher(HttpFetcher):
    def __init__(
        self,
        story_type: str = "top",
        story_count: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(transport)
        self._list_name = STORY_LISTS.get(story_type, STORY_LISTS["top"])
        self._story_count = story_count

    async def _fetch_story(self, client: httpx.AsyncClient, story_id: int) -> HnStory | None:
        resp = await client.get(f"{HN_API_BASE}/item/{story_id}.json")
        resp.raise_for_status()
        item = resp.json()
        if not item or item.get("deleted") or item.get("dead"):
            return None
        return HnStory(
            id=item["id"],
            title=item.get("title", ""),
            url=item.get("url"),
            score=item.get("score", 0),
            by=item.get("by", ""),
            descendants=item.get("descendants", 0),
        )

    async def fetch(self) -> HackerNewsData:
        async with self._client() as client:
            resp = await client.get(f"{HN_API_BASE}/{self._list_name}.json")
            resp.raise_for_status()
            ids = resp.json()
            if not isinstance(ids, list):
                raise FeedFetchError("Unexpected story list format")

            stories = await asyncio.gather(
                *(self._fetch_story(client, sid) for sid in ids[: self._story_count])
            )

        return HackerNewsData(tuple(s for s in stories if s is not None))


def discussion_url(story: HnStory) -> str:
    return HN_ITEM_URL.format(story.id)
