"""RSS/Atom feeds, parsed with feedparser."""

from __future__ import annotations

import logging
import time

import feedparser
import httpx

from feedtui.feeds import FeedFetchError, HttpFetcher, RssData, RssItem

logger = logging.getLogger(__name__)


def _published(entry) -> str | None:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return time.strftime("%Y-%m-%d %H:%M", parsed)


def parse_feed(content: bytes, max_items: int) -> list[RssItem]:
    parsed = feedparser.parse(content)
    if parsed.bozo and not parsed.entries:
        raise FeedFetchError(f"Unparseable feed: {parsed.get('bozo_exception')}")

    source = parsed.feed.get("title") or "Unknown"
    items = []
    for entry in parsed.entries[:max_items]:
        items.append(
            RssItem(
                title=entry.get("title") or "No title",
                link=entry.get("link"),
                published=_published(entry),
                source=source,
                description=entry.get("summary"),
            )
        )
    return items


class RssFetcher(HttpFetcher):
    def __init__(
        self,
        feeds: list[str],
        max_items: int = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(transport)
        self._feeds = list(feeds)
        self._max_items = max_items

    async def fetch(self) -> RssData:
        all_items: list[RssItem] = []

        async with self._client() as client:
            for url in self._feeds:
                try:
                    resp = await client.get(url)
                    resp.raise_for_status()
                    all_items.extend(parse_feed(resp.content, self._max_items))
                except (httpx.HTTPError, FeedFetchError) as e:
                    # One broken feed shouldn't blank the others
                    logger.warning("Feed %s failed: %s", url, e)

        all_items.sort(key=lambda item: item.published or "", reverse=True)
        return RssData(tuple(all_items[: self._max_items]))
