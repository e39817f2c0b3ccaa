"""
Feed payloads and the fetcher protocol.

Every fetcher returns one member of the closed ``FeedPayload`` union. The
scheduler wraps it in a ``RoutedMessage`` addressed to the widget that owns
the fetcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Union

import httpx

USER_AGENT = "feedtui/1.0"
HTTP_TIMEOUT = 30.0


class FeedFetchError(Exception):
    """A feed source returned something we can't use."""


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class HnStory:
    id: int
    title: str
    url: str | None
    score: int
    by: str
    descendants: int


@dataclass(frozen=True)
class StockQuote:
    symbol: str
    price: float
    change: float
    change_percent: float
    name: str


@dataclass(frozen=True)
class RssItem:
    title: str
    link: str | None
    published: str | None
    source: str
    description: str | None = None


@dataclass(frozen=True)
class SportsEvent:
    league: str
    home_team: str
    away_team: str
    home_score: int | None
    away_score: int | None
    status: str
    start_time: str | None


@dataclass(frozen=True)
class GithubNotification:
    id: str
    title: str
    notification_type: str
    repository: str
    url: str
    unread: bool
    updated_at: str
    reason: str


@dataclass(frozen=True)
class GithubPullRequest:
    id: int
    number: int
    title: str
    repository: str
    state: str
    author: str
    created_at: str
    updated_at: str
    draft: bool
    comments: int
    url: str


@dataclass(frozen=True)
class GithubCommit:
    sha: str
    message: str
    author: str
    repository: str
    branch: str
    timestamp: str
    url: str


@dataclass(frozen=True)
class YoutubeVideo:
    id: str
    title: str
    channel: str
    published: str
    description: str = ""
    duration: str = ""
    views: str = ""


# =============================================================================
# Payloads (tagged union)
# =============================================================================


@dataclass(frozen=True)
class HackerNewsData:
    stories: tuple[HnStory, ...]


@dataclass(frozen=True)
class StocksData:
    quotes: tuple[StockQuote, ...]


@dataclass(frozen=True)
class RssData:
    items: tuple[RssItem, ...]


@dataclass(frozen=True)
class SportsData:
    events: tuple[SportsEvent, ...]


@dataclass(frozen=True)
class GithubData:
    notifications: tuple[GithubNotification, ...] = ()
    pull_requests: tuple[GithubPullRequest, ...] = ()
    commits: tuple[GithubCommit, ...] = ()


@dataclass(frozen=True)
class YoutubeData:
    videos: tuple[YoutubeVideo, ...]


@dataclass(frozen=True)
class Loading:
    """Placeholder payload: data is on its way."""


@dataclass(frozen=True)
class FeedError:
    message: str


FeedPayload = Union[
    HackerNewsData,
    StocksData,
    RssData,
    SportsData,
    GithubData,
    YoutubeData,
    Loading,
    FeedError,
]


@dataclass(frozen=True)
class RoutedMessage:
    """A fetch result addressed to one widget."""

    widget_id: str
    payload: FeedPayload = field(default_factory=Loading)


class FeedFetcher(Protocol):
    """Retrieves one refresh cycle of data for a widget."""

    async def fetch(self) -> FeedPayload:
        ...


class HttpFetcher:
    """Base for fetchers that talk HTTP.

    ``transport`` is passed through to httpx so tests can swap in a
    ``httpx.MockTransport``.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    def _client(self, headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=HTTP_TIMEOUT,
            headers={"User-Agent": USER_AGENT, **(headers or {})},
            transport=self._transport,
            follow_redirects=True,
        )
