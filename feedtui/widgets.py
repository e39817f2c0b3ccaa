"""
Widget state for each dashboard cell.

The set of widget kinds is closed: one class per kind, built from its config
by ``build_widget``. Call sites that need kind-specific behaviour ``match`` on
the class. Rendering lives in ``feedtui.views``; nothing here draws.
"""

from __future__ import annotations

import time
from typing import ClassVar

from feedtui.config import (
    CreatureConfig,
    GithubConfig,
    HackernewsConfig,
    RssConfig,
    SportsConfig,
    StocksConfig,
    WidgetConfig,
    YoutubeConfig,
)
from feedtui.creature import Creature
from feedtui.feeds import (
    FeedError,
    FeedFetcher,
    FeedPayload,
    GithubData,
    HackerNewsData,
    Loading,
    RssData,
    SportsData,
    StocksData,
    YoutubeData,
)
from feedtui.feeds.github import GithubFetcher
from feedtui.feeds.hackernews import HackerNewsFetcher, discussion_url
from feedtui.feeds.rss import RssFetcher
from feedtui.feeds.sports import SportsFetcher
from feedtui.feeds.stocks import StocksFetcher
from feedtui.feeds.youtube import YoutubeFetcher, watch_url

ANIMATION_FRAME_SECS = 0.5
GREETING_SECS = 5.0


class FeedWidget:
    """Common widget state: items, loading/error flags, cursor, selection."""

    kind: ClassVar[str]

    def __init__(self, config: WidgetConfig) -> None:
        self.config = config
        self._items: list = []
        self.loading = True
        self.error: str | None = None
        self.cursor = 0
        self.selected = False

    @property
    def id(self) -> str:
        row, col = self.position
        return f"{self.kind}-{row}-{col}"

    @property
    def title(self) -> str:
        return self.config.title

    @property
    def position(self) -> tuple[int, int]:
        return (self.config.position.row, self.config.position.col)

    @property
    def items(self) -> list:
        return self._items

    def update_data(self, payload: FeedPayload) -> None:
        """Apply a payload. Payloads of another widget kind are ignored."""
        match payload:
            case Loading():
                self.loading = True
                self.error = None
                return
            case FeedError(message=message):
                self.loading = False
                self.error = message
                return

        if not self._accept(payload):
            return
        self.loading = False
        self.error = None
        self._clamp_cursor()

    def _accept(self, payload: FeedPayload) -> bool:
        """Store a payload of this widget's own kind; False for anything else."""
        raise NotImplementedError

    def create_fetcher(self) -> FeedFetcher:
        raise NotImplementedError

    def _clamp_cursor(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.items) - 1))

    def scroll_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def scroll_down(self) -> None:
        if self.cursor < len(self.items) - 1:
            self.cursor += 1

    def set_selected(self, selected: bool) -> None:
        self.selected = selected

    def selected_item(self):
        if 0 <= self.cursor < len(self.items):
            return self.items[self.cursor]
        return None

    def selected_url(self) -> str | None:
        return None


class HackernewsWidget(FeedWidget):
    kind = "hackernews"
    config: HackernewsConfig

    def _accept(self, payload: FeedPayload) -> bool:
        if not isinstance(payload, HackerNewsData):
            return False
        self._items = list(payload.stories)
        return True

    def create_fetcher(self) -> FeedFetcher:
        return HackerNewsFetcher(self.config.story_type, self.config.story_count)

    def selected_url(self) -> str | None:
        story = self.selected_item()
        if story is None:
            return None
        return story.url or discussion_url(story)


class StocksWidget(FeedWidget):
    kind = "stocks"
    config: StocksConfig

    def _accept(self, payload: FeedPayload) -> bool:
        if not isinstance(payload, StocksData):
            return False
        self._items = list(payload.quotes)
        return True

    def create_fetcher(self) -> FeedFetcher:
        return StocksFetcher(list(self.config.symbols))


class RssWidget(FeedWidget):
    kind = "rss"
    config: RssConfig

    def _accept(self, payload: FeedPayload) -> bool:
        if not isinstance(payload, RssData):
            return False
        self._items = list(payload.items)
        return True

    def create_fetcher(self) -> FeedFetcher:
        return RssFetcher(list(self.config.feeds), self.config.max_items)

    def selected_url(self) -> str | None:
        item = self.selected_item()
        return item.link if item else None


class SportsWidget(FeedWidget):
    kind = "sports"
    config: SportsConfig

    def _accept(self, payload: FeedPayload) -> bool:
        if not isinstance(payload, SportsData):
            return False
        self._items = list(payload.events)
        return True

    def create_fetcher(self) -> FeedFetcher:
        return SportsFetcher(list(self.config.leagues))


class GithubWidget(FeedWidget):
    """Multi-tab widget: notifications, pull requests, commits."""

    kind = "github"
    config: GithubConfig

    TAB_NAMES = {
        "notifications": "Notifications",
        "pull_requests": "Pull Requests",
        "commits": "Commits",
    }

    def __init__(self, config: GithubConfig) -> None:
        super().__init__(config)
        self.data = GithubData()
        self.tabs = [
            tab
            for tab, enabled in (
                ("notifications", config.show_notifications),
                ("pull_requests", config.show_pull_requests),
                ("commits", config.show_commits),
            )
            if enabled
        ] or ["notifications"]
        self.tab_index = 0

    @property
    def current_tab(self) -> str:
        return self.tabs[self.tab_index]

    @property
    def items(self) -> list:
        return list(getattr(self.data, self.current_tab))

    def _accept(self, payload: FeedPayload) -> bool:
        if not isinstance(payload, GithubData):
            return False
        self.data = payload
        return True

    def next_tab(self) -> None:
        self.tab_index = (self.tab_index + 1) % len(self.tabs)
        self.cursor = 0

    def prev_tab(self) -> None:
        self.tab_index = (self.tab_index - 1) % len(self.tabs)
        self.cursor = 0

    def create_fetcher(self) -> FeedFetcher:
        c = self.config
        return GithubFetcher(
            token=c.token,
            username=c.username,
            show_notifications=c.show_notifications,
            show_pull_requests=c.show_pull_requests,
            show_commits=c.show_commits,
            max_notifications=c.max_notifications,
            max_pull_requests=c.max_pull_requests,
            max_commits=c.max_commits,
        )

    def selected_url(self) -> str | None:
        item = self.selected_item()
        return item.url if item else None


class YoutubeWidget(FeedWidget):
    kind = "youtube"
    config: YoutubeConfig

    def _accept(self, payload: FeedPayload) -> bool:
        if not isinstance(payload, YoutubeData):
            return False
        self._items = list(payload.videos)
        return True

    def create_fetcher(self) -> FeedFetcher:
        c = self.config
        return YoutubeFetcher(c.api_key, list(c.channels), c.search_query, c.max_videos)

    def selected_url(self) -> str | None:
        video = self.selected_item()
        return watch_url(video) if video else None


class IdleFetcher:
    """Fetcher for widgets without a remote source."""

    async def fetch(self) -> FeedPayload:
        return Loading()


class CreatureWidget(FeedWidget):
    """Hosts the companion; the only bridge from dispatch to the engine."""

    kind = "creature"
    config: CreatureConfig

    def __init__(self, config: CreatureConfig, creature: Creature) -> None:
        super().__init__(config)
        self.creature = creature
        self.loading = False
        self.animation_frame = 0
        self.show_greeting = config.show_on_startup
        now = time.monotonic()
        self._last_frame_at = now
        self._greeting_until: float | None = (
            now + GREETING_SECS if config.show_on_startup else None
        )

    def update_data(self, payload: FeedPayload) -> None:
        # The companion has no feed; its state comes from the engine.
        return

    def _accept(self, payload: FeedPayload) -> bool:
        return False

    def create_fetcher(self) -> FeedFetcher:
        return IdleFetcher()

    def tick(self, now: float) -> None:
        """Advance the animation frame and expire the greeting."""
        if now - self._last_frame_at >= ANIMATION_FRAME_SECS:
            self.animation_frame += 1
            self._last_frame_at = now
        if self._greeting_until is not None and now >= self._greeting_until:
            self.show_greeting = False
            self._greeting_until = None


def build_widget(config: WidgetConfig, creature: Creature | None = None) -> FeedWidget:
    match config:
        case HackernewsConfig():
            return HackernewsWidget(config)
        case StocksConfig():
            return StocksWidget(config)
        case RssConfig():
            return RssWidget(config)
        case SportsConfig():
            return SportsWidget(config)
        case GithubConfig():
            return GithubWidget(config)
        case YoutubeConfig():
            return YoutubeWidget(config)
        case CreatureConfig():
            return CreatureWidget(config, creature or Creature())
    raise TypeError(f"Unsupported widget config: {config!r}")
