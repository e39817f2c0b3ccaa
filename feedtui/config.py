"""
Dashboard configuration.

Loaded from a TOML file (``~/.feedtui/config.toml`` by default)::

    [general]
    refresh_interval_secs = 60

    [[widgets]]
    type = "hackernews"
    story_count = 10
    position = { row = 0, col = 1 }
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import ClassVar, Union

from feedtui.feeds.hackernews import STORY_LISTS


class ConfigError(Exception):
    """Configuration file is unreadable or describes an invalid layout."""


def default_config_path() -> Path:
    return Path.home() / ".feedtui" / "config.toml"


@dataclass(frozen=True)
class Position:
    row: int
    col: int


@dataclass(frozen=True)
class GeneralConfig:
    refresh_interval_secs: int = 60
    theme: str = "dark"


@dataclass(frozen=True)
class HackernewsConfig:
    kind: ClassVar[str] = "hackernews"
    position: Position
    title: str = "Hacker News"
    story_count: int = 10
    story_type: str = "top"


@dataclass(frozen=True)
class StocksConfig:
    kind: ClassVar[str] = "stocks"
    position: Position
    title: str = "Stocks"
    symbols: tuple[str, ...] = ()


@dataclass(frozen=True)
class RssConfig:
    kind: ClassVar[str] = "rss"
    position: Position
    title: str = "RSS Feed"
    feeds: tuple[str, ...] = ()
    max_items: int = 15


@dataclass(frozen=True)
class SportsConfig:
    kind: ClassVar[str] = "sports"
    position: Position
    title: str = "Sports"
    leagues: tuple[str, ...] = ()


@dataclass(frozen=True)
class GithubConfig:
    kind: ClassVar[str] = "github"
    position: Position
    title: str = "GitHub"
    token: str = ""
    username: str = ""
    show_notifications: bool = True
    show_pull_requests: bool = True
    show_commits: bool = True
    max_notifications: int = 20
    max_pull_requests: int = 20
    max_commits: int = 20


@dataclass(frozen=True)
class YoutubeConfig:
    kind: ClassVar[str] = "youtube"
    position: Position
    title: str = "YouTube"
    api_key: str = ""
    channels: tuple[str, ...] = ()
    search_query: str | None = None
    max_videos: int = 15


@dataclass(frozen=True)
class CreatureConfig:
    kind: ClassVar[str] = "creature"
    position: Position
    title: str = "Tui"
    show_on_startup: bool = False


WidgetConfig = Union[
    HackernewsConfig,
    StocksConfig,
    RssConfig,
    SportsConfig,
    GithubConfig,
    YoutubeConfig,
    CreatureConfig,
]

WIDGET_CONFIG_TYPES: dict[str, type] = {
    cls.kind: cls
    for cls in (
        HackernewsConfig,
        StocksConfig,
        RssConfig,
        SportsConfig,
        GithubConfig,
        YoutubeConfig,
        CreatureConfig,
    )
}

# Credentials that may come from the environment instead of the file
ENV_CREDENTIALS = {
    "github": ("token", "GITHUB_TOKEN"),
    "youtube": ("api_key", "YOUTUBE_API_KEY"),
}


@dataclass(frozen=True)
class Config:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    widgets: tuple[WidgetConfig, ...] = ()


def _parse_position(raw: object, index: int) -> Position:
    if not isinstance(raw, dict) or "row" not in raw or "col" not in raw:
        raise ConfigError(f"widgets[{index}]: position must be {{ row, col }}")
    row, col = raw["row"], raw["col"]
    if not isinstance(row, int) or not isinstance(col, int) or row < 0 or col < 0:
        raise ConfigError(f"widgets[{index}]: position must be non-negative integers")
    return Position(row, col)


def parse_widget(raw: dict, index: int = 0) -> WidgetConfig:
    """Build one widget config from its TOML table."""
    kind = raw.get("type")
    cls = WIDGET_CONFIG_TYPES.get(kind)
    if cls is None:
        raise ConfigError(f"widgets[{index}]: unknown widget type {kind!r}")

    known = {f.name for f in fields(cls)}
    values: dict = {}
    for key, value in raw.items():
        if key in ("type", "position") or key not in known:
            continue
        values[key] = tuple(value) if isinstance(value, list) else value

    if kind in ENV_CREDENTIALS:
        key, env_var = ENV_CREDENTIALS[kind]
        if not values.get(key):
            values[key] = os.environ.get(env_var, "")

    if kind == "hackernews" and values.get("story_type", "top") not in STORY_LISTS:
        raise ConfigError(
            f"widgets[{index}]: story_type must be one of {', '.join(STORY_LISTS)}"
        )

    try:
        return cls(position=_parse_position(raw.get("position"), index), **values)
    except TypeError as e:
        raise ConfigError(f"widgets[{index}]: {e}") from e


def parse_config(data: dict) -> Config:
    general_raw = data.get("general", {})
    general = GeneralConfig(
        refresh_interval_secs=int(general_raw.get("refresh_interval_secs", 60)),
        theme=str(general_raw.get("theme", "dark")),
    )
    if general.refresh_interval_secs <= 0:
        raise ConfigError("general.refresh_interval_secs must be positive")

    widgets = tuple(
        parse_widget(raw, i) for i, raw in enumerate(data.get("widgets", []))
    )

    # Different kinds may share a cell; the same kind twice would share an id
    seen: set[tuple[str, Position]] = set()
    for widget in widgets:
        key = (widget.kind, widget.position)
        if key in seen:
            raise ConfigError(
                f"Two {widget.kind} widgets at row {widget.position.row}, "
                f"col {widget.position.col}"
            )
        seen.add(key)

    return Config(general=general, widgets=widgets)


def load_config(path: Path) -> Config:
    """Load config from a TOML file. Raises ConfigError."""
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Could not load {path}: {e}") from e
    return parse_config(data)


def default_config() -> Config:
    """Layout used when no config file is available."""
    return Config(
        general=GeneralConfig(),
        widgets=(
            CreatureConfig(position=Position(0, 0), show_on_startup=True),
            HackernewsConfig(position=Position(0, 1)),
            StocksConfig(
                position=Position(1, 0),
                symbols=("AAPL", "GOOGL", "MSFT", "NVDA"),
            ),
            RssConfig(
                position=Position(1, 1),
                title="Tech News",
                feeds=("https://feeds.arstechnica.com/arstechnica/technology-lab",),
                max_items=10,
            ),
            SportsConfig(position=Position(2, 0), leagues=("nba", "nfl")),
        ),
    )
