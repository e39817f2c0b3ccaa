"""Unit tests for configuration loading."""

from pathlib import Path

import pytest

from feedtui.config import (
    ConfigError,
    CreatureConfig,
    GithubConfig,
    HackernewsConfig,
    Position,
    RssConfig,
    YoutubeConfig,
    default_config,
    load_config,
    parse_config,
    parse_widget,
)

SAMPLE_CONFIG = """
[general]
refresh_interval_secs = 30

[[widgets]]
type = "creature"
title = "Buddy"
show_on_startup = true
position = { row = 0, col = 0 }

[[widgets]]
type = "hackernews"
story_count = 5
story_type = "best"
position = { row = 0, col = 1 }

[[widgets]]
type = "rss"
feeds = ["https://example.com/feed.xml"]
max_items = 3
position = { row = 1, col = 0 }
"""


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_sample(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(SAMPLE_CONFIG)

        config = load_config(path)

        assert config.general.refresh_interval_secs == 30
        assert [w.kind for w in config.widgets] == ["creature", "hackernews", "rss"]
        creature, hn, rss = config.widgets
        assert creature == CreatureConfig(Position(0, 0), title="Buddy", show_on_startup=True)
        assert hn.story_count == 5
        assert hn.story_type == "best"
        assert rss.feeds == ("https://example.com/feed.xml",)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[general\nrefresh = ")
        with pytest.raises(ConfigError):
            load_config(path)


class TestParseConfig:
    """Tests for parse_config."""

    def test_empty_config_uses_defaults(self) -> None:
        config = parse_config({})
        assert config.general.refresh_interval_secs == 60
        assert config.general.theme == "dark"
        assert config.widgets == ()

    def test_non_positive_interval_rejected(self) -> None:
        with pytest.raises(ConfigError):
            parse_config({"general": {"refresh_interval_secs": 0}})

    def test_same_kind_same_position_rejected(self) -> None:
        widget = {"type": "stocks", "position": {"row": 0, "col": 0}}
        with pytest.raises(ConfigError):
            parse_config({"widgets": [widget, dict(widget)]})

    def test_different_kinds_may_share_position(self) -> None:
        config = parse_config(
            {
                "widgets": [
                    {"type": "stocks", "position": {"row": 0, "col": 0}},
                    {"type": "rss", "position": {"row": 0, "col": 0}},
                ]
            }
        )
        assert len(config.widgets) == 2


class TestParseWidget:
    """Tests for parse_widget."""

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ConfigError):
            parse_widget({"type": "weather", "position": {"row": 0, "col": 0}})

    def test_missing_position_rejected(self) -> None:
        with pytest.raises(ConfigError):
            parse_widget({"type": "stocks"})

    def test_negative_position_rejected(self) -> None:
        with pytest.raises(ConfigError):
            parse_widget({"type": "stocks", "position": {"row": -1, "col": 0}})

    def test_bad_story_type_rejected(self) -> None:
        with pytest.raises(ConfigError):
            parse_widget(
                {"type": "hackernews", "story_type": "hot", "position": {"row": 0, "col": 0}}
            )

    def test_unknown_keys_ignored(self) -> None:
        widget = parse_widget(
            {"type": "hackernews", "colour": "orange", "position": {"row": 0, "col": 0}}
        )
        assert isinstance(widget, HackernewsConfig)

    def test_lists_become_tuples(self) -> None:
        widget = parse_widget(
            {"type": "rss", "feeds": ["a", "b"], "position": {"row": 0, "col": 0}}
        )
        assert isinstance(widget, RssConfig)
        assert widget.feeds == ("a", "b")

    def test_github_token_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        widget = parse_widget({"type": "github", "position": {"row": 0, "col": 0}})
        assert isinstance(widget, GithubConfig)
        assert widget.token == "env-token"

    def test_file_token_wins_over_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        widget = parse_widget(
            {"type": "github", "token": "file-token", "position": {"row": 0, "col": 0}}
        )
        assert widget.token == "file-token"

    def test_youtube_key_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YOUTUBE_API_KEY", "yt-key")
        widget = parse_widget({"type": "youtube", "position": {"row": 1, "col": 1}})
        assert isinstance(widget, YoutubeConfig)
        assert widget.api_key == "yt-key"


class TestDefaultConfig:
    """Tests for default_config."""

    def test_has_creature_and_unique_positions(self) -> None:
        config = default_config()
        assert any(isinstance(w, CreatureConfig) for w in config.widgets)
        positions = [w.position for w in config.widgets]
        assert len(positions) == len(set(positions))
