"""Panels that draw each widget kind inside its grid cell."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from feedtui.creature import CreatureColor
from feedtui.creature.art import get_creature_art, get_greeting, get_idle_message, get_xp_bar
from feedtui.widgets import (
    CreatureWidget,
    FeedWidget,
    GithubWidget,
    HackernewsWidget,
    RssWidget,
    SportsWidget,
    StocksWidget,
    YoutubeWidget,
)

CURSOR_STYLE = "bold reverse"

# Companion colours without a rich colour of the same name
RICH_COLORS = {
    CreatureColor.ORANGE: "orange1",
    CreatureColor.PINK: "pink1",
}


def color_style(color: CreatureColor) -> str:
    return RICH_COLORS.get(color, color.value)


def _row(text: Text, line: str, style: str = "", highlighted: bool = False) -> None:
    text.append(line, style=f"{style} {CURSOR_STYLE}".strip() if highlighted else style)
    text.append("\n")


def _render_hackernews(widget: HackernewsWidget) -> Text:
    text = Text()
    for i, story in enumerate(widget.items):
        on = i == widget.cursor
        _row(text, f"{i + 1}. {story.title}", "bold", on)
        _row(text, f"   {story.score} pts | {story.descendants} comments | by {story.by}", "dim")
    return text


def _render_stocks(widget: StocksWidget) -> Text:
    text = Text()
    for i, quote in enumerate(widget.items):
        arrow = "▲" if quote.change >= 0 else "▼"
        color = "green" if quote.change >= 0 else "red"
        line = (
            f"{quote.symbol:<6} {quote.price:>10.2f}  "
            f"{arrow} {quote.change:+.2f} ({quote.change_percent:+.2f}%)"
        )
        _row(text, line, color, i == widget.cursor)
    return text


def _render_rss(widget: RssWidget) -> Text:
    text = Text()
    for i, item in enumerate(widget.items):
        _row(text, f"• {item.title}", "bold", i == widget.cursor)
        meta = " | ".join(part for part in (item.source, item.published) if part)
        _row(text, f"  {meta}", "dim")
    return text


def _render_sports(widget: SportsWidget) -> Text:
    text = Text()
    for i, event in enumerate(widget.items):
        if event.home_score is not None and event.away_score is not None:
            score = f"{event.away_score} - {event.home_score}"
        else:
            score = "vs"
        line = f"[{event.league}] {event.away_team} {score} {event.home_team}"
        _row(text, line, "bold", i == widget.cursor)
        _row(text, f"  {event.status}", "dim")
    return text


def _render_github(widget: GithubWidget) -> Text:
    text = Text()
    for i, tab in enumerate(widget.tabs):
        style = "bold yellow" if i == widget.tab_index else "dim"
        text.append(f" {GithubWidget.TAB_NAMES[tab]} ", style=style)
    text.append("\n\n")

    for i, item in enumerate(widget.items):
        on = i == widget.cursor
        match widget.current_tab:
            case "notifications":
                marker = "●" if item.unread else "○"
                _row(text, f"{marker} {item.title}", "bold", on)
                _row(text, f"  {item.repository} | {item.reason}", "dim")
            case "pull_requests":
                marker = "draft" if item.draft else item.state
                _row(text, f"#{item.number} {item.title}", "bold", on)
                _row(text, f"  {item.repository} | {marker} | by {item.author}", "dim")
            case "commits":
                _row(text, f"{item.sha} {item.message}", "bold", on)
                _row(text, f"  {item.repository}@{item.branch} | {item.author}", "dim")
    return text


def _render_youtube(widget: YoutubeWidget) -> Text:
    text = Text()
    for i, video in enumerate(widget.items):
        _row(text, f"▶ {video.title}", "bold", i == widget.cursor)
        meta = " | ".join(p for p in (video.channel, video.duration, video.views, video.published) if p)
        _row(text, f"  {meta}", "dim")
    return text


def _render_creature(widget: CreatureWidget) -> Text:
    creature = widget.creature
    text = Text()
    for line in get_creature_art(
        creature.species, creature.mood, creature.equipped_outfit, widget.animation_frame
    ):
        text.append(line + "\n", style=color_style(creature.appearance.primary_color))

    text.append(f"\nLv.{creature.level}  ", style="bold")
    text.append(get_xp_bar(creature.level_progress(), 20), style="green")
    text.append(f" {creature.xp_to_next_level()} XP to go\n", style="dim")

    stats = creature.stats
    text.append(
        f"HAP {stats.happiness}  NRG {stats.energy}  "
        f"KNW {stats.knowledge}  CHA {stats.charisma}  pts {creature.points}\n",
        style="dim",
    )
    if widget.show_greeting:
        text.append(get_greeting(creature.mood, creature.name), style="italic")
    else:
        text.append(f"{creature.mood.emoji} {get_idle_message(widget.animation_frame)}")
    return text


def render_widget(widget: FeedWidget) -> Text:
    """Rich text for one widget, including its loading/error states."""
    if isinstance(widget, CreatureWidget):
        return _render_creature(widget)

    if widget.loading and not widget.items:
        return Text("Loading...", style="dim")
    if widget.error:
        return Text(f"Error: {widget.error}", style="red")
    if not widget.items:
        return Text("No items", style="dim")

    match widget:
        case HackernewsWidget():
            return _render_hackernews(widget)
        case StocksWidget():
            return _render_stocks(widget)
        case RssWidget():
            return _render_rss(widget)
        case SportsWidget():
            return _render_sports(widget)
        case GithubWidget():
            return _render_github(widget)
        case YoutubeWidget():
            return _render_youtube(widget)
    return Text()


class WidgetPanel(Static):
    """Bordered panel for one dashboard widget."""

    DEFAULT_CSS = """
    WidgetPanel {
        height: 1fr;
        border: solid $primary;
        padding: 0 1;
        overflow-y: auto;
    }

    WidgetPanel.selected {
        border: solid $warning;
    }
    """

    def __init__(self, widget: FeedWidget, **kwargs) -> None:
        super().__init__(**kwargs)
        self.feed_widget = widget

    def on_mount(self) -> None:
        self.sync()

    def sync(self) -> None:
        """Pull fresh state from the widget and redraw."""
        widget = self.feed_widget
        title = widget.title
        if isinstance(widget, CreatureWidget):
            title = f"{widget.title} - {widget.creature.name} (Lv.{widget.creature.level})"
        self.border_title = title
        self.set_class(widget.selected, "selected")
        self.refresh()

    def render(self) -> Text:
        return render_widget(self.feed_widget)
