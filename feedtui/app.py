"""
feedtui application.

Owns the single control loop: key bindings become dashboard controls, the
consumer worker drains the feed queue and a timer drives the companion.
"""

from __future__ import annotations

import logging
import time
import webbrowser
from functools import partial
from pathlib import Path
from typing import Callable

from textual.app import App
from textual.binding import Binding
from textual.worker import Worker

from feedtui.config import Config, default_config
from feedtui.creature import Creature
from feedtui.creature.persistence import (
    PersistenceError,
    default_creature_path,
    load_or_create_creature,
    save_creature,
)
from feedtui.dashboard import Control, Dashboard
from feedtui.scheduler import FeedQueue, FeedScheduler
from feedtui.views.creature_menu import CreatureMenuScreen
from feedtui.views.dashboard import DashboardScreen
from feedtui.widgets import build_widget

logger = logging.getLogger(__name__)

# Companion animation/XP timer, in seconds
TICK_INTERVAL = 0.25

THEMES = {"dark": "textual-dark", "light": "textual-light"}


class FeedtuiApp(App):
    """Terminal dashboard with a companion creature."""

    TITLE = "feedtui"
    SUB_TITLE = "Terminal Dashboard"

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("q", "control('quit')", "Quit", priority=True),
        Binding("ctrl+c", "control('quit')", "Quit", show=False, priority=True),
        Binding("r", "control('refresh')", "Refresh", priority=True),
        Binding("t", "control('toggle_overlay')", "Tui", priority=True),
        Binding("escape", "control('close_overlay')", "Close", show=False, priority=True),
        Binding("tab", "control('next')", "Next", priority=True),
        Binding("shift+tab", "control('prev')", "Prev", show=False, priority=True),
        Binding("down,j", "control('scroll_down')", "Down", show=False, priority=True),
        Binding("up,k", "control('scroll_up')", "Up", show=False, priority=True),
        Binding("left,h", "control('tab_prev')", "Tab", show=False, priority=True),
        Binding("right,l", "control('tab_next')", "Tab", show=False, priority=True),
        Binding("enter", "control('activate')", "Open", priority=True),
    ]

    def __init__(
        self,
        config: Config | None = None,
        creature_path: Path | None = None,
        opener: Callable[[str], object] = webbrowser.open,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._config = config or default_config()
        self.creature_path = creature_path or default_creature_path()
        self.creature = self._load_creature()

        widgets = [build_widget(c, self.creature) for c in self._config.widgets]
        self.queue = FeedQueue()
        self.scheduler = FeedScheduler(
            self.queue, self._config.general.refresh_interval_secs
        )
        self._opener = opener
        self.dashboard = Dashboard(
            widgets, opener=self.open_url, refresher=self.scheduler.refresh_all
        )
        self._dashboard_screen: DashboardScreen | None = None
        self._persisted = False

    def _load_creature(self) -> Creature:
        try:
            return load_or_create_creature(self.creature_path)
        except PersistenceError as e:
            logger.warning("Starting with a fresh companion: %s", e)
            creature = Creature()
            creature.start_session()
            return creature

    def open_url(self, url: str) -> Worker:
        """Open a link on a worker thread; a terminal browser may block."""
        return self.run_worker(
            partial(self._open_url_blocking, url),
            name="open-url",
            group="open-url",
            thread=True,
            exit_on_error=False,
        )

    def _open_url_blocking(self, url: str) -> None:
        try:
            self._opener(url)
        except Exception as e:
            logger.warning("Could not open %s: %s", url, e)

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.theme = THEMES.get(self._config.general.theme, "textual-dark")
        self._dashboard_screen = DashboardScreen(self.dashboard)
        self.push_screen(self._dashboard_screen)

        self.scheduler.start({w.id: w.create_fetcher() for w in self.dashboard.widgets})
        self.run_worker(self._consume_feeds(), name="feed-consumer", exclusive=True)
        self.set_interval(TICK_INTERVAL, self._tick)

    async def _consume_feeds(self) -> None:
        while True:
            message = await self.queue.get()
            widget = self.dashboard.handle_feed_message(message)
            if widget is not None:
                self._dashboard_screen.sync_widget(widget.id)

    def _tick(self) -> None:
        rewards = self.dashboard.tick(time.monotonic())
        for reward in rewards:
            self.notify(
                f"{self.creature.name} reached level {reward.level}! +{reward.points} points"
            )

        creature_widget = self.dashboard.creature_widget
        if creature_widget is not None:
            self._dashboard_screen.sync_widget(creature_widget.id)
        if rewards and isinstance(self.screen, CreatureMenuScreen):
            self.screen.sync()

    def action_control(self, name: str) -> None:
        """Route a key binding through the dashboard."""
        self.dashboard.dispatch(Control(name))
        if self.dashboard.should_quit:
            self.persist()
            self.exit()
            return
        self._sync_overlay()
        self._dashboard_screen.sync_panels()

    def _sync_overlay(self) -> None:
        """Push or pop the companion menu to match the dashboard state."""
        visible = self.dashboard.menu.visible
        on_menu = isinstance(self.screen, CreatureMenuScreen)
        if visible and not on_menu:
            self.push_screen(CreatureMenuScreen(self.dashboard))
        elif not visible and on_menu:
            self.pop_screen()
        elif on_menu:
            self.screen.sync()

    def persist(self) -> None:
        """Save the companion once; later calls do nothing."""
        if self._persisted:
            return
        self._persisted = True
        try:
            save_creature(self.creature, self.creature_path)
        except PersistenceError as e:
            logger.warning("Companion not saved: %s", e)


def run(config: Config | None = None, creature_path: Path | None = None) -> None:
    """Run the TUI application and save the companion however it exits."""
    app = FeedtuiApp(config=config, creature_path=creature_path)
    try:
        app.run()
    finally:
        app.persist()


if __name__ == "__main__":
    run()
