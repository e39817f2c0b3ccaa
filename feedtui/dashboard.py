"""
Dashboard core: the state the control loop owns and the rules for mutating it.

The textual app feeds three kinds of input in here, all on one event loop:
abstract controls (from key bindings), routed feed messages (from the
scheduler queue) and ticks (from a timer). Nothing else writes widget or
companion state.
"""

from __future__ import annotations

import logging
import webbrowser
from enum import Enum
from typing import Callable

from feedtui.creature import Creature, LevelUpReward
from feedtui.creature.menu import CreatureMenu
from feedtui.feeds import RoutedMessage
from feedtui.widgets import CreatureWidget, FeedWidget, GithubWidget

logger = logging.getLogger(__name__)

XP_TICK_SECS = 10


class Control(str, Enum):
    QUIT = "quit"
    REFRESH = "refresh"
    TOGGLE_OVERLAY = "toggle_overlay"
    CLOSE_OVERLAY = "close_overlay"
    NEXT = "next"
    PREV = "prev"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    TAB_PREV = "tab_prev"
    TAB_NEXT = "tab_next"
    ACTIVATE = "activate"


class Dashboard:
    """Widget registry, selection, overlay routing and companion ticking."""

    def __init__(
        self,
        widgets: list[FeedWidget],
        opener: Callable[[str], object] = webbrowser.open,
        refresher: Callable[[], None] | None = None,
    ) -> None:
        ids = [w.id for w in widgets]
        duplicates = {wid for wid in ids if ids.count(wid) > 1}
        if duplicates:
            raise ValueError(f"Duplicate widget ids: {', '.join(sorted(duplicates))}")

        self.widgets = widgets
        self._by_id = {w.id: w for w in widgets}
        self.selected_index = 0
        self.menu = CreatureMenu()
        self.should_quit = False
        self._opener = opener
        self.refresher = refresher
        self._last_xp_tick: float | None = None

        if widgets:
            widgets[0].set_selected(True)

    # -- lookups --------------------------------------------------------------

    @property
    def selected_widget(self) -> FeedWidget | None:
        if not self.widgets:
            return None
        return self.widgets[self.selected_index]

    @property
    def creature_widget(self) -> CreatureWidget | None:
        for widget in self.widgets:
            match widget:
                case CreatureWidget():
                    return widget
        return None

    @property
    def creature(self) -> Creature | None:
        widget = self.creature_widget
        return widget.creature if widget else None

    def widget(self, widget_id: str) -> FeedWidget | None:
        return self._by_id.get(widget_id)

    def grid_size(self) -> tuple[int, int]:
        """(rows, cols) spanned by the registered positions."""
        if not self.widgets:
            return (1, 1)
        rows = max(w.position[0] for w in self.widgets) + 1
        cols = max(w.position[1] for w in self.widgets) + 1
        return (rows, cols)

    # -- feed messages --------------------------------------------------------

    def handle_feed_message(self, message: RoutedMessage) -> FeedWidget | None:
        """Apply a routed message; unknown ids are dropped."""
        widget = self._by_id.get(message.widget_id)
        if widget is None:
            logger.debug("Dropping message for unknown widget %s", message.widget_id)
            return None
        widget.update_data(message.payload)
        return widget

    # -- controls -------------------------------------------------------------

    def dispatch(self, control: Control) -> None:
        if control == Control.QUIT:
            self.should_quit = True
            return
        if self.menu.visible:
            self._dispatch_overlay(control)
        else:
            self._dispatch_normal(control)

    def _dispatch_overlay(self, control: Control) -> None:
        creature = self.creature
        match control:
            case Control.TOGGLE_OVERLAY | Control.CLOSE_OVERLAY:
                self.menu.close()
            case Control.NEXT:
                self.menu.next_tab()
            case Control.PREV:
                self.menu.prev_tab()
            case Control.SCROLL_UP:
                self.menu.scroll_up()
            case Control.SCROLL_DOWN if creature is not None:
                self.menu.scroll_down(creature)
            case Control.ACTIVATE if creature is not None:
                self.menu.select(creature)

    def _dispatch_normal(self, control: Control) -> None:
        match control:
            case Control.REFRESH:
                self.refresh_all()
            case Control.TOGGLE_OVERLAY:
                if self.creature_widget is not None:
                    self.menu.toggle()
            case Control.NEXT:
                self.next_widget()
            case Control.PREV:
                self.prev_widget()
            case Control.SCROLL_UP:
                if self.selected_widget:
                    self.selected_widget.scroll_up()
            case Control.SCROLL_DOWN:
                if self.selected_widget:
                    self.selected_widget.scroll_down()
            case Control.TAB_NEXT | Control.TAB_PREV:
                self._switch_tab(control)
            case Control.ACTIVATE:
                self.open_selected_url()

    def refresh_all(self) -> None:
        if self.refresher is not None:
            self.refresher()

    def _select(self, index: int) -> None:
        self.widgets[self.selected_index].set_selected(False)
        self.selected_index = index
        self.widgets[self.selected_index].set_selected(True)

    def next_widget(self) -> None:
        if self.widgets:
            self._select((self.selected_index + 1) % len(self.widgets))

    def prev_widget(self) -> None:
        if self.widgets:
            self._select((self.selected_index - 1) % len(self.widgets))

    def _switch_tab(self, control: Control) -> None:
        match self.selected_widget:
            case GithubWidget() as widget:
                if control == Control.TAB_NEXT:
                    widget.next_tab()
                else:
                    widget.prev_tab()

    def open_selected_url(self) -> None:
        widget = self.selected_widget
        url = widget.selected_url() if widget else None
        if not url:
            return
        try:
            self._opener(url)
        except Exception as e:
            logger.warning("Could not open %s: %s", url, e)

    # -- ticks ----------------------------------------------------------------

    def tick(self, now: float) -> list[LevelUpReward]:
        """Advance the companion: animation every call, XP every 10 s.

        Returns the level-up rewards earned on this tick.
        """
        widget = self.creature_widget
        if widget is None:
            return []

        widget.tick(now)
        if self._last_xp_tick is None:
            self._last_xp_tick = now
            return []
        if now - self._last_xp_tick < XP_TICK_SECS:
            return []

        self._last_xp_tick = now
        creature = widget.creature
        rewards = creature.add_experience(creature.tick_session(XP_TICK_SECS))
        for reward in rewards:
            logger.info("%s reached level %d (+%d points)", creature.name, reward.level, reward.points)
        return rewards
