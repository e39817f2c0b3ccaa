"""Main dashboard screen: a grid with one cell per configured position."""

from __future__ import annotations

from collections import defaultdict

from textual.app import ComposeResult
from textual.containers import Grid, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Label

from feedtui.dashboard import Dashboard
from feedtui.views.widgets import WidgetPanel
from feedtui.widgets import FeedWidget


class DashboardScreen(Screen):
    """Grid of widget panels. Unused cells stay empty."""

    DEFAULT_CSS = """
    DashboardScreen #grid {
        layout: grid;
        grid-gutter: 0 1;
    }

    DashboardScreen .cell {
        height: 1fr;
    }

    .no-widgets {
        text-align: center;
        margin: 2;
        color: $warning;
    }
    """

    def __init__(self, dashboard: Dashboard, **kwargs) -> None:
        super().__init__(**kwargs)
        self._dashboard = dashboard

    def compose(self) -> ComposeResult:
        yield Header()

        if not self._dashboard.widgets:
            yield Label(
                "No widgets configured.\n\nAdd [[widgets]] tables to your config file.",
                classes="no-widgets",
            )
            yield Footer()
            return

        rows, cols = self._dashboard.grid_size()
        cells: dict[tuple[int, int], list[FeedWidget]] = defaultdict(list)
        for widget in self._dashboard.widgets:
            cells[widget.position].append(widget)

        grid = Grid(id="grid")
        grid.styles.grid_size_columns = cols
        grid.styles.grid_size_rows = rows
        with grid:
            for row in range(rows):
                for col in range(cols):
                    with Vertical(classes="cell"):
                        for widget in cells.get((row, col), []):
                            yield WidgetPanel(widget, id=f"panel-{widget.id}")

        yield Footer()

    def sync_widget(self, widget_id: str) -> None:
        for panel in self.query(WidgetPanel):
            if panel.feed_widget.id == widget_id:
                panel.sync()

    def sync_panels(self) -> None:
        for panel in self.query(WidgetPanel):
            panel.sync()
