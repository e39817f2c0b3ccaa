"""Companion overlay: stats, skill tree, wardrobe and species picker."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, Static

from feedtui.creature import OUTFITS, SKILL_TREE, Creature, CreatureSpecies
from feedtui.creature.art import get_xp_bar
from feedtui.creature.menu import MENU_TABS, CreatureMenu, MenuTab
from feedtui.dashboard import Dashboard
from feedtui.views.widgets import CURSOR_STYLE


def _render_stats(creature: Creature) -> Text:
    text = Text()
    text.append(f"{creature.name} the {creature.species.display_name}\n", style="bold")
    text.append(f"{creature.species.description}\n\n", style="dim")
    text.append(f"Level {creature.level}  ")
    text.append(get_xp_bar(creature.level_progress(), 24), style="green")
    text.append(f"  {creature.experience} XP, {creature.xp_to_next_level()} to next\n")
    text.append(f"Skill points: {creature.points}\n")
    text.append(f"Mood: {creature.mood.value} {creature.mood.emoji}\n\n")

    stats = creature.stats
    for name, value in (
        ("Happiness", stats.happiness),
        ("Energy", stats.energy),
        ("Knowledge", stats.knowledge),
        ("Charisma", stats.charisma),
    ):
        text.append(f"{name:<10} {get_xp_bar(value / 100, 20)} {value}\n")

    minutes = creature.total_time_seconds // 60
    text.append(
        f"\nSessions: {creature.total_sessions}  Time together: {minutes} min\n", style="dim"
    )
    return text


def _render_skills(creature: Creature, cursor: int) -> Text:
    text = Text()
    text.append(f"Points available: {creature.points}\n\n", style="bold")
    for i, skill in enumerate(SKILL_TREE.values()):
        if skill.id in creature.active_skills:
            marker, style = "[*]", "green"
        elif skill.id in creature.unlocked_skills:
            marker, style = "[ ]", ""
        elif creature.can_purchase_skill(skill):
            marker, style = "[$]", "yellow"
        else:
            marker, style = "[x]", "dim"
        if i == cursor:
            style = f"{style} {CURSOR_STYLE}".strip()
        text.append(f"{marker} {skill.name} ({skill.cost} pts)", style=style)
        text.append(f"  {skill.description}\n", style="dim")
    text.append("\n[*] active  [ ] owned  [$] affordable  [x] locked", style="dim")
    return text


def _render_outfits(creature: Creature, cursor: int) -> Text:
    text = Text()
    for i, outfit_id in enumerate(creature.unlocked_outfits):
        outfit = OUTFITS.get(outfit_id)
        name = outfit.name if outfit else outfit_id
        marker = ">" if outfit_id == creature.equipped_outfit else " "
        style = CURSOR_STYLE if i == cursor else ""
        text.append(f"{marker} {name}", style=style)
        if outfit:
            text.append(f"  {outfit.description}", style="dim")
        text.append("\n")

    locked = [o for o in OUTFITS.values() if o.id not in creature.unlocked_outfits]
    if locked:
        text.append("\nLocked:\n", style="dim")
        for outfit in locked:
            text.append(f"  {outfit.name} (level {outfit.unlock_level})\n", style="dim")
    return text


def _render_customize(creature: Creature, cursor: int) -> Text:
    text = Text()
    text.append("Species\n\n", style="bold")
    for i, species in enumerate(CreatureSpecies):
        marker = ">" if species == creature.species else " "
        style = CURSOR_STYLE if i == cursor else ""
        text.append(f"{marker} {species.display_name}", style=style)
        text.append(f"  {species.description}\n", style="dim")
    return text


def render_menu_tab(menu: CreatureMenu, creature: Creature) -> Text:
    match menu.current_tab:
        case MenuTab.STATS:
            return _render_stats(creature)
        case MenuTab.SKILLS:
            return _render_skills(creature, menu.cursor)
        case MenuTab.OUTFITS:
            return _render_outfits(creature, menu.cursor)
        case MenuTab.CUSTOMIZE:
            return _render_customize(creature, menu.cursor)
    return Text()


class MenuTabs(Static):
    def __init__(self, menu: CreatureMenu, **kwargs) -> None:
        super().__init__(**kwargs)
        self._menu = menu

    def render(self) -> Text:
        text = Text()
        for tab in MENU_TABS:
            style = "bold reverse" if tab == self._menu.current_tab else "dim"
            text.append(f" {tab.value} ", style=style)
        return text


class MenuBody(Static):
    def __init__(self, menu: CreatureMenu, creature: Creature, **kwargs) -> None:
        super().__init__(**kwargs)
        self._menu = menu
        self._creature = creature

    def render(self) -> Text:
        return render_menu_tab(self._menu, self._creature)


class CreatureMenuScreen(ModalScreen):
    """Overlay drawn above the dashboard while the companion menu is open.

    Keys are handled by the app bindings; this screen only draws.
    """

    DEFAULT_CSS = """
    CreatureMenuScreen {
        align: center middle;
    }

    CreatureMenuScreen #menu {
        width: 80%;
        height: 80%;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }

    CreatureMenuScreen MenuTabs {
        height: 1;
        margin-bottom: 1;
    }

    CreatureMenuScreen MenuBody {
        height: 1fr;
    }

    CreatureMenuScreen .menu-help {
        color: $text-muted;
    }
    """

    def __init__(self, dashboard: Dashboard, **kwargs) -> None:
        super().__init__(**kwargs)
        self._dashboard = dashboard

    def compose(self) -> ComposeResult:
        menu = self._dashboard.menu
        with Vertical(id="menu"):
            yield MenuTabs(menu)
            yield MenuBody(menu, self._dashboard.creature or Creature())
            yield Label(
                "tab: switch tab | j/k: move | enter: select | esc/t: close",
                classes="menu-help",
            )

    def on_mount(self) -> None:
        self.query_one("#menu").border_title = "Tui"

    def sync(self) -> None:
        self.query_one(MenuTabs).refresh()
        self.query_one(MenuBody).refresh()
