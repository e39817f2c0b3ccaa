"""Companion overlay menu: tab cycling, per-tab cursors and Enter semantics."""

from __future__ import annotations

from enum import Enum

from feedtui.creature import SKILL_TREE, Creature, CreatureSpecies


class MenuTab(str, Enum):
    STATS = "Stats"
    SKILLS = "Skills"
    OUTFITS = "Outfits"
    CUSTOMIZE = "Customize"


MENU_TABS = list(MenuTab)


class CreatureMenu:
    """Overlay state: closed, or open on one of the fixed tabs."""

    def __init__(self) -> None:
        self.visible = False
        self.current_tab = MenuTab.STATS
        self._cursors = {tab: 0 for tab in MENU_TABS}

    def toggle(self) -> None:
        self.visible = not self.visible

    def close(self) -> None:
        self.visible = False

    def next_tab(self) -> None:
        idx = MENU_TABS.index(self.current_tab)
        self.current_tab = MENU_TABS[(idx + 1) % len(MENU_TABS)]

    def prev_tab(self) -> None:
        idx = MENU_TABS.index(self.current_tab)
        self.current_tab = MENU_TABS[(idx - 1) % len(MENU_TABS)]

    @property
    def cursor(self) -> int:
        return self._cursors[self.current_tab]

    def cursor_for(self, tab: MenuTab) -> int:
        return self._cursors[tab]

    def _item_count(self, creature: Creature) -> int:
        if self.current_tab == MenuTab.SKILLS:
            return len(SKILL_TREE)
        if self.current_tab == MenuTab.OUTFITS:
            return len(creature.unlocked_outfits)
        if self.current_tab == MenuTab.CUSTOMIZE:
            return len(CreatureSpecies)
        return 0

    def scroll_up(self) -> None:
        if self._cursors[self.current_tab] > 0:
            self._cursors[self.current_tab] -= 1

    def scroll_down(self, creature: Creature) -> None:
        if self._cursors[self.current_tab] < self._item_count(creature) - 1:
            self._cursors[self.current_tab] += 1

    def select(self, creature: Creature) -> bool:
        """Apply Enter on the current tab. Returns True if anything changed."""
        cursor = self.cursor
        if self.current_tab == MenuTab.SKILLS:
            skills = list(SKILL_TREE.values())
            if cursor >= len(skills):
                return False
            skill = skills[cursor]
            if creature.can_purchase_skill(skill):
                return creature.purchase_skill(skill)
            if skill.id in creature.unlocked_skills:
                return creature.toggle_skill(skill.id)
            return False

        if self.current_tab == MenuTab.OUTFITS:
            if cursor >= len(creature.unlocked_outfits):
                return False
            return creature.equip_outfit(creature.unlocked_outfits[cursor])

        if self.current_tab == MenuTab.CUSTOMIZE:
            species = list(CreatureSpecies)
            if cursor >= len(species):
                return False
            creature.species = species[cursor]
            return True

        return False
