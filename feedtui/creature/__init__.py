"""
Companion progression engine.

The companion ("Tui") is a small deterministic state machine: experience
drives levels, levels grant points and unlocks, points buy skills from a
static tree. Every operation fails locally by returning False; nothing here
raises for an invalid request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)

# Mood thresholds (hours since last seen)
LONELY_AFTER_HOURS = 168
SLEEPY_AFTER_HOURS = 24

# One experience unit per this many seconds of active use
SECONDS_PER_XP = 10


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class CreatureSpecies(str, Enum):
    BLOB = "blob"
    BIRD = "bird"
    CAT = "cat"
    DRAGON = "dragon"
    FOX = "fox"
    OWL = "owl"
    PENGUIN = "penguin"
    ROBOT = "robot"
    SPIRIT = "spirit"
    OCTOPUS = "octopus"

    @property
    def display_name(self) -> str:
        return self.value.title()

    @property
    def description(self) -> str:
        return SPECIES_DESCRIPTIONS[self]


SPECIES_DESCRIPTIONS = {
    CreatureSpecies.BLOB: "A friendly blob that bounces with joy",
    CreatureSpecies.BIRD: "A chirpy companion that loves news",
    CreatureSpecies.CAT: "A curious cat always watching the feeds",
    CreatureSpecies.DRAGON: "A mini dragon with fiery enthusiasm",
    CreatureSpecies.FOX: "A clever fox with sharp insights",
    CreatureSpecies.OWL: "A wise owl for late-night browsing",
    CreatureSpecies.PENGUIN: "A cool penguin that slides through data",
    CreatureSpecies.ROBOT: "A helpful bot that never sleeps",
    CreatureSpecies.SPIRIT: "A mystical spirit from the terminal realm",
    CreatureSpecies.OCTOPUS: "Multi-tasking master of many feeds",
}


class CreatureColor(str, Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"
    ORANGE = "orange"
    PINK = "pink"
    PURPLE = "purple"


class CreatureMood(str, Enum):
    HAPPY = "happy"
    EXCITED = "excited"
    SLEEPY = "sleepy"
    THINKING = "thinking"
    PROUD = "proud"
    LONELY = "lonely"
    CURIOUS = "curious"

    @property
    def emoji(self) -> str:
        return MOOD_EMOJI[self]


MOOD_EMOJI = {
    CreatureMood.HAPPY: ":)",
    CreatureMood.EXCITED: ":D",
    CreatureMood.SLEEPY: "-.-",
    CreatureMood.THINKING: "o.O",
    CreatureMood.PROUD: "^_^",
    CreatureMood.LONELY: ":'(",
    CreatureMood.CURIOUS: "?.?",
}


def _clamp_stat(value: int) -> int:
    return max(0, min(100, int(value)))


@dataclass
class CreatureStats:
    """Cosmetic stat block, each value in 0-100."""

    happiness: int = 80
    energy: int = 100
    knowledge: int = 10
    charisma: int = 10

    def __post_init__(self) -> None:
        self.happiness = _clamp_stat(self.happiness)
        self.energy = _clamp_stat(self.energy)
        self.knowledge = _clamp_stat(self.knowledge)
        self.charisma = _clamp_stat(self.charisma)


@dataclass
class CreatureAppearance:
    primary_color: CreatureColor = CreatureColor.CYAN
    secondary_color: CreatureColor = CreatureColor.WHITE
    accessory: str | None = None
    hat: str | None = None
    background: str | None = None


class SkillCategory(str, Enum):
    PASSIVE = "passive"
    ACTIVE = "active"
    COSMETIC = "cosmetic"
    SOCIAL = "social"


@dataclass(frozen=True)
class SkillEffect:
    """A skill effect: ``kind`` plus an optional argument.

    Kinds: xp_boost (float multiplier), refresh_boost, news_digest,
    stock_alert, custom_emote (emote id), color_unlock (color), animation.
    """

    kind: str
    value: float | str | None = None


@dataclass(frozen=True)
class Skill:
    id: str
    name: str
    description: str
    category: SkillCategory
    cost: int
    prerequisites: tuple[str, ...] = ()
    effects: tuple[SkillEffect, ...] = ()


@dataclass(frozen=True)
class Outfit:
    id: str
    name: str
    description: str
    unlock_level: int | None = None


@dataclass(frozen=True)
class Emote:
    id: str
    name: str
    frames: tuple[str, ...]
    duration_ms: int


@dataclass(frozen=True)
class LevelUpReward:
    """What a single level-up granted. Not persisted."""

    level: int
    points: int
    unlocked_skills: tuple[str, ...] = ()
    unlocked_outfits: tuple[str, ...] = ()
    unlocked_emotes: tuple[str, ...] = ()


# =============================================================================
# Static catalogs
# =============================================================================

SKILL_TREE: dict[str, Skill] = {
    skill.id: skill
    for skill in (
        Skill("greeting", "Greeting", "Tui greets you when you start a session",
              SkillCategory.PASSIVE, 0),
        Skill("news_digest", "News Digest", "Tui highlights the most important news",
              SkillCategory.PASSIVE, 10, ("greeting",), (SkillEffect("news_digest"),)),
        Skill("stock_alert", "Stock Alert", "Tui alerts you on significant stock movements",
              SkillCategory.PASSIVE, 15, ("greeting",), (SkillEffect("stock_alert"),)),
        Skill("speed_read", "Speed Read", "Faster feed refresh rates",
              SkillCategory.PASSIVE, 20, ("news_digest",), (SkillEffect("refresh_boost"),)),
        Skill("xp_boost_1", "Quick Learner", "Gain 10% more XP",
              SkillCategory.PASSIVE, 15, ("greeting",), (SkillEffect("xp_boost", 1.1),)),
        Skill("xp_boost_2", "Fast Learner", "Gain 25% more XP",
              SkillCategory.PASSIVE, 30, ("xp_boost_1",), (SkillEffect("xp_boost", 1.25),)),
        Skill("cosmic_insight", "Cosmic Insight",
              "Tui gains cosmic wisdom about trending topics",
              SkillCategory.PASSIVE, 50, ("news_digest", "stock_alert")),
        Skill("fire_breath", "Fire Breath", "Tui breathes fire when excited (cosmetic)",
              SkillCategory.COSMETIC, 40, (), (SkillEffect("animation", "fire"),)),
        Skill("omniscience", "Omniscience", "Tui knows all. Maximum XP boost and insights.",
              SkillCategory.PASSIVE, 100, ("cosmic_insight", "xp_boost_2"),
              (SkillEffect("xp_boost", 1.5),)),
    )
}

OUTFITS: dict[str, Outfit] = {
    outfit.id: outfit
    for outfit in (
        Outfit("default", "Default", "The classic look", 1),
        Outfit("hacker", "Hacker", "Hoodie and sunglasses for the l33t", 5),
        Outfit("wizard", "Wizard", "Mystical robes and a pointy hat", 10),
        Outfit("ninja", "Ninja", "Stealthy and swift", 15),
        Outfit("astronaut", "Astronaut", "Ready for space exploration", 20),
        Outfit("robot", "Robot", "Mechanical enhancement suit", 25),
        Outfit("dragon", "Dragon", "Scales and wings of legend", 30),
        Outfit("legendary", "Legendary", "The ultimate form. Pure energy.", 50),
    )
}

EMOTES: dict[str, Emote] = {
    emote.id: emote
    for emote in (
        Emote("wave", "Wave", ("o/", "o-", "o\\"), 500),
        Emote("happy", "Happy", ("^_^", "^-^"), 300),
        Emote("excited", "Excited", ("\\o/", "|o|", "/o\\"), 200),
        Emote("cool", "Cool", ("B)", "B-)"), 400),
        Emote("stealth", "Stealth", ("...", "..", ".", ""), 200),
    )
}

# level -> (skills, outfits, emotes) unlocked on reaching it
LEVEL_UNLOCKS: dict[int, tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]] = {
    2: ((), (), ("excited",)),
    3: (("news_digest",), (), ()),
    5: ((), ("hacker",), ("cool",)),
    7: (("stock_alert",), (), ()),
    10: (("speed_read",), ("wizard",), ()),
    15: ((), ("ninja",), ("stealth",)),
    20: (("cosmic_insight",), ("astronaut",), ()),
    25: ((), ("robot",), ()),
    30: (("fire_breath",), ("dragon",), ()),
    50: (("omniscience",), ("legendary",), ()),
}


def xp_for_level(level: int) -> int:
    """Experience needed to reach ``level`` (exponential curve, base 100)."""
    return int(100 * 1.5 ** (level - 1))


def level_for_experience(experience: int) -> int:
    """Greatest level whose threshold ``experience`` has reached."""
    level = 1
    while experience >= xp_for_level(level + 1):
        level += 1
    return level


def level_reward(level: int) -> LevelUpReward:
    """Deterministic reward for reaching ``level``."""
    skills, outfits, emotes = LEVEL_UNLOCKS.get(level, ((), (), ()))
    return LevelUpReward(
        level=level,
        points=5 + (level // 5) * 2,
        unlocked_skills=skills,
        unlocked_outfits=outfits,
        unlocked_emotes=emotes,
    )


def _union_into(target: list[str], new_ids: tuple[str, ...]) -> None:
    for item in new_ids:
        if item not in target:
            target.append(item)


# =============================================================================
# Creature
# =============================================================================


@dataclass
class Creature:
    """The persistent companion. Owned and mutated by the control loop only."""

    name: str = "Tui"
    species: CreatureSpecies = CreatureSpecies.BLOB
    level: int = 1
    experience: int = 0
    points: int = 0
    stats: CreatureStats = field(default_factory=CreatureStats)
    appearance: CreatureAppearance = field(default_factory=CreatureAppearance)
    unlocked_skills: list[str] = field(default_factory=lambda: ["greeting"])
    active_skills: list[str] = field(default_factory=lambda: ["greeting"])
    unlocked_outfits: list[str] = field(default_factory=lambda: ["default"])
    equipped_outfit: str | None = "default"
    unlocked_emotes: list[str] = field(default_factory=lambda: ["wave", "happy"])
    mood: CreatureMood = CreatureMood.HAPPY
    created_at: datetime = field(default_factory=now_utc)
    last_seen: datetime = field(default_factory=now_utc)
    total_sessions: int = 0
    total_time_seconds: int = 0

    # -- levels ---------------------------------------------------------------

    def xp_to_next_level(self) -> int:
        return max(0, xp_for_level(self.level + 1) - self.experience)

    def xp_for_current_level(self) -> int:
        return 0 if self.level == 1 else xp_for_level(self.level)

    def level_progress(self) -> float:
        """Fraction (0.0-1.0) of the way from this level to the next."""
        floor = self.xp_for_current_level()
        ceiling = xp_for_level(self.level + 1)
        progress = (self.experience - floor) / (ceiling - floor)
        return max(0.0, min(1.0, progress))

    def add_experience(self, amount: int) -> list[LevelUpReward]:
        """Add experience and apply every level-up it causes, in order."""
        self.experience += max(0, amount)
        rewards: list[LevelUpReward] = []

        while self.experience >= xp_for_level(self.level + 1):
            self.level += 1
            reward = level_reward(self.level)
            self.points += reward.points
            _union_into(self.unlocked_skills, reward.unlocked_skills)
            _union_into(self.unlocked_outfits, reward.unlocked_outfits)
            _union_into(self.unlocked_emotes, reward.unlocked_emotes)
            rewards.append(reward)

        return rewards

    # -- sessions -------------------------------------------------------------

    def start_session(self, now: datetime | None = None) -> None:
        """Count a new session and derive mood from the time away."""
        now = now or now_utc()
        hours_away = (now - self.last_seen).total_seconds() / 3600
        self.total_sessions += 1
        self.last_seen = now

        if hours_away >= LONELY_AFTER_HOURS:
            self.mood = CreatureMood.LONELY
        elif hours_away >= SLEEPY_AFTER_HOURS:
            self.mood = CreatureMood.SLEEPY
        else:
            self.mood = CreatureMood.HAPPY

    def tick_session(self, seconds: int) -> int:
        """Record active time; return the experience it earns.

        The caller applies the experience so multipliers can sit in between.
        """
        self.total_time_seconds += seconds
        return seconds // SECONDS_PER_XP

    # -- skills and outfits ---------------------------------------------------

    def can_purchase_skill(self, skill: Skill) -> bool:
        return (
            self.points >= skill.cost
            and skill.id not in self.unlocked_skills
            and all(p in self.unlocked_skills for p in skill.prerequisites)
        )

    def purchase_skill(self, skill: Skill) -> bool:
        if not self.can_purchase_skill(skill):
            return False
        self.points -= skill.cost
        self.unlocked_skills.append(skill.id)
        return True

    def toggle_skill(self, skill_id: str) -> bool:
        if skill_id not in self.unlocked_skills:
            return False
        if skill_id in self.active_skills:
            self.active_skills.remove(skill_id)
        else:
            self.active_skills.append(skill_id)
        return True

    def equip_outfit(self, outfit_id: str) -> bool:
        if outfit_id not in self.unlocked_outfits:
            return False
        self.equipped_outfit = outfit_id
        return True
