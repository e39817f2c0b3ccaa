"""
Load/save of the companion's state to a single JSON file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from feedtui.creature import (
    Creature,
    CreatureAppearance,
    CreatureColor,
    CreatureMood,
    CreatureSpecies,
    CreatureStats,
    level_for_experience,
    now_utc,
)

logger = logging.getLogger(__name__)

CREATURE_FILE = "tui.json"


class PersistenceError(Exception):
    """Save file could not be read, parsed or written."""


def default_creature_path() -> Path:
    """Per-user save file location (~/.feedtui/tui.json)."""
    return Path.home() / ".feedtui" / CREATURE_FILE


def _parse_datetime(s: str | None) -> datetime:
    if not s:
        return now_utc()
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    # naive timestamps are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def creature_to_dict(creature: Creature) -> dict:
    data = asdict(creature)
    data["species"] = creature.species.value
    data["mood"] = creature.mood.value
    data["appearance"]["primary_color"] = creature.appearance.primary_color.value
    data["appearance"]["secondary_color"] = creature.appearance.secondary_color.value
    data["created_at"] = creature.created_at.isoformat()
    data["last_seen"] = creature.last_seen.isoformat()
    return data


def creature_from_dict(data: dict) -> Creature:
    """Build a Creature; missing keys take defaults, unknown keys are ignored.

    The stored level is not trusted. It is derived from experience, and no
    level rewards are granted for the difference.
    """
    default = Creature()
    appearance = data.get("appearance", {})
    stats = data.get("stats", {})
    experience = max(0, int(data.get("experience", default.experience)))

    stored_level = int(data.get("level", default.level))
    level = level_for_experience(experience)
    if stored_level != level:
        logger.warning(
            "Saved level %d does not match %d experience; using level %d",
            stored_level,
            experience,
            level,
        )

    return Creature(
        name=data.get("name", default.name),
        species=CreatureSpecies(data.get("species", default.species.value)),
        level=level,
        experience=experience,
        points=max(0, int(data.get("points", default.points))),
        stats=CreatureStats(
            happiness=stats.get("happiness", default.stats.happiness),
            energy=stats.get("energy", default.stats.energy),
            knowledge=stats.get("knowledge", default.stats.knowledge),
            charisma=stats.get("charisma", default.stats.charisma),
        ),
        appearance=CreatureAppearance(
            primary_color=CreatureColor(
                appearance.get("primary_color", default.appearance.primary_color.value)
            ),
            secondary_color=CreatureColor(
                appearance.get("secondary_color", default.appearance.secondary_color.value)
            ),
            accessory=appearance.get("accessory"),
            hat=appearance.get("hat"),
            background=appearance.get("background"),
        ),
        unlocked_skills=list(data.get("unlocked_skills", default.unlocked_skills)),
        active_skills=list(data.get("active_skills", default.active_skills)),
        unlocked_outfits=list(data.get("unlocked_outfits", default.unlocked_outfits)),
        equipped_outfit=data.get("equipped_outfit", default.equipped_outfit),
        unlocked_emotes=list(data.get("unlocked_emotes", default.unlocked_emotes)),
        mood=CreatureMood(data.get("mood", default.mood.value)),
        created_at=_parse_datetime(data.get("created_at")),
        last_seen=_parse_datetime(data.get("last_seen")),
        total_sessions=int(data.get("total_sessions", 0)),
        total_time_seconds=int(data.get("total_time_seconds", 0)),
    )


def save_creature(creature: Creature, path: Path) -> None:
    """Write creature state, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(creature_to_dict(creature), indent=2))
    except OSError as e:
        raise PersistenceError(f"Could not write {path}: {e}") from e
    logger.info("Saved %s (level %d) to %s", creature.name, creature.level, path)


def load_creature(path: Path) -> Creature | None:
    """Load creature state, or None if the file doesn't exist."""
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        raise PersistenceError(f"Could not read {path}: {e}") from e

    if not isinstance(data, dict):
        raise PersistenceError(f"Unexpected save file content in {path}")

    try:
        return creature_from_dict(data)
    except (ValueError, TypeError, AttributeError) as e:
        raise PersistenceError(f"Invalid creature data in {path}: {e}") from e


def load_or_create_creature(path: Path) -> Creature:
    """Load and start a new session, or create and save a fresh companion."""
    creature = load_creature(path)
    if creature is None:
        creature = Creature()
        save_creature(creature, path)
        logger.info("Created new companion at %s", path)
        return creature

    try:
        creature.start_session()
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Invalid session data in {path}: {e}") from e
    logger.info(
        "Session %d started for %s (mood: %s)",
        creature.total_sessions,
        creature.name,
        creature.mood.value,
    )
    return creature
