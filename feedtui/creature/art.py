"""Minimal ASCII art and message tables for the companion panel."""

from __future__ import annotations

from feedtui.creature import CreatureMood, CreatureSpecies

MOOD_FACES = {
    CreatureMood.HAPPY: "^_^",
    CreatureMood.EXCITED: "^o^",
    CreatureMood.SLEEPY: "-_-",
    CreatureMood.THINKING: "o.o",
    CreatureMood.PROUD: "^v^",
    CreatureMood.LONELY: ";_;",
    CreatureMood.CURIOUS: "?.?",
}

# Two-frame bodies; "{face}" is substituted
SPECIES_ART = {
    CreatureSpecies.BLOB: (
        ("  .-~~~-.", " /       \\", "|   {face}   |", " \\       /", "  '~---~'"),
        ("  .~~~~~.", " /       \\", "|   {face}   |", " \\       /", "  '-----'"),
    ),
    CreatureSpecies.CAT: (
        ("  /\\_/\\", " ( {face} )", "  > ^ <", " /|   |\\", "(_|   |_)"),
        ("  /\\_/\\", " ( {face} )", "  > ^ <", " /|   |\\", " (_   _)~"),
    ),
    CreatureSpecies.BIRD: (
        ("   __", "  ({face})>", "  /  \\", " /____\\", "   ||"),
        ("   __", " <({face})", "  /  \\", " /____\\", "   ||"),
    ),
    CreatureSpecies.ROBOT: (
        ("  [|||]", " [{face}]", " /|===|\\", "  |___|", "  d   b"),
        ("  [|||]", " [{face}]", " \\|===|/", "  |___|", "  d   b"),
    ),
}

OUTFIT_HATS = {
    "hacker": ("  [===]",),
    "wizard": ("   /\\", "  /  \\", "  ----"),
    "ninja": ("  ~~~~~",),
    "astronaut": ("  /===\\", " |     |"),
    "robot": ("  [|||]",),
    "dragon": ("  ^^^",),
    "legendary": ("  *****", "  *   *"),
}

GREETINGS = {
    CreatureMood.HAPPY: "Hi there! Ready to browse?",
    CreatureMood.EXCITED: "Woohoo! Let's see what's new!",
    CreatureMood.SLEEPY: "*yawn* Good to see you...",
    CreatureMood.THINKING: "Hmm, interesting times...",
    CreatureMood.PROUD: "Look how much we've grown!",
    CreatureMood.LONELY: "I missed you! Where were you?",
    CreatureMood.CURIOUS: "What shall we discover today?",
}

IDLE_FRAMES = ("...", " ..", "  .", "   ", ".  ", ".. ", "...", " . ")


def get_creature_art(
    species: CreatureSpecies,
    mood: CreatureMood,
    outfit: str | None,
    frame: int,
) -> list[str]:
    """Art lines for the companion; species without art use the blob body."""
    frames = SPECIES_ART.get(species, SPECIES_ART[CreatureSpecies.BLOB])
    face = MOOD_FACES[mood]
    body = [line.format(face=face) for line in frames[frame % len(frames)]]
    return list(OUTFIT_HATS.get(outfit or "", ())) + body


def get_greeting(mood: CreatureMood, name: str) -> str:
    return f"{name}: {GREETINGS[mood]}"


def get_idle_message(frame: int) -> str:
    return IDLE_FRAMES[frame % len(IDLE_FRAMES)]


def get_xp_bar(progress: float, width: int) -> str:
    filled = int(max(0.0, min(1.0, progress)) * width)
    return f"[{'=' * filled}{' ' * (width - filled)}]"
