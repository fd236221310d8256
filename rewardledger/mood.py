from __future__ import annotations

from enum import Enum


class Mood(Enum):
    SAD = "sad"
    BORED = "bored"
    NEUTRAL = "neutral"
    HAPPY = "happy"
    EXCITED = "excited"


# Balance levels that lift the mascot's mood, highest first
MOOD_BOOSTS: tuple[tuple[float, Mood], ...] = (
    (1.0, Mood.EXCITED),
    (0.3, Mood.HAPPY),
)


def mood_for(
    balance: float,
    days_inactive: int = 0,
    bored_after: int = 3,
    sad_after: int = 7,
) -> Mood:
    """Mascot mood: inactivity sets the baseline, a healthy balance overrides it."""
    mood = Mood.NEUTRAL
    if days_inactive >= sad_after:
        mood = Mood.SAD
    elif days_inactive >= bored_after:
        mood = Mood.BORED

    for level, boost in MOOD_BOOSTS:
        if balance >= level:
            return boost
    return mood
