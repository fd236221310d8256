"""Thin handles that productivity screens use to report activity."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rewardledger._types import ActivityKind

if TYPE_CHECKING:
    from rewardledger.engine import RewardEngine


class ActivityProducer:
    """Reports one activity kind into an engine.

    Screens get one of these injected instead of a reference to the whole
    engine, so a task list can only ever report completed tasks.
    """

    def __init__(self, engine: RewardEngine, kind: ActivityKind) -> None:
        self.engine = engine
        self.kind = kind

    def report(self, count: int = 1) -> float:
        """Report an incremental *count*. Returns the CC it earned."""
        return self.engine.track_activity(self.kind, count)


class CumulativeTracker:
    """Turns a running total into the positive deltas the engine expects.

    Editors know the current word count, not how many words were just added.
    Shrinking totals (deletions) are never reported; the baseline follows
    them down. Call ``rebase`` when a different document is opened so its
    existing words are not counted as new.
    """

    def __init__(self, producer: ActivityProducer, baseline: int = 0) -> None:
        self.producer = producer
        self.baseline = baseline

    def update(self, total: int) -> float:
        """Report growth of *total* since the last update. Returns CC earned."""
        if total > self.baseline:
            delta = total - self.baseline
            self.baseline = total
            return self.producer.report(delta)
        self.baseline = total
        return 0.0

    def rebase(self, total: int = 0) -> None:
        """Start counting from *total* without reporting anything."""
        self.baseline = total


def screen_producers(engine: RewardEngine) -> dict[str, ActivityProducer]:
    """One producer per screen of the study app."""
    return {
        "todolist": ActivityProducer(engine, ActivityKind.TASKS_COMPLETED),
        "notes": ActivityProducer(engine, ActivityKind.WORDS_WRITTEN),
        "pomodoro": ActivityProducer(engine, ActivityKind.FOCUS_MINUTES),
        "flashcards": ActivityProducer(engine, ActivityKind.FLASHCARDS_CORRECT),
        "quiz": ActivityProducer(engine, ActivityKind.QUIZ_CORRECT),
    }
