"""Study app wiring: every screen reports into one reward engine."""
from __future__ import annotations

from datetime import datetime, timedelta

from rewardledger._types import ActivityKind
from rewardledger.achievement import DEFAULT_ACHIEVEMENTS, AchievementDef
from rewardledger.engine import RewardEngine
from rewardledger.formatting import format_stats
from rewardledger.notifications import EventTopic
from rewardledger.persistence import MemoryGateway, PersistenceGateway
from rewardledger.producers import CumulativeTracker, screen_producers
from rewardledger.requirement import Req
from rewardledger.rules import LedgerRules


def define_rules() -> LedgerRules:
    rules = LedgerRules()
    rules.daily_goals[ActivityKind.WORDS_WRITTEN] = 300
    return rules


def define_achievements() -> list[AchievementDef]:
    return list(DEFAULT_ACHIEVEMENTS) + [
        AchievementDef(
            "night_owl",
            "Write 1000 words and focus 100 minutes",
            Req.activity(ActivityKind.WORDS_WRITTEN, ">=", 1000)
            & Req.activity(ActivityKind.FOCUS_MINUTES, ">=", 100),
        ),
    ]


class _SteppedClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=5)
        return self.now


def run_demo(gateway: PersistenceGateway | None = None) -> RewardEngine:
    """Replay one study session and return the engine."""
    engine = RewardEngine(
        gateway or MemoryGateway(),
        rules=define_rules(),
        achievements=define_achievements(),
        clock=_SteppedClock(datetime(2026, 3, 10, 8, 0)),
    )
    engine.subscribe(
        EventTopic.NOTIFICATION, lambda n: print(f"[{n.severity.value}] {n.message}")
    )
    engine.boot()

    screens = screen_producers(engine)
    editor = CumulativeTracker(screens["notes"])

    for _ in range(12):
        screens["todolist"].report()
    for total in (120, 480, 450, 1100):
        editor.update(total)
    for _ in range(4):
        screens["pomodoro"].report(25)
    screens["flashcards"].report(14)
    screens["quiz"].report(10)
    engine.record_quiz_result(10, 10)
    engine.record_hydration(8)
    engine.spend_cc(0.5, "carrot hat")
    return engine


if __name__ == "__main__":
    demo = run_demo()
    print(format_stats(demo.get_stats(), demo.daily_goals_status()))
