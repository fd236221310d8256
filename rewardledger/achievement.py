from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from rewardledger._types import ActivityKind
from rewardledger.notifications import EventBus, EventTopic, Severity
from rewardledger.requirement import EvaluationContext, Req, Requirement

if TYPE_CHECKING:
    from rewardledger.rules import LedgerRules
    from rewardledger.state import LedgerState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementDef:
    """A one-time badge unlocked when its trigger is met."""

    id: str
    description: str = ""
    trigger: Requirement | None = None


DEFAULT_ACHIEVEMENTS: tuple[AchievementDef, ...] = (
    AchievementDef("first_day", "Track your first activity", Req.any_activity()),
    AchievementDef("week_streak", "Stay active 7 days in a row", Req.streak()),
    AchievementDef("goal_getter", "Meet every daily goal in one day", Req.daily_goals_met()),
    AchievementDef("hydration_hero", "Log 10 glasses of water in one day", Req.hydration_today()),
    AchievementDef("perfect_quiz", "Finish a quiz without a mistake", Req.perfect_quizzes()),
    AchievementDef(
        "task_centurion",
        "Complete 100 tasks",
        Req.activity(ActivityKind.TASKS_COMPLETED, ">=", 100),
    ),
    AchievementDef("carrot_hoarder", "Hold 1.00 CC at once", Req.balance(">=", 1.0)),
)


class AchievementEvaluator:
    """Idempotent evaluation of a fixed badge table."""

    def __init__(
        self,
        rules: LedgerRules,
        bus: EventBus,
        achievements: tuple[AchievementDef, ...] | list[AchievementDef] = DEFAULT_ACHIEVEMENTS,
    ) -> None:
        ids = [a.id for a in achievements]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate achievement IDs: {duplicates}")
        self.rules = rules
        self.bus = bus
        self.achievements = tuple(achievements)

    def get(self, id: str) -> AchievementDef | None:
        for adef in self.achievements:
            if adef.id == id:
                return adef
        return None

    def check(self, state: LedgerState, today: date) -> list[str]:
        """Unlock every badge whose trigger now holds. Returns the new ids."""
        ctx = EvaluationContext(state=state, rules=self.rules, today=today)
        unlocked: list[str] = []
        for adef in self.achievements:
            if state.has_achievement(adef.id):
                continue
            if adef.trigger is not None and adef.trigger.evaluate(ctx):
                state.achievements.append(adef.id)
                unlocked.append(adef.id)
                logger.info("Achievement unlocked: %s", adef.id)
                self.bus.publish(
                    EventTopic.ACHIEVEMENT_UNLOCKED,
                    {"id": adef.id, "description": adef.description},
                )
                self.bus.notify(
                    f"Achievement unlocked: {adef.description or adef.id}",
                    Severity.SUCCESS,
                )
        return unlocked
