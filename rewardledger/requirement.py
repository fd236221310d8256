from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Callable

from rewardledger._types import ActivityKind, compare

if TYPE_CHECKING:
    from rewardledger.rules import LedgerRules
    from rewardledger.state import LedgerState


@dataclass(frozen=True)
class EvaluationContext:
    """Read-only view handed to achievement predicates."""

    state: LedgerState
    rules: LedgerRules
    today: date


class Requirement(ABC):
    """Base class for all requirements: boolean conditions on ledger state."""

    @abstractmethod
    def evaluate(self, ctx: EvaluationContext) -> bool: ...

    def __and__(self, other: Requirement) -> Requirement:
        return _AllRequirement([self, other])

    def __or__(self, other: Requirement) -> Requirement:
        return _AnyRequirement([self, other])


# ── Private implementations ──────────────────────────────────────────


class _ActivityRequirement(Requirement):
    def __init__(self, kind: ActivityKind, op: str, threshold: int) -> None:
        self.kind = kind
        self.op = op
        self.threshold = threshold

    def evaluate(self, ctx: EvaluationContext) -> bool:
        return compare(ctx.state.counter(self.kind), self.op, self.threshold)


class _AnyActivityRequirement(Requirement):
    def evaluate(self, ctx: EvaluationContext) -> bool:
        return any(count > 0 for count in ctx.state.counters.values())


class _BalanceRequirement(Requirement):
    def __init__(self, op: str, threshold: float) -> None:
        self.op = op
        self.threshold = threshold

    def evaluate(self, ctx: EvaluationContext) -> bool:
        return compare(ctx.state.balance, self.op, self.threshold)


class _StreakRequirement(Requirement):
    def __init__(self, days: int | None) -> None:
        self.days = days

    def evaluate(self, ctx: EvaluationContext) -> bool:
        days = self.days if self.days is not None else ctx.rules.streak_days
        return ctx.state.streak(ctx.today) >= days


class _DailyGoalsRequirement(Requirement):
    def evaluate(self, ctx: EvaluationContext) -> bool:
        state, today = ctx.state, ctx.today
        for kind, goal in ctx.rules.daily_goals.items():
            if state.today_count(kind, today) < goal:
                return False
        return state.hydration_today(today) >= ctx.rules.hydration_goal


class _HydrationRequirement(Requirement):
    def __init__(self, op: str, units: int | None) -> None:
        self.op = op
        self.units = units

    def evaluate(self, ctx: EvaluationContext) -> bool:
        units = self.units if self.units is not None else ctx.rules.hydration_hero_units
        return compare(ctx.state.hydration_today(ctx.today), self.op, units)


class _PerfectQuizRequirement(Requirement):
    def __init__(self, count: int) -> None:
        self.count = count

    def evaluate(self, ctx: EvaluationContext) -> bool:
        return ctx.state.perfect_quizzes >= self.count


class _AchievementRequirement(Requirement):
    def __init__(self, achievement_id: str) -> None:
        self.achievement_id = achievement_id

    def evaluate(self, ctx: EvaluationContext) -> bool:
        return ctx.state.has_achievement(self.achievement_id)


class _AllRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, ctx: EvaluationContext) -> bool:
        return all(r.evaluate(ctx) for r in self.reqs)


class _AnyRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, ctx: EvaluationContext) -> bool:
        return any(r.evaluate(ctx) for r in self.reqs)


class _CustomRequirement(Requirement):
    def __init__(self, fn: Callable[[EvaluationContext], bool]) -> None:
        self.fn = fn

    def evaluate(self, ctx: EvaluationContext) -> bool:
        return self.fn(ctx)


# ── Public factory ───────────────────────────────────────────────────


class Req:
    """Factory for built-in requirement types."""

    @staticmethod
    def activity(kind: ActivityKind, op: str, threshold: int) -> Requirement:
        return _ActivityRequirement(kind, op, threshold)

    @staticmethod
    def any_activity() -> Requirement:
        return _AnyActivityRequirement()

    @staticmethod
    def balance(op: str, threshold: float) -> Requirement:
        return _BalanceRequirement(op, threshold)

    @staticmethod
    def streak(days: int | None = None) -> Requirement:
        """Consecutive active days ending today (defaults to the rules' streak)."""
        return _StreakRequirement(days)

    @staticmethod
    def daily_goals_met() -> Requirement:
        return _DailyGoalsRequirement()

    @staticmethod
    def hydration_today(op: str = ">=", units: int | None = None) -> Requirement:
        return _HydrationRequirement(op, units)

    @staticmethod
    def perfect_quizzes(count: int = 1) -> Requirement:
        return _PerfectQuizRequirement(count)

    @staticmethod
    def achievement(achievement_id: str) -> Requirement:
        return _AchievementRequirement(achievement_id)

    @staticmethod
    def all(*reqs: Requirement) -> Requirement:
        return _AllRequirement(list(reqs))

    @staticmethod
    def any(*reqs: Requirement) -> Requirement:
        return _AnyRequirement(list(reqs))

    @staticmethod
    def custom(fn: Callable[[EvaluationContext], bool]) -> Requirement:
        return _CustomRequirement(fn)
