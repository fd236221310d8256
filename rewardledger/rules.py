from __future__ import annotations

import math
from dataclasses import dataclass, field

from rewardledger._types import ActivityKind, round_amount

_SEVERITIES = frozenset({"success", "info", "warning", "error"})


def _whole_cents(amount: float) -> bool:
    return math.isfinite(amount) and round_amount(amount) == amount


@dataclass(frozen=True)
class EarningRule:
    """Every *threshold* units of an activity pay *reward* CC."""

    threshold: int
    reward: float
    # "{count}" is replaced by the number of units the reward covers
    description: str = "{count} units of productivity activity"

    def describe(self, crossed: int) -> str:
        return self.description.format(count=crossed * self.threshold)


@dataclass(frozen=True)
class PenaltyTier:
    """Deduct *penalty* CC once *days* or more calendar days were missed."""

    id: str
    days: int
    penalty: float
    severity: str = "warning"


@dataclass(frozen=True)
class PurchasePackage:
    """A CC bundle sold through the external payment gateway."""

    id: str
    price: float
    cc: float


def _default_earning_rules() -> dict[ActivityKind, EarningRule]:
    return {
        ActivityKind.TASKS_COMPLETED: EarningRule(10, 0.1, "Completing {count} tasks"),
        ActivityKind.WORDS_WRITTEN: EarningRule(50, 0.1, "Writing {count} words"),
        ActivityKind.FOCUS_MINUTES: EarningRule(
            10, 0.1, "{count} minutes of focused work"
        ),
        ActivityKind.FLASHCARDS_CORRECT: EarningRule(
            10, 0.1, "{count} correct flashcards"
        ),
        ActivityKind.QUIZ_CORRECT: EarningRule(10, 0.1, "{count} correct quiz answers"),
    }


def _default_penalty_tiers() -> list[PenaltyTier]:
    return [
        PenaltyTier("three_days", days=3, penalty=0.3, severity="warning"),
        PenaltyTier("one_week", days=7, penalty=0.7, severity="error"),
    ]


def _default_packages() -> list[PurchasePackage]:
    return [
        PurchasePackage("small", price=0.99, cc=100),
        PurchasePackage("medium", price=9.99, cc=1500),
        PurchasePackage("large", price=19.99, cc=4000),
    ]


def _default_daily_goals() -> dict[ActivityKind, int]:
    return {
        ActivityKind.TASKS_COMPLETED: 5,
        ActivityKind.WORDS_WRITTEN: 200,
        ActivityKind.FOCUS_MINUTES: 50,
        ActivityKind.FLASHCARDS_CORRECT: 10,
        ActivityKind.QUIZ_CORRECT: 10,
    }


@dataclass
class LedgerRules:
    """Complete static configuration of the reward economy."""

    earning_rules: dict[ActivityKind, EarningRule] = field(
        default_factory=_default_earning_rules
    )
    penalty_tiers: list[PenaltyTier] = field(default_factory=_default_penalty_tiers)
    packages: list[PurchasePackage] = field(default_factory=_default_packages)
    daily_goals: dict[ActivityKind, int] = field(default_factory=_default_daily_goals)
    hydration_goal: int = 8
    hydration_bonus: float = 0.05
    hydration_hero_units: int = 10
    streak_days: int = 7
    transaction_cap: int = 50
    recent_transactions: int = 10

    _packages_by_id: dict[str, PurchasePackage] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._packages_by_id = {p.id: p for p in self.packages}

    def get_rule(self, kind: ActivityKind) -> EarningRule | None:
        return self.earning_rules.get(kind)

    def get_package(self, id: str) -> PurchasePackage | None:
        return self._packages_by_id.get(id)

    def tiers_by_severity(self) -> list[PenaltyTier]:
        """Penalty tiers ordered from the longest absence down."""
        return sorted(self.penalty_tiers, key=lambda t: t.days, reverse=True)

    def validate(self) -> list[str]:
        """Check for configuration errors. Returns list of error messages."""
        errors: list[str] = []

        for kind in ActivityKind:
            if kind not in self.earning_rules:
                errors.append(f"Missing earning rule for {kind.value!r}")

        for kind, rule in self.earning_rules.items():
            if not isinstance(rule.threshold, int) or rule.threshold <= 0:
                errors.append(
                    f"Earning rule {kind.value!r} threshold must be a positive integer"
                )
            if rule.reward <= 0:
                errors.append(f"Earning rule {kind.value!r} reward must be positive")
            elif not _whole_cents(rule.reward):
                errors.append(f"Earning rule {kind.value!r} reward must be whole cents")

        seen_tiers: set[str] = set()
        seen_days: set[int] = set()
        for tier in self.penalty_tiers:
            if tier.id in seen_tiers:
                errors.append(f"Duplicate penalty tier ID: {tier.id!r}")
            seen_tiers.add(tier.id)
            if tier.days in seen_days:
                errors.append(f"Penalty tiers share a day count: {tier.days}")
            seen_days.add(tier.days)
            if tier.days <= 0:
                errors.append(f"Penalty tier {tier.id!r} days must be positive")
            if tier.penalty < 0:
                errors.append(f"Penalty tier {tier.id!r} penalty must not be negative")
            elif not _whole_cents(tier.penalty):
                errors.append(f"Penalty tier {tier.id!r} penalty must be whole cents")
            if tier.severity not in _SEVERITIES:
                errors.append(
                    f"Penalty tier {tier.id!r} has unknown severity {tier.severity!r}"
                )

        seen_packages: set[str] = set()
        for p in self.packages:
            if p.id in seen_packages:
                errors.append(f"Duplicate package ID: {p.id!r}")
            seen_packages.add(p.id)
            if p.cc <= 0:
                errors.append(f"Package {p.id!r} must grant a positive CC amount")
            elif not _whole_cents(p.cc):
                errors.append(f"Package {p.id!r} CC amount must be whole cents")

        for kind, goal in self.daily_goals.items():
            if goal <= 0:
                errors.append(f"Daily goal for {kind.value!r} must be positive")

        if self.transaction_cap <= 0:
            errors.append("transaction_cap must be positive")
        if not 0 < self.recent_transactions <= self.transaction_cap:
            errors.append("recent_transactions must be between 1 and transaction_cap")
        if self.hydration_goal <= 0 or self.hydration_hero_units <= 0:
            errors.append("Hydration targets must be positive")
        if self.hydration_bonus < 0:
            errors.append("hydration_bonus must not be negative")
        elif not _whole_cents(self.hydration_bonus):
            errors.append("hydration_bonus must be whole cents")
        if self.streak_days <= 0:
            errors.append("streak_days must be positive")

        return errors
