from __future__ import annotations

import logging
from datetime import date

from rewardledger._types import ActivityKind, round_amount
from rewardledger.errors import InvalidAmount
from rewardledger.ledger import Ledger
from rewardledger.rules import LedgerRules
from rewardledger.state import LedgerState

logger = logging.getLogger(__name__)


class ActivityAccumulator:
    """Monotonic per-kind counters, plus today's tally and active days."""

    def __init__(self, state: LedgerState) -> None:
        self.state = state

    def add(self, kind: ActivityKind, delta: int, today: date) -> tuple[int, int] | None:
        """Add an incremental *delta*. Returns ``(old, new)`` or None if rejected."""
        if delta <= 0:
            logger.warning("Ignored %s: %s", kind.value, InvalidAmount(delta, "track"))
            return None
        old = self.state.counter(kind)
        new = old + delta
        self.state.counters[kind] = new

        daily = self.state.roll_daily(today)
        daily.activity[kind] = daily.activity.get(kind, 0) + delta
        self.state.mark_active(today)

        logger.debug("Activity %s +%d (total %d)", kind.value, delta, new)
        return old, new


class ThresholdEarningEngine:
    """Pays out each threshold multiple a counter passes, exactly once."""

    def __init__(self, rules: LedgerRules, ledger: Ledger) -> None:
        self.rules = rules
        self.ledger = ledger

    def thresholds_crossed(self, kind: ActivityKind, old: int, new: int) -> int:
        rule = self.rules.get_rule(kind)
        if rule is None:
            return 0
        return new // rule.threshold - old // rule.threshold

    def reward_for(self, kind: ActivityKind, old: int, new: int) -> float:
        """Credit the ledger for thresholds crossed between *old* and *new*."""
        crossed = self.thresholds_crossed(kind, old, new)
        if crossed <= 0:
            return 0.0
        rule = self.rules.earning_rules[kind]
        amount = round_amount(crossed * rule.reward)
        if not self.ledger.earn(amount, rule.describe(crossed)):
            return 0.0
        return amount
