from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from rewardledger.ledger import Ledger
from rewardledger.notifications import Severity
from rewardledger.rules import LedgerRules, PenaltyTier
from rewardledger.state import LedgerState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PenaltyResult:
    """Outcome of one session-start inactivity evaluation."""

    days_inactive: int = 0
    tier: PenaltyTier | None = None
    amount_deducted: float = 0.0
    first_run: bool = False

    @property
    def penalized(self) -> bool:
        return self.tier is not None


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from *earlier* to *later*."""
    return (later - earlier).days


class InactivityPenaltyEvaluator:
    """Charges a penalty for calendar days missed since the last session."""

    def __init__(self, rules: LedgerRules, ledger: Ledger) -> None:
        self.rules = rules
        self.ledger = ledger

    def select_tier(self, days: int) -> PenaltyTier | None:
        """The single highest tier reached by *days*; tiers never stack."""
        for tier in self.rules.tiers_by_severity():
            if days >= tier.days:
                return tier
        return None

    def apply(self, state: LedgerState, today: date) -> PenaltyResult:
        last = state.last_active_date
        if last is None:
            state.last_active_date = today
            logger.info("First session, last active date set to %s", today)
            return PenaltyResult(first_run=True)
        if last == today:
            return PenaltyResult()
        if last > today:
            logger.warning("Last active date %s is in the future; left unchanged", last)
            return PenaltyResult()

        days = days_between(last, today)
        tier = self.select_tier(days)
        deducted = 0.0
        if tier is not None:
            deducted = self.ledger.apply_penalty(tier.penalty, f"{days} days inactive")
            self.ledger.bus.notify(
                f"Lost {tier.penalty:g} CC for being inactive for {days} days!",
                Severity(tier.severity),
            )
        state.last_active_date = today
        return PenaltyResult(days_inactive=days, tier=tier, amount_deducted=deducted)
