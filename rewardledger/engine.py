from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Callable, Iterator

from rewardledger._types import ActivityKind
from rewardledger.achievement import DEFAULT_ACHIEVEMENTS, AchievementDef, AchievementEvaluator
from rewardledger.activity import ActivityAccumulator, ThresholdEarningEngine
from rewardledger.errors import CorruptPersistedState, PersistenceFailure
from rewardledger.ledger import Ledger, PaymentConfirmation
from rewardledger.mood import Mood, mood_for
from rewardledger.notifications import Callback, EventBus, EventTopic, Severity
from rewardledger.penalty import InactivityPenaltyEvaluator, PenaltyResult
from rewardledger.persistence import MemoryGateway, PersistenceGateway
from rewardledger.rules import LedgerRules
from rewardledger.state import LedgerState

logger = logging.getLogger(__name__)


class RewardEngine:
    """Single owner of the ledger state; every producer and screen goes through it.

    All public operations run to completion under one re-entrant lock, and
    persistence happens inside the same critical section after the in-memory
    mutation. Errors are recovered here: callers only ever see return values
    and notifications.
    """

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        rules: LedgerRules | None = None,
        achievements: tuple[AchievementDef, ...] | list[AchievementDef] = DEFAULT_ACHIEVEMENTS,
        clock: Callable[[], datetime] = datetime.now,
        bus: EventBus | None = None,
    ) -> None:
        rules = rules or LedgerRules()
        errors = rules.validate()
        if errors:
            raise ValueError(
                "Invalid LedgerRules:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        self.rules = rules
        self.gateway = gateway if gateway is not None else MemoryGateway()
        self.clock = clock
        self.bus = bus or EventBus()
        self.state = LedgerState()
        self.ledger = Ledger(
            self.state,
            self.bus,
            clock=clock,
            transaction_cap=rules.transaction_cap,
            on_change=self._on_ledger_change,
        )
        self.accumulator = ActivityAccumulator(self.state)
        self.earning = ThresholdEarningEngine(rules, self.ledger)
        self.penalties = InactivityPenaltyEvaluator(rules, self.ledger)
        self.achievements = AchievementEvaluator(rules, self.bus, achievements)
        self.last_penalty = PenaltyResult()
        self.booted = False

        self._lock = threading.RLock()
        self._depth = 0
        self._dirty = False

    def today(self) -> date:
        return self.clock().date()

    # ── Session ──────────────────────────────────────────────────────

    def boot(self) -> PenaltyResult:
        """Load persisted state and run the session-start inactivity check."""
        self.booted = True
        with self._operation():
            self._load()
            self.last_penalty = self.penalties.apply(self.state, self.today())
            self._dirty = True
            logger.info(
                "Ledger ready: balance %.2f, last active %s",
                self.state.balance,
                self.state.last_active_date,
            )
            return self.last_penalty

    def reset(self, confirmed: bool = False) -> bool:
        """Wipe all ledger data. Does nothing unless the user *confirmed*."""
        if not confirmed:
            logger.info("Reset not confirmed; nothing changed")
            return False
        with self._operation():
            self.state.replace(LedgerState())
            self.state.last_active_date = self.today()
            self.last_penalty = PenaltyResult()
            self.booted = True
            self._dirty = True
            self.bus.notify("CC system reset!", Severity.INFO)
            return True

    # ── Producers ────────────────────────────────────────────────────

    def track_activity(self, kind: ActivityKind | str, delta: int = 1) -> float:
        """Record an incremental *delta* of activity. Returns the CC it earned."""
        try:
            kind = ActivityKind.parse(kind)
        except ValueError as exc:
            logger.warning("Ignored activity: %s", exc)
            return 0.0
        with self._operation():
            today = self.today()
            counts = self.accumulator.add(kind, delta, today)
            if counts is None:
                return 0.0
            self._dirty = True
            earned = self.earning.reward_for(kind, *counts)
            self.achievements.check(self.state, today)
            return earned

    def track_todo_completed(self, count: int = 1) -> float:
        return self.track_activity(ActivityKind.TASKS_COMPLETED, count)

    def track_words_written(self, count: int = 1) -> float:
        return self.track_activity(ActivityKind.WORDS_WRITTEN, count)

    def track_pomodoro_minutes(self, count: int = 1) -> float:
        return self.track_activity(ActivityKind.FOCUS_MINUTES, count)

    def track_flashcard_correct(self, count: int = 1) -> float:
        return self.track_activity(ActivityKind.FLASHCARDS_CORRECT, count)

    def track_quiz_correct(self, count: int = 1) -> float:
        return self.track_activity(ActivityKind.QUIZ_CORRECT, count)

    def record_hydration(self, units: int = 1) -> bool:
        """Log water intake; pays the daily hydration bonus once per day."""
        if units <= 0:
            logger.warning("Ignored hydration entry of %r units", units)
            return False
        with self._operation():
            today = self.today()
            daily = self.state.roll_daily(today)
            daily.hydration += units
            self._dirty = True
            if daily.hydration >= self.rules.hydration_goal and not daily.hydration_bonus_paid:
                daily.hydration_bonus_paid = True
                if self.rules.hydration_bonus > 0:
                    self.ledger.earn(self.rules.hydration_bonus, "Daily hydration goal achieved!")
            self.achievements.check(self.state, today)
            return True

    def record_quiz_result(self, correct: int, total: int) -> bool:
        """Record a finished quiz. Returns True if it was a perfect score.

        Correct answers are reported separately through track_quiz_correct().
        """
        if total <= 0 or not 0 <= correct <= total:
            logger.warning("Ignored quiz result %r/%r", correct, total)
            return False
        if correct != total:
            return False
        with self._operation():
            self.state.perfect_quizzes += 1
            self._dirty = True
            self.achievements.check(self.state, self.today())
            return True

    # ── Ledger access ────────────────────────────────────────────────

    def earn_cc(self, amount: float, reason: str = "") -> bool:
        """Direct credit for bonuses outside the threshold system."""
        with self._operation():
            ok = self.ledger.earn(amount, reason)
            if ok:
                self.achievements.check(self.state, self.today())
            return ok

    def spend_cc(self, amount: float, reason: str = "") -> bool:
        with self._operation():
            return self.ledger.spend(amount, reason)

    def purchase_cc(self, package_id: str, confirmation: PaymentConfirmation) -> bool:
        """Credit a CC package after the payment gateway confirmed it."""
        package = self.rules.get_package(package_id)
        if package is None:
            logger.warning("Unknown purchase package %r", package_id)
            return False
        with self._operation():
            ok = self.ledger.purchase(package, confirmation)
            if ok:
                self.achievements.check(self.state, self.today())
            return ok

    def check_achievements(self) -> list[str]:
        with self._operation():
            unlocked = self.achievements.check(self.state, self.today())
            if unlocked:
                self._dirty = True
            return unlocked

    # ── Queries ──────────────────────────────────────────────────────

    def get_balance(self) -> float:
        with self._operation():
            return self.state.balance

    def get_stats(self) -> dict[str, Any]:
        with self._operation():
            state = self.state
            return {
                "balance": state.balance,
                "counters": {k.value: v for k, v in state.counters.items()},
                "transactions": [
                    t.to_dict() for t in state.transactions[: self.rules.recent_transactions]
                ],
                "last_active_date": (
                    state.last_active_date.isoformat() if state.last_active_date else None
                ),
                "achievements": list(state.achievements),
                "mood": self.mood().value,
            }

    def daily_goals_status(self) -> dict[str, dict[str, Any]]:
        """Progress towards today's goals, keyed by activity kind (plus hydration)."""
        with self._operation():
            today = self.today()
            status: dict[str, dict[str, Any]] = {}
            for kind, goal in self.rules.daily_goals.items():
                done = self.state.today_count(kind, today)
                status[kind.value] = {"done": done, "goal": goal, "met": done >= goal}
            water = self.state.hydration_today(today)
            goal = self.rules.hydration_goal
            status["hydration"] = {"done": water, "goal": goal, "met": water >= goal}
            return status

    def mood(self) -> Mood:
        tiers = sorted(t.days for t in self.rules.penalty_tiers)
        bored_after = tiers[0] if tiers else 3
        sad_after = tiers[-1] if tiers else 7
        return mood_for(
            self.state.balance, self.last_penalty.days_inactive, bored_after, sad_after
        )

    def subscribe(self, topic: EventTopic, callback: Callback) -> Callable[[], None]:
        return self.bus.subscribe(topic, callback)

    # ── Private helpers ──────────────────────────────────────────────

    @contextmanager
    def _operation(self) -> Iterator[None]:
        """Serialize an operation and commit its changes once it finishes.

        Events raised during the operation reach subscribers only after the
        commit has saved the new state.
        """
        with self._lock:
            if not self.booted:
                self.boot()
            outermost = self._depth == 0
            if outermost:
                self.bus.hold()
            self._depth += 1
            try:
                yield
                if outermost and self._dirty:
                    self._commit()
            finally:
                self._depth -= 1
                if outermost:
                    self.bus.release()

    def _on_ledger_change(self) -> None:
        self._dirty = True
        if self._depth == 0:
            with self._lock:
                self._commit()

    def _commit(self) -> None:
        self._dirty = False
        self._save()
        self.bus.publish(
            EventTopic.BALANCE_CHANGED,
            {
                "balance": self.state.balance,
                "counters": {k.value: v for k, v in self.state.counters.items()},
            },
        )

    def _save(self) -> None:
        try:
            self.gateway.save(self.state.to_dict())
        except (PersistenceFailure, OSError):
            # In-memory state stays authoritative; the next save writes it all
            logger.exception("Failed to save ledger state")

    def _load(self) -> None:
        try:
            snapshot = self.gateway.load()
            loaded = LedgerState.from_dict(snapshot) if snapshot is not None else None
        except CorruptPersistedState as exc:
            logger.warning("Corrupt ledger snapshot, starting fresh: %s", exc)
            loaded = None
        except (PersistenceFailure, OSError):
            logger.exception("Failed to load ledger state, starting fresh")
            loaded = None
        self.state.replace(loaded or LedgerState())
