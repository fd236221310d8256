from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from rewardledger._types import ActivityKind, format_amount, parse_amount
from rewardledger.config import ACTIVE_DAYS_KEPT, SCHEMA_VERSION
from rewardledger.errors import CorruptPersistedState
from rewardledger.transaction import Transaction


def _zero_counters() -> dict[ActivityKind, int]:
    return {kind: 0 for kind in ActivityKind}


@dataclass
class DailyProgress:
    """Activity recorded on a single calendar day."""

    day: date | None = None
    activity: dict[ActivityKind, int] = field(default_factory=_zero_counters)
    hydration: int = 0
    hydration_bonus_paid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat() if self.day else None,
            "activity": {k.value: v for k, v in self.activity.items()},
            "hydration": self.hydration,
            "hydration-bonus-paid": self.hydration_bonus_paid,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyProgress:
        day = data.get("date")
        return cls(
            day=date.fromisoformat(day) if day else None,
            activity={**_zero_counters(), **_parse_counters(data.get("activity") or {})},
            hydration=int(data.get("hydration", 0)),
            hydration_bonus_paid=bool(data.get("hydration-bonus-paid", False)),
        )


class LedgerState:
    """Mutable runtime container holding everything that gets persisted."""

    def __init__(self) -> None:
        self.balance: float = 0.0
        self.counters: dict[ActivityKind, int] = _zero_counters()
        self.transactions: list[Transaction] = []
        self.last_active_date: date | None = None
        self.achievements: list[str] = []
        self.active_days: list[date] = []
        self.daily = DailyProgress()
        self.perfect_quizzes: int = 0

    def replace(self, other: LedgerState) -> None:
        """Adopt every field of *other* in place, keeping this object's identity."""
        vars(self).update(vars(other))

    # ── Queries ──────────────────────────────────────────────────────

    def counter(self, kind: ActivityKind) -> int:
        return self.counters.get(kind, 0)

    def has_achievement(self, id: str) -> bool:
        return id in self.achievements

    def today_count(self, kind: ActivityKind, today: date) -> int:
        if self.daily.day != today:
            return 0
        return self.daily.activity.get(kind, 0)

    def hydration_today(self, today: date) -> int:
        return self.daily.hydration if self.daily.day == today else 0

    def streak(self, today: date) -> int:
        """Consecutive active days ending on *today*."""
        days = set(self.active_days)
        count = 0
        cursor = today
        while cursor in days:
            count += 1
            cursor -= timedelta(days=1)
        return count

    # ── Daily bookkeeping ────────────────────────────────────────────

    def roll_daily(self, today: date) -> DailyProgress:
        """Return today's progress record, starting a fresh one on a new day."""
        if self.daily.day != today:
            self.daily = DailyProgress(day=today)
        return self.daily

    def mark_active(self, today: date) -> None:
        if today in self.active_days:
            return
        self.active_days.append(today)
        self.active_days.sort()
        del self.active_days[:-ACTIVE_DAYS_KEPT]

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": SCHEMA_VERSION,
            "balance": format_amount(self.balance),
            "activity-counters": {k.value: v for k, v in self.counters.items()},
            "last-active-date": (
                self.last_active_date.isoformat() if self.last_active_date else None
            ),
            "achievement-ids": list(self.achievements),
            "transactions": [t.to_dict() for t in self.transactions],
            "active-days": [d.isoformat() for d in self.active_days],
            "daily-progress": self.daily.to_dict(),
            "perfect-quizzes": self.perfect_quizzes,
        }

    @classmethod
    def from_dict(cls, data: Any) -> LedgerState:
        """Rebuild state from a snapshot. Raises CorruptPersistedState."""
        if not isinstance(data, dict):
            raise CorruptPersistedState(
                f"Snapshot must be a mapping, got {type(data).__name__}"
            )
        state = cls()
        try:
            state.balance = parse_amount(str(data.get("balance", "0")))
            if state.balance < 0:
                raise ValueError(f"negative balance {state.balance}")
            state.counters.update(_parse_counters(data.get("activity-counters") or {}))

            last = data.get("last-active-date")
            state.last_active_date = date.fromisoformat(last) if last else None

            for aid in data.get("achievement-ids") or []:
                if aid not in state.achievements:
                    state.achievements.append(str(aid))

            state.transactions = [
                Transaction.from_dict(t) for t in data.get("transactions") or []
            ]
            state.active_days = sorted(
                {date.fromisoformat(d) for d in data.get("active-days") or []}
            )
            daily = data.get("daily-progress")
            if daily:
                state.daily = DailyProgress.from_dict(daily)
            state.perfect_quizzes = int(data.get("perfect-quizzes", 0))
            if state.perfect_quizzes < 0:
                raise ValueError("negative perfect quiz count")
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise CorruptPersistedState(f"Malformed snapshot: {exc}") from exc
        return state


def _parse_counters(raw: Any) -> dict[ActivityKind, int]:
    if not isinstance(raw, dict):
        raise ValueError("activity counters must be a mapping")
    counters: dict[ActivityKind, int] = {}
    for key, value in raw.items():
        kind = ActivityKind.parse(key)
        count = int(value)
        if count < 0:
            raise ValueError(f"negative counter for {kind.value!r}")
        counters[kind] = count
    return counters
