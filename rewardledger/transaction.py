from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from rewardledger._types import round_amount


class TransactionType(Enum):
    EARNED = "earned"
    SPENT = "spent"
    PURCHASED = "purchased"
    PENALTY = "penalty"


@dataclass(frozen=True)
class Transaction:
    """One entry of the append-only ledger history."""

    type: TransactionType
    amount: float
    reason: str = ""
    timestamp: datetime | None = None

    @property
    def signed_amount(self) -> float:
        """Effect on the balance: positive for credits, negative for debits."""
        if self.type in (TransactionType.SPENT, TransactionType.PENALTY):
            return -self.amount
        return self.amount

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "amount": round_amount(self.amount),
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        ts = data.get("timestamp")
        return cls(
            type=TransactionType(data["type"]),
            amount=round_amount(float(data["amount"])),
            reason=str(data.get("reason", "")),
            timestamp=datetime.fromisoformat(ts) if ts else None,
        )
