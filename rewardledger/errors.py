"""Error taxonomy for the reward ledger.

These are raised at the lowest layer that detects them and recovered at the
engine seam; none of them escapes a public ``RewardEngine`` operation.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all recoverable ledger errors."""


class InvalidAmount(LedgerError):
    """An amount or delta that must be positive was not."""

    def __init__(self, amount: float, operation: str) -> None:
        self.amount = amount
        self.operation = operation
        super().__init__(f"{operation}: invalid amount {amount!r}")


class InsufficientFunds(LedgerError):
    """A spend asked for more than the current balance."""

    def __init__(self, balance: float, requested: float) -> None:
        self.balance = balance
        self.requested = requested
        super().__init__(
            f"Insufficient CC: balance {balance:.2f}, requested {requested:.2f}"
        )


class PersistenceFailure(LedgerError):
    """The durable store could not be read or written."""


class CorruptPersistedState(LedgerError):
    """A persisted snapshot exists but cannot be parsed into a valid state."""
