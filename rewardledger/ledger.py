from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from rewardledger._types import round_amount
from rewardledger.errors import InsufficientFunds, InvalidAmount
from rewardledger.notifications import EventBus, Severity
from rewardledger.rules import PurchasePackage
from rewardledger.state import LedgerState
from rewardledger.transaction import Transaction, TransactionType

logger = logging.getLogger(__name__)

# Gateway statuses that mean the money was actually taken
CONFIRMED_STATUSES = frozenset({"successful", "completed"})


@dataclass(frozen=True)
class PaymentConfirmation:
    """Event delivered by the external payment gateway after checkout."""

    package_id: str
    status: str
    reference: str = ""

    @property
    def confirmed(self) -> bool:
        return self.status.lower() in CONFIRMED_STATUSES


def _checked_amount(amount: float, operation: str) -> float:
    """Quantise *amount* to cents. Raises InvalidAmount if nothing positive is left."""
    if not math.isfinite(amount):
        raise InvalidAmount(amount, operation)
    rounded = round_amount(amount)
    if rounded <= 0:
        raise InvalidAmount(amount, operation)
    return rounded


class Ledger:
    """Owns the balance and the transaction log of a ``LedgerState``."""

    def __init__(
        self,
        state: LedgerState,
        bus: EventBus,
        clock: Callable[[], datetime] = datetime.now,
        transaction_cap: int = 50,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.state = state
        self.bus = bus
        self.clock = clock
        self.transaction_cap = transaction_cap
        self.on_change = on_change

    @property
    def balance(self) -> float:
        return self.state.balance

    # ── Primitives ───────────────────────────────────────────────────

    def credit(
        self,
        amount: float,
        reason: str,
        type: TransactionType = TransactionType.EARNED,
    ) -> Transaction:
        """Add *amount* to the balance. Raises InvalidAmount unless it is at least a cent."""
        amount = _checked_amount(amount, type.value)
        self.state.balance = round_amount(self.state.balance + amount)
        return self._record(type, amount, reason)

    def debit(self, amount: float, reason: str) -> Transaction:
        """Remove *amount* from the balance. Raises InvalidAmount/InsufficientFunds."""
        amount = _checked_amount(amount, TransactionType.SPENT.value)
        if self.state.balance < amount:
            raise InsufficientFunds(self.state.balance, amount)
        self.state.balance = round_amount(self.state.balance - amount)
        return self._record(TransactionType.SPENT, amount, reason)

    # ── Operations ───────────────────────────────────────────────────

    def earn(self, amount: float, reason: str = "") -> bool:
        try:
            txn = self.credit(amount, reason)
        except InvalidAmount as exc:
            logger.warning("Ignored earn: %s", exc)
            return False
        logger.info("CC earned: +%.2f (%s). Balance %.2f", txn.amount, reason, self.balance)
        self._changed()
        self.bus.notify(f"+{txn.amount:.2f} CC earned! {reason}".rstrip(), Severity.SUCCESS)
        return True

    def spend(self, amount: float, reason: str = "") -> bool:
        try:
            txn = self.debit(amount, reason)
        except InvalidAmount as exc:
            logger.warning("Ignored spend: %s", exc)
            return False
        except InsufficientFunds as exc:
            logger.info("Spend refused: %s", exc)
            self.bus.notify("Insufficient CC!", Severity.ERROR)
            return False
        logger.info("CC spent: -%.2f (%s). Balance %.2f", txn.amount, reason, self.balance)
        self._changed()
        self.bus.notify(f"-{txn.amount:.2f} CC spent on {reason}", Severity.INFO)
        return True

    def apply_penalty(self, amount: float, reason: str = "inactivity") -> float:
        """Deduct up to *amount*, clamping the balance at zero.

        Returns the amount actually removed.
        """
        if not math.isfinite(amount) or amount < 0:
            logger.warning("Ignored penalty: %s", InvalidAmount(amount, "penalty"))
            return 0.0
        before = self.state.balance
        self.state.balance = round_amount(max(0.0, before - amount))
        deducted = round_amount(before - self.state.balance)
        self._record(TransactionType.PENALTY, round_amount(amount), reason)
        logger.info(
            "CC penalty: -%.2f (%s), deducted %.2f. Balance %.2f",
            amount,
            reason,
            deducted,
            self.balance,
        )
        self._changed()
        return deducted

    def purchase(
        self, package: PurchasePackage, confirmation: PaymentConfirmation
    ) -> bool:
        """Credit a purchased bundle once the gateway has confirmed payment."""
        if confirmation.package_id != package.id:
            logger.warning(
                "Confirmation for %r does not match package %r",
                confirmation.package_id,
                package.id,
            )
            return False
        if not confirmation.confirmed:
            logger.info(
                "Payment for %r not confirmed (status %r)", package.id, confirmation.status
            )
            return False
        try:
            self.credit(
                package.cc, f"${package.price:.2f} purchase", TransactionType.PURCHASED
            )
        except InvalidAmount as exc:
            logger.warning("Ignored purchase: %s", exc)
            return False
        logger.info(
            "CC purchased: +%.2f (%s, ref %s)", package.cc, package.id, confirmation.reference
        )
        self._changed()
        self.bus.notify(f"Purchased {package.cc:g} CC! Thank you!", Severity.SUCCESS)
        return True

    # ── Private helpers ──────────────────────────────────────────────

    def _record(self, type: TransactionType, amount: float, reason: str) -> Transaction:
        """Prepend a transaction, evicting the oldest beyond the cap."""
        txn = Transaction(type=type, amount=amount, reason=reason, timestamp=self.clock())
        self.state.transactions.insert(0, txn)
        del self.state.transactions[self.transaction_cap:]
        return txn

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
