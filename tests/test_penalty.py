"""Tests for penalty module."""
from datetime import date, datetime, timedelta

import pytest

from rewardledger.ledger import Ledger
from rewardledger.notifications import EventBus, EventTopic, Severity
from rewardledger.penalty import InactivityPenaltyEvaluator, days_between
from rewardledger.rules import LedgerRules
from rewardledger.state import LedgerState
from rewardledger.transaction import TransactionType

TODAY = date(2026, 3, 20)


def _make_evaluator(balance: float = 2.0, last: date | None = None):
    state = LedgerState()
    state.balance = balance
    state.last_active_date = last
    bus = EventBus()
    notes = []
    bus.subscribe(EventTopic.NOTIFICATION, notes.append)
    ledger = Ledger(state, bus, clock=lambda: datetime(2026, 3, 20, 8))
    return state, InactivityPenaltyEvaluator(LedgerRules(), ledger), notes


def test_days_between_ignores_time_of_day():
    assert days_between(date(2026, 3, 1), date(2026, 3, 4)) == 3


def test_first_run_sets_date():
    state, evaluator, notes = _make_evaluator(last=None)
    result = evaluator.apply(state, TODAY)
    assert result.first_run
    assert not result.penalized
    assert state.last_active_date == TODAY
    assert state.balance == 2.0
    assert notes == []


def test_same_day_noop():
    state, evaluator, _ = _make_evaluator(last=TODAY)
    result = evaluator.apply(state, TODAY)
    assert not result.penalized
    assert state.transactions == []


@pytest.mark.parametrize("days", [1, 2])
def test_short_absence_no_penalty(days):
    state, evaluator, _ = _make_evaluator(last=TODAY - timedelta(days=days))
    result = evaluator.apply(state, TODAY)
    assert result.days_inactive == days
    assert not result.penalized
    assert state.balance == 2.0
    assert state.last_active_date == TODAY


@pytest.mark.parametrize("days", [3, 4, 6])
def test_three_day_tier(days):
    state, evaluator, notes = _make_evaluator(last=TODAY - timedelta(days=days))
    result = evaluator.apply(state, TODAY)
    assert result.tier.id == "three_days"
    assert state.balance == pytest.approx(1.7)
    assert notes[-1].severity is Severity.WARNING
    assert state.last_active_date == TODAY


@pytest.mark.parametrize("days", [7, 10, 60])
def test_week_tier_supersedes(days):
    state, evaluator, notes = _make_evaluator(last=TODAY - timedelta(days=days))
    result = evaluator.apply(state, TODAY)
    assert result.tier.id == "one_week"
    # Only the weekly tier applies, never 0.3 + 0.7
    assert state.balance == pytest.approx(1.3)
    assert len(state.transactions) == 1
    assert notes[-1].severity is Severity.ERROR
    assert f"{days} days" in notes[-1].message


def test_ten_days_clamps_at_zero():
    state, evaluator, _ = _make_evaluator(balance=0.5, last=TODAY - timedelta(days=10))
    result = evaluator.apply(state, TODAY)
    assert state.balance == 0.0
    assert result.amount_deducted == pytest.approx(0.5)
    txn = state.transactions[0]
    assert txn.type is TransactionType.PENALTY
    assert txn.reason == "10 days inactive"
    assert state.last_active_date == TODAY


def test_future_date_left_alone():
    future = TODAY + timedelta(days=2)
    state, evaluator, _ = _make_evaluator(last=future)
    result = evaluator.apply(state, TODAY)
    assert not result.penalized
    assert state.last_active_date == future
    assert state.balance == 2.0


def test_select_tier():
    _, evaluator, _ = _make_evaluator()
    assert evaluator.select_tier(2) is None
    assert evaluator.select_tier(3).id == "three_days"
    assert evaluator.select_tier(8).id == "one_week"
