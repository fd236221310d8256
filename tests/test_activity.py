"""Tests for activity module."""
from datetime import date, datetime

import pytest

from rewardledger._types import ActivityKind
from rewardledger.activity import ActivityAccumulator, ThresholdEarningEngine
from rewardledger.ledger import Ledger
from rewardledger.notifications import EventBus
from rewardledger.rules import LedgerRules
from rewardledger.state import LedgerState

TODAY = date(2026, 3, 10)
TODO = ActivityKind.TASKS_COMPLETED


def _make_components():
    state = LedgerState()
    ledger = Ledger(state, EventBus(), clock=lambda: datetime(2026, 3, 10, 12))
    return state, ActivityAccumulator(state), ThresholdEarningEngine(LedgerRules(), ledger)


def _track(acc, earning, kind, delta):
    counts = acc.add(kind, delta, TODAY)
    if counts is None:
        return 0.0
    return earning.reward_for(kind, *counts)


def test_add_updates_counter_and_daily():
    state, acc, _ = _make_components()
    assert acc.add(TODO, 3, TODAY) == (0, 3)
    assert acc.add(TODO, 2, TODAY) == (3, 5)
    assert state.counter(TODO) == 5
    assert state.today_count(TODO, TODAY) == 5
    assert state.active_days == [TODAY]


@pytest.mark.parametrize("delta", [0, -4])
def test_add_rejects_non_positive(delta):
    state, acc, _ = _make_components()
    assert acc.add(TODO, delta, TODAY) is None
    assert state.counter(TODO) == 0
    assert state.active_days == []


def test_ten_single_todos():
    state, acc, earning = _make_components()
    for i in range(1, 10):
        _track(acc, earning, TODO, 1)
        assert state.balance == 0, f"paid out early at call {i}"
    _track(acc, earning, TODO, 1)
    assert state.balance == pytest.approx(0.1)
    assert state.transactions[0].reason == "Completing 10 tasks"


def test_one_large_delta_carries_remainder():
    state, acc, earning = _make_components()
    assert _track(acc, earning, TODO, 25) == pytest.approx(0.2)
    assert state.balance == pytest.approx(0.2)
    assert state.counter(TODO) == 25
    assert state.transactions[0].reason == "Completing 20 tasks"
    # 5 more reach the next multiple
    _track(acc, earning, TODO, 4)
    assert state.balance == pytest.approx(0.2)
    _track(acc, earning, TODO, 1)
    assert state.balance == pytest.approx(0.3)


def test_five_small_deltas_equal_one_big():
    s1, acc1, e1 = _make_components()
    for _ in range(5):
        _track(acc1, e1, TODO, 2)
    s2, acc2, e2 = _make_components()
    _track(acc2, e2, TODO, 10)
    assert s1.balance == s2.balance == pytest.approx(0.1)
    assert len(s1.transactions) == len(s2.transactions) == 1


@pytest.mark.parametrize(
    "chunks",
    [
        [1] * 137,
        [137],
        [49, 1, 50, 37],
        [7, 13, 29, 3, 85],
        [50] * 2 + [37],
    ],
)
def test_batching_invariance_words(chunks):
    state, acc, earning = _make_components()
    for c in chunks:
        _track(acc, earning, ActivityKind.WORDS_WRITTEN, c)
    n = sum(chunks)
    assert state.balance == pytest.approx((n // 50) * 0.1)


def test_kinds_are_independent():
    state, acc, earning = _make_components()
    _track(acc, earning, ActivityKind.FOCUS_MINUTES, 9)
    _track(acc, earning, ActivityKind.QUIZ_CORRECT, 9)
    assert state.balance == 0
    _track(acc, earning, ActivityKind.FOCUS_MINUTES, 1)
    assert state.balance == pytest.approx(0.1)
    assert state.transactions[0].reason == "10 minutes of focused work"


def test_thresholds_crossed():
    _, _, earning = _make_components()
    assert earning.thresholds_crossed(TODO, 0, 9) == 0
    assert earning.thresholds_crossed(TODO, 9, 10) == 1
    assert earning.thresholds_crossed(TODO, 19, 41) == 3


def test_reward_returned_in_whole_cents():
    _, acc, earning = _make_components()
    old, new = acc.add(TODO, 30, TODAY)
    # 3 * 0.1 would otherwise come back as 0.30000000000000004
    assert earning.reward_for(TODO, old, new) == 0.3
