"""Tests for achievement module."""
from datetime import date

import pytest

from rewardledger._types import ActivityKind
from rewardledger.achievement import DEFAULT_ACHIEVEMENTS, AchievementDef, AchievementEvaluator
from rewardledger.notifications import EventBus, EventTopic
from rewardledger.requirement import Req
from rewardledger.rules import LedgerRules
from rewardledger.state import LedgerState

TODAY = date(2026, 3, 10)


def _make_evaluator(achievements=DEFAULT_ACHIEVEMENTS):
    bus = EventBus()
    unlocked = []
    bus.subscribe(EventTopic.ACHIEVEMENT_UNLOCKED, unlocked.append)
    return AchievementEvaluator(LedgerRules(), bus, achievements), unlocked


def test_nothing_unlocked_on_empty_state():
    evaluator, events = _make_evaluator()
    assert evaluator.check(LedgerState(), TODAY) == []
    assert events == []


def test_first_day_unlocks_exactly_once():
    evaluator, events = _make_evaluator()
    state = LedgerState()
    state.counters[ActivityKind.TASKS_COMPLETED] = 1
    assert evaluator.check(state, TODAY) == ["first_day"]
    assert evaluator.check(state, TODAY) == []
    assert evaluator.check(state, TODAY) == []
    assert state.achievements == ["first_day"]
    assert events == [{"id": "first_day", "description": "Track your first activity"}]


def test_unlock_is_permanent():
    evaluator, _ = _make_evaluator()
    state = LedgerState()
    state.balance = 1.5
    assert "carrot_hoarder" in evaluator.check(state, TODAY)
    state.balance = 0.0
    evaluator.check(state, TODAY)
    assert state.has_achievement("carrot_hoarder")


def test_several_unlock_in_table_order():
    evaluator, events = _make_evaluator()
    state = LedgerState()
    state.counters[ActivityKind.TASKS_COMPLETED] = 100
    state.perfect_quizzes = 1
    assert evaluator.check(state, TODAY) == ["first_day", "perfect_quiz", "task_centurion"]
    assert [e["id"] for e in events] == state.achievements


def test_week_streak():
    evaluator, _ = _make_evaluator()
    state = LedgerState()
    for d in range(3, 10):
        state.mark_active(date(2026, 3, d))
    assert "week_streak" not in evaluator.check(state, TODAY)
    state.mark_active(TODAY)
    assert "week_streak" in evaluator.check(state, TODAY)


def test_hydration_hero():
    evaluator, _ = _make_evaluator()
    state = LedgerState()
    state.roll_daily(TODAY).hydration = 10
    assert "hydration_hero" in evaluator.check(state, TODAY)


def test_notification_sent():
    evaluator, _ = _make_evaluator()
    notes = []
    evaluator.bus.subscribe(EventTopic.NOTIFICATION, notes.append)
    state = LedgerState()
    state.perfect_quizzes = 3
    evaluator.check(state, TODAY)
    assert notes[0].message == "Achievement unlocked: Finish a quiz without a mistake"


def test_custom_table():
    evaluator, _ = _make_evaluator(
        [
            AchievementDef("rich", "Rich", Req.balance(">=", 10)),
            AchievementDef("manual"),
        ]
    )
    state = LedgerState()
    state.balance = 10
    assert evaluator.check(state, TODAY) == ["rich"]
    assert evaluator.get("manual").trigger is None
    assert evaluator.get("missing") is None


def test_duplicate_ids():
    with pytest.raises(ValueError, match="Duplicate achievement IDs"):
        _make_evaluator([AchievementDef("a"), AchievementDef("a")])


def test_default_table_ids_unique():
    ids = [a.id for a in DEFAULT_ACHIEVEMENTS]
    assert len(ids) == len(set(ids)) == 7
