"""Tests for _types module."""
import pytest

from rewardledger._types import (
    ActivityKind,
    compare,
    format_amount,
    parse_amount,
    round_amount,
)


def test_activity_kind_values():
    assert [k.value for k in ActivityKind] == [
        "tasksCompleted",
        "wordsWritten",
        "focusMinutes",
        "flashcardsCorrect",
        "quizCorrect",
    ]


def test_parse_by_value_and_name():
    assert ActivityKind.parse("wordsWritten") is ActivityKind.WORDS_WRITTEN
    assert ActivityKind.parse("FOCUS_MINUTES") is ActivityKind.FOCUS_MINUTES
    assert ActivityKind.parse("quiz_correct") is ActivityKind.QUIZ_CORRECT
    assert ActivityKind.parse(ActivityKind.TASKS_COMPLETED) is ActivityKind.TASKS_COMPLETED


def test_parse_unknown():
    with pytest.raises(ValueError, match="Unknown activity kind"):
        ActivityKind.parse("meditationMinutes")


def test_round_amount():
    assert round_amount(0.1 + 0.2) == 0.3
    assert round_amount(0.7 * 3) == 2.1
    assert round_amount(-0.0) == 0.0


def test_format_and_parse_amount():
    assert format_amount(0.1) == "0.10"
    assert format_amount(12) == "12.00"
    assert parse_amount("0.10") == 0.1
    with pytest.raises(ValueError):
        parse_amount("carrots")
    with pytest.raises(ValueError):
        parse_amount("nan")


def test_compare_ops():
    assert compare(5, ">=", 5)
    assert compare(5, "<=", 5)
    assert not compare(5, ">", 5)
    assert compare(4, "<", 5)
    assert compare(5, "==", 5)
    assert compare(4, "!=", 5)


def test_compare_unknown_op():
    with pytest.raises(ValueError, match="Unknown operator"):
        compare(1, "~", 2)
