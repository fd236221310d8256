from __future__ import annotations

import math
import operator
from enum import Enum
from typing import Callable

_OPS: dict[str, Callable[[float, float], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


class ActivityKind(Enum):
    """Closed set of productivity actions the ledger rewards."""

    TASKS_COMPLETED = "tasksCompleted"
    WORDS_WRITTEN = "wordsWritten"
    FOCUS_MINUTES = "focusMinutes"
    FLASHCARDS_CORRECT = "flashcardsCorrect"
    QUIZ_CORRECT = "quizCorrect"

    @classmethod
    def parse(cls, value: str | ActivityKind) -> ActivityKind:
        """Accept an enum member, its value ("tasksCompleted") or its name."""
        if isinstance(value, cls):
            return value
        for kind in cls:
            if value in (kind.value, kind.name, kind.name.lower()):
                return kind
        raise ValueError(
            f"Unknown activity kind: {value!r}. Expected one of {[k.value for k in cls]}"
        )


def round_amount(value: float) -> float:
    """Quantise a currency amount to two decimals."""
    return round(value + 0.0, 2)


def format_amount(value: float) -> str:
    return f"{round_amount(value):.2f}"


def parse_amount(text: str) -> float:
    """Parse a persisted numeric string. Raises ValueError on garbage."""
    value = float(text)
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"Not a finite amount: {text!r}")
    return round_amount(value)


def compare(left: float, op: str, right: float) -> bool:
    """Compare two values using a string operator."""
    fn = _OPS.get(op)
    if fn is None:
        raise ValueError(f"Unknown operator: {op!r}. Expected one of {list(_OPS)}")
    return fn(left, right)
