"""Explicit publish/subscribe channel for ledger feedback.

Screens subscribe to the topics they care about instead of listening for an
ambient global event. Delivery is best-effort: a subscriber that raises is
logged and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventTopic(Enum):
    BALANCE_CHANGED = "balance-changed"
    ACHIEVEMENT_UNLOCKED = "achievement-unlocked"
    NOTIFICATION = "notification"


class Severity(Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A user-facing message describing the outcome of an operation."""

    message: str
    severity: Severity = Severity.INFO


Callback = Callable[[Any], None]

_LOG_LEVELS = {
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.WARNING,
}


class EventBus:
    """Observer list keyed by topic."""

    def __init__(self) -> None:
        self._subscribers: dict[EventTopic, list[Callback]] = {t: [] for t in EventTopic}
        self._held: list[tuple[EventTopic, Any]] | None = None

    def subscribe(self, topic: EventTopic, callback: Callback) -> Callable[[], None]:
        """Register *callback* for *topic*. Returns a function that unsubscribes."""
        self._subscribers[topic].append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(topic, callback)

        return unsubscribe

    def unsubscribe(self, topic: EventTopic, callback: Callback) -> None:
        try:
            self._subscribers[topic].remove(callback)
        except ValueError:
            pass

    def subscriber_count(self, topic: EventTopic) -> int:
        return len(self._subscribers[topic])

    def hold(self) -> None:
        """Queue published events until ``release`` is called."""
        if self._held is None:
            self._held = []

    def release(self) -> None:
        """Deliver every queued event in publish order and stop queueing."""
        held, self._held = self._held, None
        for topic, payload in held or []:
            self._deliver(topic, payload)

    def publish(self, topic: EventTopic, payload: Any) -> None:
        if self._held is not None:
            self._held.append((topic, payload))
            return
        self._deliver(topic, payload)

    def _deliver(self, topic: EventTopic, payload: Any) -> None:
        for callback in list(self._subscribers[topic]):
            try:
                callback(payload)
            except Exception:
                logger.exception("Subscriber %r failed on %s", callback, topic.value)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        """Log and broadcast a user-facing notification."""
        note = Notification(message, severity)
        logger.log(_LOG_LEVELS[severity], "[%s] %s", severity.value, message)
        self.publish(EventTopic.NOTIFICATION, note)
        return note
