"""Tests for notifications module."""
import logging

from rewardledger.notifications import EventBus, EventTopic, Notification, Severity


def test_publish_by_topic():
    bus = EventBus()
    balances, notes = [], []
    bus.subscribe(EventTopic.BALANCE_CHANGED, balances.append)
    bus.subscribe(EventTopic.NOTIFICATION, notes.append)
    bus.publish(EventTopic.BALANCE_CHANGED, {"balance": 0.1})
    assert balances == [{"balance": 0.1}]
    assert notes == []


def test_unsubscribe():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe(EventTopic.NOTIFICATION, seen.append)
    assert bus.subscriber_count(EventTopic.NOTIFICATION) == 1
    unsubscribe()
    unsubscribe()
    assert bus.subscriber_count(EventTopic.NOTIFICATION) == 0
    bus.notify("hello")
    assert seen == []


def test_notify():
    bus = EventBus()
    seen = []
    bus.subscribe(EventTopic.NOTIFICATION, seen.append)
    note = bus.notify("Insufficient CC!", Severity.ERROR)
    assert note == Notification("Insufficient CC!", Severity.ERROR)
    assert seen == [note]


def test_notify_logs(caplog):
    bus = EventBus()
    with caplog.at_level(logging.INFO, logger="rewardledger"):
        bus.notify("+0.10 CC earned!", Severity.SUCCESS)
    assert "+0.10 CC earned!" in caplog.text


def test_failing_subscriber_does_not_block_others(caplog):
    bus = EventBus()
    seen = []

    def broken(_payload):
        raise RuntimeError("screen gone")

    bus.subscribe(EventTopic.NOTIFICATION, broken)
    bus.subscribe(EventTopic.NOTIFICATION, seen.append)
    with caplog.at_level(logging.ERROR, logger="rewardledger"):
        bus.notify("still delivered")
    assert len(seen) == 1
    assert "screen gone" in caplog.text


def test_hold_queues_until_release():
    bus = EventBus()
    seen = []
    bus.subscribe(EventTopic.NOTIFICATION, lambda n: seen.append(n.message))
    bus.subscribe(EventTopic.BALANCE_CHANGED, lambda p: seen.append("balance"))
    bus.hold()
    bus.notify("first")
    bus.publish(EventTopic.BALANCE_CHANGED, {"balance": 0.1})
    bus.notify("second")
    assert seen == []
    bus.release()
    assert seen == ["first", "balance", "second"]
    bus.notify("third")
    assert seen[-1] == "third"
