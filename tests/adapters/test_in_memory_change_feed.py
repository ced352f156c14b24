"""Tests for the in-process change feed."""

from __future__ import annotations

import threading

from carlot.adapters.in_memory_change_feed import InMemoryChangeFeed
from carlot.domain.changes import ChangeEvent, ChangeType


def _event(table: str = "sales", vendor_id: str = "v1") -> ChangeEvent:
    return ChangeEvent(table=table, change_type=ChangeType.INSERT, vendor_id=vendor_id, record_id="r1")


def test_subscription_receives_matching_events_only() -> None:
    feed = InMemoryChangeFeed()
    subscription = feed.subscribe(("sales", "cars"), "v1")

    feed.publish(_event("sales"))
    feed.publish(_event("vendors"))
    feed.publish(_event("cars", vendor_id="v2"))

    assert subscription.poll(timeout=0) == _event("sales")
    assert subscription.poll(timeout=0) is None


def test_poll_times_out_with_none() -> None:
    subscription = InMemoryChangeFeed().subscribe(("sales",), "v1")

    assert subscription.poll(timeout=0.01) is None


def test_close_unsubscribes_and_stops_delivery() -> None:
    feed = InMemoryChangeFeed()
    subscription = feed.subscribe(("sales",), "v1")

    subscription.close()
    feed.publish(_event())

    assert subscription.closed
    assert feed.subscriber_count == 0
    assert subscription.poll(timeout=0) is None


def test_context_manager_closes_subscription() -> None:
    feed = InMemoryChangeFeed()

    with feed.subscribe(("sales",), "v1") as subscription:
        assert feed.subscriber_count == 1

    assert subscription.closed
    assert feed.subscriber_count == 0


def test_feed_close_wakes_blocked_consumer() -> None:
    feed = InMemoryChangeFeed()
    subscription = feed.subscribe(("sales",), "v1")
    polled: list[object] = []

    consumer = threading.Thread(target=lambda: polled.append(subscription.poll(timeout=5)))
    consumer.start()
    feed.close()
    consumer.join(timeout=5)

    assert not consumer.is_alive()
    assert polled == [None]


def test_iteration_ends_when_closed() -> None:
    feed = InMemoryChangeFeed()
    subscription = feed.subscribe(("sales",), "v1")
    feed.publish(_event())
    feed.publish(_event())

    received = []
    for event in subscription:
        received.append(event)
        if len(received) == 2:
            subscription.close()

    assert len(received) == 2
