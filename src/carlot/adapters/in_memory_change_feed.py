from __future__ import annotations

import logging
import queue
import threading

from carlot.domain.changes import ChangeEvent
from carlot.ports.change_feed import ChangeFeed, Subscription

logger = logging.getLogger(__name__)

_CLOSED = object()


class QueueSubscription(Subscription):
    """Buffers matching events in a queue until the consumer polls them."""

    def __init__(self, feed: InMemoryChangeFeed, tables: tuple[str, ...], vendor_id: str) -> None:
        self._feed = feed
        self.tables = tables
        self.vendor_id = vendor_id
        self._queue: queue.Queue[object] = queue.Queue()
        self._closed = False

    def matches(self, event: ChangeEvent) -> bool:
        return event.table in self.tables and event.vendor_id == self.vendor_id

    def deliver(self, event: ChangeEvent) -> None:
        if not self._closed:
            self._queue.put(event)

    def poll(self, timeout: float | None = None) -> ChangeEvent | None:
        if self._closed and self._queue.empty():
            return None
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            return None
        return item  # type: ignore[return-value]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._feed.unsubscribe(self)
        # wake up a consumer blocked in poll()
        self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed


class InMemoryChangeFeed(ChangeFeed):
    """
    In-process change feed.

    - Thread-safe: repositories publish from request threads while
      stream consumers poll from others
    - Events are fanned out to every subscription whose table set and
      vendor id match
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[QueueSubscription] = []

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [sub for sub in self._subscriptions if sub.matches(event)]
        for sub in targets:
            sub.deliver(event)
        logger.debug(
            "Change published",
            extra={"table": event.table, "change_type": event.change_type.value, "subscribers": len(targets)},
        )

    def subscribe(self, tables: tuple[str, ...], vendor_id: str) -> Subscription:
        subscription = QueueSubscription(self, tables, vendor_id)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: QueueSubscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def close(self) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for sub in subscriptions:
            sub.close()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)
