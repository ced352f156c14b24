from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator

from carlot.domain.changes import ChangeEvent


class Subscription(ABC):
    """A stream of change events matching one subscription filter."""

    @abstractmethod
    def poll(self, timeout: float | None = None) -> ChangeEvent | None:
        """Next event, or ``None`` on timeout or once closed."""
        ...

    @abstractmethod
    def close(self) -> None: ...

    @property
    @abstractmethod
    def closed(self) -> bool: ...

    def __iter__(self) -> Iterator[ChangeEvent]:
        while not self.closed:
            event = self.poll()
            if event is not None:
                yield event

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ChangeFeed(ABC):
    """Port for row-change notifications on vendor-scoped tables."""

    @abstractmethod
    def publish(self, event: ChangeEvent) -> None: ...

    @abstractmethod
    def subscribe(self, tables: tuple[str, ...], vendor_id: str) -> Subscription: ...

    @abstractmethod
    def close(self) -> None:
        """Close every open subscription."""
        ...
