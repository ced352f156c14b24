from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from carlot.domain.car import Car, CarDocument, CarImage
from carlot.domain.changes import ChangeEvent, ChangeType
from carlot.domain.result import Err
from carlot.domain.sale import Sale
from carlot.domain.vendor import Vendor
from carlot.ports.change_feed import ChangeFeed


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class InMemoryDatabase:
    """
    Shared table storage for the in-memory repositories.

    - Rows are kept in insertion order (dicts preserve it)
    - ``fail`` lets a test make one named operation return ``Err``
      (e.g. ``db.fail("car_images.add", "bucket offline")``)
    - Writes are published to the optional change feed
    """

    change_feed: ChangeFeed | None = None
    cars: dict[str, Car] = field(default_factory=dict)
    images: dict[str, CarImage] = field(default_factory=dict)
    documents: dict[str, CarDocument] = field(default_factory=dict)
    sales: dict[str, Sale] = field(default_factory=dict)
    vendors: dict[str, Vendor] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    def fail(self, operation: str, message: str = "store unavailable") -> None:
        self.failures[operation] = message

    def recover(self, operation: str | None = None) -> None:
        if operation is None:
            self.failures.clear()
        else:
            self.failures.pop(operation, None)

    def failure(self, operation: str) -> Err | None:
        message = self.failures.get(operation)
        return Err(message) if message is not None else None

    def notify(
        self,
        table: str,
        change_type: ChangeType,
        vendor_id: str,
        record_id: str | None,
    ) -> None:
        if self.change_feed is not None:
            self.change_feed.publish(
                ChangeEvent(
                    table=table,
                    change_type=change_type,
                    vendor_id=vendor_id,
                    record_id=record_id,
                )
            )
