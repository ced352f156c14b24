from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChangeType(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A row-level change in one of the vendor-scoped tables."""

    table: str
    change_type: ChangeType
    vendor_id: str
    record_id: str | None = None
