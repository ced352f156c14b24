from __future__ import annotations

from dataclasses import replace
from typing import Any

from carlot.adapters.in_memory_store import InMemoryDatabase, utcnow
from carlot.domain.result import Err, Ok, Result
from carlot.domain.vendor import Vendor
from carlot.ports.vendor_repository import VendorRepository


class InMemoryVendorRepository(VendorRepository):
    """Canonical contract implementation for tests."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def get(self, vendor_id: str) -> Result[Vendor | None]:
        if err := self._db.failure("vendors.get"):
            return err
        return Ok(self._db.vendors.get(vendor_id))

    def add(self, vendor: Vendor) -> Result[Vendor]:
        if err := self._db.failure("vendors.add"):
            return err
        if vendor.id in self._db.vendors:
            return Err(f"Vendor '{vendor.id}' already exists")
        stored = replace(vendor, created_at=vendor.created_at or utcnow())
        self._db.vendors[vendor.id] = stored
        return Ok(stored)

    def update(self, vendor_id: str, patch: dict[str, Any]) -> Result[Vendor]:
        if err := self._db.failure("vendors.update"):
            return err
        vendor = self._db.vendors.get(vendor_id)
        if vendor is None:
            return Err(f"Vendor '{vendor_id}' not found")
        updated = replace(vendor, **patch)
        self._db.vendors[vendor_id] = updated
        return Ok(updated)
