"""PostgreSQL implementation of VendorRepository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from carlot.adapters.postgres_base import PostgresRepository, parse_uuid
from carlot.domain.result import Err, Ok, Result
from carlot.domain.vendor import Vendor
from carlot.infra.db.models.vendor import VendorRow
from carlot.ports.vendor_repository import VendorRepository

_UPDATABLE_FIELDS = {"full_name", "phone", "profile_photo"}


class PostgresVendorRepository(PostgresRepository, VendorRepository):
    def get(self, vendor_id: str) -> Result[Vendor | None]:
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Ok(None)
        try:
            row = self._session.execute(
                select(VendorRow).where(VendorRow.id == vendor_uuid)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            return self._fail("vendors.get", exc)
        return Ok(self._to_domain(row) if row else None)

    def add(self, vendor: Vendor) -> Result[Vendor]:
        vendor_uuid = parse_uuid(vendor.id)
        if vendor_uuid is None:
            return Err(f"Invalid vendor id: {vendor.id}")
        row = VendorRow(
            id=vendor_uuid,
            email=vendor.email,
            full_name=vendor.full_name,
            phone=vendor.phone,
            profile_photo=vendor.profile_photo,
        )
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            return self._fail("vendors.add", exc)
        return Ok(self._to_domain(row))

    def update(self, vendor_id: str, patch: dict[str, Any]) -> Result[Vendor]:
        unknown = set(patch) - _UPDATABLE_FIELDS
        if unknown:
            return Err(f"Fields not updatable: {sorted(unknown)}")
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Err(f"Invalid vendor id: {vendor_id}")
        try:
            row = self._session.get(VendorRow, vendor_uuid)
            if row is None:
                return Err(f"Vendor '{vendor_id}' not found")
            for name, value in patch.items():
                setattr(row, name, value)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            return self._fail("vendors.update", exc)
        return Ok(self._to_domain(row))

    def _to_domain(self, row: VendorRow) -> Vendor:
        return Vendor(
            id=str(row.id),
            email=row.email,
            full_name=row.full_name,
            phone=row.phone,
            profile_photo=row.profile_photo,
            created_at=row.created_at,
        )
