from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Vendor:
    id: str
    email: str
    full_name: str
    phone: str | None = None
    profile_photo: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class VendorProfileUpdate:
    full_name: str | None = None
    phone: str | None = None
    profile_photo: str | None = None

    def as_patch(self) -> dict[str, Any]:
        # phone is always written so that clearing it is possible
        patch: dict[str, Any] = {"phone": self.phone or None}
        if self.full_name is not None:
            patch["full_name"] = self.full_name
        if self.profile_photo is not None:
            patch["profile_photo"] = self.profile_photo
        return patch
