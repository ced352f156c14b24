from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from carlot.domain.result import Result
from carlot.domain.vendor import Vendor


class VendorRepository(ABC):
    """Port for the ``vendors`` table."""

    @abstractmethod
    def get(self, vendor_id: str) -> Result[Vendor | None]: ...

    @abstractmethod
    def add(self, vendor: Vendor) -> Result[Vendor]: ...

    @abstractmethod
    def update(self, vendor_id: str, patch: dict[str, Any]) -> Result[Vendor]: ...
