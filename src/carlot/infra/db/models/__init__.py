from carlot.infra.db.models.auth import AuthSessionRow, AuthUserRow
from carlot.infra.db.models.base import Base
from carlot.infra.db.models.car import CarRow
from carlot.infra.db.models.car_asset import CarDocumentRow, CarImageRow
from carlot.infra.db.models.sale import SaleRow
from carlot.infra.db.models.vendor import VendorRow

__all__ = [
    "AuthSessionRow",
    "AuthUserRow",
    "Base",
    "CarDocumentRow",
    "CarImageRow",
    "CarRow",
    "SaleRow",
    "VendorRow",
]
