from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable

from carlot.domain.car import StagedFile
from carlot.domain.errors import UpstreamError, ValidationError
from carlot.domain.filenames import PROFILE_PHOTOS_BUCKET, profile_photo_key
from carlot.domain.result import Err
from carlot.domain.vendor import Vendor, VendorProfileUpdate
from carlot.ports.object_storage import ObjectStorage
from carlot.ports.vendor_repository import VendorRepository
from carlot.use_cases.vendor_session import VendorSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateVendorProfileRequest:
    update: VendorProfileUpdate
    photo: StagedFile | None = None


class UpdateVendorProfile:
    """
    Update the signed-in vendor's name and phone, optionally with a new photo.

    The photo is uploaded to ``profile-photos`` before the row is written;
    the session's vendor is replaced with the updated profile.
    """

    def __init__(
        self,
        session: VendorSession,
        vendor_repository: VendorRepository,
        storage: ObjectStorage,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._session = session
        self._vendors = vendor_repository
        self._storage = storage
        self._clock = clock

    def execute(self, request: UpdateVendorProfileRequest) -> Vendor:
        vendor = self._session.require_vendor()
        update = request.update
        if update.full_name is not None and not update.full_name.strip():
            raise ValidationError(
                errors=[{"field": "full_name", "message": "Full name is required"}]
            )

        if request.photo is not None:
            key = profile_photo_key(vendor.id, request.photo.filename, now=self._clock())
            uploaded = self._storage.upload(
                PROFILE_PHOTOS_BUCKET, key, request.photo.content, request.photo.content_type
            )
            if isinstance(uploaded, Err):
                raise UpstreamError(f"Failed to upload profile photo: {uploaded.message}")
            update = replace(
                update, profile_photo=self._storage.get_public_url(PROFILE_PHOTOS_BUCKET, key)
            )

        if update.full_name is not None:
            update = replace(update, full_name=update.full_name.strip())
        updated = self._vendors.update(vendor.id, update.as_patch())
        if isinstance(updated, Err):
            raise UpstreamError("Failed to update profile", vendor_id=vendor.id)

        logger.info("Vendor profile updated", extra={"vendor_id": vendor.id})
        self._session.replace_vendor(updated.value)
        return updated.value
