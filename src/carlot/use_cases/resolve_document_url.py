from __future__ import annotations

import logging
from dataclasses import dataclass

from carlot.domain.errors import NotFoundError
from carlot.domain.filenames import (
    CAR_DOCUMENTS_BUCKET,
    CAR_IMAGES_BUCKET,
    CLIENT_DOCUMENTS_BUCKET,
    PROFILE_PHOTOS_BUCKET,
)
from carlot.domain.result import Err
from carlot.ports.object_storage import ObjectStorage

logger = logging.getLogger(__name__)

DEFAULT_SIGNED_URL_TTL_SECONDS = 3600
_BUCKETS = (CLIENT_DOCUMENTS_BUCKET, CAR_DOCUMENTS_BUCKET, CAR_IMAGES_BUCKET, PROFILE_PHOTOS_BUCKET)


@dataclass(frozen=True, slots=True)
class ResolvedDocument:
    url: str
    signed: bool = False
    available: bool = True


class ResolveDocumentUrl:
    """
    Turn a stored document URL into one that can be opened.

    URLs into one of our buckets get a signed URL. When signing fails the
    original URL is returned instead, flagged unavailable only if the
    object is missing. Foreign URLs are passed through untouched.

    Every stored key starts with the owning vendor's id; keys of other
    vendors read as missing.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS,
    ) -> None:
        self._storage = storage
        self._ttl_seconds = ttl_seconds

    def execute(self, vendor_id: str, url: str) -> ResolvedDocument:
        """
        Raises:
            NotFoundError: If the URL points at another vendor's object
        """
        for bucket in _BUCKETS:
            key = self._storage.key_from_url(bucket, url)
            if key is None:
                continue
            if not key.startswith(f"{vendor_id}/"):
                logger.info(
                    "Refused to sign another vendor's document",
                    extra={"vendor_id": vendor_id, "bucket": bucket, "key": key},
                )
                raise NotFoundError(resource="Document")
            signed = self._storage.create_signed_url(bucket, key, self._ttl_seconds)
            if isinstance(signed, Err):
                logger.warning(
                    "Could not sign document URL",
                    extra={"bucket": bucket, "key": key, "error": signed.message},
                )
                return ResolvedDocument(url=url, available=self._storage.exists(bucket, key))
            return ResolvedDocument(url=signed.value, signed=True)
        return ResolvedDocument(url=url)
