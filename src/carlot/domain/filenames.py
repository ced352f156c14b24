"""Storage key construction for uploaded assets."""

from __future__ import annotations

import re
import time

CAR_IMAGES_BUCKET = "car-images"
CAR_DOCUMENTS_BUCKET = "car-documents"
CLIENT_DOCUMENTS_BUCKET = "client-documents"
PROFILE_PHOTOS_BUCKET = "profile-photos"

STORAGE_BUCKETS = frozenset(
    {CAR_IMAGES_BUCKET, CAR_DOCUMENTS_BUCKET, CLIENT_DOCUMENTS_BUCKET, PROFILE_PHOTOS_BUCKET}
)
# readable without a signed URL
PUBLIC_BUCKETS = frozenset({CAR_IMAGES_BUCKET, PROFILE_PHOTOS_BUCKET})

_DISALLOWED = re.compile(r"[^A-Za-z0-9 ._-]")
_WHITESPACE = re.compile(r"\s+")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def _millis(now: float | None = None) -> int:
    return int((time.time() if now is None else now) * 1000)


def sanitize_filename(filename: str, now: float | None = None) -> str:
    """
    Make an uploaded filename safe for use in a storage key.

    Drops everything outside ``[A-Za-z0-9 ._-]`` (emoji included), turns
    whitespace into single underscores, trims underscores at both ends and
    lowercases. A name that sanitises to nothing becomes ``file_<millis>``.

    Sanitising an already-sanitised name returns it unchanged.
    """
    sanitized = _DISALLOWED.sub("", filename)
    sanitized = _WHITESPACE.sub("_", sanitized)
    sanitized = _REPEATED_UNDERSCORES.sub("_", sanitized)
    sanitized = sanitized.strip("_").lower()
    return sanitized or f"file_{_millis(now)}"


def asset_key(vendor_id: str, car_id: str, filename: str, now: float | None = None) -> str:
    """Key for a car image or document: ``vendor/car/<millis>_<sanitized>``."""
    millis = _millis(now)
    return f"{vendor_id}/{car_id}/{millis}_{sanitize_filename(filename, now)}"


def client_document_key(vendor_id: str, filename: str, now: float | None = None) -> str:
    return f"{vendor_id}/{_millis(now)}-{filename}"


def profile_photo_key(vendor_id: str, filename: str, now: float | None = None) -> str:
    return f"{vendor_id}/{_millis(now)}-{filename}"
