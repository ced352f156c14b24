"""Filesystem implementation of ObjectStorage."""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from pathlib import Path
from typing import Callable
from urllib.parse import quote, unquote, urlencode, urlsplit

from carlot.domain.result import Err, Ok, Result
from carlot.ports.object_storage import ObjectStorage

logger = logging.getLogger(__name__)


def storage_path_prefix(bucket: str) -> str:
    return f"/storage/{bucket}/"


def is_safe_key(key: str) -> bool:
    if not key or key.startswith("/") or "\\" in key:
        return False
    return all(part not in ("", ".", "..") for part in key.split("/"))


class LocalObjectStorage(ObjectStorage):
    """
    Stores objects as files under ``root/<bucket>/<key>``.

    - Public URLs point at the ``/storage`` route of this service
    - Signed URLs add ``expires`` and an HMAC-SHA256 ``signature`` over
      ``<bucket>/<key>:<expires>``, verified by the same route
    - Existing keys are never overwritten
    """

    def __init__(
        self,
        root: Path,
        public_base_url: str,
        secret: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._root = root
        self._public_base_url = public_base_url.rstrip("/")
        self._secret = secret.encode("utf-8")
        self._clock = clock

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> Result[str]:
        if not is_safe_key(key):
            return Err(f"Invalid object key: {key!r}")
        path = self.path_for(bucket, key)
        if path.exists():
            return Err("The resource already exists")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            logger.error(
                "Object upload failed",
                exc_info=exc,
                extra={"bucket": bucket, "key": key},
            )
            return Err.from_exception(exc, "Upload failed")
        return Ok(key)

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self._public_base_url}{storage_path_prefix(bucket)}{quote(key)}"

    def create_signed_url(self, bucket: str, key: str, ttl_seconds: int) -> Result[str]:
        if not is_safe_key(key) or not self.exists(bucket, key):
            return Err("Object not found")
        expires = int(self._clock()) + ttl_seconds
        query = urlencode({"expires": expires, "signature": self.sign(bucket, key, expires)})
        return Ok(f"{self.get_public_url(bucket, key)}?{query}")

    def remove(self, bucket: str, keys: list[str]) -> Result[None]:
        try:
            for key in keys:
                if not is_safe_key(key):
                    return Err(f"Invalid object key: {key!r}")
                self.path_for(bucket, key).unlink(missing_ok=True)
        except OSError as exc:
            return Err.from_exception(exc, "Remove failed")
        return Ok(None)

    def exists(self, bucket: str, key: str) -> bool:
        return is_safe_key(key) and self.path_for(bucket, key).is_file()

    def key_from_url(self, bucket: str, url: str) -> str | None:
        parts = urlsplit(url)
        base = urlsplit(self._public_base_url)
        if parts.netloc and parts.netloc != base.netloc:
            return None
        path = parts.path
        prefix = base.path.rstrip("/") + storage_path_prefix(bucket)
        if not path.startswith(prefix):
            return None
        key = unquote(path[len(prefix):])
        return key if is_safe_key(key) else None

    def path_for(self, bucket: str, key: str) -> Path:
        return self._root / bucket / key

    def sign(self, bucket: str, key: str, expires: int) -> str:
        message = f"{bucket}/{key}:{expires}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def verify_signature(self, bucket: str, key: str, expires: int, signature: str) -> bool:
        if expires < int(self._clock()):
            return False
        return hmac.compare_digest(self.sign(bucket, key, expires), signature)
