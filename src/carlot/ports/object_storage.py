from __future__ import annotations

from abc import ABC, abstractmethod

from carlot.domain.result import Result


class ObjectStorage(ABC):
    """
    Port for bucketed object storage.

    Keys are slash-separated paths inside a bucket. Uploading to an existing
    key fails; keys are expected to be unique per upload.
    """

    @abstractmethod
    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> Result[str]:
        """Store ``data`` and return the key it was stored under."""
        ...

    @abstractmethod
    def get_public_url(self, bucket: str, key: str) -> str: ...

    @abstractmethod
    def create_signed_url(self, bucket: str, key: str, ttl_seconds: int) -> Result[str]: ...

    @abstractmethod
    def remove(self, bucket: str, keys: list[str]) -> Result[None]: ...

    @abstractmethod
    def exists(self, bucket: str, key: str) -> bool: ...

    @abstractmethod
    def key_from_url(self, bucket: str, url: str) -> str | None:
        """Recover the object key from one of this storage's public URLs."""
        ...
