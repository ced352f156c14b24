from __future__ import annotations

from urllib.parse import quote, unquote

from carlot.domain.result import Err, Ok, Result
from carlot.ports.object_storage import ObjectStorage


class InMemoryObjectStorage(ObjectStorage):
    """
    Canonical contract implementation for tests.

    ``fail_uploads`` makes every upload to the named bucket return ``Err``.
    """

    def __init__(self, base_url: str = "http://storage.test") -> None:
        self._base_url = base_url
        self.objects: dict[tuple[str, str], tuple[bytes, str | None]] = {}
        self.fail_uploads: set[str] = set()
        self.fail_removals: set[str] = set()
        self.uploads: list[tuple[str, str]] = []

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> Result[str]:
        if bucket in self.fail_uploads:
            return Err(f"Upload to {bucket} failed")
        if (bucket, key) in self.objects:
            return Err("The resource already exists")
        self.objects[(bucket, key)] = (data, content_type)
        self.uploads.append((bucket, key))
        return Ok(key)

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self._base_url}/storage/{bucket}/{quote(key)}"

    def create_signed_url(self, bucket: str, key: str, ttl_seconds: int) -> Result[str]:
        if (bucket, key) not in self.objects:
            return Err("Object not found")
        return Ok(f"{self.get_public_url(bucket, key)}?expires={ttl_seconds}&signature=test")

    def remove(self, bucket: str, keys: list[str]) -> Result[None]:
        if bucket in self.fail_removals:
            return Err(f"Remove from {bucket} failed")
        for key in keys:
            self.objects.pop((bucket, key), None)
        return Ok(None)

    def exists(self, bucket: str, key: str) -> bool:
        return (bucket, key) in self.objects

    def key_from_url(self, bucket: str, url: str) -> str | None:
        prefix = f"{self._base_url}/storage/{bucket}/"
        if not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):].split("?", 1)[0])
