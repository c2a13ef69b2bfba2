"""In-memory storage backend for tests and throwaway sessions."""

from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

from .base import StorageBackend, StorageKeyError, StorageMetadata


class MemoryStorage(StorageBackend):
    """Dict-backed storage. URLs are ``memory://<key>``."""

    name = "memory"

    def __init__(self, **config):
        super().__init__(**config)
        self._objects: dict[str, tuple[bytes, StorageMetadata]] = {}

    async def save(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, Any] | None = None,
    ) -> StorageMetadata:
        meta = StorageMetadata(
            key=key,
            size=len(data),
            modified_at=datetime.now(),
            content_type=content_type,
            custom_metadata=metadata or {},
        )
        self._objects[key] = (bytes(data), meta)
        return meta

    async def load(self, key: str) -> bytes:
        try:
            return self._objects[key][0]
        except KeyError:
            raise StorageKeyError(f"Key not found: {key}") from None

    async def exists(self, key: str) -> bool:
        return key in self._objects

    async def delete(self, key: str) -> bool:
        return self._objects.pop(key, None) is not None

    async def list_keys(self, prefix: str = "", limit: int | None = None) -> AsyncIterator[str]:
        count = 0
        for key in sorted(self._objects):
            if prefix and not key.startswith(prefix):
                continue
            yield key
            count += 1
            if limit and count >= limit:
                return

    async def copy(self, source_key: str, dest_key: str) -> StorageMetadata:
        if source_key not in self._objects:
            raise StorageKeyError(f"Source key not found: {source_key}")
        data, meta = self._objects[source_key]
        return await self.save(dest_key, data, meta.content_type, dict(meta.custom_metadata))

    async def get_url(self, key: str) -> str:
        if key not in self._objects:
            raise StorageKeyError(f"Key not found: {key}")
        return f"memory://{key}"

    def key_for_url(self, url: str) -> str | None:
        if url.startswith("memory://"):
            return url[len("memory://") :] or None
        return None
