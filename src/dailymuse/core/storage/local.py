"""
Local filesystem storage backend.

Objects are plain files under ``base_path``. When ``public_base_url`` is
set (e.g. ``/data`` for a static site that serves ``base_path``), URLs are
built from it; otherwise they are ``file://`` URLs.
"""

import asyncio
import os
import shutil
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import aiofiles
import aiofiles.os

from .base import StorageBackend, StorageKeyError, StorageMetadata, StoragePermissionError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend."""

    name = "local"

    def __init__(self, base_path: str = "~/.dailymuse-data/assets", public_base_url: str = "", **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _get_full_path(self, key: str) -> Path:
        """Resolve a storage key to an absolute path under ``base_path``.

        Rejects unsafe keys (absolute paths, traversal, empty keys, and
        backslash-delimited paths) to prevent writes outside ``base_path``.
        """
        raw_key = key.strip()
        if not raw_key:
            raise StoragePermissionError("Storage key cannot be empty.")
        if "\x00" in raw_key:
            raise StoragePermissionError("Storage key cannot contain null bytes.")
        if "\\" in raw_key:
            raise StoragePermissionError("Storage key cannot contain backslashes. Use '/' separators.")

        key_path = Path(raw_key)
        if key_path.is_absolute() or raw_key.startswith("~"):
            raise StoragePermissionError(f"Unsafe storage key '{key}': absolute paths are not allowed.")

        full_path = (self.base_path / key_path).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise StoragePermissionError(f"Unsafe storage key '{key}': path traversal is not allowed.") from e
        return full_path

    async def _metadata_for(self, key: str, path: Path, content_type: str, metadata=None) -> StorageMetadata:
        stat = await aiofiles.os.stat(path)
        return StorageMetadata(
            key=key,
            size=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime),
            content_type=content_type,
            custom_metadata=metadata or {},
        )

    async def save(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, Any] | None = None,
    ) -> StorageMetadata:
        path = self._get_full_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e

        return await self._metadata_for(key, path, content_type, metadata)

    async def load(self, key: str) -> bytes:
        path = self._get_full_path(key)
        if not path.exists():
            raise StorageKeyError(f"Key not found: {key}")

        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e

    async def exists(self, key: str) -> bool:
        return self._get_full_path(key).exists()

    async def delete(self, key: str) -> bool:
        path = self._get_full_path(key)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return False
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot delete {path}: {e}") from e
        return True

    async def list_keys(self, prefix: str = "", limit: int | None = None) -> AsyncIterator[str]:
        count = 0
        for root, _dirs, files in os.walk(self.base_path):
            for file in sorted(files):
                key = (Path(root) / file).relative_to(self.base_path).as_posix()
                if prefix and not key.startswith(prefix):
                    continue
                yield key
                count += 1
                if limit and count >= limit:
                    return

    async def copy(self, source_key: str, dest_key: str) -> StorageMetadata:
        source_path = self._get_full_path(source_key)
        if not source_path.exists():
            raise StorageKeyError(f"Source key not found: {source_key}")

        dest_path = self._get_full_path(dest_key)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.get_running_loop().run_in_executor(None, shutil.copy2, source_path, dest_path)
        return await self._metadata_for(dest_key, dest_path, "application/octet-stream")

    async def get_url(self, key: str) -> str:
        path = self._get_full_path(key)
        if self.public_base_url:
            return f"{self.public_base_url}/{path.relative_to(self.base_path).as_posix()}"
        return path.as_uri()

    def key_for_url(self, url: str) -> str | None:
        if self.public_base_url and url.startswith(self.public_base_url + "/"):
            key = url[len(self.public_base_url) + 1 :]
        elif url.startswith("file://"):
            path = Path(unquote(urlparse(url).path))
            try:
                key = path.relative_to(self.base_path).as_posix()
            except ValueError:
                return None
        else:
            return None
        try:
            self._get_full_path(key)
        except StoragePermissionError:
            return None
        return key
