"""AssetStore: comic images kept outside the entry records.

Images are addressed by ``(date, kind)`` rather than content hash: a
re-publish to the same date overwrites, and a reschedule carries the
images to the new date's paths. ``path_from_ref`` maps a stored ref back
to its path so removal also reaches assets written under other names.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from loguru import logger

from dailymuse.core.exceptions import StoreUnavailableError
from dailymuse.core.storage import StorageBackend, StorageError, StorageKeyError, StoragePermissionError
from dailymuse.entries import codec
from dailymuse.entries.models import AssetKind, validate_date


class AssetStore:
    """Binary image storage keyed by logical path, on top of a blob backend.

    Args:
        backend: Any :class:`~dailymuse.core.storage.StorageBackend`.
        prefix: Leading path segment for every asset.
    """

    def __init__(self, backend: StorageBackend, prefix: str = "muses"):
        self.backend = backend
        self.prefix = prefix.strip("/")

    def path_for(self, date: str, kind: AssetKind | str) -> str:
        """Deterministic asset path for one image of the entry at ``date``."""
        kind = AssetKind(kind)
        validate_date(date)
        if self.prefix:
            return f"{self.prefix}/{date}/{kind}.jpg"
        return f"{date}/{kind}.jpg"

    @asynccontextmanager
    async def _storage_errors(self, action: str):
        try:
            yield
        except StoragePermissionError as e:
            raise StoreUnavailableError(
                f"Cannot {action}: {e}", reason="access-denied", backend=self.backend.name
            ) from e
        except StorageKeyError as e:
            raise StoreUnavailableError(f"Cannot {action}: {e}", reason="not-found", backend=self.backend.name) from e
        except (StorageError, OSError) as e:
            raise StoreUnavailableError(f"Cannot {action}: {e}", reason="unavailable", backend=self.backend.name) from e

    async def put(self, path: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """Store ``data`` at ``path`` (overwriting) and return a reader-resolvable ref."""
        async with self._storage_errors(f"store asset {path}"):
            await self.backend.save(path, data, content_type=content_type)
            ref = await self.backend.get_url(path)
        logger.debug(f"Stored {len(data)} bytes at {path}")
        return ref

    async def exists(self, path: str) -> bool:
        async with self._storage_errors(f"check asset {path}"):
            return await self.backend.exists(path)

    async def delete(self, path: str) -> None:
        """Remove the asset at ``path``; an already-missing asset is fine."""
        async with self._storage_errors(f"delete asset {path}"):
            deleted = await self.backend.delete(path)
        if not deleted:
            logger.debug(f"Asset {path} already gone")

    async def copy(self, source: str, dest: str) -> str:
        async with self._storage_errors(f"copy asset {source} -> {dest}"):
            await self.backend.copy(source, dest)
            return await self.backend.get_url(dest)

    def path_from_ref(self, ref: str) -> str | None:
        """Path of the asset a stored ref points at, or None for inline and foreign refs."""
        if not ref or codec.is_inline(ref):
            return None
        return self.backend.key_for_url(ref)
