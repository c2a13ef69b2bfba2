"""Google Cloud Storage backend.

Wraps the synchronous ``google-cloud-storage`` client; every blocking call
runs in the default executor so the event loop stays free.

Requires ``dailymuse[cloud]``.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from datetime import datetime
from functools import partial
from typing import Any
from urllib.parse import unquote, urlparse

from .base import StorageBackend, StorageError, StorageKeyError, StorageMetadata, StoragePermissionError

PUBLIC_URL_TEMPLATE = "https://storage.googleapis.com/{bucket}/{key}"


def _require_gcs():
    """Lazy import with clear error message."""
    try:
        from google.api_core import exceptions as gexc
        from google.cloud import storage

        return storage, gexc
    except ImportError:
        raise ImportError("Install with: pip install dailymuse[cloud]") from None


class GCSStorage(StorageBackend):
    """Blob storage in a single GCS bucket.

    Args:
        bucket: Bucket name.
        credentials_file: Service-account JSON. If empty, uses
            Application Default Credentials.
    """

    name = "gcs"

    def __init__(self, bucket: str, credentials_file: str = "", **config):
        super().__init__(**config)
        self.bucket_name = bucket
        self.credentials_file = credentials_file
        self._client = None

    @property
    def client(self):
        if self._client is None:
            storage, _ = _require_gcs()
            if self.credentials_file:
                self._client = storage.Client.from_service_account_json(self.credentials_file)
            else:
                self._client = storage.Client()
        return self._client

    @property
    def bucket(self):
        return self.client.bucket(self.bucket_name)

    async def _run(self, func, *args, **kwargs):
        """Run a blocking client call in the executor, translating API errors."""
        _, gexc = _require_gcs()
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args, **kwargs))
        except gexc.NotFound as e:
            raise StorageKeyError(str(e)) from e
        except (gexc.Forbidden, gexc.Unauthorized) as e:
            raise StoragePermissionError(str(e)) from e
        except gexc.GoogleAPICallError as e:
            raise StorageError(str(e)) from e

    async def save(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, Any] | None = None,
    ) -> StorageMetadata:
        blob = self.bucket.blob(key)
        if metadata:
            blob.metadata = {k: str(v) for k, v in metadata.items()}
        await self._run(blob.upload_from_string, data, content_type=content_type)
        return StorageMetadata(
            key=key,
            size=len(data),
            modified_at=blob.updated or datetime.now(),
            content_type=content_type,
            custom_metadata=metadata or {},
        )

    async def load(self, key: str) -> bytes:
        blob = self.bucket.blob(key)
        return await self._run(blob.download_as_bytes)

    async def exists(self, key: str) -> bool:
        blob = self.bucket.blob(key)
        return await self._run(blob.exists)

    async def delete(self, key: str) -> bool:
        blob = self.bucket.blob(key)
        try:
            await self._run(blob.delete)
        except StorageKeyError:
            return False
        return True

    async def list_keys(self, prefix: str = "", limit: int | None = None) -> AsyncIterator[str]:
        blobs = await self._run(lambda: list(self.client.list_blobs(self.bucket_name, prefix=prefix or None)))
        for count, blob in enumerate(blobs, start=1):
            yield blob.name
            if limit and count >= limit:
                return

    async def copy(self, source_key: str, dest_key: str) -> StorageMetadata:
        bucket = self.bucket
        source = bucket.blob(source_key)
        try:
            new_blob = await self._run(bucket.copy_blob, source, bucket, dest_key)
        except StorageKeyError:
            raise StorageKeyError(f"Source key not found: {source_key}") from None
        return StorageMetadata(
            key=dest_key,
            size=new_blob.size or 0,
            modified_at=new_blob.updated or datetime.now(),
            content_type=new_blob.content_type or "application/octet-stream",
        )

    async def get_url(self, key: str) -> str:
        return PUBLIC_URL_TEMPLATE.format(bucket=self.bucket_name, key=key)

    def key_for_url(self, url: str) -> str | None:
        """Resolve public URLs and Firebase download URLs for this bucket.

        Firebase URLs look like
        ``https://firebasestorage.googleapis.com/v0/b/<bucket>/o/<quoted key>?alt=media``.
        """
        public_prefix = PUBLIC_URL_TEMPLATE.format(bucket=self.bucket_name, key="")
        if url.startswith(public_prefix):
            return unquote(urlparse(url).path[len(f"/{self.bucket_name}/") :]) or None

        parsed = urlparse(url)
        if parsed.netloc != "firebasestorage.googleapis.com":
            return None
        bucket_part, sep, quoted_key = parsed.path.partition("/o/")
        if not sep or bucket_part != f"/v0/b/{self.bucket_name}":
            return None
        return unquote(quoted_key) or None
