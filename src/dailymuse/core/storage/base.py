"""
Abstract base class for blob storage backends.

A unified async interface over the local filesystem, Google Cloud Storage
and an in-memory map. Keys are ``/``-separated logical paths.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class StorageMetadata:
    """Metadata for stored objects."""

    key: str
    size: int
    modified_at: datetime
    content_type: str
    custom_metadata: dict[str, Any] = field(default_factory=dict)


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    #: Short name used in log lines and error details.
    name = "storage"

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def save(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, Any] | None = None,
    ) -> StorageMetadata:
        """Save data to storage, overwriting any existing object."""

    @abstractmethod
    async def load(self, key: str) -> bytes:
        """Load data from storage. Raises StorageKeyError if not found."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists in storage."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete an object. Returns True if deleted, False if it didn't exist."""

    @abstractmethod
    async def list_keys(self, prefix: str = "", limit: int | None = None) -> AsyncIterator[str]:
        """List keys with optional prefix filter."""

    @abstractmethod
    async def copy(self, source_key: str, dest_key: str) -> StorageMetadata:
        """Copy an object within storage. Raises StorageKeyError if the source is missing."""

    @abstractmethod
    async def get_url(self, key: str) -> str:
        """Get a reader-resolvable URL or path for the object."""

    def key_for_url(self, url: str) -> str | None:
        """Inverse of get_url: the key a URL points at, or None if it is not ours."""
        return None


class StorageError(Exception):
    """Base exception for storage errors."""


class StorageKeyError(StorageError, KeyError):
    """Raised when a storage key doesn't exist."""


class StoragePermissionError(StorageError):
    """Raised when storage operation is not permitted."""
