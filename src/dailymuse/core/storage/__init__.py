"""
Blob storage backends for dailymuse.

Provides a pluggable async interface for binary objects (the comic
images), with local filesystem, in-memory and Google Cloud Storage
implementations.
"""

from .base import (
    StorageBackend,
    StorageError,
    StorageKeyError,
    StorageMetadata,
    StoragePermissionError,
)
from .gcs import GCSStorage
from .local import LocalStorage
from .memory import MemoryStorage

__all__ = [
    "GCSStorage",
    "LocalStorage",
    "MemoryStorage",
    "StorageBackend",
    "StorageError",
    "StorageKeyError",
    "StorageMetadata",
    "StoragePermissionError",
]
