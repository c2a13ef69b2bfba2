"""EntryStore implementations."""

from .file import FileEntryStore
from .firestore import FirestoreEntryStore
from .memory import MemoryEntryStore

__all__ = ["FileEntryStore", "FirestoreEntryStore", "MemoryEntryStore"]
