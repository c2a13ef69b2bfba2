"""EntryStore: the contract for entry persistence backends.

A dumb keyed map from ``YYYY-MM-DD`` to ``MuseEntry`` with ordered
listing. It does not enforce one-entry-per-date on its own; the
scheduling service does that through ``get`` checks and, where the
backend can do it atomically, ``put_if_absent``.

Implementations: :class:`~dailymuse.entries.backends.MemoryEntryStore`,
:class:`~dailymuse.entries.backends.FileEntryStore`,
:class:`~dailymuse.entries.backends.FirestoreEntryStore`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from .models import MuseEntry


class EntryStore(ABC):
    """Abstract base class for entry stores.

    Listing methods are async generators: each call starts a fresh,
    finite pass over the store, ordered by date descending. Any backend
    I/O failure surfaces as ``StoreUnavailableError``.
    """

    name = "entries"

    #: True when ``put_if_absent`` is a real create-if-absent write rather
    #: than a get-then-put.
    supports_conditional_write = False

    @abstractmethod
    async def get(self, date: str) -> MuseEntry | None:
        """Return the entry at ``date`` or None. Never raises for "not found"."""

    @abstractmethod
    async def put(self, date: str, entry: MuseEntry) -> None:
        """Unconditional upsert at ``date``."""

    @abstractmethod
    async def delete(self, date: str) -> None:
        """Remove the entry at ``date``. Deleting an absent key is not an error."""

    @abstractmethod
    def list_all(self) -> AsyncIterator[MuseEntry]:
        """All entries, date descending."""

    def list_before(self, date: str) -> AsyncIterator[MuseEntry]:
        """Entries with ``scheduled_date < date``, date descending.

        Backends with a native range query override this.
        """
        return self._filter_before(date)

    async def _filter_before(self, date: str) -> AsyncIterator[MuseEntry]:
        async for entry in self.list_all():
            if entry.scheduled_date < date:
                yield entry

    async def put_if_absent(self, date: str, entry: MuseEntry) -> bool:
        """Write ``entry`` only if ``date`` is free. Returns False if it was occupied.

        The default is a best-effort check-then-write with no isolation
        between the two round-trips.
        """
        if await self.get(date) is not None:
            return False
        await self.put(date, entry)
        return True
