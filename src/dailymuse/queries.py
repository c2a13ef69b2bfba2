"""QueryFacade: the reader side: today's entry and the archive."""

from __future__ import annotations

from collections.abc import Callable

from dailymuse.entries.models import MuseEntry, today_str, validate_date
from dailymuse.entries.store import EntryStore


class QueryFacade:
    """Read-only views over an EntryStore.

    Args:
        entries: Record store.
        today: Returns today's date as ``YYYY-MM-DD``; injectable for tests.
    """

    def __init__(self, entries: EntryStore, today: Callable[[], str] = today_str):
        self.entries = entries
        self._today = today

    async def entry_for(self, date: str) -> MuseEntry | None:
        return await self.entries.get(validate_date(date))

    async def today(self) -> MuseEntry | None:
        """The entry scheduled for today, if any."""
        return await self.entries.get(self._today())

    async def archive(self, before: str | None = None) -> list[MuseEntry]:
        """Entries strictly before ``before`` (default: today), newest first."""
        cutoff = validate_date(before) if before else self._today()
        return [entry async for entry in self.entries.list_before(cutoff)]

    async def all_entries(self) -> list[MuseEntry]:
        """Every stored entry, newest first, including future-scheduled ones."""
        return [entry async for entry in self.entries.list_all()]
