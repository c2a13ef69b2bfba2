"""In-memory entry store."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from ..models import MuseEntry
from ..store import EntryStore


class MemoryEntryStore(EntryStore):
    """Dict-backed store. Records are kept serialized so callers never share
    mutable state with the store."""

    name = "memory"
    supports_conditional_write = True

    def __init__(self) -> None:
        self._records: dict[str, dict] = {}
        self._lock = asyncio.Lock()

    async def get(self, date: str) -> MuseEntry | None:
        record = self._records.get(date)
        return MuseEntry.from_record(record, key=date) if record is not None else None

    async def put(self, date: str, entry: MuseEntry) -> None:
        self._records[date] = entry.to_record()

    async def put_if_absent(self, date: str, entry: MuseEntry) -> bool:
        async with self._lock:
            if date in self._records:
                return False
            self._records[date] = entry.to_record()
            return True

    async def delete(self, date: str) -> None:
        self._records.pop(date, None)

    async def list_all(self) -> AsyncIterator[MuseEntry]:
        for date in sorted(self._records, reverse=True):
            record = self._records.get(date)
            if record is not None:
                yield MuseEntry.from_record(record, key=date)
