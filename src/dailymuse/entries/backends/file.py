"""Flat-file entry store.

Layout under ``base_dir`` (servable as static files)::

    2024-06-01.json      one record per date
    2024-05-31.json
    index.json           ["2024-06-01", "2024-05-31", ...]  (descending)

The index is rewritten on every put/delete. Record writes go through a
temp file so readers never see a half-written record.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import tempfile
from collections.abc import AsyncIterator
from contextlib import contextmanager
from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from dailymuse.core.exceptions import InvalidDateError, StoreUnavailableError

from ..models import MuseEntry, validate_date
from ..store import EntryStore

INDEX_FILE = "index.json"
_RECORD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\.json$")


def _is_date(value: str) -> bool:
    try:
        validate_date(value)
    except InvalidDateError:
        return False
    return True


class FileEntryStore(EntryStore):
    """Directory of JSON records plus an ordered index file."""

    name = "file"
    supports_conditional_write = True

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._index_lock = asyncio.Lock()

    @property
    def index_path(self) -> Path:
        return self.base_dir / INDEX_FILE

    def _record_path(self, date: str) -> Path:
        # The date doubles as a filename, so it must never carry separators.
        return self.base_dir / f"{validate_date(date)}.json"

    @contextmanager
    def _io_errors(self, action: str):
        try:
            yield
        except PermissionError as e:
            raise StoreUnavailableError(f"Cannot {action}: {e}", reason="access-denied", backend=self.name) from e
        except OSError as e:
            raise StoreUnavailableError(f"Cannot {action}: {e}", reason="unavailable", backend=self.name) from e
        except json.JSONDecodeError as e:
            raise StoreUnavailableError(f"Cannot {action}: corrupt JSON ({e})", backend=self.name) from e

    # -- Low-level file helpers ----------------------------------------------

    async def _read_json(self, path: Path):
        async with aiofiles.open(path, encoding="utf-8") as f:
            return json.loads(await f.read())

    async def _write_temp(self, content: str) -> str:
        fd, tmp_path = tempfile.mkstemp(dir=str(self.base_dir), suffix=".tmp")
        os.close(fd)
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(content)
        return tmp_path

    async def _atomic_write(self, path: Path, content: str) -> None:
        """Write via temp file + rename."""
        tmp_path = await self._write_temp(content)
        try:
            await aiofiles.os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    async def _exclusive_write(self, path: Path, content: str) -> bool:
        """Create ``path`` only if it does not exist. Hard-linking the temp file
        fails atomically when the target is already there."""
        tmp_path = await self._write_temp(content)
        try:
            await aiofiles.os.link(tmp_path, path)
        except FileExistsError:
            return False
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
        return True

    # -- Index ---------------------------------------------------------------

    async def _load_index(self) -> list[str]:
        if not self.index_path.exists():
            return self._scan_dates()
        index = await self._read_json(self.index_path)
        if not isinstance(index, list):
            logger.warning(f"Ignoring malformed index at {self.index_path}; rescanning records")
            return self._scan_dates()
        dates = {d for d in index if isinstance(d, str) and _is_date(d)}
        skipped = [d for d in index if not (isinstance(d, str) and d in dates)]
        if skipped:
            logger.warning(f"Skipping non-date index entries {skipped!r} in {self.index_path}")
        return sorted(dates, reverse=True)

    def _scan_dates(self) -> list[str]:
        return sorted(
            (p.stem for p in self.base_dir.iterdir() if _RECORD_RE.match(p.name) and _is_date(p.stem)),
            reverse=True,
        )

    async def _update_index(self, add: str | None = None, remove: str | None = None) -> None:
        async with self._index_lock:
            dates = set(await self._load_index())
            if add:
                dates.add(add)
            if remove:
                dates.discard(remove)
            await self._atomic_write(self.index_path, json.dumps(sorted(dates, reverse=True), indent=2))

    async def rebuild_index(self) -> list[str]:
        """Regenerate ``index.json`` from the record files on disk."""
        with self._io_errors("rebuild index"):
            async with self._index_lock:
                dates = self._scan_dates()
                await self._atomic_write(self.index_path, json.dumps(dates, indent=2))
        logger.info(f"Rebuilt entry index with {len(dates)} dates")
        return dates

    # -- EntryStore ----------------------------------------------------------

    async def get(self, date: str) -> MuseEntry | None:
        path = self._record_path(date)
        with self._io_errors(f"read entry {date}"):
            try:
                record = await self._read_json(path)
            except FileNotFoundError:
                return None
        return MuseEntry.from_record(record, key=date)

    async def put(self, date: str, entry: MuseEntry) -> None:
        path = self._record_path(date)
        content = json.dumps(entry.to_record(), indent=2, ensure_ascii=False)
        with self._io_errors(f"write entry {date}"):
            await self._atomic_write(path, content)
            await self._update_index(add=date)

    async def put_if_absent(self, date: str, entry: MuseEntry) -> bool:
        path = self._record_path(date)
        content = json.dumps(entry.to_record(), indent=2, ensure_ascii=False)
        with self._io_errors(f"write entry {date}"):
            if not await self._exclusive_write(path, content):
                return False
            await self._update_index(add=date)
        return True

    async def delete(self, date: str) -> None:
        path = self._record_path(date)
        with self._io_errors(f"delete entry {date}"):
            try:
                await aiofiles.os.remove(path)
            except FileNotFoundError:
                pass
            await self._update_index(remove=date)

    async def list_all(self) -> AsyncIterator[MuseEntry]:
        with self._io_errors("read index"):
            dates = await self._load_index()
        for date in dates:
            entry = await self.get(date)
            if entry is None:
                logger.warning(f"Index lists {date} but its record is missing; skipping")
                continue
            yield entry

    async def list_before(self, date: str) -> AsyncIterator[MuseEntry]:
        with self._io_errors("read index"):
            dates = await self._load_index()
        for d in dates:
            if d >= date:
                continue
            entry = await self.get(d)
            if entry is not None:
                yield entry
