"""SchedulingService: the only writer of entries.

Publish, reschedule and remove each span several calls across two
stores with no shared transaction. The ordering rules:

- conflict checks run before any mutation;
- a reschedule writes the new record before deleting the old one, so an
  interrupted move leaves the entry duplicated rather than lost;
- stale-asset cleanup is best-effort and reported through
  ``OperationResult.warnings`` instead of failing the operation.

Nothing is retried automatically. Re-running a failed publish is safe
because asset paths are deterministic and record writes are upserts.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from dailymuse.assets import AssetStore
from dailymuse.core.exceptions import DateConflictError, EntryNotFoundError, IncompleteDraftError, MuseError
from dailymuse.entries import codec
from dailymuse.entries.models import (
    AssetKind,
    MuseEntry,
    OperationResult,
    PublishDraft,
    now_ms,
    validate_date,
)
from dailymuse.entries.store import EntryStore


class SchedulingService:
    """Writer-side operations over an EntryStore and an AssetStore.

    Args:
        entries: Record store.
        assets: Image store.
        clock: Returns the current time in ms since epoch (for ``created_at``).
    """

    def __init__(self, entries: EntryStore, assets: AssetStore, clock: Callable[[], int] = now_ms):
        self.entries = entries
        self.assets = assets
        self.clock = clock

    async def _write_new(self, date: str, entry: MuseEntry) -> None:
        """Write a record at a date that was free at check time."""
        if self.entries.supports_conditional_write:
            if not await self.entries.put_if_absent(date, entry):
                raise DateConflictError(date)
        else:
            await self.entries.put(date, entry)

    async def publish(self, draft: PublishDraft) -> OperationResult:
        """Create a new entry at ``draft.scheduled_date``.

        Raises:
            InvalidDateError: The date is not ``YYYY-MM-DD``.
            IncompleteDraftError: A title or comic image is missing.
            MalformedAssetError: An inline image cannot be decoded.
            DateConflictError: The date already holds an entry.
            StoreUnavailableError: A backend write failed. Assets already
                stored are left in place; a retry overwrites them.
        """
        date = validate_date(draft.scheduled_date)
        missing = [kind.value for kind in AssetKind if not getattr(draft, f"{kind.value}_image")]
        if missing:
            raise IncompleteDraftError(f"Draft for {date} is missing image(s): {', '.join(missing)}")

        entry = draft.to_entry(created_at=self.clock())

        # Decode everything first so a bad payload fails before any write.
        decoded: dict[AssetKind, tuple[bytes, str]] = {}
        for kind in AssetKind:
            ref = entry.image(kind)
            if codec.is_inline(ref):
                decoded[kind] = (codec.decode(ref), codec.mime_type(ref))

        if await self.entries.get(date) is not None:
            raise DateConflictError(date)

        for kind, (data, mime) in decoded.items():
            ref = await self.assets.put(self.assets.path_for(date, kind), data, content_type=mime)
            entry = entry.with_image(kind, ref)

        await self._write_new(date, entry)
        logger.info(f"Published '{entry.title}' ({entry.episode_number}) for {date}")
        return OperationResult(entry=entry)

    async def reschedule(self, old_date: str, new_date: str) -> OperationResult:
        """Move the entry at ``old_date`` to ``new_date``.

        Assets are copied, not renamed, so the old record stays fully
        resolvable until the new one is written.

        Raises:
            EntryNotFoundError: Nothing is scheduled at ``old_date``.
            DateConflictError: ``new_date`` is occupied; nothing was changed.
            StoreUnavailableError: A backend call failed mid-move.
        """
        validate_date(old_date)
        validate_date(new_date)
        if old_date == new_date:
            return OperationResult(entry=await self.entries.get(old_date))

        old_entry = await self.entries.get(old_date)
        if old_entry is None:
            raise EntryNotFoundError(old_date)
        if await self.entries.get(new_date) is not None:
            raise DateConflictError(new_date)

        new_entry = replace(old_entry, scheduled_date=new_date)
        migrated: list[str] = []
        for kind in AssetKind:
            ref = old_entry.image(kind)
            old_path = self.assets.path_for(old_date, kind)
            # Only refs pointing at this date's own asset move; anything else travels unchanged.
            if self.assets.path_from_ref(ref) != old_path or not await self.assets.exists(old_path):
                continue
            new_ref = await self.assets.copy(old_path, self.assets.path_for(new_date, kind))
            new_entry = new_entry.with_image(kind, new_ref)
            migrated.append(old_path)

        await self._write_new(new_date, new_entry)
        await self.entries.delete(old_date)

        result = OperationResult(entry=new_entry)
        for path in migrated:
            await self._cleanup_asset(path, result)
        logger.info(f"Rescheduled '{new_entry.title}' from {old_date} to {new_date}")
        return result

    async def remove(self, date: str) -> OperationResult:
        """Delete the entry at ``date`` and its images. Absent entries are a no-op."""
        validate_date(date)
        entry = await self.entries.get(date)
        result = OperationResult()
        if entry is None:
            logger.debug(f"Nothing scheduled for {date}; remove is a no-op")
            return result

        for path in self._owned_paths(date, entry):
            await self._cleanup_asset(path, result)
        await self.entries.delete(date)
        logger.info(f"Removed '{entry.title}' scheduled for {date}")
        return result

    def _owned_paths(self, date: str, entry: MuseEntry) -> list[str]:
        """Deterministic asset paths for ``date`` plus any path the entry's refs point at."""
        paths = [self.assets.path_for(date, kind) for kind in AssetKind]
        for kind in AssetKind:
            path = self.assets.path_from_ref(entry.image(kind))
            if path and path not in paths:
                paths.append(path)
        return paths

    async def _cleanup_asset(self, path: str, result: OperationResult) -> None:
        """Delete an asset, recording (not raising) any failure."""
        try:
            await self.assets.delete(path)
        except MuseError as e:
            logger.warning(f"Could not delete stale asset {path}: {e}")
            result.warnings.append(f"Could not delete asset {path}: {e}")
