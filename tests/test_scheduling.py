"""Tests for dailymuse.scheduling.SchedulingService."""

from unittest.mock import AsyncMock

import pytest

from dailymuse.core.exceptions import (
    DateConflictError,
    EntryNotFoundError,
    IncompleteDraftError,
    InvalidDateError,
    MalformedAssetError,
)
from dailymuse.core.storage import StorageError
from dailymuse.entries.backends import MemoryEntryStore
from dailymuse.entries.models import AssetKind, MuseEntry
from dailymuse.scheduling import SchedulingService


async def _dates(store):
    return [e.scheduled_date async for e in store.list_all()]


class TestPublish:
    async def test_publish_externalizes_images(
        self, scheduler, entry_store, blob_backend, make_draft, png_bytes, jpeg_bytes
    ):
        result = await scheduler.publish(make_draft("2024-06-01"))

        entry = result.entry
        assert result.ok
        assert entry.title_image == "memory://muses/2024-06-01/title.jpg"
        assert entry.comic_image == "memory://muses/2024-06-01/comic.jpg"
        assert entry.created_at == 1_700_000_000_000
        assert await blob_backend.load("muses/2024-06-01/title.jpg") == png_bytes
        assert await blob_backend.load("muses/2024-06-01/comic.jpg") == jpeg_bytes
        assert await entry_store.get("2024-06-01") == entry

    async def test_pilot_scenario(self, scheduler, queries, make_draft):
        await scheduler.publish(make_draft("2024-02-01", title="Pilot", episode="#01"))
        with pytest.raises(DateConflictError):
            await scheduler.publish(make_draft("2024-02-01", title="Pilot Again", episode="#02"))

        entry = await queries.today()
        assert entry.title == "Pilot"
        assert entry.episode_number == "#01"
        assert entry.is_published
        assert entry.display_image == entry.title_image

    async def test_stores_content_type(self, scheduler, blob_backend, make_draft):
        await scheduler.publish(make_draft("2024-06-01"))
        meta = blob_backend._objects["muses/2024-06-01/title.jpg"][1]
        assert meta.content_type == "image/png"

    async def test_external_refs_pass_through(self, scheduler, blob_backend, make_draft):
        draft = make_draft("2024-06-01", title_image="https://cdn.example.com/t.jpg")
        entry = (await scheduler.publish(draft)).entry
        assert entry.title_image == "https://cdn.example.com/t.jpg"
        assert not await blob_backend.exists("muses/2024-06-01/title.jpg")
        assert await blob_backend.exists("muses/2024-06-01/comic.jpg")

    async def test_date_conflict_leaves_existing_entry(self, scheduler, entry_store, blob_backend, make_draft):
        original = (await scheduler.publish(make_draft("2024-06-01", title="First"))).entry
        before = dict(blob_backend._objects)

        with pytest.raises(DateConflictError) as excinfo:
            await scheduler.publish(make_draft("2024-06-01", title="Second"))

        assert excinfo.value.date == "2024-06-01"
        assert "2024-06-01" in str(excinfo.value)
        assert await entry_store.get("2024-06-01") == original
        assert blob_backend._objects == before

    async def test_malformed_image_fails_before_any_write(self, scheduler, entry_store, blob_backend, make_draft):
        draft = make_draft("2024-06-01", comic_image="data:image/png;base64,!!!")
        with pytest.raises(MalformedAssetError):
            await scheduler.publish(draft)
        assert await _dates(entry_store) == []
        assert [k async for k in blob_backend.list_keys()] == []

    async def test_missing_image_is_rejected(self, scheduler, entry_store, make_draft):
        with pytest.raises(IncompleteDraftError, match="comic"):
            await scheduler.publish(make_draft("2024-06-01", comic_image=""))
        assert await _dates(entry_store) == []

    async def test_invalid_date(self, scheduler, make_draft):
        with pytest.raises(InvalidDateError):
            await scheduler.publish(make_draft("2024-02-30"))

    async def test_lost_race_surfaces_as_conflict(self, asset_store, make_draft):
        class RacingStore(MemoryEntryStore):
            async def put_if_absent(self, date, entry):
                return False

        scheduler = SchedulingService(RacingStore(), asset_store)
        with pytest.raises(DateConflictError):
            await scheduler.publish(make_draft("2024-06-01"))

    async def test_store_without_conditional_write(self, asset_store, make_draft):
        class PlainStore(MemoryEntryStore):
            supports_conditional_write = False

        store = PlainStore()
        scheduler = SchedulingService(store, asset_store)
        await scheduler.publish(make_draft("2024-06-01"))
        with pytest.raises(DateConflictError):
            await scheduler.publish(make_draft("2024-06-01"))
        assert await _dates(store) == ["2024-06-01"]


class TestReschedule:
    async def test_moves_entry_and_assets(self, scheduler, entry_store, blob_backend, make_draft, png_bytes):
        original = (await scheduler.publish(make_draft("2024-06-01"))).entry

        result = await scheduler.reschedule("2024-06-01", "2024-06-15")

        moved = result.entry
        assert result.ok
        assert await entry_store.get("2024-06-01") is None
        assert await entry_store.get("2024-06-15") == moved
        assert moved.scheduled_date == "2024-06-15"
        assert moved.title == original.title
        assert moved.created_at == original.created_at
        assert moved.title_image == "memory://muses/2024-06-15/title.jpg"
        assert moved.comic_image == "memory://muses/2024-06-15/comic.jpg"
        assert await blob_backend.load("muses/2024-06-15/title.jpg") == png_bytes
        assert not await blob_backend.exists("muses/2024-06-01/title.jpg")
        assert not await blob_backend.exists("muses/2024-06-01/comic.jpg")

    async def test_conflict_changes_nothing(self, scheduler, entry_store, blob_backend, make_draft):
        a = (await scheduler.publish(make_draft("2024-06-01", title="A"))).entry
        b = (await scheduler.publish(make_draft("2024-06-02", title="B"))).entry
        before = dict(blob_backend._objects)

        with pytest.raises(DateConflictError):
            await scheduler.reschedule("2024-06-01", "2024-06-02")

        assert await entry_store.get("2024-06-01") == a
        assert await entry_store.get("2024-06-02") == b
        assert blob_backend._objects == before

    async def test_missing_source(self, scheduler):
        with pytest.raises(EntryNotFoundError):
            await scheduler.reschedule("2024-06-01", "2024-06-02")

    async def test_same_date_is_noop(self, scheduler, entry_store, make_draft):
        original = (await scheduler.publish(make_draft("2024-06-01"))).entry
        result = await scheduler.reschedule("2024-06-01", "2024-06-01")
        assert result.entry == original
        assert await _dates(entry_store) == ["2024-06-01"]

    async def test_validates_both_dates(self, scheduler):
        with pytest.raises(InvalidDateError):
            await scheduler.reschedule("2024-06-01", "June 2")

    async def test_foreign_refs_travel_unchanged(self, scheduler, entry_store, asset_store):
        legacy = MuseEntry(
            scheduled_date="2023-01-01",
            created_at=5,
            title="Old",
            episode_number="#00",
            title_image="https://cdn.example.com/old-title.png",
            comic_image="https://cdn.example.com/old-comic.png",
        )
        await entry_store.put("2023-01-01", legacy)

        moved = (await scheduler.reschedule("2023-01-01", "2023-01-08")).entry

        assert moved.title_image == legacy.title_image
        assert moved.comic_image == legacy.comic_image
        assert not await asset_store.exists(asset_store.path_for("2023-01-08", AssetKind.TITLE))

    async def test_stray_asset_at_old_path_is_not_adopted(self, scheduler, entry_store, blob_backend, make_draft):
        # Left behind by an earlier publish that failed before writing its record.
        await blob_backend.save("muses/2024-06-01/title.jpg", b"stray")
        draft = make_draft("2024-06-01", title_image="https://cdn.example.com/real-title.png")
        published = (await scheduler.publish(draft)).entry

        moved = (await scheduler.reschedule("2024-06-01", "2024-06-02")).entry

        assert moved.title_image == "https://cdn.example.com/real-title.png"
        assert moved.comic_image == "memory://muses/2024-06-02/comic.jpg"
        assert await entry_store.get("2024-06-02") == moved
        assert moved.title == published.title
        assert not await blob_backend.exists("muses/2024-06-02/title.jpg")

    async def test_cleanup_failure_becomes_warning(self, scheduler, entry_store, blob_backend, make_draft):
        await scheduler.publish(make_draft("2024-06-01"))
        blob_backend.delete = AsyncMock(side_effect=StorageError("bucket offline"))

        result = await scheduler.reschedule("2024-06-01", "2024-06-15")

        assert not result.ok
        assert len(result.warnings) == 2
        assert "muses/2024-06-01/title.jpg" in result.warnings[0]
        assert await _dates(entry_store) == ["2024-06-15"]


class TestRemove:
    async def test_removes_entry_and_assets(self, scheduler, entry_store, blob_backend, make_draft):
        await scheduler.publish(make_draft("2024-06-01"))
        await scheduler.publish(make_draft("2024-06-02"))

        result = await scheduler.remove("2024-06-01")

        assert result.ok
        assert result.entry is None
        assert await _dates(entry_store) == ["2024-06-02"]
        assert [k async for k in blob_backend.list_keys()] == [
            "muses/2024-06-02/comic.jpg",
            "muses/2024-06-02/title.jpg",
        ]

    async def test_remove_is_idempotent(self, scheduler, entry_store, make_draft):
        await scheduler.publish(make_draft("2024-06-01"))
        await scheduler.remove("2024-06-01")
        result = await scheduler.remove("2024-06-01")
        assert result.ok
        assert await _dates(entry_store) == []

    async def test_removes_assets_named_by_refs(self, scheduler, entry_store, blob_backend):
        for kind in ("title", "comic"):
            await blob_backend.save(f"muses/2024-06-01/{kind}_1700000000000.jpg", b"legacy")
        await entry_store.put(
            "2024-06-01",
            MuseEntry(
                scheduled_date="2024-06-01",
                created_at=1_700_000_000_000,
                title="Legacy",
                episode_number="#00",
                title_image="memory://muses/2024-06-01/title_1700000000000.jpg",
                comic_image="memory://muses/2024-06-01/comic_1700000000000.jpg",
            ),
        )

        result = await scheduler.remove("2024-06-01")

        assert result.ok
        assert [k async for k in blob_backend.list_keys()] == []
        assert await entry_store.get("2024-06-01") is None

    async def test_asset_failure_still_removes_record(self, scheduler, entry_store, blob_backend, make_draft):
        await scheduler.publish(make_draft("2024-06-01"))
        blob_backend.delete = AsyncMock(side_effect=StorageError("bucket offline"))

        result = await scheduler.remove("2024-06-01")

        assert len(result.warnings) == 2
        assert await entry_store.get("2024-06-01") is None
