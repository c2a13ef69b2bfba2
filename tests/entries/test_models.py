"""Tests for dailymuse.entries.models: MuseEntry records and the legacy-read adapter."""

import pytest

from dailymuse.core.exceptions import InvalidDateError
from dailymuse.entries.models import AssetKind, MuseEntry, OperationResult, today_str, validate_date


def _entry(**overrides):
    fields = {
        "scheduled_date": "2024-06-01",
        "created_at": 1717200000000,
        "title": "Pilot",
        "episode_number": "#01",
        "title_image": "https://cdn/title.jpg",
        "comic_image": "https://cdn/comic.jpg",
        "character_description": "a cat",
        "concept": "The cat naps.",
    }
    fields.update(overrides)
    return MuseEntry(**fields)


class TestValidateDate:
    @pytest.mark.parametrize("value", ["2024-01-05", "2000-02-29", "1999-12-31"])
    def test_valid(self, value):
        assert validate_date(value) == value

    @pytest.mark.parametrize("value", ["2024-1-5", "2024/01/05", "2023-02-29", "2024-13-01", "", "../../etc", None])
    def test_invalid(self, value):
        with pytest.raises(InvalidDateError):
            validate_date(value)

    def test_today_str_is_zero_padded(self):
        from datetime import date

        assert today_str(date(2024, 3, 7)) == "2024-03-07"


class TestMuseEntry:
    def test_record_uses_camel_case_and_date_id(self):
        record = _entry().to_record()
        assert record["id"] == "2024-06-01"
        assert record["scheduledDate"] == "2024-06-01"
        assert record["episodeNumber"] == "#01"
        assert record["titleImage"] == "https://cdn/title.jpg"
        assert record["characterDescription"] == "a cat"

    def test_record_roundtrip(self):
        entry = _entry()
        assert MuseEntry.from_record(entry.to_record()) == entry

    def test_is_published_requires_both_images(self):
        assert _entry().is_published
        assert not _entry(title_image="").is_published
        assert not _entry(comic_image="").is_published

    def test_display_image_prefers_title(self):
        assert _entry().display_image == "https://cdn/title.jpg"
        assert _entry(title_image="").display_image == "https://cdn/comic.jpg"

    def test_with_image_returns_copy(self):
        entry = _entry()
        updated = entry.with_image(AssetKind.COMIC, "/data/new.jpg")
        assert updated.comic_image == "/data/new.jpg"
        assert entry.comic_image == "https://cdn/comic.jpg"
        assert updated.image(AssetKind.TITLE) == entry.title_image


class TestLegacyRecords:
    def test_flat_image_url_becomes_comic(self):
        entry = MuseEntry.from_record({"scheduledDate": "2023-11-02", "title": "Old", "imageUrl": "https://old/img.png"})
        assert entry.comic_image == "https://old/img.png"
        assert entry.title_image == ""
        assert entry.display_image == "https://old/img.png"

    def test_panels_image_url_becomes_comic(self):
        entry = MuseEntry.from_record(
            {"scheduledDate": "2023-11-03", "panels": [{"imageUrl": "https://old/p1.png"}, {"imageUrl": "x"}]}
        )
        assert entry.comic_image == "https://old/p1.png"

    def test_current_shape_wins_over_legacy(self):
        entry = MuseEntry.from_record({"scheduledDate": "2023-11-04", "comicImage": "new.jpg", "imageUrl": "old.jpg"})
        assert entry.comic_image == "new.jpg"

    def test_missing_fields_default(self):
        entry = MuseEntry.from_record({}, key="2023-11-05")
        assert entry.scheduled_date == "2023-11-05"
        assert entry.created_at == 0
        assert entry.title == ""
        assert entry.concept == ""

    def test_numeric_episode_and_string_timestamp(self):
        entry = MuseEntry.from_record({"scheduledDate": "2023-11-06", "episodeNumber": 7, "createdAt": "12"})
        assert entry.episode_number == "7"
        assert entry.created_at == 12


def test_operation_result_ok():
    assert OperationResult().ok
    assert not OperationResult(warnings=["cleanup failed"]).ok
