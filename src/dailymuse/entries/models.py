"""Data models for scheduled comic entries.

``MuseEntry`` is the only persisted entity. Records are stored as JSON
with camelCase keys so every backend (document store, flat files, memory)
shares one wire shape. Pure data, no I/O.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from dailymuse.core.exceptions import InvalidDateError

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class AssetKind(StrEnum):
    TITLE = "title"
    COMIC = "comic"


def validate_date(value: str) -> str:
    """Return ``value`` if it is a real ``YYYY-MM-DD`` date, else raise InvalidDateError.

    The zero-padded format is load-bearing: string order must equal
    chronological order for listing and the before-filter.
    """
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise InvalidDateError(f"Invalid date {value!r}: expected YYYY-MM-DD.")
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise InvalidDateError(f"Invalid date {value!r}: not a calendar date.") from None
    return value


def today_str(today: date | None = None) -> str:
    """Local calendar date as ``YYYY-MM-DD``."""
    return (today or date.today()).strftime(DATE_FORMAT)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class MuseEntry:
    """One scheduled comic publication, keyed by its calendar date."""

    scheduled_date: str
    created_at: int
    title: str = ""
    episode_number: str = ""
    title_image: str = ""
    comic_image: str = ""
    character_description: str = ""
    concept: str = ""

    @property
    def is_published(self) -> bool:
        """Both artworks are present."""
        return bool(self.title_image and self.comic_image)

    @property
    def display_image(self) -> str:
        """Best single image for thumbnails: the title card, else the comic."""
        return self.title_image or self.comic_image

    def image(self, kind: AssetKind) -> str:
        return self.title_image if kind is AssetKind.TITLE else self.comic_image

    def with_image(self, kind: AssetKind, ref: str) -> MuseEntry:
        if kind is AssetKind.TITLE:
            return replace(self, title_image=ref)
        return replace(self, comic_image=ref)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the shared JSON record shape."""
        return {
            "id": self.scheduled_date,
            "scheduledDate": self.scheduled_date,
            "createdAt": self.created_at,
            "title": self.title,
            "episodeNumber": self.episode_number,
            "titleImage": self.title_image,
            "comicImage": self.comic_image,
            "characterDescription": self.character_description,
            "concept": self.concept,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any], key: str | None = None) -> MuseEntry:
        """Build an entry from a stored record, normalizing legacy shapes.

        Older records kept a single flat ``imageUrl`` (or a ``panels`` list
        of ``{imageUrl}``) instead of split title/comic images; that image
        becomes the comic. A record without ``scheduledDate`` takes the
        storage key.
        """
        comic = record.get("comicImage") or record.get("imageUrl") or ""
        if not comic:
            panels = record.get("panels") or []
            if panels and isinstance(panels[0], dict):
                comic = panels[0].get("imageUrl") or ""

        created_at = record.get("createdAt") or 0
        try:
            created_at = int(created_at)
        except (TypeError, ValueError):
            created_at = 0

        return cls(
            scheduled_date=record.get("scheduledDate") or key or record.get("id") or "",
            created_at=created_at,
            title=record.get("title") or "",
            episode_number=str(record.get("episodeNumber") or ""),
            title_image=record.get("titleImage") or "",
            comic_image=comic,
            character_description=record.get("characterDescription") or "",
            concept=record.get("concept") or "",
        )


@dataclass
class PublishDraft:
    """Everything the creator submits to publish one entry.

    Images are usually inline data URLs fresh from the generator, but an
    already-externalized URL is accepted as-is.
    """

    scheduled_date: str
    title: str
    episode_number: str
    title_image: str
    comic_image: str
    character_description: str = ""
    concept: str = ""

    def to_entry(self, created_at: int) -> MuseEntry:
        return MuseEntry(
            scheduled_date=self.scheduled_date,
            created_at=created_at,
            title=self.title,
            episode_number=self.episode_number,
            title_image=self.title_image,
            comic_image=self.comic_image,
            character_description=self.character_description,
            concept=self.concept,
        )


@dataclass
class OperationResult:
    """Outcome of a writer operation.

    Attributes:
        entry: The entry after the operation (None for remove / no-op).
        warnings: Non-fatal side effects that failed, e.g. stale asset
            cleanup. The operation itself succeeded.
    """

    entry: MuseEntry | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings
