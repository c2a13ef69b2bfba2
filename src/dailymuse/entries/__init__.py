"""Entry model, inline image codec, and the EntryStore contract."""

from .models import AssetKind, MuseEntry, OperationResult, PublishDraft, today_str, validate_date
from .store import EntryStore

__all__ = [
    "AssetKind",
    "EntryStore",
    "MuseEntry",
    "OperationResult",
    "PublishDraft",
    "today_str",
    "validate_date",
]
