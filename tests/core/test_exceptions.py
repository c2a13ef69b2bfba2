"""Tests for dailymuse.core.exceptions."""

from dailymuse.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ContentBlockedError,
    DateConflictError,
    EntryNotFoundError,
    GenerationAuthError,
    GenerationError,
    GenerationQuotaError,
    IncompleteDraftError,
    InvalidDateError,
    MalformedAssetError,
    MuseError,
    StoreUnavailableError,
)


def test_hierarchy():
    """All exceptions should inherit from MuseError."""
    for exc_cls in [
        ConfigurationError,
        AuthenticationError,
        DateConflictError,
        EntryNotFoundError,
        StoreUnavailableError,
        MalformedAssetError,
        InvalidDateError,
        IncompleteDraftError,
        GenerationError,
    ]:
        assert issubclass(exc_cls, MuseError)


def test_generation_family():
    for exc_cls in [GenerationAuthError, GenerationQuotaError, ContentBlockedError]:
        assert issubclass(exc_cls, GenerationError)


def test_validation_errors_are_value_errors():
    assert issubclass(MalformedAssetError, ValueError)
    assert issubclass(InvalidDateError, ValueError)
    assert issubclass(IncompleteDraftError, ValueError)


def test_date_conflict_carries_date():
    err = DateConflictError("2024-06-01")
    assert err.date == "2024-06-01"
    assert "already scheduled" in str(err)


def test_store_unavailable_detail():
    err = StoreUnavailableError("boom", reason="access-denied", backend="file")
    assert err.reason == "access-denied"
    assert err.backend == "file"
    assert StoreUnavailableError("boom").reason == "unknown"


def test_catch_base():
    """Catching MuseError should catch all subtypes."""
    try:
        raise EntryNotFoundError("2024-01-01")
    except MuseError as e:
        assert "2024-01-01" in str(e)
