"""
dailymuse exception hierarchy.

All dailymuse exceptions inherit from MuseError, so the CLI and any other
boundary layer can catch library-level errors while still distinguishing
the specific failure modes.
"""


class MuseError(Exception):
    """Base exception class for all dailymuse errors."""


class ConfigurationError(MuseError):
    """Raised for configuration errors (unknown backend, missing settings)."""


class AuthenticationError(MuseError):
    """Raised when a writer operation is attempted without a creator session."""


# -- Persistence -------------------------------------------------------------


class DateConflictError(MuseError):
    """An entry already exists at the target date."""

    def __init__(self, date: str):
        super().__init__(f"A muse is already scheduled for {date}.")
        self.date = date


class EntryNotFoundError(MuseError):
    """An operation referenced a date with no entry."""

    def __init__(self, date: str):
        super().__init__(f"No muse is scheduled for {date}.")
        self.date = date


class StoreUnavailableError(MuseError):
    """Backend I/O failure (network, filesystem, permissions).

    Attributes:
        reason: Short failure category: ``access-denied``, ``not-found``,
            ``unavailable`` or ``unknown``.
        backend: Name of the backend that failed.
    """

    def __init__(self, message: str, *, reason: str = "unknown", backend: str = ""):
        super().__init__(message)
        self.reason = reason
        self.backend = backend


class MalformedAssetError(MuseError, ValueError):
    """An inline image reference could not be decoded."""


class InvalidDateError(MuseError, ValueError):
    """A scheduled date is not a real ``YYYY-MM-DD`` calendar date."""


class IncompleteDraftError(MuseError, ValueError):
    """A publish draft is missing one of its required images."""


# -- Image generation --------------------------------------------------------


class GenerationError(MuseError):
    """Raised when the image provider fails to produce an image."""


class GenerationAuthError(GenerationError):
    """The image provider rejected the API key."""


class GenerationQuotaError(GenerationError):
    """The image provider quota or rate limit was exceeded."""


class ContentBlockedError(GenerationError):
    """The prompt or output was blocked by the provider's safety filters."""
