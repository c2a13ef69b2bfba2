"""Creator authentication at the boundary layer.

The scheduling core never looks at authentication; callers that expose
writer operations (the CLI) obtain a ``CreatorSession`` from
``PasswordGate.login`` and check it with ``require_creator``.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from loguru import logger

from dailymuse.core.exceptions import AuthenticationError, ConfigurationError


@dataclass(frozen=True)
class CreatorSession:
    authenticated: bool = False


ANONYMOUS = CreatorSession()


class PasswordGate:
    """Single shared admin password."""

    def __init__(self, password: str):
        if not password:
            raise ConfigurationError("No admin password configured (admin.password / MUSE_ADMIN__PASSWORD).")
        self._password = password

    def login(self, attempt: str) -> CreatorSession:
        if hmac.compare_digest(attempt.encode("utf-8"), self._password.encode("utf-8")):
            return CreatorSession(authenticated=True)
        logger.warning("Rejected creator login attempt")
        raise AuthenticationError("Incorrect password.")


def require_creator(session: CreatorSession) -> None:
    if not session.authenticated:
        raise AuthenticationError("This action requires the creator to be logged in.")
