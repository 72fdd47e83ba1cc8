"""
Bearer token holder.

A `Session` is created once per process and handed to the API client and
to every view-model that issues authenticated requests. The token is never
persisted: restarting the process requires a new login.
"""

from typing import Optional
import logging

from .errors import AuthenticationRequiredError

logger = logging.getLogger(__name__)


class Session:
    """Holds the bearer token obtained at login."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value or None
        if self._token:
            logger.debug("Session token set")
        else:
            logger.debug("Session token cleared")

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def clear(self) -> None:
        """Drop the token, e.g. on logout."""
        self.token = None

    def require_token(self) -> str:
        """Return the token or raise when no login has happened yet."""
        if self._token is None:
            raise AuthenticationRequiredError()
        return self._token

    def authorization_header(self) -> Optional[str]:
        if self._token is None:
            return None
        return f"Bearer {self._token}"

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated else "anonymous"
        return f"Session({state})"
