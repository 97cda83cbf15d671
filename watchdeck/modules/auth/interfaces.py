"""Authentication interfaces following Black Box Design principles."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol

Handler = Callable[..., Awaitable[Any]]

REALM = "Restricted"


class AuthMode(str, Enum):
    """Authentication modes the dashboard can run in."""

    NONE = "none"
    SIMPLE = "simple"
    FILE_BACKED = "file-backed"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AuthMode"]:
        """
        Resolve a configured mode string, case-insensitively.

        ``htpasswd`` is the name older configurations used for file-backed auth.

        Returns:
            The matching mode, or None if the string is not recognised
        """
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized == "htpasswd":
            return cls.FILE_BACKED
        for mode in cls:
            if mode.value == normalized:
                return mode
        return None


@dataclass(frozen=True)
class BasicCredentials:
    """Username and password extracted from an Authorization header."""
    username: str
    password: str


class AuthStrategy(Protocol):
    """Protocol for request-gating strategies."""

    def check(self, username: str, password: str) -> bool:
        """
        Decide whether a username/password pair is accepted.

        Returns:
            True if the request may proceed
        """
        ...

    def decorate(self, handler: Handler) -> Handler:
        """
        Wrap an endpoint so it only runs for authenticated requests.

        Args:
            handler: Async endpoint taking ``request`` as its first argument

        Returns:
            Endpoint with the same signature
        """
        ...
