"""
HTTP Basic authentication strategies.

Each strategy is an immutable value built once at startup and shared by every
request. ``decorate`` wraps a route handler; rejected requests get a uniform
401 challenge and never reach the handler. The reason for a rejection is only
logged, never returned to the client.
"""

import base64
import binascii
import functools
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from .interfaces import REALM, BasicCredentials, Handler
from .verifier import verify_password

logger = logging.getLogger(__name__)


def parse_basic_authorization(header_value: Optional[str]) -> Optional[BasicCredentials]:
    """
    Extract Basic credentials from an Authorization header value.

    Returns:
        BasicCredentials, or None if the header is absent or not valid Basic auth
    """
    if not header_value:
        return None

    scheme, _, param = header_value.partition(" ")
    if scheme.lower() != "basic" or not param:
        return None

    try:
        decoded = base64.b64decode(param.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    username, sep, password = decoded.partition(":")
    if sep != ":":
        return None

    return BasicCredentials(username=username, password=password)


def format_error(status_code: int, message: str) -> Dict[str, Any]:
    """Format an error body the same way for every route."""
    return {
        "error": message,
        "status": status_code
    }


def unauthorized_response(realm: str = REALM) -> JSONResponse:
    """Build the 401 challenge sent for every rejected request."""
    return JSONResponse(
        status_code=401,
        content=format_error(401, "Unauthorized"),
        headers={"WWW-Authenticate": f'Basic realm="{realm}"'}
    )


def _equal(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


class BasicAuthStrategy(ABC):
    """Shared challenge/response handling for Basic auth strategies."""

    realm: str = REALM

    @abstractmethod
    def check(self, username: str, password: str) -> bool:
        """Decide whether the supplied pair is accepted."""

    def decorate(self, handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(request: Request, *args, **kwargs):
            credentials = parse_basic_authorization(request.headers.get("Authorization"))
            if credentials is None:
                logger.warning(f"Request to {request.url.path} without Basic credentials")
                return unauthorized_response(self.realm)

            if not self.check(credentials.username, credentials.password):
                return unauthorized_response(self.realm)

            return await handler(request, *args, **kwargs)

        return wrapper


@dataclass(frozen=True)
class NoAuth:
    """Every request passes through unmodified."""

    def check(self, username: str, password: str) -> bool:
        return True

    def decorate(self, handler: Handler) -> Handler:
        return handler


@dataclass(frozen=True)
class StaticAuth(BasicAuthStrategy):
    """A single configured username/password pair."""

    username: str
    password: str = field(repr=False)

    def check(self, username: str, password: str) -> bool:
        # Both comparisons always run
        user_ok = _equal(username, self.username)
        pass_ok = _equal(password, self.password)
        if not (user_ok and pass_ok):
            logger.warning(f"Invalid credentials attempted for user {username!r}")
            return False
        return True


@dataclass(frozen=True)
class FileBackedAuth(BasicAuthStrategy):
    """Users and ``{SHA}`` digests loaded from a credential file."""

    credentials: Mapping[str, str] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        if not isinstance(self.credentials, MappingProxyType):
            object.__setattr__(self, "credentials", MappingProxyType(dict(self.credentials)))

    def check(self, username: str, password: str) -> bool:
        stored = self.credentials.get(username)
        if stored is None:
            logger.warning(f"No entry for {username!r}.")
            return False

        if not verify_password(stored, password, username=username):
            logger.warning(f"Invalid password attempted for user {username!r}")
            return False
        return True
