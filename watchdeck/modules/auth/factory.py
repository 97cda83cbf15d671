"""
Authentication Factory following Black Box Design principles.

This factory:
- Picks the authentication strategy from normalized dashboard settings
- Wires the credential mapping into the file-backed strategy
- Returns only the strategy interface
"""

import logging
from typing import TYPE_CHECKING

from .interfaces import AuthMode, AuthStrategy
from .strategies import FileBackedAuth, NoAuth, StaticAuth

if TYPE_CHECKING:
    from ...config.provider import DashboardSettings

logger = logging.getLogger(__name__)


class AuthFactory:
    """
    Factory for building the authentication strategy.

    Called once from the composition root; the result is shared read-only by
    every request.
    """

    @staticmethod
    def build(settings: "DashboardSettings") -> AuthStrategy:
        """
        Build the strategy for the configured authentication mode.

        Args:
            settings: Normalized dashboard settings

        Returns:
            AuthStrategy instance (NoAuth if the mode is not recognised)
        """
        mode = settings.auth
        if not isinstance(mode, AuthMode):
            mode = AuthMode.parse(mode)

        if mode is AuthMode.SIMPLE:
            logger.info("Building authentication with a single static user")
            return StaticAuth(username=settings.user, password=settings.password)

        if mode is AuthMode.FILE_BACKED:
            logger.info(
                f"Building authentication from credential file {settings.authfile} "
                f"({len(settings.credentials)} users)"
            )
            return FileBackedAuth(credentials=settings.credentials)

        logger.info("Authentication disabled")
        return NoAuth()
