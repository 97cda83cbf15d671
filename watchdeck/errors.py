"""
Error taxonomy shared across Watchdeck modules.

ConfigError and its subclasses are fatal: they stop startup and are never
recovered. BackendError comes from the monitoring backends and is surfaced to
the HTTP client as a 500.
"""


class ConfigError(Exception):
    """Base class for configuration problems that must abort startup."""


class ConfigFileMissing(ConfigError):
    """The configuration document does not exist."""


class ConfigParseError(ConfigError):
    """The configuration document could not be decoded."""


class ConfigValidationError(ConfigError):
    """The configuration decoded but is not usable."""


class CredentialFileMissing(ConfigError):
    """The credential file named by the configuration does not exist."""


class CredentialFileParseError(ConfigError):
    """The credential file contains a malformed line."""


class BackendError(Exception):
    """A monitoring backend operation failed."""
