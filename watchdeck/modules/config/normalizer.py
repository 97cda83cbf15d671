"""
Configuration normalization.

Turns the raw decoded configuration document into an immutable
Configuration: fills defaults, converts values left over from older
configuration formats, derives the authentication mode and validates that it
can actually be used. Any problem raises a ConfigError; deciding to stop the
process is left to the entry point.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from ...config.provider import BackendEndpoint, Configuration, DashboardSettings
from ...errors import ConfigValidationError
from ..auth.credentials import load_credential_file
from ..auth.interfaces import AuthMode

logger = logging.getLogger(__name__)

DEFAULT_DASHBOARD_HOST = "0.0.0.0"
DEFAULT_DASHBOARD_PORT = 3000
DEFAULT_REFRESH = 10
DEFAULT_BACKEND_PORT = 4567
DEFAULT_BACKEND_TIMEOUT = 10

# Older configurations expressed timeout and refresh in milliseconds. A value
# this large is assumed to be one of those and converted to seconds, so a
# deliberate 1000 second setting cannot be expressed.
LEGACY_MILLISECONDS_THRESHOLD = 1000

# Top-level section names, current name first
DASHBOARD_KEYS = ("dashboard", "uchiwa")
BACKEND_KEYS = ("backends", "sensu")

CredentialLoader = Callable[[str], Dict[str, str]]


def migrate_legacy_seconds(value: int, field_name: str = "value") -> int:
    """Convert a millisecond value from an old configuration to seconds."""
    if value >= LEGACY_MILLISECONDS_THRESHOLD:
        converted = value // 1000
        logger.info(f"Treating {field_name}={value} as milliseconds, using {converted} seconds")
        return converted
    return value


def _lower_keys(section: Any, label: str) -> Dict[str, Any]:
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigValidationError(f"{label} must be an object")
    return {str(k).lower(): v for k, v in section.items()}


def _first_present(data: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _string(section: Dict[str, Any], key: str, label: str) -> str:
    value = section.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigValidationError(f"{label} {key!r} must be a string")
    return value


def _boolean(section: Dict[str, Any], key: str, label: str) -> bool:
    value = section.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigValidationError(f"{label} {key!r} must be true or false")
    return value


def _integer(section: Dict[str, Any], key: str, label: str) -> int:
    """Read an integer field; absent means 0 so the caller applies its default."""
    value = section.get(key)
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ConfigValidationError(f"{label} {key!r} must be an integer")
    if isinstance(value, str):
        text = value.strip()
        # ASCII digits only; str.isdigit() also matches superscripts
        if not (text.isascii() and text.isdigit()):
            raise ConfigValidationError(f"{label} {key!r} must be an integer")
        value = int(text)
    if not isinstance(value, int):
        raise ConfigValidationError(f"{label} {key!r} must be an integer")
    if value < 0:
        raise ConfigValidationError(f"{label} {key!r} must not be negative")
    return value


def _check_port(port: int, label: str) -> int:
    if not 1 <= port <= 65535:
        raise ConfigValidationError(f"{label} port {port} is out of range")
    return port


class ConfigNormalizer:
    """Normalizes and validates the raw configuration document."""

    def __init__(self, credential_loader: Optional[CredentialLoader] = None):
        """
        Args:
            credential_loader: Reads a credential file; defaults to load_credential_file
        """
        self._load_credentials = credential_loader or load_credential_file

    def normalize(self, raw: Mapping[str, Any]) -> Configuration:
        """
        Normalize a raw configuration document.

        Args:
            raw: Decoded configuration document

        Returns:
            Immutable Configuration

        Raises:
            ConfigError: If the configuration cannot be used
        """
        data = _lower_keys(raw, "Configuration")

        dashboard = self._normalize_dashboard(
            _lower_keys(_first_present(data, DASHBOARD_KEYS), "Dashboard section")
        )
        backends = self._normalize_backends(_first_present(data, BACKEND_KEYS))

        return Configuration(backends=backends, dashboard=dashboard)

    def _normalize_dashboard(self, section: Dict[str, Any]) -> DashboardSettings:
        label = "Dashboard"

        host = _string(section, "host", label) or DEFAULT_DASHBOARD_HOST
        port = _check_port(_integer(section, "port", label) or DEFAULT_DASHBOARD_PORT, label)

        refresh = _integer(section, "refresh", label)
        if refresh == 0:
            refresh = DEFAULT_REFRESH
        else:
            refresh = migrate_legacy_seconds(refresh, "refresh")

        user = _string(section, "user", label)
        password = _string(section, "pass", label)
        authfile = _string(section, "authfile", label)

        mode = self._resolve_auth_mode(section.get("auth"), user, password)
        credentials: Mapping[str, str] = MappingProxyType({})

        if mode is AuthMode.SIMPLE:
            if not user or not password:
                raise ConfigValidationError(
                    "For auth=simple you need to define user and pass in the configuration"
                )
        elif mode is AuthMode.FILE_BACKED:
            credentials = MappingProxyType(self._load_credentials(authfile))

        return DashboardSettings(
            host=host,
            port=port,
            refresh=refresh,
            auth=mode,
            user=user,
            password=password,
            authfile=authfile,
            credentials=credentials,
        )

    @staticmethod
    def _resolve_auth_mode(value: Any, user: str, password: str) -> AuthMode:
        """
        Work out the authentication mode.

        With no explicit mode, a configured user and password imply simple
        auth, as they did before modes existed.
        """
        if value is None or value == "":
            return AuthMode.SIMPLE if user and password else AuthMode.NONE

        if not isinstance(value, str):
            raise ConfigValidationError(f"Unknown authentication mode {value!r}")

        mode = AuthMode.parse(value)
        if mode is None:
            raise ConfigValidationError(f"Unknown authentication mode {value!r}")
        return mode

    def _normalize_backends(self, raw_backends: Any) -> Tuple[BackendEndpoint, ...]:
        if raw_backends is None:
            logger.warning("No monitoring backends configured")
            return ()
        if not isinstance(raw_backends, list):
            raise ConfigValidationError("Backends must be a list")

        sections = [
            _lower_keys(raw_backend, f"Backend #{index + 1}")
            for index, raw_backend in enumerate(raw_backends)
        ]
        names = self._backend_names(sections)

        backends: List[BackendEndpoint] = []
        for name, section in zip(names, sections):
            backends.append(self._normalize_backend(name, section))
        return tuple(backends)

    @staticmethod
    def _backend_names(sections: List[Dict[str, Any]]) -> List[str]:
        """
        Resolve a unique name for every backend.

        Backends are addressed by name, so explicit names must not repeat.
        Unnamed backends get ``backend-<position>``, moved past any name
        already taken.
        """
        explicit = [
            _string(section, "name", f"Backend #{index + 1}")
            for index, section in enumerate(sections)
        ]

        taken: Set[str] = set()
        for name in explicit:
            if not name:
                continue
            if name in taken:
                raise ConfigValidationError(f"Backend name {name!r} is used more than once")
            taken.add(name)

        names: List[str] = []
        for index, name in enumerate(explicit):
            if not name:
                number = index + 1
                while f"backend-{number}" in taken:
                    number += 1
                name = f"backend-{number}"
                taken.add(name)
                logger.warning(f"Backend #{index + 1} has no name property. Using {name!r}")
            names.append(name)
        return names

    def _normalize_backend(self, name: str, section: Dict[str, Any]) -> BackendEndpoint:
        label = f"Backend {name!r}"

        host = _string(section, "host", label)
        if not host:
            raise ConfigValidationError(f"{label} host is missing")

        port = _check_port(_integer(section, "port", label) or DEFAULT_BACKEND_PORT, label)

        timeout = _integer(section, "timeout", label)
        if timeout == 0:
            timeout = DEFAULT_BACKEND_TIMEOUT
        else:
            timeout = migrate_legacy_seconds(timeout, f"{name} timeout")

        ssl = _boolean(section, "ssl", label)
        path = _string(section, "path", label)
        protocol = "https" if ssl else "http"

        return BackendEndpoint(
            name=name,
            host=host,
            port=port,
            ssl=ssl,
            insecure=_boolean(section, "insecure", label),
            path=path,
            user=_string(section, "user", label),
            password=_string(section, "pass", label),
            timeout=timeout,
            url=f"{protocol}://{host}:{port}{path}",
        )


def normalize_config(
    raw: Mapping[str, Any],
    credential_loader: Optional[CredentialLoader] = None
) -> Configuration:
    """Normalize a raw configuration document with the default normalizer."""
    return ConfigNormalizer(credential_loader).normalize(raw)
