"""Configuration provider following Black Box Design principles."""
import json
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Protocol, Tuple

import yaml

from ..errors import ConfigFileMissing, ConfigParseError
from ..modules.auth.interfaces import AuthMode

YAML_EXTENSIONS = (".yaml", ".yml")


@dataclass(frozen=True)
class BackendEndpoint:
    """A monitoring backend API the dashboard talks to."""
    name: str
    host: str
    port: int
    ssl: bool
    insecure: bool
    path: str
    user: str
    password: str
    timeout: int
    url: str


@dataclass(frozen=True)
class DashboardSettings:
    """Dashboard listener and authentication settings."""
    host: str
    port: int
    refresh: int
    auth: AuthMode
    user: str
    password: str
    authfile: str
    credentials: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class Configuration:
    """Normalized configuration, built once at startup."""
    backends: Tuple[BackendEndpoint, ...]
    dashboard: DashboardSettings


@dataclass(frozen=True)
class EnvSettings:
    """Process settings taken from the environment."""
    config_path: str
    public_path: str
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for raw configuration sources."""

    def load(self) -> Dict[str, Any]:
        """Return the raw configuration document."""
        ...


class FileConfigProvider:
    """Reads the configuration document from a JSON or YAML file."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Dict[str, Any]:
        """
        Decode the configuration file.

        Raises:
            ConfigFileMissing: If the file does not exist or cannot be read
            ConfigParseError: If the file cannot be decoded into a mapping
        """
        if not os.path.isfile(self.path):
            raise ConfigFileMissing(f"Could not read config file {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                if self.path.lower().endswith(YAML_EXTENSIONS):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigParseError(f"Error decoding file {self.path}: {e}") from e
        except OSError as e:
            raise ConfigFileMissing(f"Could not read config file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigParseError(f"Error decoding file {self.path}: top level must be an object")
        return data


class EnvConfigProvider:
    """Environment-based process settings."""

    def get_env_settings(self) -> EnvSettings:
        """Get process settings from environment variables."""
        return EnvSettings(
            config_path=os.getenv("WATCHDECK_CONFIG", "./config.json"),
            public_path=os.getenv("WATCHDECK_PUBLIC_PATH", "./public"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
