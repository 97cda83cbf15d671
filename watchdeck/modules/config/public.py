"""Redacted view of the configuration, safe to serve to the browser."""

import dataclasses
from types import MappingProxyType
from typing import Any, Dict

from ...config.provider import Configuration

REDACTED = "*****"


def build_public_config(config: Configuration) -> Configuration:
    """
    Copy a normalized configuration with every credential replaced.

    User and password fields become REDACTED; the loaded credential mapping is
    dropped. All other fields are unchanged.
    """
    dashboard = dataclasses.replace(
        config.dashboard,
        user=REDACTED,
        password=REDACTED,
        credentials=MappingProxyType({}),
    )
    backends = tuple(
        dataclasses.replace(backend, user=REDACTED, password=REDACTED)
        for backend in config.backends
    )
    return Configuration(backends=backends, dashboard=dashboard)


def to_public_dict(config: Configuration) -> Dict[str, Any]:
    """Render a public configuration as JSON-ready data."""
    dashboard = {
        f.name: getattr(config.dashboard, f.name)
        for f in dataclasses.fields(config.dashboard)
        if f.name != "credentials"
    }
    dashboard["auth"] = config.dashboard.auth.value
    return {
        "dashboard": dashboard,
        "backends": [dataclasses.asdict(backend) for backend in config.backends],
    }
