"""
Config Module - Black Box Interface

Purpose: Turn the raw configuration document into validated, immutable settings
Interface: normalize_config(), build_public_config(), to_public_dict()
Hidden: Defaults, legacy value conversion, per-mode validation

Runs once at startup. A ConfigError from here means the process must not serve.
"""

from .normalizer import ConfigNormalizer, migrate_legacy_seconds, normalize_config
from .public import REDACTED, build_public_config, to_public_dict

__all__ = [
    "ConfigNormalizer",
    "REDACTED",
    "build_public_config",
    "migrate_legacy_seconds",
    "normalize_config",
    "to_public_dict",
]
