"""
Unit tests for the configuration providers.
"""

import os
from unittest.mock import patch

import pytest

from watchdeck.config.provider import EnvConfigProvider, FileConfigProvider
from watchdeck.errors import ConfigFileMissing, ConfigParseError


def test_load_json(write_config, raw_config):
    """A JSON document is decoded as-is."""
    path = write_config(raw_config)

    assert FileConfigProvider(path).load() == raw_config


def test_load_yaml(tmp_path):
    """Files ending in .yaml are read with PyYAML."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "dashboard:\n  port: 8080\nbackends:\n  - name: dc1\n    host: sensu\n",
        encoding="utf-8",
    )

    data = FileConfigProvider(str(path)).load()

    assert data == {"dashboard": {"port": 8080}, "backends": [{"name": "dc1", "host": "sensu"}]}


def test_missing_file(tmp_path):
    """A missing file raises ConfigFileMissing."""
    with pytest.raises(ConfigFileMissing):
        FileConfigProvider(str(tmp_path / "nope.json")).load()


def test_invalid_json(tmp_path):
    """Undecodable JSON raises ConfigParseError."""
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigParseError):
        FileConfigProvider(str(path)).load()


def test_invalid_yaml(tmp_path):
    """Undecodable YAML raises ConfigParseError."""
    path = tmp_path / "config.yml"
    path.write_text("dashboard: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigParseError):
        FileConfigProvider(str(path)).load()


def test_top_level_must_be_object(write_config):
    """A list at the top level is not a configuration."""
    path = write_config([1, 2, 3])

    with pytest.raises(ConfigParseError, match="top level"):
        FileConfigProvider(path).load()


def test_env_settings_defaults():
    """Without environment variables the defaults apply."""
    with patch.dict(os.environ, {}, clear=True):
        settings = EnvConfigProvider().get_env_settings()

    assert settings.config_path == "./config.json"
    assert settings.public_path == "./public"
    assert settings.log_level == "INFO"


def test_env_settings_from_environment():
    """Environment variables override the defaults."""
    env = {
        "WATCHDECK_CONFIG": "/etc/watchdeck/config.yaml",
        "WATCHDECK_PUBLIC_PATH": "/srv/public",
        "LOG_LEVEL": "DEBUG",
    }
    with patch.dict(os.environ, env, clear=True):
        settings = EnvConfigProvider().get_env_settings()

    assert settings.config_path == "/etc/watchdeck/config.yaml"
    assert settings.public_path == "/srv/public"
    assert settings.log_level == "DEBUG"


def test_non_utf8_file(tmp_path):
    """Bytes that are not UTF-8 raise ConfigParseError."""
    path = tmp_path / "config.json"
    path.write_bytes(b'{"dashboard": "\xff\xfe"}')

    with pytest.raises(ConfigParseError):
        FileConfigProvider(str(path)).load()
