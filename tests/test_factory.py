"""
Unit tests for AuthFactory strategy selection.
"""

from types import MappingProxyType

import pytest

from watchdeck.config.provider import DashboardSettings
from watchdeck.modules.auth.factory import AuthFactory
from watchdeck.modules.auth.interfaces import AuthMode
from watchdeck.modules.auth.strategies import FileBackedAuth, NoAuth, StaticAuth
from watchdeck.modules.auth.verifier import hash_password


def _settings(auth, **overrides):
    values = dict(
        host="0.0.0.0",
        port=3000,
        refresh=10,
        auth=auth,
        user="admin",
        password="s3cret",
        authfile="",
        credentials=MappingProxyType({}),
    )
    values.update(overrides)
    return DashboardSettings(**values)


def test_build_simple():
    """Simple mode gives a StaticAuth with the configured pair."""
    strategy = AuthFactory.build(_settings(AuthMode.SIMPLE))

    assert strategy == StaticAuth(username="admin", password="s3cret")


def test_build_file_backed():
    """File-backed mode gives a FileBackedAuth over the loaded mapping."""
    credentials = MappingProxyType({"alice": hash_password("password")})

    strategy = AuthFactory.build(_settings(AuthMode.FILE_BACKED, credentials=credentials))

    assert isinstance(strategy, FileBackedAuth)
    assert strategy.check("alice", "password") is True


def test_build_none():
    """None mode gives NoAuth."""
    assert AuthFactory.build(_settings(AuthMode.NONE)) == NoAuth()


@pytest.mark.parametrize(
    "mode,expected",
    [("SIMPLE", StaticAuth), ("Htpasswd", FileBackedAuth), ("File-Backed", FileBackedAuth)],
)
def test_build_accepts_mode_strings_case_insensitively(mode, expected):
    """Plain strings are matched without regard to case."""
    assert isinstance(AuthFactory.build(_settings(mode)), expected)


def test_build_unknown_mode_falls_back_to_no_auth():
    """An unrecognised mode string never raises here."""
    assert isinstance(AuthFactory.build(_settings("bogus")), NoAuth)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("none", AuthMode.NONE),
        (" simple ", AuthMode.SIMPLE),
        ("htpasswd", AuthMode.FILE_BACKED),
        ("file-backed", AuthMode.FILE_BACKED),
        ("bogus", None),
        (None, None),
    ],
)
def test_auth_mode_parse(value, expected):
    """Mode strings resolve to enum members or None."""
    assert AuthMode.parse(value) is expected
