"""
Unit tests for the credential file loader.
"""

import pytest

from watchdeck.errors import ConfigError, CredentialFileMissing, CredentialFileParseError
from watchdeck.modules.auth import credentials as credentials_module
from watchdeck.modules.auth.credentials import load_credential_file, parse_credentials


def test_parse_well_formed_lines():
    """Every well-formed line becomes one entry keyed by username."""
    content = "alice:{SHA}abc=\nbob:{SHA}def=\ncarol:plain\n"

    credentials = parse_credentials(content)

    assert credentials == {"alice": "{SHA}abc=", "bob": "{SHA}def=", "carol": "plain"}


def test_parse_skips_comments_and_blank_lines():
    """Comment and blank lines do not produce entries."""
    content = "# users\n\nalice:{SHA}abc=\n   \n#bob:{SHA}def=\n"

    credentials = parse_credentials(content)

    assert credentials == {"alice": "{SHA}abc="}


def test_parse_trims_leading_whitespace_of_fields():
    """Leading whitespace on each field is dropped."""
    credentials = parse_credentials("  alice:  {SHA}abc=\n")

    assert credentials == {"alice": "{SHA}abc="}


def test_parse_last_duplicate_wins():
    """A repeated username keeps the last stored password."""
    credentials = parse_credentials("alice:first\nalice:second\n")

    assert credentials == {"alice": "second"}


def test_parse_ignores_extra_fields():
    """Only the first two fields are used."""
    credentials = parse_credentials("alice:{SHA}abc=:comment\n")

    assert credentials == {"alice": "{SHA}abc="}


def test_parse_malformed_line_is_an_error():
    """A line without a separator is a hard parse error naming the line."""
    with pytest.raises(CredentialFileParseError) as exc_info:
        parse_credentials("alice:{SHA}abc=\nbroken\n", source="users")

    assert "users:2" in str(exc_info.value)
    assert isinstance(exc_info.value, ConfigError)


def test_parse_empty_content():
    """An empty file is a valid, empty mapping."""
    assert parse_credentials("") == {}


def test_load_credential_file(credential_file):
    """Entries are read from disk."""
    credentials = load_credential_file(credential_file)

    assert credentials == {"alice": "{SHA}W6ph5Mm5Pz8GgiULbPgzG37mj9g="}


def test_load_missing_file(tmp_path):
    """A missing file raises CredentialFileMissing."""
    with pytest.raises(CredentialFileMissing):
        load_credential_file(str(tmp_path / "nope"))


def test_load_empty_path():
    """An unset path counts as missing."""
    with pytest.raises(CredentialFileMissing):
        load_credential_file("")


def test_load_malformed_file(tmp_path):
    """Malformed content on disk raises CredentialFileParseError."""
    path = tmp_path / "users"
    path.write_text("alice\n", encoding="utf-8")

    with pytest.raises(CredentialFileParseError):
        load_credential_file(str(path))


def test_load_non_utf8_file(tmp_path):
    """Bytes that are not UTF-8 are a parse failure, not a crash."""
    path = tmp_path / "users"
    path.write_bytes(b"alice:{SHA}W6ph5Mm5Pz8GgiULbPgzG37mj9g=\n\xff\xfebob:x\n")

    with pytest.raises(CredentialFileParseError) as exc_info:
        load_credential_file(str(path))
    assert isinstance(exc_info.value, ConfigError)


def test_load_unreadable_file(credential_file, monkeypatch):
    """An OS error while reading is reported as a configuration error."""
    def refuse(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(credentials_module, "open", refuse, raising=False)

    with pytest.raises(CredentialFileMissing, match="Could not read"):
        load_credential_file(credential_file)
