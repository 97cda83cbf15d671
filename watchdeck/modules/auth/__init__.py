"""
Authentication Module - Black Box Interface

Purpose: Gate dashboard routes behind HTTP Basic authentication
Interface: AuthStrategy.decorate(), load_credential_file(), verify_password()
Hidden: Header parsing, digest scheme, comparison details

The strategy is chosen once at startup by AuthFactory (see factory.py) and
can be replaced without affecting the route handlers it wraps.
"""

from .credentials import load_credential_file, parse_credentials
from .interfaces import AuthMode, AuthStrategy, BasicCredentials
from .strategies import FileBackedAuth, NoAuth, StaticAuth
from .verifier import hash_password, verify_password

__all__ = [
    "AuthMode",
    "AuthStrategy",
    "BasicCredentials",
    "FileBackedAuth",
    "NoAuth",
    "StaticAuth",
    "hash_password",
    "load_credential_file",
    "parse_credentials",
    "verify_password",
]
