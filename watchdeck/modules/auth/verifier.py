"""
Password verification against stored credential entries.

Only the ``{SHA}`` scheme is supported: the tag followed by the standard
base64 encoding of the SHA-1 digest of the password. Anything else is
rejected so a file with one bad entry still works for the other users.
"""

import logging

from passlib.hash import ldap_sha1

logger = logging.getLogger(__name__)

SHA_PREFIX = "{SHA}"


def hash_password(plaintext: str) -> str:
    """Build a ``{SHA}`` stored password for a credential file."""
    return ldap_sha1.hash(plaintext)


def verify_password(stored: str, plaintext: str, username: str = "") -> bool:
    """
    Check a supplied password against a stored credential entry.

    Args:
        stored: Stored password from the credential file
        plaintext: Password supplied by the client
        username: Only used for log messages

    Returns:
        True if the password matches, False otherwise
    """
    # Exact, case-sensitive tag only
    if not stored.startswith(SHA_PREFIX):
        logger.warning(f"Invalid credential entry for {username!r}. Must be a SHA entry.")
        return False

    try:
        return ldap_sha1.verify(plaintext, stored)
    except ValueError:
        logger.warning(f"Malformed SHA entry for {username!r}.")
        return False
