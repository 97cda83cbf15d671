"""
Credential file loader.

The file is an htpasswd-style list of ``username:storedpassword`` lines.
Lines starting with ``#`` are comments; blank lines are ignored.
"""

import logging
import os
from typing import Dict

from ...errors import CredentialFileMissing, CredentialFileParseError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
FIELD_SEPARATOR = ":"


def parse_credentials(content: str, source: str = "<string>") -> Dict[str, str]:
    """
    Parse credential file content into a username -> stored password mapping.

    Args:
        content: Full text of the credential file
        source: Name used in error messages

    Returns:
        Mapping of username to stored password (last entry wins on duplicates)

    Raises:
        CredentialFileParseError: If a line has fewer than two fields
    """
    credentials: Dict[str, str] = {}

    for lineno, raw_line in enumerate(content.splitlines(), start=1):
        if raw_line.startswith(COMMENT_PREFIX) or not raw_line.strip():
            continue

        fields = raw_line.split(FIELD_SEPARATOR)
        if len(fields) < 2:
            raise CredentialFileParseError(
                f"{source}:{lineno}: expected 'username:password', got {len(fields)} field"
            )

        username = fields[0].lstrip()
        credentials[username] = fields[1].lstrip()

    return credentials


def load_credential_file(path: str) -> Dict[str, str]:
    """
    Read a credential file from disk.

    The file is read once; changes on disk are not picked up until restart.

    Raises:
        CredentialFileMissing: If the file does not exist or cannot be read
        CredentialFileParseError: If the content is not UTF-8 or is malformed
    """
    if not path or not os.path.isfile(path):
        raise CredentialFileMissing(f"Credential file {path!r} is missing")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise CredentialFileParseError(f"Credential file {path!r} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise CredentialFileMissing(f"Could not read credential file {path!r}: {e}") from e

    credentials = parse_credentials(content, source=path)
    logger.info(f"Loaded {len(credentials)} credential entries from {path}")
    return credentials
