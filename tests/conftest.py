"""
Shared pytest fixtures for Watchdeck tests.

This module provides common fixtures including:
- Credential and configuration files on disk
- Basic auth header and request builders
- A fake backend client for route tests
"""

import base64
import json
import os
import sys
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from watchdeck.modules.backend import BackendClient


# {SHA} entry for the password "password"
ALICE_ENTRY = "alice:{SHA}W6ph5Mm5Pz8GgiULbPgzG37mj9g="


def basic_auth_header(username: str, password: str) -> str:
    """Build an Authorization header value for HTTP Basic auth."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def make_request(path: str = "/get_config", authorization: Optional[str] = None) -> Request:
    """Build a bare Starlette request for calling decorated handlers directly."""
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode("latin-1")))
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "raw_path": path.encode("ascii"),
        "query_string": b"",
        "headers": headers,
        "scheme": "http",
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 12345),
        "root_path": "",
    }
    return Request(scope)


@pytest.fixture
def credential_file(tmp_path):
    """Credential file containing alice/password."""
    path = tmp_path / "users.htpasswd"
    path.write_text(f"# dashboard users\n{ALICE_ENTRY}\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def raw_config() -> Dict[str, Any]:
    """A minimal raw configuration document."""
    return {
        "backends": [
            {"name": "us-east", "host": "sensu.example.com", "user": "api", "pass": "secret"}
        ],
        "dashboard": {},
    }


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration document to disk and return its path."""
    def _write(document: Dict[str, Any], filename: str = "config.json") -> str:
        path = tmp_path / filename
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def fake_backend():
    """BackendClient mock with sensible default return values."""
    backend = AsyncMock(spec=BackendClient)
    backend.get_client = AsyncMock(return_value={"name": "web-1", "dc": "us-east"})
    backend.delete_client = AsyncMock(return_value=None)
    backend.create_stash = AsyncMock(return_value=None)
    backend.delete_stash = AsyncMock(return_value=None)
    backend.resolve_event = AsyncMock(return_value=None)
    backend.snapshot = AsyncMock(return_value={"dc": [], "clients": [], "events": []})
    backend.health = AsyncMock(return_value={"us-east": {"output": "ok"}})
    backend.close = AsyncMock(return_value=None)
    return backend


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests that exercise the full application stack"
    )
