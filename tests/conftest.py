"""Shared fixtures: isolated configuration, a temporary registry and a fake GHL API.

Every test gets its own SQLite registry file and a config built from defaults
plus environment variables, so nothing touches the project's config.yaml or the ~/.ghl-mcp directory.
"""

from __future__ import annotations

import functools
import json
import os
import tempfile
from typing import Any

import httpx
import pytest
import pytest_asyncio

import core.accounts
from core.config import ConfigLoader
from core.ghl_client import GHLClient
from core.registry import AccountRegistry

FALLBACK_KEY = "pit-fallback-0000-1111"
FALLBACK_LOCATION = "loc_fallback"

# Importing server configures file logging; keep it out of the home directory.
os.environ.setdefault("GHL_MCP_LOGS_DIR", tempfile.mkdtemp(prefix="ghl-mcp-logs-"))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point configuration at a temp registry and a fallback pair from the environment."""
    monkeypatch.setenv("GHL_MCP_CONFIG", str(tmp_path / "absent-config.yaml"))
    monkeypatch.setenv("GHL_REGISTRY_DB", str(tmp_path / "registry.db"))
    monkeypatch.setenv("GHL_API_KEY", FALLBACK_KEY)
    monkeypatch.setenv("GHL_LOCATION_ID", FALLBACK_LOCATION)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest_asyncio.fixture
async def registry(tmp_path) -> AccountRegistry:
    """Registry on the same file the tools resolve through."""
    reg = AccountRegistry(str(tmp_path / "registry.db"))
    await reg.ensure_schema()
    return reg


class FakeGHL:
    """Records requests and answers them from a queue of canned responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[tuple[int, Any]] = []

    def respond(self, status: int = 200, payload: Any = None) -> None:
        self._responses.append((status, {} if payload is None else payload))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, payload = self._responses.pop(0) if self._responses else (200, {})
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def ghl_api(monkeypatch) -> FakeGHL:
    """Route every client built by core.accounts.get_client to a FakeGHL."""
    fake = FakeGHL()
    transport = httpx.MockTransport(fake.handler)
    monkeypatch.setattr(core.accounts, "GHLClient", functools.partial(GHLClient, transport=transport))
    return fake


def result_text(result) -> str:
    """Text of the first content block of a CallToolResult."""
    return result.content[0].text
