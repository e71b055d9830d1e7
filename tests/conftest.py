"""Shared fixtures: canned registry payloads and a mocked HTTP layer."""

from __future__ import annotations

from typing import Any, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from npm_mcp.registry.client import RegistryClient


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    text: str = "",
) -> MagicMock:
    """Build a stand-in for ``httpx.Response``."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.is_success = 200 <= status_code < 300
    resp.text = text
    resp.json.return_value = json_body
    return resp


@pytest.fixture
def express_doc() -> Dict[str, Any]:
    return {
        "name": "express",
        "dist-tags": {"latest": "4.21.0"},
        "versions": {
            "4.21.0": {
                "dependencies": {"body-parser": "1.20.0", "cookie": "0.6.0"},
                "devDependencies": {"mocha": "10.0.0"},
            },
        },
        "description": "Fast web framework",
        "license": "MIT",
        "homepage": "https://expressjs.com",
        "repository": {"url": "git+https://github.com/expressjs/express.git"},
        "keywords": ["web", "framework"],
        "maintainers": [{"name": "dougwilson"}, {"name": "wesleytodd"}],
        "time": {
            "created": "2010-12-29T19:38:25.450Z",
            "modified": "2024-09-01T00:00:00Z",
            "4.20.0": "2024-06-01T00:00:00Z",
            "4.21.0": "2024-09-01T00:00:00Z",
        },
    }


@pytest.fixture
def express_downloads() -> Dict[str, Any]:
    return {
        "package": "express",
        "start": "2026-01-01",
        "end": "2026-01-31",
        "downloads": [
            {"day": "2026-01-01", "downloads": 100000},
            {"day": "2026-01-02", "downloads": 120000},
        ],
    }


@pytest.fixture
def mocked_client() -> Callable[..., RegistryClient]:
    """Return a factory producing a client whose GETs answer *responses* in order."""

    def _factory(*responses: MagicMock) -> RegistryClient:
        mock_httpx_client = AsyncMock()
        mock_httpx_client.get = AsyncMock(side_effect=list(responses))
        client = RegistryClient("https://registry.example.com", "https://api.example.com/downloads")
        client._client = mock_httpx_client
        return client

    return _factory


@pytest.fixture
def response() -> Callable[..., MagicMock]:
    """Expose :func:`make_response` to tests."""
    return make_response


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio only (the server is asyncio-based)."""
    return "asyncio"
