"""Tests for FastMCP wiring: tool registry, argument schemas and validation."""

from __future__ import annotations

from typing import get_args
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from npm_mcp.config.schema import NpmMcpConfig
from npm_mcp.constants import DOWNLOAD_PERIODS
from npm_mcp.registry.client import RegistryClient
from npm_mcp.registry.models import SearchResult
from npm_mcp.server.app import Period, build_client, create_server
from npm_mcp.server.tools import NpmTools

EXPECTED_TOOLS = {
    "npm_search",
    "npm_info",
    "npm_downloads",
    "npm_versions",
    "npm_compare",
    "npm_deps",
}


def _fake_client() -> MagicMock:
    client = MagicMock(spec=RegistryClient)
    client.search = AsyncMock(
        return_value=[SearchResult(name="express", version="4.21.0", score=85)]
    )
    client.close = AsyncMock()
    return client


async def _schemas(server):
    return {t.name: t.inputSchema for t in await server.list_tools()}


class TestRegistration:
    @pytest.mark.anyio
    async def test_all_tools_registered(self):
        server = create_server(client=_fake_client())
        tools = await server.list_tools()
        assert {t.name for t in tools} == EXPECTED_TOOLS
        assert len(tools) == len(EXPECTED_TOOLS)
        assert all(t.description for t in tools)

    @pytest.mark.anyio
    async def test_every_tool_has_a_handler(self):
        server = create_server(client=_fake_client())
        for tool in await server.list_tools():
            assert hasattr(NpmTools, tool.name.removeprefix("npm_"))

    def test_period_literal_matches_constants(self):
        assert get_args(Period) == DOWNLOAD_PERIODS

    def test_server_name_from_config(self):
        cfg = NpmMcpConfig.model_validate({"server": {"name": "npm-private"}})
        server = create_server(cfg, client=_fake_client())
        assert server.name == "npm-private"

    def test_build_client_uses_registry_settings(self):
        cfg = NpmMcpConfig.model_validate(
            {"registry": {"registry_url": "https://npm.example.com/", "timeout": 5}}
        )
        client = build_client(cfg)
        assert client._registry_url == "https://npm.example.com"
        assert client._timeout == 5


class TestSchemas:
    @pytest.mark.anyio
    async def test_search_size_bounds(self):
        schema = (await _schemas(create_server(client=_fake_client())))["npm_search"]
        size = schema["properties"]["size"]
        assert size["minimum"] == 1
        assert size["maximum"] == 50
        assert size["default"] == 10
        assert schema["required"] == ["query"]

    @pytest.mark.anyio
    async def test_versions_count_bounds(self):
        schema = (await _schemas(create_server(client=_fake_client())))["npm_versions"]
        count = schema["properties"]["count"]
        assert (count["minimum"], count["maximum"], count["default"]) == (1, 50, 10)

    @pytest.mark.anyio
    async def test_downloads_period_enum(self):
        schema = (await _schemas(create_server(client=_fake_client())))["npm_downloads"]
        period = schema["properties"]["period"]
        assert period["enum"] == list(DOWNLOAD_PERIODS)
        assert period["default"] == "last-month"

    @pytest.mark.anyio
    async def test_compare_arguments(self):
        schema = (await _schemas(create_server(client=_fake_client())))["npm_compare"]
        assert sorted(schema["required"]) == ["packageA", "packageB"]


class TestCallTool:
    @pytest.mark.anyio
    async def test_valid_call_dispatches(self):
        client = _fake_client()
        server = create_server(client=client)
        result = await server.call_tool("npm_search", {"query": "express", "size": 3})
        client.search.assert_awaited_once_with("express", 3)
        assert "**express** v4.21.0" in str(result)

    @pytest.mark.anyio
    async def test_out_of_range_size_rejected(self):
        client = _fake_client()
        server = create_server(client=client)
        with pytest.raises(ToolError):
            await server.call_tool("npm_search", {"query": "express", "size": 51})
        client.search.assert_not_awaited()

    @pytest.mark.anyio
    async def test_unknown_period_rejected(self):
        client = _fake_client()
        client.get_downloads = AsyncMock()
        server = create_server(client=client)
        with pytest.raises(ToolError):
            await server.call_tool("npm_downloads", {"name": "express", "period": "last-decade"})
        client.get_downloads.assert_not_awaited()


class TestSessionLifespan:
    """Sessions share one client; it is closed when the last one ends."""

    @staticmethod
    def _session(server):
        low_level = server._mcp_server
        return low_level.lifespan(low_level)

    @pytest.mark.anyio
    async def test_ending_one_session_keeps_client_open(self):
        client = _fake_client()
        server = create_server(client=client)
        async with self._session(server):
            async with self._session(server) as tools:
                assert isinstance(tools, NpmTools)
            client.close.assert_not_awaited()
            await server.call_tool("npm_search", {"query": "express"})
        client.close.assert_awaited_once()

    @pytest.mark.anyio
    async def test_client_closed_after_each_last_session(self):
        client = _fake_client()
        server = create_server(client=client)
        async with self._session(server):
            pass
        async with self._session(server):
            pass
        assert client.close.await_count == 2
