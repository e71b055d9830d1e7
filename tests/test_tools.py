"""Tests for the NpmTools operations."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from npm_mcp.errors import RegistryError
from npm_mcp.registry.client import RegistryClient
from npm_mcp.registry.models import DownloadStats, PackageInfo, SearchResult, VersionEntry
from npm_mcp.server.tools import NpmTools


def _fake_client() -> MagicMock:
    client = MagicMock(spec=RegistryClient)
    client.search = AsyncMock()
    client.get_package_info = AsyncMock()
    client.get_downloads = AsyncMock()
    client.get_versions = AsyncMock()
    return client


class TestSearchTool:
    @pytest.mark.anyio
    async def test_renders_results(self):
        client = _fake_client()
        client.search.return_value = [
            SearchResult(name="express", version="4.21.0", description="Fast", score=85)
        ]
        text = await NpmTools(client).search("express", 5)
        client.search.assert_awaited_once_with("express", 5)
        assert text.startswith("1. **express** v4.21.0 (score: 85)")

    @pytest.mark.anyio
    async def test_no_results(self):
        client = _fake_client()
        client.search.return_value = []
        assert await NpmTools(client).search("nothing") == "No packages found."


class TestInfoAndDepsTools:
    @pytest.mark.anyio
    async def test_info(self, express_doc):
        client = _fake_client()
        client.get_package_info.return_value = PackageInfo.from_dict(express_doc)
        text = await NpmTools(client).info("express")
        assert text.startswith("# express v4.21.0")
        assert "Repository: https://github.com/expressjs/express" in text

    @pytest.mark.anyio
    async def test_deps(self, express_doc):
        client = _fake_client()
        client.get_package_info.return_value = PackageInfo.from_dict(express_doc)
        text = await NpmTools(client).deps("express")
        assert "Dependencies (2):" in text
        assert "  mocha: 10.0.0" in text

    @pytest.mark.anyio
    async def test_registry_error_propagates(self):
        client = _fake_client()
        client.get_package_info.side_effect = RegistryError(404, "Not Found")
        with pytest.raises(RegistryError, match="404"):
            await NpmTools(client).info("nonexistent-pkg-xyz")


class TestDownloadsTool:
    @pytest.mark.anyio
    async def test_downloads(self, express_downloads):
        client = _fake_client()
        client.get_downloads.return_value = DownloadStats.from_dict(express_downloads)
        text = await NpmTools(client).downloads("express", "last-week")
        client.get_downloads.assert_awaited_once_with("express", "last-week")
        assert text.endswith("Total: 220,000")


class TestVersionsTool:
    @pytest.mark.anyio
    async def test_truncates_to_count(self):
        client = _fake_client()
        client.get_versions.return_value = [
            VersionEntry(f"1.0.{i}", f"2024-01-{10 - i:02d}T00:00:00Z") for i in range(5)
        ]
        text = await NpmTools(client).versions("pkg", 2)
        assert text.split("\n") == [
            "1.0.0 — 2024-01-10T00:00:00Z",
            "1.0.1 — 2024-01-09T00:00:00Z",
        ]


class TestCompareTool:
    @pytest.mark.anyio
    async def test_compare(self, express_doc, express_downloads):
        koa_doc = dict(express_doc, name="koa")
        client = _fake_client()

        async def info(name):
            return PackageInfo.from_dict(express_doc if name == "express" else koa_doc)

        client.get_package_info.side_effect = info
        client.get_downloads.return_value = DownloadStats.from_dict(express_downloads)

        text = await NpmTools(client).compare("express", "koa")
        assert text.split("\n")[0] == "| | express | koa |"
        assert "| Monthly downloads | 220,000 | 220,000 |" in text
        assert client.get_package_info.await_count == 2
        assert client.get_downloads.await_count == 2
        for call in client.get_downloads.await_args_list:
            assert call.args[1] == "last-month"

    @pytest.mark.anyio
    async def test_compare_fails_as_a_whole(self, express_doc):
        client = _fake_client()
        client.get_package_info.return_value = PackageInfo.from_dict(express_doc)
        client.get_downloads.side_effect = RegistryError(500, "boom")
        with pytest.raises(RegistryError, match="500"):
            await NpmTools(client).compare("express", "koa")


class TestIdempotence:
    @pytest.mark.anyio
    async def test_repeated_calls_render_identically(self, express_doc):
        client = _fake_client()
        client.get_package_info.return_value = PackageInfo.from_dict(express_doc)
        tools = NpmTools(client)
        assert await tools.info("express") == await tools.info("express")
