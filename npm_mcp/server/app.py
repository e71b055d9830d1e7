"""FastMCP application: registers the npm tools.

The tool registry is built once in :func:`create_server`.  Argument schemas
come from the annotated handler signatures, and ``FastMCP`` validates every
call against them before the handler runs.

The lifespan is entered once per session on the HTTP transports.  Sessions
share one :class:`RegistryClient`, which is closed only when the last open
session ends and re-opens its connection pool on next use.
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from npm_mcp.config.schema import NpmMcpConfig
from npm_mcp.constants import DEFAULT_RESULTS, MAX_RESULTS, MIN_RESULTS
from npm_mcp.registry.client import RegistryClient
from npm_mcp.server.tools import NpmTools

logger = logging.getLogger(__name__)

Period = Literal["last-day", "last-week", "last-month", "last-year"]

PackageName = Annotated[str, Field(description="Package name (e.g. 'express')")]


def build_client(config: NpmMcpConfig) -> RegistryClient:
    """Create a :class:`RegistryClient` from the ``registry`` settings."""
    reg = config.registry
    return RegistryClient(
        reg.registry_url,
        reg.downloads_url,
        headers=reg.headers,
        timeout=reg.timeout,
    )


def create_server(
    config: Optional[NpmMcpConfig] = None,
    client: Optional[RegistryClient] = None,
) -> FastMCP:
    """Build the MCP server with all six npm tools registered."""
    config = config or NpmMcpConfig()
    client = client or build_client(config)
    tools = NpmTools(client)

    open_sessions = 0

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[NpmTools]:
        nonlocal open_sessions
        open_sessions += 1
        logger.debug("MCP session opened (%d active).", open_sessions)
        try:
            yield tools
        finally:
            open_sessions -= 1
            logger.debug("MCP session closed (%d active).", open_sessions)
            if open_sessions == 0:
                await client.close()

    mcp = FastMCP(
        config.server.name,
        lifespan=lifespan,
        host=config.server.host,
        port=config.server.port,
    )

    @mcp.tool(name="npm_search", description="Search npm packages by keyword")
    async def npm_search(
        query: Annotated[str, Field(description="Search query")],
        size: Annotated[
            int, Field(ge=MIN_RESULTS, le=MAX_RESULTS, description="Number of results")
        ] = DEFAULT_RESULTS,
    ) -> str:
        return await tools.search(query, size)

    @mcp.tool(name="npm_info", description="Get detailed info about an npm package")
    async def npm_info(name: PackageName) -> str:
        return await tools.info(name)

    @mcp.tool(name="npm_downloads", description="Get download statistics for an npm package")
    async def npm_downloads(
        name: PackageName,
        period: Annotated[Period, Field(description="Time period")] = "last-month",
    ) -> str:
        return await tools.downloads(name, period)

    @mcp.tool(name="npm_versions", description="List recent versions of an npm package")
    async def npm_versions(
        name: PackageName,
        count: Annotated[
            int,
            Field(ge=MIN_RESULTS, le=MAX_RESULTS, description="Number of versions to show"),
        ] = DEFAULT_RESULTS,
    ) -> str:
        return await tools.versions(name, count)

    @mcp.tool(name="npm_compare", description="Compare two npm packages side by side")
    async def npm_compare(
        packageA: Annotated[str, Field(description="First package name")],
        packageB: Annotated[str, Field(description="Second package name")],
    ) -> str:
        return await tools.compare(packageA, packageB)

    @mcp.tool(name="npm_deps", description="List dependencies of an npm package")
    async def npm_deps(name: PackageName) -> str:
        return await tools.deps(name)

    logger.debug("Registered npm tools on server '%s'.", config.server.name)
    return mcp
