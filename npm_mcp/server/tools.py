"""The six npm tool operations.

:class:`NpmTools` is protocol-agnostic: each method takes already validated
arguments, calls the registry client and returns rendered text.  Registry
errors propagate unchanged to the caller.
"""

import asyncio
import logging

from npm_mcp.constants import DEFAULT_PERIOD, DEFAULT_RESULTS
from npm_mcp.registry.client import RegistryClient
from npm_mcp.server import formatting

logger = logging.getLogger(__name__)

COMPARE_PERIOD = "last-month"


class NpmTools:
    """Tool handlers bound to one :class:`RegistryClient`."""

    def __init__(self, client: RegistryClient) -> None:
        self.client = client

    async def search(self, query: str, size: int = DEFAULT_RESULTS) -> str:
        logger.info("Tool 'npm_search' called with query=%r, size=%s", query, size)
        results = await self.client.search(query, size)
        logger.info("Tool 'npm_search' found %d package(s)", len(results))
        return formatting.render_search(results)

    async def info(self, name: str) -> str:
        logger.info("Tool 'npm_info' called with name=%r", name)
        info = await self.client.get_package_info(name)
        return formatting.render_info(info)

    async def downloads(self, name: str, period: str = DEFAULT_PERIOD) -> str:
        logger.info("Tool 'npm_downloads' called with name=%r, period=%s", name, period)
        stats = await self.client.get_downloads(name, period)
        return formatting.render_downloads(stats)

    async def versions(self, name: str, count: int = DEFAULT_RESULTS) -> str:
        logger.info("Tool 'npm_versions' called with name=%r, count=%s", name, count)
        versions = await self.client.get_versions(name)
        return formatting.render_versions(versions[:count])

    async def compare(self, package_a: str, package_b: str) -> str:
        """Compare two packages; fails as a whole if any lookup fails."""
        logger.info("Tool 'npm_compare' called with %r vs %r", package_a, package_b)
        info_a, info_b, dl_a, dl_b = await asyncio.gather(
            self.client.get_package_info(package_a),
            self.client.get_package_info(package_b),
            self.client.get_downloads(package_a, COMPARE_PERIOD),
            self.client.get_downloads(package_b, COMPARE_PERIOD),
        )
        return formatting.render_comparison(info_a, info_b, dl_a, dl_b)

    async def deps(self, name: str) -> str:
        logger.info("Tool 'npm_deps' called with name=%r", name)
        info = await self.client.get_package_info(name)
        return formatting.render_deps(info)
