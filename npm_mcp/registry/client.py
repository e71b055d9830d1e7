"""Read-only async client for the public npm registry and downloads API.

Every public method issues exactly one GET and returns normalized models
from :mod:`npm_mcp.registry.models`.  There is no caching and no retry;
non-success responses raise :class:`~npm_mcp.errors.RegistryError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from npm_mcp.constants import (
    DEFAULT_DOWNLOADS_URL,
    DEFAULT_PERIOD,
    DEFAULT_REGISTRY_URL,
    DEFAULT_RESULTS,
    DEFAULT_TIMEOUT,
    DOWNLOAD_PERIODS,
    SEARCH_PATH,
    SERVER_NAME,
    SERVER_VERSION,
)
from npm_mcp.errors import RegistryError
from npm_mcp.registry.models import DownloadStats, PackageInfo, SearchResult, VersionEntry

logger = logging.getLogger(__name__)


def encode_package_name(name: str) -> str:
    """Percent-encode a package name for use as a single path segment."""
    return quote(name, safe="")


class RegistryClient:
    """Async HTTP client for the npm registry.

    Parameters
    ----------
    registry_url:
        Root URL of the package registry.
    downloads_url:
        Root URL of the download-counts API.
    headers:
        Extra headers applied to every request.
    timeout:
        HTTP request timeout in seconds.
    """

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        downloads_url: str = DEFAULT_DOWNLOADS_URL,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._registry_url = registry_url.rstrip("/")
        self._downloads_url = downloads_url.rstrip("/")
        self._headers = {"User-Agent": f"{SERVER_NAME}/{SERVER_VERSION}"}
        self._headers.update(headers or {})
        self._timeout = timeout
        self._client: Any = None  # lazy httpx.AsyncClient

    # ── lifecycle ───────────────────────────────────────────────────

    async def _ensure_client(self) -> Any:
        if self._client is None:
            import httpx  # lazy import

            self._client = httpx.AsyncClient(
                headers=self._headers,
                timeout=self._timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── transport ───────────────────────────────────────────────────

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        client = await self._ensure_client()
        logger.debug("GET %s params=%s", url, params)
        resp = await client.get(url, params=params)
        if not resp.is_success:
            logger.warning("Registry request failed: GET %s -> %s", url, resp.status_code)
            raise RegistryError(resp.status_code, resp.text, url=url)
        return resp.json()

    def _package_url(self, name: str) -> str:
        return f"{self._registry_url}/{encode_package_name(name)}"

    # ── public API ──────────────────────────────────────────────────

    async def search(self, query: str, size: int = DEFAULT_RESULTS) -> List[SearchResult]:
        """Search packages via ``GET /-/v1/search``; at most *size* results."""
        data = await self._get_json(
            f"{self._registry_url}{SEARCH_PATH}",
            params={"text": query, "size": size},
        )
        objects = data.get("objects") or []
        results = [SearchResult.from_dict(obj) for obj in objects if isinstance(obj, dict)]
        return results[:size]

    async def get_package_info(self, name: str) -> PackageInfo:
        """Fetch the full package document and resolve its ``latest`` version."""
        data = await self._get_json(self._package_url(name))
        return PackageInfo.from_dict(data)

    async def get_downloads(self, name: str, period: str = DEFAULT_PERIOD) -> DownloadStats:
        """Fetch the daily download series for one of the fixed periods."""
        if period not in DOWNLOAD_PERIODS:
            raise ValueError(
                f"Unknown download period '{period}'. "
                f"Expected one of: {', '.join(DOWNLOAD_PERIODS)}"
            )
        data = await self._get_json(
            f"{self._downloads_url}/range/{period}/{encode_package_name(name)}"
        )
        return DownloadStats.from_dict(data)

    async def get_versions(self, name: str) -> List[VersionEntry]:
        """Return every published version, newest first."""
        data = await self._get_json(self._package_url(name))
        return VersionEntry.list_from_dict(data)
