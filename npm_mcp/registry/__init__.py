"""npm registry access - async client and normalized models."""

from npm_mcp.registry.client import RegistryClient
from npm_mcp.registry.models import (
    DailyDownloads,
    DownloadStats,
    PackageInfo,
    SearchResult,
    VersionEntry,
)

__all__ = [
    "DailyDownloads",
    "DownloadStats",
    "PackageInfo",
    "RegistryClient",
    "SearchResult",
    "VersionEntry",
]
