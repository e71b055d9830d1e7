"""Data models for the npm registry and downloads APIs.

Each model normalizes one upstream JSON payload in ``from_dict``.  Missing or
malformed optional fields are defaulted there so nothing past the client ever
sees ``None`` for them.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from npm_mcp.constants import TIME_SENTINEL_KEYS

_VCS_PREFIX_RE = re.compile(r"^git\+")
_GIT_SUFFIX_RE = re.compile(r"\.git$")


def _str_or(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _str_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): v for k, v in value.items() if isinstance(v, str)}


def clean_repository_url(repo_data: Any) -> str:
    """Extract a repository URL from a string or ``{"url": ...}`` object.

    Strips a leading ``git+`` scheme token and a trailing ``.git``.
    """
    if isinstance(repo_data, dict):
        url = repo_data.get("url")
    else:
        url = repo_data
    if not isinstance(url, str):
        return ""
    return _GIT_SUFFIX_RE.sub("", _VCS_PREFIX_RE.sub("", url))


def _license_name(value: Any) -> str:
    # Legacy documents use {"type": "MIT", "url": ...}
    if isinstance(value, dict):
        value = value.get("type")
    if isinstance(value, str) and value:
        return value
    return "Unknown"


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 registry timestamp, ``None`` if unparseable."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class SearchResult:
    """One hit from ``GET /-/v1/search``."""

    name: str
    version: str = ""
    description: str = ""
    keywords: List[str] = field(default_factory=list)
    score: int = 0
    # Not populated by the search endpoint.
    downloads: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SearchResult:
        """Construct from a single ``objects[]`` element."""
        pkg = data.get("package") or {}
        score_data = data.get("score") or {}
        final = score_data.get("final", 0) if isinstance(score_data, dict) else 0
        try:
            score = math.floor(float(final) * 100 + 0.5)
        except (TypeError, ValueError):
            score = 0
        return cls(
            name=_str_or(pkg.get("name")),
            version=_str_or(pkg.get("version")),
            description=_str_or(pkg.get("description")),
            keywords=_str_list(pkg.get("keywords")),
            score=max(0, min(100, score)),
        )


@dataclass(frozen=True)
class PackageInfo:
    """Normalized view of a full package document (``GET /{name}``).

    Fields scoped to a version (dependencies, publish time) come from the
    version the ``latest`` dist-tag points at.  Without that tag they
    degrade to empty values.
    """

    name: str
    version: str = ""
    description: str = ""
    license: str = "Unknown"
    homepage: str = ""
    repository: str = ""
    keywords: List[str] = field(default_factory=list)
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    maintainers: List[str] = field(default_factory=list)
    last_publish: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PackageInfo:
        dist_tags = data.get("dist-tags") or {}
        latest = _str_or(dist_tags.get("latest")) if isinstance(dist_tags, dict) else ""

        versions = data.get("versions") or {}
        version_data = versions.get(latest) if latest and isinstance(versions, dict) else None
        if not isinstance(version_data, dict):
            version_data = {}

        times = data.get("time") or {}
        last_publish = _str_or(times.get(latest)) if latest and isinstance(times, dict) else ""

        maintainers_raw = data.get("maintainers")
        if not isinstance(maintainers_raw, list):
            maintainers_raw = []
        maintainers = [
            m["name"]
            for m in maintainers_raw
            if isinstance(m, dict) and isinstance(m.get("name"), str)
        ]

        return cls(
            name=_str_or(data.get("name")),
            version=latest,
            description=_str_or(data.get("description")),
            license=_license_name(data.get("license")),
            homepage=_str_or(data.get("homepage")),
            repository=clean_repository_url(data.get("repository")),
            keywords=_str_list(data.get("keywords")),
            dependencies=_str_map(version_data.get("dependencies")),
            dev_dependencies=_str_map(version_data.get("devDependencies")),
            maintainers=maintainers,
            last_publish=last_publish,
        )


@dataclass(frozen=True)
class DailyDownloads:
    """Download count for a single day."""

    day: str
    downloads: int = 0


@dataclass(frozen=True)
class DownloadStats:
    """Response of ``GET /downloads/range/{period}/{name}``."""

    package: str
    period: str
    total: int
    daily: List[DailyDownloads] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DownloadStats:
        raw_days = data.get("downloads") or []
        daily = [
            DailyDownloads(day=_str_or(d.get("day")), downloads=int(d.get("downloads") or 0))
            for d in raw_days
            if isinstance(d, dict)
        ]
        start = _str_or(data.get("start"))
        end = _str_or(data.get("end"))
        return cls(
            package=_str_or(data.get("package")),
            period=f"{start} to {end}",
            total=sum(d.downloads for d in daily),
            daily=daily,
        )


@dataclass(frozen=True)
class VersionEntry:
    """A published version and its publish timestamp."""

    version: str
    date: str

    @staticmethod
    def list_from_dict(data: Dict[str, Any]) -> List[VersionEntry]:
        """Build the version history from a package document's ``time`` map.

        Newest first.  Entries with equal timestamps keep document order;
        unparseable timestamps go last.
        """
        times = data.get("time") or {}
        if not isinstance(times, dict):
            return []
        entries = [
            VersionEntry(version=version, date=date)
            for version, date in times.items()
            if version not in TIME_SENTINEL_KEYS and isinstance(date, str)
        ]
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            entries,
            key=lambda e: parse_timestamp(e.date) or oldest,
            reverse=True,
        )
