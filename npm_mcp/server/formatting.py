"""Text rendering for tool results.

Pure functions: the same models always render to the same text.
"""

from typing import Dict, List

from npm_mcp.registry.models import DownloadStats, PackageInfo, SearchResult, VersionEntry

NONE_MARKER = "(none)"
NO_RESULTS = "No packages found."


def format_count(value: int) -> str:
    """Format an integer with thousands separators (``220000`` -> ``220,000``)."""
    return f"{value:,}"


def _dep_lines(deps: Dict[str, str]) -> List[str]:
    return [f"  {name}: {spec}" for name, spec in deps.items()]


def render_search(results: List[SearchResult]) -> str:
    if not results:
        return NO_RESULTS
    return "\n\n".join(
        f"{i}. **{r.name}** v{r.version} (score: {r.score})\n   {r.description}"
        for i, r in enumerate(results, start=1)
    )


def render_info(info: PackageInfo) -> str:
    dep_count = len(info.dependencies)
    deps = "\n".join(_dep_lines(info.dependencies)) if dep_count else f"  {NONE_MARKER}"
    lines = [
        f"# {info.name} v{info.version}",
        "",
        info.description,
        "",
        f"License: {info.license}",
        f"Homepage: {info.homepage or NONE_MARKER}",
        f"Repository: {info.repository or NONE_MARKER}",
        f"Keywords: {', '.join(info.keywords) or NONE_MARKER}",
        f"Maintainers: {', '.join(info.maintainers)}",
        f"Last published: {info.last_publish}",
        "",
        f"Dependencies ({dep_count}):",
        deps,
        "",
        f"Dev dependencies: {len(info.dev_dependencies)}",
    ]
    return "\n".join(lines)


def render_downloads(stats: DownloadStats) -> str:
    return "\n".join(
        [
            f"# {stats.package} downloads",
            f"Period: {stats.period}",
            f"Total: {format_count(stats.total)}",
        ]
    )


def render_versions(versions: List[VersionEntry]) -> str:
    return "\n".join(f"{v.version} — {v.date}" for v in versions)


def render_comparison(
    info_a: PackageInfo,
    info_b: PackageInfo,
    downloads_a: DownloadStats,
    downloads_b: DownloadStats,
) -> str:
    """Render a markdown table comparing two packages."""
    rows = [
        ("Version", info_a.version, info_b.version),
        ("License", info_a.license, info_b.license),
        ("Dependencies", len(info_a.dependencies), len(info_b.dependencies)),
        ("Monthly downloads", format_count(downloads_a.total), format_count(downloads_b.total)),
        ("Last published", info_a.last_publish, info_b.last_publish),
        ("Maintainers", len(info_a.maintainers), len(info_b.maintainers)),
    ]
    lines = [
        f"| | {info_a.name} | {info_b.name} |",
        "|---|---|---|",
    ]
    lines.extend(f"| {label} | {a} | {b} |" for label, a, b in rows)
    return "\n".join(lines)


def render_deps(info: PackageInfo) -> str:
    sections = [f"# {info.name} v{info.version} dependencies"]
    for label, deps in (
        ("Dependencies", info.dependencies),
        ("Dev dependencies", info.dev_dependencies),
    ):
        if deps:
            sections.append(f"\n{label} ({len(deps)}):")
            sections.extend(_dep_lines(deps))
        else:
            sections.append(f"\n{label}: {NONE_MARKER}")
    return "\n".join(sections)
