"""
npm MCP server - query the public npm registry over the Model Context Protocol.

Exposes search, package metadata, download statistics, version history,
dependency listing and side-by-side comparison as MCP tools.
"""

from npm_mcp.constants import SERVER_NAME, SERVER_VERSION

__version__ = SERVER_VERSION
__app_name__ = SERVER_NAME

__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "__version__",
    "__app_name__",
]
