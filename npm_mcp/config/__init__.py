"""Configuration loading and validation for the npm MCP server."""

from npm_mcp.config.loader import find_config_file, load_config
from npm_mcp.config.schema import (
    LoggingSettings,
    NpmMcpConfig,
    RegistrySettings,
    ServerSettings,
)

__all__ = [
    "LoggingSettings",
    "NpmMcpConfig",
    "RegistrySettings",
    "ServerSettings",
    "find_config_file",
    "load_config",
]
