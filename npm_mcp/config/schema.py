"""Pydantic configuration models for the npm MCP server.

Defines the validated config structure using the versioned v1 format.
Every section is optional; omitted values fall back to the defaults in
:mod:`npm_mcp.constants`.
"""

from __future__ import annotations

import os
import re
from typing import Dict, Literal

from pydantic import BaseModel, Field, field_validator

from npm_mcp.constants import (
    DEFAULT_DOWNLOADS_URL,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_REGISTRY_URL,
    DEFAULT_TIMEOUT,
    LOG_DIR,
    SERVER_NAME,
)

# ${NAME} placeholders in header values
_ENV_REF_RE = re.compile(r"\$\{(\w+)\}")


def _expand_env_refs(value: str) -> str:
    """Substitute ``${NAME}`` with the value of environment variable NAME."""

    def _lookup(match: re.Match) -> str:
        name = match.group(1)
        if name not in os.environ:
            raise ValueError(f"environment variable '{name}' is not set")
        return os.environ[name]

    return _ENV_REF_RE.sub(_lookup, value)


def _validate_http_url(v: str) -> str:
    v = v.strip()
    if not v.startswith(("http://", "https://")):
        raise ValueError(f"URL '{v}' must start with http:// or https://")
    return v.rstrip("/")


class RegistrySettings(BaseModel):
    """Upstream npm endpoints and request settings."""

    registry_url: str = Field(
        default=DEFAULT_REGISTRY_URL,
        description="Root URL of the package metadata and search API.",
    )
    downloads_url: str = Field(
        default=DEFAULT_DOWNLOADS_URL,
        description="Root URL of the download-counts API.",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Per-request timeout in seconds.",
    )
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra HTTP headers sent upstream. Values may reference ${ENV_VAR}.",
    )

    @field_validator("registry_url", "downloads_url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        return _validate_http_url(v)

    @field_validator("headers")
    @classmethod
    def _expand_headers(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Resolve ``${VAR}`` references; an unset variable is rejected."""
        return {key: _expand_env_refs(value) for key, value in v.items()}


class ServerSettings(BaseModel):
    """MCP server identity and transport."""

    name: str = Field(default=SERVER_NAME, min_length=1)
    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)

    @field_validator("transport", mode="before")
    @classmethod
    def _normalise_transport(cls, v: str) -> str:
        """Accept 'http' as a shorthand for 'streamable-http'."""
        if isinstance(v, str) and v.strip().lower() == "http":
            return "streamable-http"
        return v


class LoggingSettings(BaseModel):
    """File logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = DEFAULT_LOG_LEVEL
    dir: str = Field(default=LOG_DIR, min_length=1)

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class NpmMcpConfig(BaseModel):
    """Top-level validated configuration.

    Supports version ``"1"`` format::

        version: "1"
        registry: { registry_url, downloads_url, timeout, headers }
        server:   { name, transport, host, port }
        logging:  { level, dir }
    """

    version: Literal["1"] = "1"
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, v: object) -> object:
        # YAML reads an unquoted 1 as an int
        return str(v) if isinstance(v, int) else v
