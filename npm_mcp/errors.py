"""Custom exception classes for the npm MCP server."""

from typing import Optional


class NpmMcpBaseError(Exception):
    """Base class for all custom exceptions in the npm MCP server."""

    pass


class ConfigurationError(NpmMcpBaseError):
    """Raised when loading or validating the configuration file fails."""

    pass


class RegistryError(NpmMcpBaseError):
    """
    Raised when the npm registry or downloads API answers with a
    non-success HTTP status.
    """

    def __init__(
        self,
        status_code: int,
        body: str,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"Registry API error ({status_code}): {body}")
