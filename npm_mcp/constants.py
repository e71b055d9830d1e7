"""Shared constants for the npm MCP server."""

SERVER_NAME = "mcp-server-npm"
SERVER_VERSION = "0.1.0"

# Upstream endpoints
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_DOWNLOADS_URL = "https://api.npmjs.org/downloads"
SEARCH_PATH = "/-/v1/search"
DEFAULT_TIMEOUT = 30.0  # seconds per upstream request

# Download statistics windows accepted by the downloads API
DOWNLOAD_PERIODS = ("last-day", "last-week", "last-month", "last-year")
DEFAULT_PERIOD = "last-month"

# Tool argument limits
MIN_RESULTS = 1
MAX_RESULTS = 50
DEFAULT_RESULTS = 10

# Keys in a package's "time" map that are not versions
TIME_SENTINEL_KEYS = frozenset({"created", "modified"})

# Network defaults for the HTTP transports
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9100

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

CONFIG_ENV_VAR = "NPM_MCP_CONFIG"
