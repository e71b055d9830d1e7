"""Configuration file discovery, loading and validation.

Loads an optional YAML configuration file and validates it against the
Pydantic models defined in :mod:`schema`.  Running without any config file is supported and yields
the built-in defaults.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from npm_mcp.config.schema import NpmMcpConfig
from npm_mcp.constants import CONFIG_ENV_VAR
from npm_mcp.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Recognised config file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})

# Config file search order in the working directory (first match wins)
_CONFIG_SEARCH_ORDER = ("config.yaml", "config.yml")


def find_config_file(explicit: Optional[str] = None) -> Optional[str]:
    """Resolve the config path: explicit flag, then env var, then CWD.

    Returns ``None`` when nothing is configured and no default file exists.
    """
    if explicit:
        return explicit
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return from_env
    for name in _CONFIG_SEARCH_ORDER:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return None


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML config file from *cfg_fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported config file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except Exception as exc:
        raise ConfigurationError(f"Error reading configuration file: {cfg_fpath}\n  {exc}") from exc

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            "Top-level configuration content must be a YAML mapping (dictionary)."
        )
    return raw_data


def _format_validation_errors(exc: ValidationError) -> str:
    """Format Pydantic validation errors into a readable multi-line string."""
    lines: List[str] = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        lines.append(f"  • {loc}: {err['msg']}")
    return "\n".join(lines)


def load_config(cfg_fpath: Optional[str] = None) -> NpmMcpConfig:
    """Load and validate the configuration.

    Steps:
        1. Read YAML file (skipped when *cfg_fpath* is ``None``)
        2. Validate against :class:`NpmMcpConfig` (Pydantic), which also
           resolves ``${VAR}`` references in registry header values

    Raises:
        ConfigurationError: On a missing file, I/O or parse errors, or
            validation failures (all errors reported at once).
    """
    if cfg_fpath is None:
        logger.debug("No configuration file; using defaults.")
        return NpmMcpConfig()

    logger.debug("Loading configuration file: %s", cfg_fpath)
    if not os.path.exists(cfg_fpath):
        raise ConfigurationError(f"Configuration file does not exist: {cfg_fpath}")

    raw_data = _read_config_file(cfg_fpath)

    try:
        config = NpmMcpConfig.model_validate(raw_data)
    except ValidationError as exc:
        error_summary = _format_validation_errors(exc)
        raise ConfigurationError(
            f"Configuration validation failed ({len(exc.errors())} error(s)):\n" f"{error_summary}"
        ) from exc

    logger.info("Configuration '%s' loaded (v%s).", cfg_fpath, config.version)
    return config
