"""CLI argument parsing and main entry point.

Provides two subcommands:

* ``npm-mcp serve``: run the MCP server (stdio by default).
* ``npm-mcp tools``: list the registered tools and exit.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from npm_mcp.config.loader import find_config_file, load_config
from npm_mcp.config.schema import NpmMcpConfig
from npm_mcp.constants import SERVER_NAME, SERVER_VERSION
from npm_mcp.display.logging_config import setup_logging
from npm_mcp.errors import ConfigurationError

module_logger = logging.getLogger(__name__)

_TRANSPORTS = ("stdio", "sse", "streamable-http")


def _load_config_or_exit(config_path: Optional[str]) -> NpmMcpConfig:
    cfg_fpath = find_config_file(config_path)
    try:
        return load_config(cfg_fpath)
    except ConfigurationError as e_cfg:
        module_logger.error("Configuration error: %s", e_cfg)
        print(f"Error: {e_cfg}", file=sys.stderr)
        sys.exit(1)


def _apply_overrides(config: NpmMcpConfig, args: argparse.Namespace) -> NpmMcpConfig:
    """Return *config* with CLI flags applied on top of the file values."""
    server_updates = {
        key: getattr(args, key)
        for key in ("transport", "host", "port")
        if getattr(args, key, None) is not None
    }
    if not server_updates:
        return config
    server = config.server.model_copy(update=server_updates)
    return config.model_copy(update={"server": server})


# ── ``npm-mcp serve`` ───────────────────────────────────────────────────


def _cmd_serve(args: argparse.Namespace) -> None:
    """Entry-point for the ``serve`` subcommand."""
    config = _apply_overrides(_load_config_or_exit(args.config), args)

    log_lvl = args.log_level or config.logging.level
    _log_fpath, cfg_log_lvl = setup_logging(log_lvl, log_dir=config.logging.dir)

    module_logger.info(
        "---- %s v%s starting (transport: %s, file log level: %s) ----",
        SERVER_NAME,
        SERVER_VERSION,
        config.server.transport,
        cfg_log_lvl,
    )
    module_logger.info(
        "Registry: %s, downloads API: %s",
        config.registry.registry_url,
        config.registry.downloads_url,
    )

    from npm_mcp.server.app import create_server

    try:
        server = create_server(config)
        server.run(transport=config.server.transport)
    except KeyboardInterrupt:
        module_logger.info("%s interrupted by KeyboardInterrupt.", SERVER_NAME)
    except Exception as e_fatal:
        module_logger.exception("%s terminated by a fatal error: %s", SERVER_NAME, e_fatal)
        print(f"Fatal error: {e_fatal}", file=sys.stderr)
        sys.exit(1)
    finally:
        module_logger.info("%s has shut down.", SERVER_NAME)


# ── ``npm-mcp tools`` ───────────────────────────────────────────────────


def _cmd_tools(args: argparse.Namespace) -> None:
    """Entry-point for the ``tools`` subcommand."""
    from npm_mcp.server.app import create_server

    config = _load_config_or_exit(args.config)
    server = create_server(config)
    for tool in asyncio.run(server.list_tools()):
        print(f"{tool.name:<16} {tool.description or ''}")


# ── CLI parser construction ──────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with serve/tools subcommands."""
    parser = argparse.ArgumentParser(
        prog="npm-mcp",
        description=f"{SERVER_NAME} v{SERVER_VERSION}",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {SERVER_VERSION}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # ── serve ───────────────────────────────────────────────────
    sp_serve = subparsers.add_parser(
        "serve",
        help="Run the npm MCP server",
    )
    sp_serve.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "Path to configuration file (YAML). "
            "Default: $NPM_MCP_CONFIG, then config.yaml/config.yml in CWD"
        ),
    )
    sp_serve.add_argument(
        "--transport",
        type=str,
        default=None,
        choices=_TRANSPORTS,
        help="MCP transport (default: from config, else stdio)",
    )
    sp_serve.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind address for the HTTP transports",
    )
    sp_serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for the HTTP transports",
    )
    sp_serve.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Set file logging level (default: from config, else info)",
    )
    sp_serve.set_defaults(func=_cmd_serve)

    # ── tools ───────────────────────────────────────────────────
    sp_tools = subparsers.add_parser(
        "tools",
        help="List the tools this server exposes",
    )
    sp_tools.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to configuration file (YAML)",
    )
    sp_tools.set_defaults(func=_cmd_tools)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    else:
        args.func(args)
