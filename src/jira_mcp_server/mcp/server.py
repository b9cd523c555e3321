"""MCP Server for Jira integration using stdio transport.

This module implements the Model Context Protocol server that enables
AI agents to search, read, create, update, transition and comment on
Jira issues via standardized tools.

Transport: stdio (for Claude Desktop/Code integration)
Protocol: JSON-RPC 2.0 over MCP
"""

import argparse
import asyncio
import logging
import os
import sys

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from .. import __version__
from ..core.client import JiraClient
from ..logger import DEFAULT_LOG_FILE, setup_logging
from .lifespan import load_startup_settings, server_lifespan
from .tools import ToolRegistry, build_all_specs, build_error_response

logger = logging.getLogger(__name__)

server = Server("jira-mcp-server")

# Initialized in main() for the lifetime of the stdio session
_jira_client: JiraClient | None = None
_registry: ToolRegistry | None = None


def get_client() -> JiraClient:
    """Get the global JiraClient instance.

    Raises:
        RuntimeError: If client is not initialized
    """
    if _jira_client is None:
        raise RuntimeError(
            "JiraClient not initialized. Server lifespan not started."
        )
    return _jira_client


def set_client(client: JiraClient | None) -> None:
    global _jira_client
    _jira_client = client


def get_registry() -> ToolRegistry:
    """Get the global ToolRegistry instance.

    Raises:
        RuntimeError: If registry is not initialized
    """
    if _registry is None:
        raise RuntimeError("ToolRegistry not initialized.")
    return _registry


def set_registry(registry: ToolRegistry | None) -> None:
    global _registry
    _registry = registry


# ---------------------------------------------------------------------------
# MCP protocol handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List enabled Jira tools."""
    return get_registry().list_tools()


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict | None
) -> types.CallToolResult:
    """Handle tool execution via ToolRegistry dispatch."""
    client = get_client()
    try:
        return await get_registry().call_tool(name, arguments, client)
    except ValueError as e:
        return build_error_response(
            "unknown_tool",
            str(e),
            "Use list_tools to see available tools.",
        )


# ---------------------------------------------------------------------------
# Server lifecycle
# ---------------------------------------------------------------------------


async def main(config_overrides: dict | None = None):
    """Run the MCP server with stdio transport.

    Configuration is resolved first so that its debug flag and the config
    file's logging section apply. Logging goes to a file only: stdout
    carries the JSON-RPC stream.

    Args:
        config_overrides: Optional dict with config values to override
            (url, username, api_token, default_project, insecure, debug,
            read_only, log_file)
    """
    overrides = config_overrides or {}
    config, log_settings = load_startup_settings(overrides)
    setup_logging(
        mode="mcp",
        debug=config.debug,
        log_file=overrides.get("log_file")
        or os.getenv("LOG_FILE")
        or log_settings.file,
        log_level=log_settings.level,
    )

    async with server_lifespan(config=config) as ctx:
        registry = ToolRegistry(
            build_all_specs(config.default_project),
            read_only=config.read_only,
        )
        logger.info("Registered %d tools", registry.tool_count())
        set_client(ctx["client"])
        set_registry(registry)
        try:
            async with mcp.server.stdio.stdio_server() as (
                read_stream,
                write_stream,
            ):
                init_options = InitializationOptions(
                    server_name="jira-mcp-server",
                    server_version=__version__,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                )
                await server.run(read_stream, write_stream, init_options)
        finally:
            set_client(None)
            set_registry(None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Jira MCP Server - Model Context Protocol server for Jira integration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with default config (from .env or .jira_mcp/config.yml)
  jira-mcp-server

  # Override connection settings
  jira-mcp-server --url https://your-domain.atlassian.net --username me@example.com

  # Expose only read-only tools
  jira-mcp-server --read-only

Note: This server uses stdio transport for JSON-RPC communication with MCP clients.
All user-facing messages are written to stderr.
        """,
    )
    parser.add_argument(
        "--url",
        help="Override Jira URL (takes precedence over JIRA_URL env var and config files)",
    )
    parser.add_argument(
        "--username",
        help="Override Jira account e-mail/username (takes precedence over JIRA_USERNAME)",
    )
    parser.add_argument(
        "--api-token",
        help="Override Jira API token (visible in process list -- prefer JIRA_API_TOKEN env var)",
    )
    parser.add_argument(
        "--default-project",
        help="Default project key suggested to agents (DEFAULT_PROJECT_KEY, default: PROJ)",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip SSL certificate verification (use only for development)",
    )
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Expose only tools that do not modify Jira",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--log-file",
        help=f"Log file path (overrides LOG_FILE and the config file; default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"jira-mcp-server version {__version__}",
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict:
    """Build config overrides dict from parsed CLI args (unset values omitted)."""
    overrides: dict = {}
    for key in ("url", "username", "api_token", "default_project", "log_file"):
        value = getattr(args, key)
        if value:
            overrides[key] = value
    for flag in ("insecure", "read_only", "debug"):
        if getattr(args, flag):
            overrides[flag] = True
    return overrides


def run() -> None:
    """Entry point that parses CLI arguments and handles startup errors."""
    args = build_parser().parse_args()
    config_overrides = overrides_from_args(args)

    override_keys = [k for k in config_overrides if k != "api_token"]
    if override_keys:
        print(
            f"Config overrides from CLI: {', '.join(override_keys)}",
            file=sys.stderr,
        )

    try:
        asyncio.run(main(config_overrides=config_overrides))
    except RuntimeError:
        # Error already printed to stderr by lifespan manager
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
