"""Lifespan management for MCP server startup and shutdown."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..config import Config, load_config
from ..config_loader import discover_config_files, load_hierarchical_config
from ..config_schema import LoggingSection, build_config
from ..core import operations
from ..core.async_utils import run_sync
from ..core.client import JiraClient

logger = logging.getLogger(__name__)

_REQUIRED_VARS = "JIRA_URL, JIRA_USERNAME, JIRA_API_TOKEN"


def _stderr_print(msg: str) -> None:
    """Print message to stderr for user feedback (safe in MCP mode)."""
    print(msg, file=sys.stderr, flush=True)


def resolve_settings(
    config_overrides: dict[str, Any] | None = None,
) -> tuple[Config, LoggingSection]:
    """Load the connection config and the config file's logging section.

    Precedence: CLI overrides > env vars (.env loaded first) > YAML config > defaults.
    Without a config file the logging section holds its defaults.

    Raises:
        ValueError: If required values are missing or invalid.
    """
    load_dotenv()

    yaml_fallbacks: dict[str, Any] | None = None
    logging_section = LoggingSection()
    config_files = discover_config_files()
    if config_files:
        try:
            unified = build_config(load_hierarchical_config())
        except ValidationError as e:
            raise ValueError(f"Invalid config file {config_files[0]}: {e}") from e
        yaml_fallbacks = unified.jira.model_dump(exclude_none=True)
        logging_section = unified.logging
        logger.info("Config file: %s", config_files[0])

    overrides = config_overrides or {}
    config = load_config(
        url=overrides.get("url"),
        username=overrides.get("username"),
        api_token=overrides.get("api_token"),
        default_project=overrides.get("default_project"),
        insecure=overrides.get("insecure", False),
        debug=overrides.get("debug", False),
        read_only=overrides.get("read_only", False),
        yaml_fallbacks=yaml_fallbacks,
    )
    return config, logging_section


def resolve_config(config_overrides: dict[str, Any] | None = None) -> Config:
    """Load configuration from all sources (see ``resolve_settings``)."""
    config, _ = resolve_settings(config_overrides)
    return config


def _config_error(error: ValueError) -> RuntimeError:
    logger.error("Configuration error: %s", error)
    _stderr_print(f"ERROR: Configuration error: {error}")
    _stderr_print(f"  Ensure {_REQUIRED_VARS} are set.")
    return RuntimeError(
        f"Configuration error: {error}. Ensure {_REQUIRED_VARS} are set."
    )


def load_startup_settings(
    config_overrides: dict[str, Any] | None = None,
) -> tuple[Config, LoggingSection]:
    """Resolve settings for server startup, reporting failures on stderr.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        return resolve_settings(config_overrides)
    except ValueError as e:
        raise _config_error(e) from e


@asynccontextmanager
async def server_lifespan(
    config_overrides: dict[str, Any] | None = None,
    config: Config | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """
    Manage server startup and shutdown lifecycle.

    On startup:
    - Load configuration unless an already resolved ``config`` is given
      (CLI > env vars > .env > YAML > defaults)
    - Create JiraClient and validate credentials via /myself
    - Fail fast if Jira is unreachable

    Args:
        config_overrides: Optional dict with config values from CLI
        config: Config resolved by the caller; overrides are ignored when set

    Yields:
        Dict with 'client' (JiraClient) and 'config' (Config)

    Raises:
        RuntimeError: If configuration is invalid or Jira connection fails.
    """
    logger.info("MCP server starting...")
    _stderr_print("Jira MCP Server starting...")

    if config is None:
        try:
            config = resolve_config(config_overrides)
        except ValueError as e:
            raise _config_error(e) from e
    logger.info("Jira URL: %s", config.jira_url)
    _stderr_print(f"  Jira URL: {config.jira_url}")

    logger.info("Validating Jira connection...")
    _stderr_print("  Validating Jira connection...")
    try:
        client = JiraClient(config)
        user = await run_sync(operations.get_myself, client)
    except Exception as e:
        logger.error("Failed to connect to Jira: %s", e)
        _stderr_print("ERROR: Jira connection failed.")
        _stderr_print(f"  {e}")
        _stderr_print(f"  Check {_REQUIRED_VARS}.")
        raise RuntimeError(
            f"Jira connection failed: {e}. Check {_REQUIRED_VARS}."
        ) from e

    logger.info("Connected to Jira as %s", user.display_name)
    _stderr_print(f"  Connected as {user.display_name} ({user.email})")
    if config.read_only:
        _stderr_print("  Read-only mode: mutating tools disabled")
    _stderr_print("Server ready. Waiting for MCP client connection...")

    yield {"client": client, "config": config}

    logger.info("MCP server shutting down")
    _stderr_print("Jira MCP Server shutting down.")
