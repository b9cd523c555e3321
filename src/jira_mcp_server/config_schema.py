"""Unified configuration schema for jira_mcp_server.

Defines Pydantic models for the YAML config structure with dedicated
sections for the Jira connection and logging.

Usage:
    from jira_mcp_server.config_schema import build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
    fallbacks = unified.jira.model_dump(exclude_none=True)
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class JiraSection(BaseModel):
    """Jira connection settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    url: str | None = Field(default=None, description="Jira instance URL")
    username: str | None = Field(
        default=None, description="Account e-mail or username"
    )
    api_token: str | None = Field(default=None, description="API token")
    default_project: str | None = Field(
        default=None, description="Default project key"
    )
    insecure: bool = Field(
        default=False,
        description="Disable SSL verification (development only)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    read_only: bool = Field(
        default=False, description="Expose only read-only tools"
    )
    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="HTTP timeout in seconds (1-300)",
    )

    model_config = {"frozen": True}


class LoggingSection(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            None keeps the mode default (WARNING for MCP, INFO for CLI).
        file: Optional log file path.
    """

    level: str | None = Field(default=None, description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


class UnifiedConfig(BaseModel):
    """Top-level configuration. ``UnifiedConfig()`` is always valid."""

    jira: JiraSection = Field(default_factory=JiraSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged raw config dict.

    Missing sections get defaults.

    Raises:
        pydantic.ValidationError: If a section holds invalid values.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
