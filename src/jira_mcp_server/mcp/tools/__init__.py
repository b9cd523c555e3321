"""MCP tool handlers for Jira operations.

This package contains MCP tool implementations that wrap the core Jira
operations with async handlers, text rendering, and structured error
responses.
"""

from .errors import build_error_response, translate_error
from .issue_read import ISSUE_READ_SPECS
from .issue_write import build_issue_write_specs
from .project import PROJECT_SPECS
from .registry import ToolName, ToolRegistry, ToolSpec
from .system import SYSTEM_SPECS


def build_all_specs(default_project: str | None = None) -> list[ToolSpec]:
    """Return one spec per ToolName."""
    return (
        SYSTEM_SPECS
        + ISSUE_READ_SPECS
        + build_issue_write_specs(default_project)
        + PROJECT_SPECS
    )


__all__ = [
    "build_error_response",
    "translate_error",
    "ToolName",
    "ToolSpec",
    "ToolRegistry",
    "build_all_specs",
    "ISSUE_READ_SPECS",
    "PROJECT_SPECS",
    "SYSTEM_SPECS",
    "build_issue_write_specs",
]
