"""ToolName, ToolSpec and ToolRegistry for closed tool dispatch.

Key concepts:
- ToolName: Enum of every tool this server knows. Dispatch is keyed on it,
  so a tool name string is converted once and unknown names are rejected
  up front.
- ToolSpec: Immutable dataclass linking a Tool definition, whether the tool
  modifies Jira, and an async handler (client, args) -> CallToolResult.
- ToolRegistry: Checks at construction that every ToolName has exactly one
  spec, optionally hides mutating tools (read-only mode), then provides
  list_tools() and call_tool() dispatch with error translation.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

import mcp.types as types

from ...core.client import JiraClient
from ...core.errors import JiraBridgeError

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    SEARCH_ISSUES = "search_issues"
    GET_ISSUE = "get_issue"
    CREATE_ISSUE = "create_issue"
    UPDATE_ISSUE = "update_issue"
    TRANSITION_ISSUE = "transition_issue"
    ADD_COMMENT = "add_comment"
    GET_PROJECT_INFO = "get_project_info"
    GET_PROJECT_ISSUES = "get_project_issues"
    GET_TRANSITIONS = "get_transitions"
    PING = "ping"


Handler = Callable[[JiraClient, dict], Awaitable[types.CallToolResult]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Immutable specification for a single MCP tool.

    Attributes:
        tool: The MCP Tool definition (name, description, inputSchema).
            ``tool.name`` must be a ToolName value.
        mutating: True if the tool creates or changes anything in Jira.
        handler: Async handler with signature (client, args) -> CallToolResult.
    """

    tool: types.Tool
    mutating: bool
    handler: Handler

    @property
    def name(self) -> ToolName:
        return ToolName(self.tool.name)


class ToolRegistry:
    """Registry covering every ToolName, with optional read-only filtering.

    Raises:
        ValueError: At construction, if a spec has an unknown name, a name
            is registered twice, or some ToolName has no spec.
    """

    def __init__(self, specs: list[ToolSpec], read_only: bool = False):
        all_specs: dict[ToolName, ToolSpec] = {}
        for spec in specs:
            name = spec.name
            if name in all_specs:
                raise ValueError(f"Duplicate tool spec: {name.value}")
            all_specs[name] = spec

        missing = [n.value for n in ToolName if n not in all_specs]
        if missing:
            raise ValueError(
                f"No tool spec registered for: {', '.join(missing)}"
            )

        self._specs: dict[ToolName, ToolSpec] = {
            name: spec
            for name, spec in all_specs.items()
            if not (read_only and spec.mutating)
        }

    def list_tools(self) -> list[types.Tool]:
        """Return list of types.Tool for all enabled specs."""
        return [spec.tool for spec in self._specs.values()]

    def tool_count(self) -> int:
        """Return number of enabled tools."""
        return len(self._specs)

    async def call_tool(
        self,
        name: str,
        arguments: dict | None,
        client: JiraClient,
    ) -> types.CallToolResult:
        """Dispatch tool call to its handler.

        Core exceptions are translated into structured CallToolResult
        errors with corrective actions; anything else is logged and
        reported as a server error.

        Raises:
            ValueError: If the tool name is unknown or disabled.
        """
        from .errors import build_error_response, translate_error

        try:
            spec = self._specs.get(ToolName(name))
        except ValueError:
            spec = None
        if spec is None:
            raise ValueError(f"Unknown tool: {name}")

        args = arguments or {}
        try:
            return await spec.handler(client, args)
        except JiraBridgeError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return translate_error(e)
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return build_error_response(
                "server_error",
                str(e),
                "Retry later or contact the Jira administrator.",
            )
