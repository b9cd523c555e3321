"""System tool handlers: connectivity check."""

import mcp.types as types

from ...core import operations
from ...core.async_utils import run_sync
from ...core.client import JiraClient
from .issue_read import text_result
from .registry import ToolName, ToolSpec


async def _handle_ping(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle ping -- confirm Jira is reachable with the configured credentials."""
    user = await run_sync(operations.get_myself, client)
    return text_result(
        "Jira MCP server connected successfully.\n"
        f"User: {user.display_name} ({user.email})\n"
        f"Jira instance: {client.base_url}\n"
        f"Default project: {client.config.default_project}"
    )


SYSTEM_SPECS = [
    ToolSpec(
        tool=types.Tool(
            name=ToolName.PING.value,
            description="Test Jira connectivity and show the authenticated user",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": [],
            },
        ),
        mutating=False,
        handler=_handle_ping,
    ),
]
