"""Read-only issue tool handlers for MCP server.

This module implements issue read operations: search, get, and transitions.
Handlers run the blocking core operations through run_sync() and render the
results as markdown-like text. Errors propagate to the ToolRegistry, which
translates them into structured error responses.
"""

from typing import Any

import mcp.types as types

from ...core import operations
from ...core.async_utils import run_sync
from ...core.client import JiraClient
from ...core.errors import InvalidArgument
from ...core.models import IssueSummary
from .registry import ToolName, ToolSpec

_ISSUE_KEY_PROPERTY = {
    "type": "string",
    "description": 'Jira issue key (e.g., "PROJ-123")',
}

_MAX_RESULTS_PROPERTY = {
    "type": "number",
    "description": "Maximum number of results to return (default: 50)",
    "default": operations.DEFAULT_MAX_RESULTS,
}


def text_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)]
    )


def parse_max_results(args: dict) -> int:
    """Read ``maxResults`` as a positive int, defaulting to 50."""
    raw: Any = args.get("maxResults", operations.DEFAULT_MAX_RESULTS)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidArgument(
            f"maxResults must be a number, got {raw!r}"
        ) from None
    if value < 1:
        raise InvalidArgument("maxResults must be at least 1")
    return value


def format_issue_list(issues: list[IssueSummary]) -> str:
    blocks = [
        f"**{issue.key}**: {issue.summary}\n"
        f"Status: {issue.status} | Assignee: {issue.assignee} | Priority: {issue.priority}\n"
        f"URL: {issue.url}\n"
        for issue in issues
    ]
    return f"Found {len(issues)} issues:\n\n" + "\n".join(blocks)


async def _handle_search(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle search_issues."""
    issues = await run_sync(
        operations.search_issues,
        client,
        args.get("jql"),
        parse_max_results(args),
    )
    return text_result(format_issue_list(issues))


async def _handle_get(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle get_issue."""
    issue = await run_sync(operations.get_issue, client, args.get("issueKey"))
    lines = [
        f"**{issue.key}**: {issue.summary}",
        "",
        f"**Description**: {issue.description}",
        f"**Status**: {issue.status}",
        f"**Assignee**: {issue.assignee}",
        f"**Priority**: {issue.priority}",
        f"**Type**: {issue.issue_type}",
        f"**Labels**: {', '.join(issue.labels) or 'None'}",
        f"**Created**: {issue.created}",
        f"**Updated**: {issue.updated}",
        f"**URL**: {issue.url}",
    ]
    return text_result("\n".join(lines))


async def _handle_transitions(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle get_transitions."""
    issue_key = args.get("issueKey")
    transitions = await run_sync(
        operations.get_transitions, client, issue_key
    )
    listing = "\n".join(
        f"• **{t.name}** → {t.to_status}" for t in transitions
    )
    return text_result(
        f"Available transitions for **{issue_key}**:\n\n"
        f"{listing}\n\n"
        f"URL: {client.base_url}/browse/{issue_key}"
    )


ISSUE_READ_SPECS = [
    ToolSpec(
        tool=types.Tool(
            name=ToolName.SEARCH_ISSUES.value,
            description="Search Jira issues using JQL (Jira Query Language)",
            inputSchema={
                "type": "object",
                "properties": {
                    "jql": {
                        "type": "string",
                        "description": 'JQL query string (e.g., "project = PROJ AND status = Open")',
                    },
                    "maxResults": _MAX_RESULTS_PROPERTY,
                },
                "required": ["jql"],
            },
        ),
        mutating=False,
        handler=_handle_search,
    ),
    ToolSpec(
        tool=types.Tool(
            name=ToolName.GET_ISSUE.value,
            description="Get detailed information about a specific Jira issue",
            inputSchema={
                "type": "object",
                "properties": {"issueKey": _ISSUE_KEY_PROPERTY},
                "required": ["issueKey"],
            },
        ),
        mutating=False,
        handler=_handle_get,
    ),
    ToolSpec(
        tool=types.Tool(
            name=ToolName.GET_TRANSITIONS.value,
            description="Get available transitions for an issue. Use before transition_issue to see reachable statuses.",
            inputSchema={
                "type": "object",
                "properties": {"issueKey": _ISSUE_KEY_PROPERTY},
                "required": ["issueKey"],
            },
        ),
        mutating=False,
        handler=_handle_transitions,
    ),
]
