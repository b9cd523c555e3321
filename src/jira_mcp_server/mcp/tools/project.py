"""Project tool handlers for MCP server: project info and project issue listing."""

import mcp.types as types

from ...core import operations
from ...core.async_utils import run_sync
from ...core.client import JiraClient
from .issue_read import format_issue_list, parse_max_results, text_result
from .registry import ToolName, ToolSpec

_PROJECT_KEY_PROPERTY = {
    "type": "string",
    "description": 'Project key (e.g., "PROJ")',
}


async def _handle_project_info(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle get_project_info."""
    project = await run_sync(
        operations.get_project_info, client, args.get("projectKey")
    )
    return text_result(
        f"**Project**: {project.name} ({project.key})\n"
        f"**Description**: {project.description}\n"
        f"**Lead**: {project.lead}\n"
        f"**Project Type**: {project.project_type}\n"
        f"**URL**: {project.url}"
    )


async def _handle_project_issues(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle get_project_issues."""
    issues = await run_sync(
        operations.get_project_issues,
        client,
        args.get("projectKey"),
        parse_max_results(args),
        args.get("status"),
    )
    return text_result(format_issue_list(issues))


PROJECT_SPECS = [
    ToolSpec(
        tool=types.Tool(
            name=ToolName.GET_PROJECT_INFO.value,
            description="Get information about a Jira project",
            inputSchema={
                "type": "object",
                "properties": {"projectKey": _PROJECT_KEY_PROPERTY},
                "required": ["projectKey"],
            },
        ),
        mutating=False,
        handler=_handle_project_info,
    ),
    ToolSpec(
        tool=types.Tool(
            name=ToolName.GET_PROJECT_ISSUES.value,
            description="Get all issues for a specific project, newest first",
            inputSchema={
                "type": "object",
                "properties": {
                    "projectKey": _PROJECT_KEY_PROPERTY,
                    "maxResults": {
                        "type": "number",
                        "description": "Maximum number of results to return (default: 50)",
                        "default": operations.DEFAULT_MAX_RESULTS,
                    },
                    "status": {
                        "type": "string",
                        "description": "Filter by status (optional)",
                    },
                },
                "required": ["projectKey"],
            },
        ),
        mutating=False,
        handler=_handle_project_issues,
    ),
]
