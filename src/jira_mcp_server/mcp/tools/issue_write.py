"""Write issue tool handlers for MCP server.

This module implements issue mutations: create, update, transition, and
comment. Text fields are sent to Jira as single-paragraph ADF documents.
"""

import mcp.types as types

from ...core import operations
from ...core.async_utils import run_sync
from ...core.client import JiraClient
from .issue_read import text_result
from .registry import ToolName, ToolSpec

_ISSUE_KEY_PROPERTY = {
    "type": "string",
    "description": 'Jira issue key (e.g., "PROJ-123")',
}

_LABELS_PROPERTY = {
    "type": "array",
    "items": {"type": "string"},
    "description": "Array of labels to set on the issue",
}


async def _handle_create(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle create_issue."""
    project = args.get("project")
    summary = args.get("summary")
    issue_type = args.get("issueType") or operations.DEFAULT_ISSUE_TYPE
    priority = args.get("priority") or operations.DEFAULT_PRIORITY

    created = await run_sync(
        operations.create_issue,
        client,
        project,
        summary,
        description=args.get("description"),
        issue_type=issue_type,
        priority=priority,
        assignee=args.get("assignee"),
        labels=args.get("labels"),
    )

    return text_result(
        f"✅ Successfully created issue: **{created.key}**\n"
        f"Summary: {summary}\n"
        f"Type: {issue_type}\n"
        f"Priority: {priority}\n"
        f"Project: {project}\n"
        f"URL: {created.url}"
    )


async def _handle_update(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle update_issue."""
    issue_key = args.get("issueKey")
    changed = await run_sync(
        operations.update_issue,
        client,
        issue_key,
        summary=args.get("summary"),
        description=args.get("description"),
        assignee=args.get("assignee"),
        priority=args.get("priority"),
        labels=args.get("labels"),
    )

    change_summary = (
        f"updated: {', '.join(changed)}" if changed else "no changes"
    )
    return text_result(
        f"✅ Successfully updated issue: **{issue_key}** ({change_summary})\n"
        f"URL: {client.base_url}/browse/{issue_key}"
    )


async def _handle_transition(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle transition_issue."""
    issue_key = args.get("issueKey")
    status = args.get("status")
    await run_sync(operations.transition_issue, client, issue_key, status)
    return text_result(
        f"✅ Successfully transitioned issue **{issue_key}** to **{status}**\n"
        f"URL: {client.base_url}/browse/{issue_key}"
    )


async def _handle_comment(
    client: JiraClient, args: dict
) -> types.CallToolResult:
    """Handle add_comment."""
    issue_key = args.get("issueKey")
    comment = args.get("comment")
    await run_sync(operations.add_comment, client, issue_key, comment)
    return text_result(
        f"✅ Successfully added comment to issue: **{issue_key}**\n"
        f"Comment: {comment}\n"
        f"URL: {client.base_url}/browse/{issue_key}"
    )


def _build_create_tool(default_project: str | None = None) -> types.Tool:
    """Build create_issue tool definition, mentioning the default project if known."""
    project_hint = 'Project key (e.g., "PROJ")'
    if default_project:
        project_hint += f". Default project for this server: {default_project}"
    return types.Tool(
        name=ToolName.CREATE_ISSUE.value,
        description="Create a new Jira issue. Issue type and priority names are matched case-insensitively against the project's metadata.",
        inputSchema={
            "type": "object",
            "properties": {
                "project": {"type": "string", "description": project_hint},
                "summary": {
                    "type": "string",
                    "description": "Issue summary/title",
                },
                "description": {
                    "type": "string",
                    "description": "Issue description (plain text)",
                },
                "issueType": {
                    "type": "string",
                    "description": 'Issue type (e.g., "Task", "Bug", "Story", "Epic")',
                    "default": operations.DEFAULT_ISSUE_TYPE,
                },
                "priority": {
                    "type": "string",
                    "description": 'Issue priority (e.g., "High", "Medium", "Low"). Skipped if not allowed for the issue type.',
                    "default": operations.DEFAULT_PRIORITY,
                },
                "assignee": {
                    "type": "string",
                    "description": "Assignee email or username (optional)",
                },
                "labels": {
                    **_LABELS_PROPERTY,
                    "description": "Array of labels to add to the issue",
                },
            },
            "required": ["project", "summary"],
        },
    )


def build_issue_write_specs(default_project: str | None = None) -> list[ToolSpec]:
    return [
        ToolSpec(
            tool=_build_create_tool(default_project),
            mutating=True,
            handler=_handle_create,
        ),
        ToolSpec(
            tool=types.Tool(
                name=ToolName.UPDATE_ISSUE.value,
                description="Update an existing Jira issue. Only the fields provided are changed.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "issueKey": _ISSUE_KEY_PROPERTY,
                        "summary": {
                            "type": "string",
                            "description": "New summary/title",
                        },
                        "description": {
                            "type": "string",
                            "description": "New description",
                        },
                        "assignee": {
                            "type": "string",
                            "description": "Assignee email or username",
                        },
                        "priority": {
                            "type": "string",
                            "description": 'Priority (e.g., "High", "Medium", "Low")',
                        },
                        "labels": _LABELS_PROPERTY,
                    },
                    "required": ["issueKey"],
                },
            ),
            mutating=True,
            handler=_handle_update,
        ),
        ToolSpec(
            tool=types.Tool(
                name=ToolName.TRANSITION_ISSUE.value,
                description="Transition an issue to a new status. Use get_transitions to see which statuses are reachable.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "issueKey": _ISSUE_KEY_PROPERTY,
                        "status": {
                            "type": "string",
                            "description": 'New status (e.g., "In Progress", "Done", "To Do")',
                        },
                    },
                    "required": ["issueKey", "status"],
                },
            ),
            mutating=True,
            handler=_handle_transition,
        ),
        ToolSpec(
            tool=types.Tool(
                name=ToolName.ADD_COMMENT.value,
                description="Add a comment to a Jira issue",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "issueKey": _ISSUE_KEY_PROPERTY,
                        "comment": {
                            "type": "string",
                            "description": "Comment text",
                        },
                    },
                    "required": ["issueKey", "comment"],
                },
            ),
            mutating=True,
            handler=_handle_comment,
        ),
    ]
