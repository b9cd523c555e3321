"""Error response builders for MCP tool handlers.

Failures are returned to the agent as a CallToolResult with isError=True
and a corrective action, so it can recover without human intervention.
"""

import mcp.types as types

from ...core.errors import (
    InvalidArgument,
    IssueTypeNotFound,
    JiraBridgeError,
    ProjectNotFound,
    RemoteRequestFailed,
    TransitionNotAvailable,
)


def build_error_response(
    error_type: str, message: str, corrective_action: str
) -> types.CallToolResult:
    """Build a structured error response with corrective action.

    Args:
        error_type: Error category (validation_error, project_not_found,
            issue_type_not_found, transition_not_available, not_found,
            permission_denied, remote_error, server_error, unknown_tool)
        message: Human-readable error description
        corrective_action: Specific action the agent can take to resolve the error

    Returns:
        CallToolResult with isError=True

    Examples:
        >>> build_error_response("not_found", "Issue does not exist", "Use search_issues to verify the key.")
        CallToolResult(content=[TextContent(...)], isError=True)
    """
    error_text = f"Error ({error_type}): {message}\n\nAction: {corrective_action}"

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error_text)],
        isError=True,
    )


def _translate_remote(error: RemoteRequestFailed) -> types.CallToolResult:
    match error.status_code:
        case None:
            return build_error_response(
                "remote_error",
                f"Could not reach Jira: {error.message}",
                "Check JIRA_URL and network connectivity, then retry.",
            )
        case 401 | 403:
            return build_error_response(
                "permission_denied",
                error.message,
                "Check JIRA_USERNAME / JIRA_API_TOKEN and the account's project permissions.",
            )
        case 404:
            return build_error_response(
                "not_found",
                error.message,
                "Use search_issues or get_project_info to verify the key exists.",
            )
        case 400:
            return build_error_response(
                "validation_error",
                error.message,
                "Jira rejected the request. Fix the listed fields and retry.",
            )
        case _:
            return build_error_response(
                "remote_error",
                str(error),
                "Retry later or contact the Jira administrator.",
            )


def translate_error(error: JiraBridgeError) -> types.CallToolResult:
    """Translate a core exception into a structured error response."""
    match error:
        case InvalidArgument():
            return build_error_response(
                "validation_error",
                str(error),
                "Provide the missing parameter and retry.",
            )
        case ProjectNotFound():
            return build_error_response(
                "project_not_found",
                str(error),
                "Check the project key with get_project_info.",
            )
        case IssueTypeNotFound(available=available):
            return build_error_response(
                "issue_type_not_found",
                str(error),
                f"Retry with one of: {', '.join(available)}.",
            )
        case TransitionNotAvailable(available=available):
            action = (
                f"Retry with one of: {', '.join(available)}."
                if available
                else "No transitions are available from the current status."
            )
            return build_error_response(
                "transition_not_available", str(error), action
            )
        case RemoteRequestFailed():
            return _translate_remote(error)
        case _:
            return build_error_response(
                "server_error",
                str(error),
                "Retry later or contact the Jira administrator.",
            )
