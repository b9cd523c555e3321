"""Tests for mcp/tools/errors.py -- structured error responses."""

import pytest

from jira_mcp_server.core.errors import (
    InvalidArgument,
    IssueTypeNotFound,
    JiraBridgeError,
    ProjectNotFound,
    RemoteRequestFailed,
    TransitionNotAvailable,
)
from jira_mcp_server.mcp.tools.errors import (
    build_error_response,
    translate_error,
)


def _text(result):
    return result.content[0].text


def test_build_error_response_format():
    result = build_error_response(
        "not_found", "Issue does not exist", "Check the key."
    )
    assert result.isError is True
    assert _text(result) == (
        "Error (not_found): Issue does not exist\n\nAction: Check the key."
    )


def test_invalid_argument():
    result = translate_error(InvalidArgument("jql is required"))
    assert _text(result).startswith("Error (validation_error): jql is required")


def test_project_not_found():
    result = translate_error(ProjectNotFound("NOPE"))
    assert "Error (project_not_found): Project NOPE not found" in _text(result)


def test_issue_type_not_found_lists_types():
    result = translate_error(IssueTypeNotFound("Epic", ["Task", "Bug"]))
    text = _text(result)
    assert text.startswith("Error (issue_type_not_found)")
    assert "Available types: Task, Bug" in text
    assert "Retry with one of: Task, Bug." in text


def test_transition_not_available_with_and_without_options():
    with_options = _text(
        translate_error(TransitionNotAvailable("Done", ["In Progress"]))
    )
    assert "Retry with one of: In Progress." in with_options

    without = _text(translate_error(TransitionNotAvailable("Done", [])))
    assert "No transitions are available" in without


@pytest.mark.parametrize(
    ("status_code", "error_type"),
    [
        (None, "remote_error"),
        (400, "validation_error"),
        (401, "permission_denied"),
        (403, "permission_denied"),
        (404, "not_found"),
        (500, "remote_error"),
    ],
)
def test_remote_failures_by_status(status_code, error_type):
    result = translate_error(RemoteRequestFailed(status_code, "boom"))
    assert result.isError is True
    assert _text(result).startswith(f"Error ({error_type}):")


def test_base_error_is_server_error():
    result = translate_error(JiraBridgeError("unexpected"))
    assert _text(result).startswith("Error (server_error): unexpected")
