"""Tests for core/operations.py -- issue/project reads and mutations."""

import pytest

from jira_mcp_server.core import operations
from jira_mcp_server.core.adf import encode
from jira_mcp_server.core.errors import (
    InvalidArgument,
    IssueTypeNotFound,
    RemoteRequestFailed,
    TransitionNotAvailable,
)


def _meta(*issue_types):
    return {"projects": [{"key": "PROJ", "issuetypes": list(issue_types)}]}


TASK_WITH_PRIORITIES = {
    "id": "10001",
    "name": "Task",
    "fields": {
        "priority": {
            "allowedValues": [
                {"id": "2", "name": "High"},
                {"id": "3", "name": "Medium"},
            ]
        }
    },
}


# ---------------------------------------------------------------------------
# create_issue
# ---------------------------------------------------------------------------


class TestCreateIssue:
    def test_bug_without_priority_field(self, mock_client):
        """Catalog with Bug -> 10004 and no priority field sends the minimal payload."""
        mock_client.get_create_meta.return_value = _meta(
            {"id": "10004", "name": "Bug", "fields": {}}
        )
        mock_client.create_issue.return_value = {"key": "PROJ-42"}

        created = operations.create_issue(
            mock_client, "PROJ", "Fix login bug", issue_type="Bug"
        )

        mock_client.create_issue.assert_called_once_with(
            {
                "project": {"key": "PROJ"},
                "summary": "Fix login bug",
                "issuetype": {"id": "10004"},
            }
        )
        assert created.key == "PROJ-42"
        assert created.url == "https://example.atlassian.net/browse/PROJ-42"

    def test_all_optional_fields(self, mock_client):
        mock_client.get_create_meta.return_value = _meta(TASK_WITH_PRIORITIES)
        mock_client.create_issue.return_value = {"key": "PROJ-1"}

        operations.create_issue(
            mock_client,
            "PROJ",
            "Summary",
            description="Details",
            priority="high",
            assignee="dev@example.com",
            labels=["a", "b"],
        )

        fields = mock_client.create_issue.call_args[0][0]
        assert fields["issuetype"] == {"id": "10001"}
        assert fields["description"] == encode("Details")
        assert fields["priority"] == {"id": "2"}
        assert fields["assignee"] == {"emailAddress": "dev@example.com"}
        assert fields["labels"] == ["a", "b"]

    def test_default_type_and_priority(self, mock_client):
        mock_client.get_create_meta.return_value = _meta(TASK_WITH_PRIORITIES)
        mock_client.create_issue.return_value = {"key": "PROJ-1"}

        operations.create_issue(mock_client, "PROJ", "Summary")

        fields = mock_client.create_issue.call_args[0][0]
        assert fields["issuetype"] == {"id": "10001"}
        assert fields["priority"] == {"id": "3"}

    def test_unknown_priority_silently_omitted(self, mock_client):
        mock_client.get_create_meta.return_value = _meta(TASK_WITH_PRIORITIES)
        mock_client.create_issue.return_value = {"key": "PROJ-1"}

        operations.create_issue(mock_client, "PROJ", "S", priority="Blocker")

        assert "priority" not in mock_client.create_issue.call_args[0][0]

    def test_empty_description_not_sent(self, mock_client):
        mock_client.get_create_meta.return_value = _meta(TASK_WITH_PRIORITIES)
        mock_client.create_issue.return_value = {"key": "PROJ-1"}

        operations.create_issue(mock_client, "PROJ", "S", description="")

        assert "description" not in mock_client.create_issue.call_args[0][0]

    def test_non_list_labels_ignored(self, mock_client):
        mock_client.get_create_meta.return_value = _meta(TASK_WITH_PRIORITIES)
        mock_client.create_issue.return_value = {"key": "PROJ-1"}

        operations.create_issue(mock_client, "PROJ", "S", labels="oops")

        assert "labels" not in mock_client.create_issue.call_args[0][0]

    def test_unknown_issue_type_lists_all(self, mock_client):
        mock_client.get_create_meta.return_value = _meta(
            {"id": "1", "name": "Task"}, {"id": "2", "name": "Bug"}
        )

        with pytest.raises(IssueTypeNotFound) as exc_info:
            operations.create_issue(mock_client, "PROJ", "S", issue_type="Story")

        assert exc_info.value.available == ["Task", "Bug"]
        mock_client.create_issue.assert_not_called()

    @pytest.mark.parametrize(
        "project,summary", [(None, "S"), ("", "S"), ("PROJ", None), ("PROJ", "")]
    )
    def test_required_fields_checked_before_network(
        self, mock_client, project, summary
    ):
        with pytest.raises(InvalidArgument):
            operations.create_issue(mock_client, project, summary)
        mock_client.get_project.assert_not_called()


# ---------------------------------------------------------------------------
# update_issue
# ---------------------------------------------------------------------------


class TestUpdateIssue:
    def test_no_fields_makes_no_call(self, mock_client):
        changed = operations.update_issue(mock_client, "PROJ-1")

        assert changed == []
        mock_client.update_issue.assert_not_called()
        assert mock_client.method_calls == []

    def test_only_supplied_fields_sent(self, mock_client):
        changed = operations.update_issue(
            mock_client, "PROJ-1", summary="New title", labels=["x"]
        )

        assert changed == ["summary", "labels"]
        mock_client.update_issue.assert_called_once_with(
            "PROJ-1", {"summary": "New title", "labels": ["x"]}
        )

    def test_priority_sent_by_name_without_lookup(self, mock_client):
        operations.update_issue(mock_client, "PROJ-1", priority="Whatever")

        mock_client.update_issue.assert_called_once_with(
            "PROJ-1", {"priority": {"name": "Whatever"}}
        )
        mock_client.get_create_meta.assert_not_called()

    def test_description_and_assignee(self, mock_client):
        operations.update_issue(
            mock_client, "PROJ-1", description="New", assignee="a@b.c"
        )

        fields = mock_client.update_issue.call_args[0][1]
        assert fields == {
            "description": encode("New"),
            "assignee": {"emailAddress": "a@b.c"},
        }

    def test_missing_issue_key(self, mock_client):
        with pytest.raises(InvalidArgument, match="issueKey is required"):
            operations.update_issue(mock_client, "", summary="x")


# ---------------------------------------------------------------------------
# transition_issue / add_comment
# ---------------------------------------------------------------------------


class TestTransitionIssue:
    def test_resolves_then_applies(self, mock_client):
        mock_client.get_transitions.return_value = [
            {"id": "21", "name": "Start", "to": {"name": "In Progress"}}
        ]

        transition = operations.transition_issue(
            mock_client, "PROJ-1", "in progress"
        )

        assert transition.id == "21"
        mock_client.transition_issue.assert_called_once_with("PROJ-1", "21")

    def test_unavailable_status(self, mock_client):
        mock_client.get_transitions.return_value = [
            {"id": "21", "name": "Start", "to": {"name": "In Progress"}}
        ]

        with pytest.raises(TransitionNotAvailable) as exc_info:
            operations.transition_issue(mock_client, "PROJ-1", "Done")

        assert exc_info.value.available == ["In Progress"]
        mock_client.transition_issue.assert_not_called()

    def test_second_call_failure_propagates(self, mock_client):
        mock_client.get_transitions.return_value = [
            {"id": "21", "name": "Start", "to": {"name": "In Progress"}}
        ]
        mock_client.transition_issue.side_effect = RemoteRequestFailed(
            400, "Transition id '21' is not valid for this issue."
        )

        with pytest.raises(RemoteRequestFailed, match="not valid"):
            operations.transition_issue(mock_client, "PROJ-1", "In Progress")

    def test_missing_status(self, mock_client):
        with pytest.raises(InvalidArgument):
            operations.transition_issue(mock_client, "PROJ-1", None)
        mock_client.get_transitions.assert_not_called()


class TestAddComment:
    def test_comment_encoded(self, mock_client):
        operations.add_comment(mock_client, "PROJ-1", "Looks good")

        mock_client.add_comment.assert_called_once_with(
            "PROJ-1", encode("Looks good")
        )

    def test_missing_comment(self, mock_client):
        with pytest.raises(InvalidArgument, match="comment is required"):
            operations.add_comment(mock_client, "PROJ-1", "")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestReads:
    def test_search_preserves_remote_order(self, mock_client):
        mock_client.search_issues.return_value = {
            "issues": [
                {"key": "PROJ-3", "fields": {"summary": "c"}},
                {"key": "PROJ-1", "fields": {"summary": "a"}},
            ]
        }

        issues = operations.search_issues(mock_client, "project = PROJ", 5)

        assert [i.key for i in issues] == ["PROJ-3", "PROJ-1"]
        mock_client.search_issues.assert_called_once_with("project = PROJ", 5)

    def test_search_requires_jql(self, mock_client):
        with pytest.raises(InvalidArgument):
            operations.search_issues(mock_client, "")

    def test_build_project_jql_with_status(self):
        assert (
            operations.build_project_jql("PROJ", "Done")
            == 'project = PROJ AND status = "Done" ORDER BY created DESC'
        )

    def test_build_project_jql_without_status(self):
        assert (
            operations.build_project_jql("PROJ")
            == "project = PROJ ORDER BY created DESC"
        )

    def test_get_project_issues_delegates(self, mock_client):
        mock_client.search_issues.return_value = {"issues": []}

        operations.get_project_issues(mock_client, "PROJ", status="Done")

        mock_client.search_issues.assert_called_once_with(
            'project = PROJ AND status = "Done" ORDER BY created DESC', 50
        )

    def test_get_transitions_in_remote_order(self, mock_client):
        mock_client.get_transitions.return_value = [
            {"id": "31", "name": "Finish", "to": {"name": "Done"}},
            {"id": "11", "name": "Reopen", "to": {"name": "To Do"}},
        ]

        transitions = operations.get_transitions(mock_client, "PROJ-1")

        assert [(t.id, t.name, t.to_status) for t in transitions] == [
            ("31", "Finish", "Done"),
            ("11", "Reopen", "To Do"),
        ]

    def test_search_skips_malformed_entries(self, mock_client):
        mock_client.search_issues.return_value = {
            "issues": [None, "PROJ-9", {"key": "PROJ-1", "fields": {}}]
        }

        issues = operations.search_issues(mock_client, "project = PROJ")

        assert [i.key for i in issues] == ["PROJ-1"]

    def test_get_issue_empty_body(self, mock_client):
        mock_client.get_issue.return_value = None

        issue = operations.get_issue(mock_client, "PROJ-1")

        assert issue.description == "No description"
        assert issue.assignee == "Unassigned"
        assert issue.labels == []

    def test_get_project_info_empty_body(self, mock_client):
        mock_client.get_project.return_value = None

        project = operations.get_project_info(mock_client, "PROJ")

        assert project.lead == "No lead assigned"
        assert project.description == "No description"

    def test_get_transitions_skips_malformed_entries(self, mock_client):
        mock_client.get_transitions.return_value = [
            None,
            {"id": "31", "name": "Finish", "to": {"name": "Done"}},
        ]

        transitions = operations.get_transitions(mock_client, "PROJ-1")

        assert [t.id for t in transitions] == ["31"]
