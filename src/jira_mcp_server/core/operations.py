"""Issue and project operations composed from JiraClient calls.

Read operations project Jira's JSON into the typed records in ``models``.
Mutations build payloads from only the fields the caller supplied; create
resolves issue type and priority names to ids first, update sends the
priority by name as given.
"""

import logging
from typing import Any

from . import adf
from .client import JiraClient
from .errors import InvalidArgument
from .models import (
    CreatedIssue,
    IssueDetail,
    IssueSummary,
    ProjectInfo,
    TransitionEntry,
    UserInfo,
    browse_url,
)
from .resolvers import (
    resolve_issue_type,
    resolve_priority,
    resolve_transition,
)

logger = logging.getLogger(__name__)

DEFAULT_ISSUE_TYPE = "Task"
DEFAULT_PRIORITY = "Medium"
DEFAULT_MAX_RESULTS = 50


def _require(value: Any, name: str) -> None:
    if not value:
        raise InvalidArgument(f"{name} is required")


# ---------------------------------------------------------------------------
# Read / query
# ---------------------------------------------------------------------------


def search_issues(
    client: JiraClient, jql: str, max_results: int = DEFAULT_MAX_RESULTS
) -> list[IssueSummary]:
    """Run a JQL search; results keep Jira's order."""
    _require(jql, "jql")
    data = client.search_issues(jql, max_results) or {}
    return [
        IssueSummary.from_api(raw, client.base_url)
        for raw in data.get("issues") or []
        if isinstance(raw, dict)
    ]


def get_issue(client: JiraClient, issue_key: str) -> IssueDetail:
    _require(issue_key, "issueKey")
    return IssueDetail.from_api(
        client.get_issue(issue_key) or {}, client.base_url
    )


def get_project_info(client: JiraClient, project_key: str) -> ProjectInfo:
    _require(project_key, "projectKey")
    return ProjectInfo.from_api(
        client.get_project(project_key) or {}, client.base_url
    )


def build_project_jql(project_key: str, status: str | None = None) -> str:
    """Build the JQL listing a project's issues, newest first.

    ``status`` is inserted between double quotes as-is.
    """
    # TODO: escape embedded double quotes in status once JQL quoting rules are pinned down
    jql = f"project = {project_key}"
    if status:
        jql += f' AND status = "{status}"'
    return jql + " ORDER BY created DESC"


def get_project_issues(
    client: JiraClient,
    project_key: str,
    max_results: int = DEFAULT_MAX_RESULTS,
    status: str | None = None,
) -> list[IssueSummary]:
    _require(project_key, "projectKey")
    return search_issues(
        client, build_project_jql(project_key, status), max_results
    )


def get_transitions(
    client: JiraClient, issue_key: str
) -> list[TransitionEntry]:
    _require(issue_key, "issueKey")
    return [
        TransitionEntry.from_api(raw)
        for raw in client.get_transitions(issue_key)
        if isinstance(raw, dict)
    ]


def get_myself(client: JiraClient) -> UserInfo:
    return UserInfo.from_api(client.get_myself() or {})


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def build_create_fields(
    project: str,
    summary: str,
    issue_type_id: str,
    description: str | None = None,
    priority_id: str | None = None,
    assignee: str | None = None,
    labels: Any = None,
) -> dict[str, Any]:
    """Assemble the ``fields`` object for issue creation."""
    fields: dict[str, Any] = {
        "project": {"key": project},
        "summary": summary,
        "issuetype": {"id": issue_type_id},
    }
    if description:
        fields["description"] = adf.encode(description)
    if priority_id:
        fields["priority"] = {"id": priority_id}
    if assignee:
        fields["assignee"] = {"emailAddress": assignee}
    if isinstance(labels, list):
        fields["labels"] = labels
    return fields


def create_issue(
    client: JiraClient,
    project: str,
    summary: str,
    description: str | None = None,
    issue_type: str = DEFAULT_ISSUE_TYPE,
    priority: str | None = DEFAULT_PRIORITY,
    assignee: str | None = None,
    labels: list[str] | None = None,
) -> CreatedIssue:
    """Create an issue after resolving its type and priority.

    Raises:
        InvalidArgument: If project or summary is missing.
        ProjectNotFound, IssueTypeNotFound: From issue type resolution.
        RemoteRequestFailed: If Jira rejects a request.
    """
    _require(project, "project")
    _require(summary, "summary")

    resolved_type = resolve_issue_type(
        client, project, issue_type or DEFAULT_ISSUE_TYPE
    )
    fields = build_create_fields(
        project,
        summary,
        resolved_type.id,
        description=description,
        priority_id=resolve_priority(
            resolved_type.allowed_priorities, priority
        ),
        assignee=assignee,
        labels=labels,
    )

    data = client.create_issue(fields) or {}
    key = str(data.get("key", ""))
    logger.info("Created issue %s in project %s", key, project)
    return CreatedIssue(key=key, url=browse_url(client.base_url, key))


def build_update_fields(
    summary: str | None = None,
    description: str | None = None,
    assignee: str | None = None,
    priority: str | None = None,
    labels: Any = None,
) -> dict[str, Any]:
    """Assemble the ``fields`` patch from the supplied values only."""
    fields: dict[str, Any] = {}
    if summary:
        fields["summary"] = summary
    if description:
        fields["description"] = adf.encode(description)
    if assignee:
        fields["assignee"] = {"emailAddress": assignee}
    if priority:
        fields["priority"] = {"name": priority}
    if isinstance(labels, list):
        fields["labels"] = labels
    return fields


def update_issue(
    client: JiraClient,
    issue_key: str,
    summary: str | None = None,
    description: str | None = None,
    assignee: str | None = None,
    priority: str | None = None,
    labels: list[str] | None = None,
) -> list[str]:
    """Patch the supplied fields of an issue.

    Returns:
        Names of the fields sent. Empty when nothing was supplied, in
        which case no request is made.
    """
    _require(issue_key, "issueKey")
    fields = build_update_fields(
        summary=summary,
        description=description,
        assignee=assignee,
        priority=priority,
        labels=labels,
    )
    if fields:
        client.update_issue(issue_key, fields)
        logger.info("Updated %s: %s", issue_key, ", ".join(fields))
    return list(fields)


def transition_issue(
    client: JiraClient, issue_key: str, status: str
) -> TransitionEntry:
    """Move an issue to ``status`` through an available transition.

    The transition list and the transition itself are two separate calls;
    if the workflow changes in between, Jira's error from the second call
    is raised as-is.
    """
    _require(issue_key, "issueKey")
    _require(status, "status")
    transition = resolve_transition(client, issue_key, status)
    client.transition_issue(issue_key, transition.id)
    logger.info(
        "Transitioned %s via %s to %s",
        issue_key,
        transition.id,
        transition.to_status,
    )
    return transition


def add_comment(client: JiraClient, issue_key: str, comment: str) -> None:
    _require(issue_key, "issueKey")
    _require(comment, "comment")
    client.add_comment(issue_key, adf.encode(comment))
