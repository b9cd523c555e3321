"""Resolve human-readable names to Jira identifiers.

Issue types and priorities are looked up in the project's create metadata;
target statuses are looked up in the issue's currently available
transitions. Nothing is cached: every call fetches fresh catalogs.
"""

import logging

from .client import JiraClient
from .errors import (
    IssueTypeNotFound,
    ProjectNotFound,
    RemoteRequestFailed,
    TransitionNotAvailable,
)
from .models import IssueTypeEntry, PriorityValue, TransitionEntry

logger = logging.getLogger(__name__)


def resolve_issue_type(
    client: JiraClient, project_key: str, type_name: str
) -> IssueTypeEntry:
    """Find the issue type named ``type_name`` (case-insensitive) in a project.

    Raises:
        ProjectNotFound: If the project cannot be fetched or has no create metadata.
        IssueTypeNotFound: If no issue type matches; lists the available names.
        RemoteRequestFailed: If the create metadata request fails.
    """
    try:
        client.get_project(project_key)
    except RemoteRequestFailed as e:
        logger.info("Project %s lookup failed: %s", project_key, e)
        raise ProjectNotFound(project_key) from e

    meta = client.get_create_meta(project_key) or {}
    projects = meta.get("projects") or []
    if not projects or not isinstance(projects[0], dict):
        raise ProjectNotFound(project_key)

    issue_types = [
        IssueTypeEntry.from_api(raw)
        for raw in projects[0].get("issuetypes") or []
        if isinstance(raw, dict)
    ]
    wanted = type_name.lower()
    for issue_type in issue_types:
        if issue_type.name.lower() == wanted:
            return issue_type

    logger.info(
        "Issue type %r not in project %s", type_name, project_key
    )
    raise IssueTypeNotFound(type_name, [t.name for t in issue_types])


def resolve_priority(
    allowed: list[PriorityValue] | None, priority_name: str | None
) -> str | None:
    """Return the id of the allowed priority matching ``priority_name``.

    Priority is best-effort: no allowed set, no name, or no match all
    give None.
    """
    if not allowed or not priority_name:
        return None
    wanted = priority_name.lower()
    for priority in allowed:
        if priority.name.lower() == wanted:
            return priority.id
    logger.info("Priority %r not allowed, omitting", priority_name)
    return None


def resolve_transition(
    client: JiraClient, issue_key: str, status_name: str
) -> TransitionEntry:
    """Find the available transition whose destination status is ``status_name``.

    Raises:
        TransitionNotAvailable: If no current transition reaches that status;
            lists the reachable status names.
    """
    transitions = [
        TransitionEntry.from_api(raw)
        for raw in client.get_transitions(issue_key)
        if isinstance(raw, dict)
    ]
    wanted = status_name.lower()
    for transition in transitions:
        if transition.to_status.lower() == wanted:
            return transition

    logger.info(
        "No transition from %s to %r", issue_key, status_name
    )
    raise TransitionNotAvailable(
        status_name, [t.to_status for t in transitions]
    )
