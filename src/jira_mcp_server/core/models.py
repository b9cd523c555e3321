"""Typed records for the Jira REST API shapes this server consumes.

Raw JSON from Jira is loosely shaped: most nested objects (assignee,
priority, lead, ...) may be missing or null. Each ``from_api`` constructor
is the single place where those optional paths are probed and defaulted,
so the rest of the code works with plain attributes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from . import adf


def _name_of(obj: Any, attr: str = "name") -> str | None:
    """Return ``obj[attr]`` when obj is a dict holding a truthy value."""
    if isinstance(obj, dict):
        value = obj.get(attr)
        if value:
            return str(value)
    return None


def browse_url(base_url: str, issue_key: str) -> str:
    return f"{base_url}/browse/{issue_key}"


class IssueSummary(BaseModel):
    """Issue projection used by search results."""

    key: str
    summary: str = ""
    status: str = ""
    assignee: str = "Unassigned"
    priority: str = "None"
    created: str = ""
    updated: str = ""
    url: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: dict[str, Any], base_url: str) -> IssueSummary:
        fields = data.get("fields") or {}
        key = str(data.get("key", ""))
        return cls(
            key=key,
            summary=str(fields.get("summary") or ""),
            status=_name_of(fields.get("status")) or "",
            assignee=_name_of(fields.get("assignee"), "displayName")
            or "Unassigned",
            priority=_name_of(fields.get("priority")) or "None",
            created=str(fields.get("created") or ""),
            updated=str(fields.get("updated") or ""),
            url=browse_url(base_url, key),
        )


class IssueDetail(IssueSummary):
    """Full issue projection returned by ``get_issue``."""

    description: str = adf.NO_DESCRIPTION
    issue_type: str = ""
    labels: list[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any], base_url: str) -> IssueDetail:
        summary = IssueSummary.from_api(data, base_url)
        fields = data.get("fields") or {}
        labels = fields.get("labels")
        return cls(
            **summary.model_dump(),
            description=adf.decode(fields.get("description")),
            issue_type=_name_of(fields.get("issuetype")) or "",
            labels=[str(label) for label in labels]
            if isinstance(labels, list)
            else [],
        )


class ProjectInfo(BaseModel):
    name: str = ""
    key: str
    description: str = adf.NO_DESCRIPTION
    lead: str = "No lead assigned"
    project_type: str = ""
    url: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: dict[str, Any], base_url: str) -> ProjectInfo:
        key = str(data.get("key", ""))
        return cls(
            name=str(data.get("name") or ""),
            key=key,
            description=str(data.get("description") or "")
            or adf.NO_DESCRIPTION,
            lead=_name_of(data.get("lead"), "displayName")
            or "No lead assigned",
            project_type=str(data.get("projectTypeKey") or ""),
            url=f"{base_url}/projects/{key}",
        )


class TransitionEntry(BaseModel):
    """A workflow transition currently available on an issue."""

    id: str
    name: str = ""
    to_status: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> TransitionEntry:
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            to_status=_name_of(data.get("to")) or "",
        )


class PriorityValue(BaseModel):
    id: str
    name: str

    model_config = {"frozen": True}


class IssueTypeEntry(BaseModel):
    """Issue type from create metadata.

    ``allowed_priorities`` is None when the type declares no ``priority``
    field, meaning priority cannot be set on creation.
    """

    id: str
    name: str
    allowed_priorities: list[PriorityValue] | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> IssueTypeEntry:
        fields = data.get("fields") or {}
        priority_field = fields.get("priority")
        allowed = None
        if isinstance(priority_field, dict):
            allowed = [
                PriorityValue(id=str(value.get("id", "")), name=value["name"])
                for value in priority_field.get("allowedValues") or []
                if isinstance(value, dict) and value.get("name")
            ]
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            allowed_priorities=allowed,
        )


class CreatedIssue(BaseModel):
    key: str
    url: str

    model_config = {"frozen": True}


class UserInfo(BaseModel):
    """The authenticated user, as returned by ``/myself``."""

    display_name: str = ""
    email: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> UserInfo:
        return cls(
            display_name=str(data.get("displayName") or ""),
            email=str(data.get("emailAddress") or ""),
        )
