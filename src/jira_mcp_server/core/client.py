import logging
import threading
from typing import Any

import requests

from ..config import Config
from .errors import RemoteRequestFailed

logger = logging.getLogger(__name__)

API_PATH = "/rest/api/3"

SEARCH_FIELDS = "summary,status,assignee,priority,created,updated,description"


def _error_message(response: requests.Response) -> str:
    """Extract Jira's error text from a failed response.

    Jira reports failures as ``{"errorMessages": [...], "errors": {field: msg}}``.
    Falls back to the raw body, then the HTTP reason.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        parts = [str(m) for m in data.get("errorMessages") or []]
        errors = data.get("errors")
        if isinstance(errors, dict):
            parts.extend(f"{field}: {msg}" for field, msg in errors.items())
        if parts:
            return "; ".join(parts)

    return response.text.strip() or response.reason or "Unknown error"


class JiraClient:
    """Blocking client for the Jira Cloud REST API (v3).

    Holds the immutable connection config; each thread gets its own
    ``requests.Session`` so the client can be shared by concurrent
    ``run_sync`` calls.
    """

    def __init__(self, config: Config):
        self.config = config
        self._thread_local = threading.local()
        self.api_url = f"{config.jira_url.rstrip('/')}{API_PATH}"

    @property
    def base_url(self) -> str:
        return self.config.jira_url.rstrip("/")

    @property
    def session(self) -> requests.Session:
        """Session for the current thread."""
        if not hasattr(self._thread_local, "session"):
            self._thread_local.session = self._create_session()
        return self._thread_local.session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.auth = (self.config.username, self.config.api_token)
        session.verify = not self.config.insecure
        session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )
        return session

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Send a request to ``{jira_url}/rest/api/3{endpoint}``.

        Returns the decoded JSON body, or None for empty (204) responses.

        Raises:
            RemoteRequestFailed: On network errors or non-2xx responses.
        """
        url = f"{self.api_url}{endpoint}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise RemoteRequestFailed(None, str(e)) from e

        if not response.ok:
            message = _error_message(response)
            logger.debug(
                "%s %s failed: %s %s",
                method,
                url,
                response.status_code,
                message,
            )
            raise RemoteRequestFailed(response.status_code, message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteRequestFailed(
                response.status_code, f"Invalid JSON in response: {e}"
            ) from e

    def get_myself(self) -> dict[str, Any]:
        """
        Get the authenticated user's profile.
        """
        return self._request("GET", "/myself")

    def list_projects(self) -> list[dict[str, Any]]:
        """
        List projects visible to the authenticated user.
        """
        return self._request("GET", "/project") or []

    def get_project(self, project_key: str) -> dict[str, Any]:
        """
        Get a project record by key.
        """
        return self._request("GET", f"/project/{project_key}")

    def get_create_meta(self, project_key: str) -> dict[str, Any]:
        """
        Get issue creation metadata for a project.

        The response lists the project's issue types, each expanded with its
        field definitions (including allowed priority values).
        """
        return self._request(
            "GET",
            "/issue/createmeta",
            params={
                "projectKeys": project_key,
                "expand": "projects.issuetypes.fields",
            },
        )

    def search_issues(self, jql: str, max_results: int = 50) -> dict[str, Any]:
        """
        Search issues with a JQL query (passed through verbatim).
        """
        return self._request(
            "GET",
            "/search",
            params={
                "jql": jql,
                "maxResults": max_results,
                "fields": SEARCH_FIELDS,
            },
        )

    def get_issue(self, issue_key: str) -> dict[str, Any]:
        """
        Get an issue by key.
        """
        return self._request("GET", f"/issue/{issue_key}")

    def create_issue(self, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Create an issue.

        Returns:
            Jira's response: ``{"id": ..., "key": ..., "self": ...}``
        """
        return self._request("POST", "/issue", json={"fields": fields})

    def update_issue(self, issue_key: str, fields: dict[str, Any]) -> None:
        """
        Set fields on an existing issue.
        """
        self._request("PUT", f"/issue/{issue_key}", json={"fields": fields})

    def get_transitions(self, issue_key: str) -> list[dict[str, Any]]:
        """
        Get transitions available from the issue's current status.
        """
        data = self._request("GET", f"/issue/{issue_key}/transitions") or {}
        return data.get("transitions") or []

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        """
        Apply a workflow transition to an issue.
        """
        self._request(
            "POST",
            f"/issue/{issue_key}/transitions",
            json={"transition": {"id": transition_id}},
        )

    def add_comment(
        self, issue_key: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Add a comment (ADF body) to an issue.
        """
        return self._request(
            "POST", f"/issue/{issue_key}/comment", json={"body": body}
        )
