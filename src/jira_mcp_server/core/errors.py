"""Exception taxonomy for Jira bridge operations.

Every failure raised by the core carries enough context for the MCP layer
to tell the agent what went wrong and what values would have been accepted.
"""


class JiraBridgeError(Exception):
    """Base class for all errors raised by the Jira bridge core."""


class InvalidArgument(JiraBridgeError, ValueError):
    """A required argument is missing or empty (detected before any request)."""


class ProjectNotFound(JiraBridgeError):
    """The project does not exist or is not accessible to the configured user."""

    def __init__(self, project_key: str):
        self.project_key = project_key
        super().__init__(f"Project {project_key} not found or not accessible")


class IssueTypeNotFound(JiraBridgeError):
    """The requested issue type is not in the project's create metadata."""

    def __init__(self, requested: str, available: list[str]):
        self.requested = requested
        self.available = list(available)
        super().__init__(
            f'Issue type "{requested}" not found. '
            f"Available types: {', '.join(self.available)}"
        )


class TransitionNotAvailable(JiraBridgeError):
    """No transition from the issue's current state leads to the requested status."""

    def __init__(self, requested: str, available: list[str]):
        self.requested = requested
        self.available = list(available)
        super().__init__(
            f'Status "{requested}" not available. '
            f"Available statuses: {', '.join(self.available)}"
        )


class RemoteRequestFailed(JiraBridgeError):
    """A request to Jira failed at the network level or returned non-2xx.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        message: Error text as reported by Jira (or the transport).
    """

    def __init__(self, status_code: int | None, message: str):
        self.status_code = status_code
        self.message = message
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(f"{prefix}{message}")
