"""Command-line Jira connectivity check.

Loads configuration the same way the MCP server does, then verifies the
credentials against ``/myself`` and lists a few accessible projects.
Exits with status 1 on any failure.
"""

import argparse
import sys

from .core import operations
from .core.client import JiraClient
from .core.errors import RemoteRequestFailed
from .logger import setup_logging
from .mcp.lifespan import resolve_settings

PROJECT_PREVIEW = 5


def _failure_hint(error: RemoteRequestFailed) -> str | None:
    match error.status_code:
        case 401:
            return (
                "Authentication failed. Check that:\n"
                "  - the Jira account e-mail (JIRA_USERNAME) is correct\n"
                "  - the API token (JIRA_API_TOKEN) is valid\n"
                "  - the Jira URL (JIRA_URL) is correct"
            )
        case 403:
            return "Permission denied. Check the account's access to Jira projects."
        case None:
            return "Network error. Check the Jira URL (JIRA_URL)."
        case _:
            return None


def check_connection(client: JiraClient) -> None:
    """Print the authenticated user and accessible projects.

    Raises:
        RemoteRequestFailed: If either request fails.
    """
    print("Connecting to Jira...")
    user = operations.get_myself(client)
    print("Connected.")
    print(f"User: {user.display_name} ({user.email})")
    print(f"Jira instance: {client.base_url}")

    print("\nFetching accessible projects...")
    projects = client.list_projects()
    if not projects:
        print("No accessible projects found.")
        return

    print("Accessible projects:")
    for project in projects[:PROJECT_PREVIEW]:
        print(f"  - {project.get('key')}: {project.get('name')}")
    if len(projects) > PROJECT_PREVIEW:
        print(f"  ... and {len(projects) - PROJECT_PREVIEW} more")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Check Jira connectivity using the MCP server configuration"
    )
    parser.add_argument("--url", help="Override Jira URL")
    parser.add_argument("--username", help="Override Jira account e-mail/username")
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip SSL certificate verification",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    args = parser.parse_args(argv)

    try:
        config, log_settings = resolve_settings(
            {
                "url": args.url,
                "username": args.username,
                "insecure": args.insecure,
                "debug": args.debug,
            }
        )
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        mode="cli",
        debug=config.debug,
        log_file=log_settings.file,
        log_level=log_settings.level,
    )

    try:
        check_connection(JiraClient(config))
    except RemoteRequestFailed as e:
        print(f"Jira connection failed: {e}", file=sys.stderr)
        hint = _failure_hint(e)
        if hint:
            print(f"\n{hint}", file=sys.stderr)
        return 1

    print("\nAll checks passed.")
    return 0


def run() -> None:
    sys.exit(main())
