"""MCP server bridging AI agents to a Jira issue tracker."""

__version__ = "0.1.0"
