"""Core Jira client, resolvers and operations (no MCP dependencies)."""

from .async_utils import run_sync
from .client import JiraClient

__all__ = ["JiraClient", "run_sync"]
