"""Async bridge for running blocking Jira HTTP calls from MCP handlers."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a worker thread without blocking the event loop.

    Example:
        # In MCP tool handler:
        issue = await run_sync(operations.get_issue, client, "PROJ-1")
    """
    return await asyncio.to_thread(func, *args, **kwargs)
