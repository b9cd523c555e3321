"""Tests for mcp/tools/registry.py -- ToolName, ToolSpec and ToolRegistry."""

import mcp.types as types
import pytest

from jira_mcp_server.core.errors import ProjectNotFound
from jira_mcp_server.mcp.tools import ToolName, ToolRegistry, ToolSpec, build_all_specs


def _spec(name, mutating=False, handler=None):
    async def default_handler(client, args):
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=f"{name.value} ok")]
        )

    return ToolSpec(
        tool=types.Tool(
            name=name.value,
            description=name.value,
            inputSchema={"type": "object", "properties": {}},
        ),
        mutating=mutating,
        handler=handler or default_handler,
    )


def _all_specs(**handlers):
    return [_spec(name, handler=handlers.get(name.value)) for name in ToolName]


class TestToolRegistryConstruction:
    def test_build_all_specs_covers_every_tool(self):
        registry = ToolRegistry(build_all_specs("PROJ"))
        names = {tool.name for tool in registry.list_tools()}
        assert names == {name.value for name in ToolName}
        assert registry.tool_count() == len(ToolName)

    def test_missing_spec_rejected(self):
        specs = [s for s in _all_specs() if s.name is not ToolName.PING]
        with pytest.raises(ValueError, match="No tool spec registered for: ping"):
            ToolRegistry(specs)

    def test_duplicate_spec_rejected(self):
        specs = _all_specs() + [_spec(ToolName.GET_ISSUE)]
        with pytest.raises(ValueError, match="Duplicate tool spec: get_issue"):
            ToolRegistry(specs)

    def test_unknown_tool_name_rejected(self):
        bogus = ToolSpec(
            tool=types.Tool(name="delete_everything", inputSchema={"type": "object"}),
            mutating=True,
            handler=None,
        )
        with pytest.raises(ValueError):
            ToolRegistry(_all_specs() + [bogus])

    def test_read_only_hides_mutating_tools(self):
        registry = ToolRegistry(build_all_specs("PROJ"), read_only=True)
        names = {tool.name for tool in registry.list_tools()}
        assert names == {
            "ping",
            "search_issues",
            "get_issue",
            "get_transitions",
            "get_project_info",
            "get_project_issues",
        }

    def test_create_tool_mentions_default_project(self):
        registry = ToolRegistry(build_all_specs("ACME"))
        create = next(
            t for t in registry.list_tools() if t.name == "create_issue"
        )
        assert "ACME" in create.inputSchema["properties"]["project"]["description"]
        assert create.inputSchema["required"] == ["project", "summary"]


class TestToolRegistryDispatch:
    async def test_dispatches_to_handler(self, mock_client):
        registry = ToolRegistry(_all_specs())
        result = await registry.call_tool("get_issue", {}, mock_client)
        assert result.content[0].text == "get_issue ok"

    async def test_none_arguments_become_empty_dict(self, mock_client):
        seen = {}

        async def handler(client, args):
            seen["args"] = args
            return types.CallToolResult(content=[])

        registry = ToolRegistry(_all_specs(ping=handler))
        await registry.call_tool("ping", None, mock_client)
        assert seen["args"] == {}

    async def test_unknown_tool_raises(self, mock_client):
        registry = ToolRegistry(_all_specs())
        with pytest.raises(ValueError, match="Unknown tool: nope"):
            await registry.call_tool("nope", {}, mock_client)

    async def test_disabled_tool_raises(self, mock_client):
        registry = ToolRegistry(build_all_specs(), read_only=True)
        with pytest.raises(ValueError, match="Unknown tool: create_issue"):
            await registry.call_tool("create_issue", {}, mock_client)

    async def test_core_error_translated(self, mock_client):
        async def handler(client, args):
            raise ProjectNotFound("NOPE")

        registry = ToolRegistry(_all_specs(get_project_info=handler))
        result = await registry.call_tool("get_project_info", {}, mock_client)
        assert result.isError is True
        assert result.content[0].text.startswith("Error (project_not_found)")

    async def test_unexpected_error_is_server_error(self, mock_client):
        async def handler(client, args):
            raise KeyError("fields")

        registry = ToolRegistry(_all_specs(get_issue=handler))
        result = await registry.call_tool("get_issue", {}, mock_client)
        assert result.isError is True
        assert result.content[0].text.startswith("Error (server_error)")
