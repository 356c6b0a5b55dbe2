"""End-to-end server tests."""

import pytest
import json

from implmunch_mcp.server import list_tools, call_tool


@pytest.mark.asyncio
async def test_server_lists_three_tools():
    """Test that server lists all 3 tools."""
    tools = await list_tools()

    assert len(tools) == 3

    names = {t.name for t in tools}
    assert names == {"resolve_methods", "get_method_source", "describe_symbol"}


@pytest.mark.asyncio
async def test_resolve_methods_tool_schema():
    """Test resolve_methods tool has correct schema."""
    tools = await list_tools()

    resolve = next(t for t in tools if t.name == "resolve_methods")

    props = resolve.inputSchema["properties"]
    assert "symbol" in props
    assert "document_path" in props
    assert "line" in props
    assert "definition_path" in props
    assert props["documented_only"]["default"] is False
    assert resolve.inputSchema["required"] == ["symbol", "document_path", "line"]


@pytest.mark.asyncio
async def test_describe_symbol_defaults_to_documented_only():
    tools = await list_tools()
    describe = next(t for t in tools if t.name == "describe_symbol")
    assert describe.inputSchema["properties"]["documented_only"]["default"] is True


@pytest.mark.asyncio
async def test_get_method_source_tool_schema():
    """Test get_method_source tool has correct schema."""
    tools = await list_tools()

    get_source = next(t for t in tools if t.name == "get_method_source")

    assert set(get_source.inputSchema["required"]) == {"method_name", "type_name", "file_path"}


@pytest.mark.asyncio
async def test_unknown_tool_returns_error():
    """Test that an unknown tool name produces an error payload."""
    content = await call_tool("no_such_tool", {})

    result = json.loads(content[0].text)
    assert result == {"error": "Unknown tool: no_such_tool"}


@pytest.mark.asyncio
async def test_call_tool_end_to_end(workspace, monkeypatch):
    """Test a full resolve_methods call through the server."""
    monkeypatch.setenv("IMPLMUNCH_SEARCHER", "python")

    content = await call_tool("resolve_methods", {
        "symbol": "Point",
        "document_path": str(workspace / "src" / "main.rs"),
        "line": 6,
        "workspace_root": str(workspace),
    })

    result = json.loads(content[0].text)
    assert result["type_name"] == "Point"
    assert [m["name"] for m in result["blocks"][0]["methods"]] == ["add"]


@pytest.mark.asyncio
async def test_call_tool_missing_argument():
    """Test that a missing required argument is reported, not raised."""
    content = await call_tool("get_method_source", {"method_name": "add"})

    result = json.loads(content[0].text)
    assert "error" in result
