"""MCP server for implmunch-mcp."""

import asyncio
import json
import logging
import os
import sys

from mcp.server import Server
from mcp.types import Tool, TextContent

from .config import EngineConfig
from .tools.resolve_methods import resolve_methods
from .tools.get_method_source import get_method_source
from .tools.describe_symbol import describe_symbol

logger = logging.getLogger(__name__)


# Create server
server = Server("implmunch-mcp")


_CURSOR_PROPERTIES = {
    "symbol": {
        "type": "string",
        "description": "Symbol text under the cursor (e.g., 'Point')"
    },
    "document_path": {
        "type": "string",
        "description": "Absolute path of the Rust file the cursor is in"
    },
    "line": {
        "type": "integer",
        "description": "1-indexed cursor line"
    },
    "column": {
        "type": "integer",
        "description": "0-indexed cursor column",
        "default": 0
    },
    "workspace_root": {
        "type": "string",
        "description": "Project root (default: IMPLMUNCH_WORKSPACE or the server's working directory)"
    },
    "definition_path": {
        "type": "string",
        "description": "Declaration file, when already known from a language server"
    },
    "definition_line": {
        "type": "integer",
        "description": "1-indexed declaration line in definition_path"
    },
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="resolve_methods",
            description="Resolve a Rust symbol to its concrete type (following type aliases) and list the methods of every impl block for that type, with normalized signatures and short descriptions.",
            inputSchema={
                "type": "object",
                "properties": {
                    **_CURSOR_PROPERTIES,
                    "documented_only": {
                        "type": "boolean",
                        "description": "Only show methods whose description has at least the minimum number of sentences",
                        "default": False
                    }
                },
                "required": ["symbol", "document_path", "line"]
            }
        ),
        Tool(
            name="get_method_source",
            description="Get the full signature and complete doc comment of one method. Use after resolve_methods to see a method in detail.",
            inputSchema={
                "type": "object",
                "properties": {
                    "method_name": {
                        "type": "string",
                        "description": "Method name (e.g., 'add')"
                    },
                    "type_name": {
                        "type": "string",
                        "description": "Type whose impl block declares the method"
                    },
                    "file_path": {
                        "type": "string",
                        "description": "Absolute path of the file declaring the method"
                    },
                    "workspace_root": {
                        "type": "string",
                        "description": "Project root (default: IMPLMUNCH_WORKSPACE or the server's working directory)"
                    }
                },
                "required": ["method_name", "type_name", "file_path"]
            }
        ),
        Tool(
            name="describe_symbol",
            description="Hover documentation for a Rust symbol plus a one-line summary of each well-documented method of its type.",
            inputSchema={
                "type": "object",
                "properties": {
                    **_CURSOR_PROPERTIES,
                    "documented_only": {
                        "type": "boolean",
                        "description": "Only list methods whose description has at least the minimum number of sentences",
                        "default": True
                    }
                },
                "required": ["symbol", "document_path", "line"]
            }
        ),
    ]


def _dispatch(name: str, arguments: dict) -> dict:
    """Run a tool synchronously."""
    config = EngineConfig.from_env()
    workspace_root = arguments.get("workspace_root") or os.environ.get("IMPLMUNCH_WORKSPACE")

    if name == "resolve_methods":
        return resolve_methods(
            symbol=arguments["symbol"],
            document_path=arguments["document_path"],
            line=arguments["line"],
            column=arguments.get("column", 0),
            workspace_root=workspace_root,
            definition_path=arguments.get("definition_path"),
            definition_line=arguments.get("definition_line"),
            documented_only=arguments.get("documented_only", False),
            config=config
        )
    elif name == "get_method_source":
        return get_method_source(
            method_name=arguments["method_name"],
            type_name=arguments["type_name"],
            file_path=arguments["file_path"],
            workspace_root=workspace_root,
            config=config
        )
    elif name == "describe_symbol":
        return describe_symbol(
            symbol=arguments["symbol"],
            document_path=arguments["document_path"],
            line=arguments["line"],
            column=arguments.get("column", 0),
            workspace_root=workspace_root,
            definition_path=arguments.get("definition_path"),
            definition_line=arguments.get("definition_line"),
            documented_only=arguments.get("documented_only", True),
            config=config
        )
    return {"error": f"Unknown tool: {name}"}


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls.

    Each call runs in a worker thread so searches do not block the event loop.
    """
    try:
        result = await asyncio.to_thread(_dispatch, name, arguments)
    except Exception as e:
        logger.exception(f"Tool {name} failed")
        result = {"error": str(e)}

    return [TextContent(type="text", text=json.dumps(result, indent=2))]


async def run_server():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Main entry point."""
    # stdout carries the MCP protocol, so diagnostics go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("IMPLMUNCH_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
