"""MCP server for AI agent integration"""

import json
import logging
from mcp.server import Server
from mcp.types import Tool, TextContent, CallToolResult
from . import hover, describe

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("csslens-mcp")

# Create server instance
server = Server("csslens")


def _name_schema(description: str) -> dict:
    return {
        "type": "object",
        "properties": {
            "name": {
                "type": "string",
                "description": description
            }
        },
        "required": ["name"]
    }


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools for AI agents"""
    return [
        Tool(
            name="hover_stylesheet",
            description="Explain the CSS construct (selector, property, at-rule or pseudo selector) at a position in a stylesheet, as an editor hover would.",
            inputSchema={
                "type": "object",
                "properties": {
                    "source": {
                        "type": "string",
                        "description": "Stylesheet text"
                    },
                    "line": {
                        "type": "integer",
                        "description": "Zero based line of the position"
                    },
                    "character": {
                        "type": "integer",
                        "description": "Zero based character of the position within the line"
                    },
                    "markdown": {
                        "type": "boolean",
                        "description": "Allow markdown in the result (default true)",
                        "default": True
                    }
                },
                "required": ["source", "line", "character"]
            }
        ),
        Tool(
            name="describe_property",
            description="Look up the documentation and browser support of a CSS property.",
            inputSchema=_name_schema("Property name (e.g., 'color', 'border-radius')")
        ),
        Tool(
            name="describe_at_rule",
            description="Look up the documentation of a CSS at-rule.",
            inputSchema=_name_schema("At-rule name (e.g., '@font-face')")
        ),
        Tool(
            name="describe_pseudo",
            description="Look up the documentation of a CSS pseudo-class or pseudo-element.",
            inputSchema=_name_schema("Pseudo selector (e.g., ':hover', '::before')")
        ),
    ]


_DESCRIBE_KINDS = {
    "describe_property": "property",
    "describe_at_rule": "at-rule",
    "describe_pseudo": "pseudo",
}


def _text_result(payload: dict, is_error: bool = False) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(
            type="text",
            text=json.dumps(payload, indent=2)
        )],
        isError=is_error
    )


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> CallToolResult:
    """Handle tool calls from AI agents"""
    try:
        if name == "hover_stylesheet":
            result = hover(
                arguments["source"],
                arguments["line"],
                arguments["character"],
                markdown=arguments.get("markdown", True),
            )
            return _text_result({"hover": result})

        elif name in _DESCRIBE_KINDS:
            result = describe(_DESCRIBE_KINDS[name], arguments["name"])
            if result is None:
                return _text_result({"error": f"No documentation for {arguments['name']}"}, is_error=True)
            return _text_result(result)

        else:
            return _text_result({"error": f"Unknown tool: {name}"}, is_error=True)

    except Exception as e:
        logger.error(f"Tool call error: {e}")
        return _text_result({"error": str(e)}, is_error=True)


async def run_server():
    """Run the MCP server over stdio"""
    from mcp.server.stdio import stdio_server

    logger.info("Starting csslens MCP server")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )
