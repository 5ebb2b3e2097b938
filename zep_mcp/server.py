"""MCP server for Zep Cloud memory.

Exposes the tool catalog over stdio and proxies each tool call to Zep Cloud
through the Dispatcher.

Usage in ~/.claude.json:
    {
      "mcpServers": {
        "zep": {
          "command": "zep-mcp",
          "env": {"ZEP_API_KEY": "z_your_key"}
        }
      }
    }
"""

import asyncio
import sys
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from zep_mcp import __version__
from zep_mcp.client import ZepClient
from zep_mcp.config import Config, ConfigError
from zep_mcp.dispatcher import Dispatcher
from zep_mcp.log_config import get_logger
from zep_mcp.tools import list_tools

log = get_logger("server")

SERVER_NAME = "zep-cloud"


def create_server(dispatcher: Dispatcher) -> Server:
    """Build the MCP server with list-tools and call-tool handlers bound."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list_tools()

    # Required arguments are checked by the dispatcher so that a bad call
    # produces the same error result shape as a remote failure
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        result = await dispatcher.dispatch(name, arguments)
        return result.to_mcp()

    return server


async def serve(config: Config) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    client = ZepClient(
        api_key=config.api_key,
        base_url=config.api_url,
        timeout=config.timeout,
    )
    server = create_server(Dispatcher(client, config))
    try:
        async with stdio_server() as (read_stream, write_stream):
            log.info("Zep Cloud MCP Server running")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await client.close()
        log.info("MCP server stopped")


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════


def main():
    """Run the MCP server."""
    config = Config()
    try:
        config.validate()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        log.info("Interrupted by user")
    except Exception as e:
        log.opt(exception=True).error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
