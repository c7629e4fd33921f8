"""
MCP Connections
===============
Server definitions for MultiServerMCPClient and a loader that turns them
into LangChain tools.

Servers (all stdio transport):
  calculator  → this repo's mcp_server.py, run with the current interpreter
  github      → npx @modelcontextprotocol/server-github (needs a token)
  filesystem  → npx @modelcontextprotocol/server-filesystem <directory>

MCP tools are async-only, so graphs that use them must be driven with
ainvoke(). Every tool call opens its own session on the server.
"""
import logging
import sys
from pathlib import Path

from langchain_core.tools import BaseTool
from langchain_mcp_adapters.client import MultiServerMCPClient

logger = logging.getLogger(__name__)

GITHUB_SERVER_PACKAGE = "@modelcontextprotocol/server-github"
FILESYSTEM_SERVER_PACKAGE = "@modelcontextprotocol/server-filesystem"


def calculator_server() -> dict:
    return {
        "command":   sys.executable,
        "args":      ["-m", "mcp_server"],
        "transport": "stdio",
    }


def github_server(token: str) -> dict:
    return {
        "command":   "npx",
        "args":      ["-y", GITHUB_SERVER_PACKAGE],
        "transport": "stdio",
        "env":       {"GITHUB_PERSONAL_ACCESS_TOKEN": token},
    }


def filesystem_server(directory: str | Path) -> dict:
    return {
        "command":   "npx",
        "args":      ["-y", FILESYSTEM_SERVER_PACKAGE, str(Path(directory).resolve())],
        "transport": "stdio",
    }


async def load_mcp_tools(servers: dict[str, dict]) -> list[BaseTool]:
    """Start each server, list its tools, and return them as LangChain tools."""
    client = MultiServerMCPClient(servers)
    tools = await client.get_tools()
    logger.info(
        "[mcp] %d tool(s) from %s: %s",
        len(tools), list(servers), [t.name for t in tools],
    )
    return tools
