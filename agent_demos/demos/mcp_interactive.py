"""
Demo 6: MCP Interactive
=======================
An agent whose tools come entirely from MCP servers.

    calculator  always started (mcp_server.py in this repo)
    github      started when GitHubMCP:GitHubPersonalAccessToken is set

Commands:
    tools   list the tools the servers exposed
"""
import logging

from ..chat import print_error, print_welcome_message, run_chat_loop
from ..config import AppConfig
from ..graph import build_graph
from ..mcp_clients import calculator_server, github_server, load_mcp_tools
from ..prompts import MCP_PROMPT
from ..providers import build_llm
from ..session import AgentRunner, ChatSession

logger = logging.getLogger(__name__)


def configured_servers(config: AppConfig) -> dict[str, dict]:
    servers = {"calculator": calculator_server()}
    token = config.github_mcp().github_personal_access_token
    if token.strip():
        servers["github"] = github_server(token)
    return servers


async def run(config: AppConfig, *, input_fn=input, output_fn=print) -> None:
    llm = build_llm(config.azure_openai())
    servers = configured_servers(config)

    print_welcome_message(
        "MCP Interactive",
        "Tools are discovered at runtime from Model Context Protocol servers.",
        output_fn=output_fn,
    )
    if "github" not in servers:
        output_fn("ℹ️  No GitHub token configured; only the calculator server will start.")

    output_fn(f"🔌 Starting MCP servers: {', '.join(servers)}...")
    try:
        tools = await load_mcp_tools(servers)
    except Exception as exc:
        logger.warning("[mcp] Could not start servers: %s", exc, exc_info=True)
        print_error(str(exc), output_fn)
        output_fn("\nTROUBLESHOOTING:")
        output_fn("1. Check the calculator server runs: python mcp_server.py")
        output_fn("2. For GitHub tools, check Node.js is installed: npx --version")
        output_fn("3. Check Python version (3.10+ required)")
        return

    output_fn(f"✅ Connected. {len(tools)} tools available")

    graph = build_graph(llm, tools, system_prompt=MCP_PROMPT)
    session = ChatSession(AgentRunner(graph))

    def list_tools(_rest: str) -> None:
        for tool in tools:
            summary = (tool.description or "").strip().splitlines()
            output_fn(f"   • {tool.name}: {summary[0] if summary else ''}")

    await run_chat_loop(
        session.ask,
        commands={"tools": list_tools},
        input_fn=input_fn,
        output_fn=output_fn,
    )
