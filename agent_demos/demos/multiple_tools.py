"""
Demo 1: Multiple Function Tools
===============================
One agent with weather, calculator and time tools. The model picks the
tool from the question; no tool needs approval.

Try:
    "What's the weather in Paris?"
    "Calculate (15 + 5) * 3"
    "What time is it in Asia/Tokyo?"
"""
from ..chat import print_welcome_message, run_chat_loop
from ..config import AppConfig
from ..graph import build_graph
from ..prompts import MULTIPLE_TOOLS_PROMPT
from ..providers import build_llm
from ..session import AgentRunner, ChatSession
from ..tools import build_tools


async def run(config: AppConfig, *, input_fn=input, output_fn=print) -> None:
    llm = build_llm(config.azure_openai())
    tools, approval_required = build_tools("get_weather", "calculate", "get_time")

    graph = build_graph(llm, tools, approval_required=approval_required, system_prompt=MULTIPLE_TOOLS_PROMPT)
    session = ChatSession(AgentRunner(graph))

    print_welcome_message(
        "Multiple Function Tools",
        "An agent that chooses between weather, calculator and time tools on its own.",
        output_fn=output_fn,
    )
    output_fn("✅ Agent created with 3 tools:")
    output_fn("   🌤️  Weather tool")
    output_fn("   🧮 Calculator tool")
    output_fn("   ⏰ Time zone tool")
    output_fn("\n💬 Starting multi-tool chat...")

    await run_chat_loop(session.ask, input_fn=input_fn, output_fn=output_fn)
