"""
Demo 5: Middleware Pipeline
===========================
Three stages wrapped around every agent turn, outermost first:

    TimingMiddleware          how long the turn took
    SecurityMiddleware        refuses messages with sensitive keywords
    FunctionLoggerMiddleware  which tools the agent called

Try:
    "tell me a joke"                               → timing only
    "what's the weather in Tokyo?"                 → timing + function logger
    "what time is it and calculate 15 * 8"         → two function calls
    "what is my password?"                         → blocked by security
    "search for users and get weather in Paris"    → everything
"""
from ..chat import print_welcome_message, run_chat_loop
from ..config import AppConfig
from ..graph import build_graph
from ..middleware import FunctionLoggerMiddleware, SecurityMiddleware, TimingMiddleware
from ..prompts import MIDDLEWARE_PROMPT
from ..providers import build_llm
from ..session import AgentRunner, ChatSession
from ..tools import build_tools

SUGGESTED_PROMPTS = [
    ("tell me a joke",                            "Timing", "Simple request, no functions"),
    ("what's the weather in Tokyo?",              "Timing + Function Logger", "Calls the get_weather function"),
    ("what time is it and calculate 15 * 8",      "Timing + Function Logger (2 calls)", "Multiple function calls"),
    ("what is my password?",                      "Timing + Security (BLOCKS)", "Security middleware blocks this request!"),
    ("search for users and get weather in Paris", "All 3 middleware", "Multiple functions, shows complete flow"),
]


def build_middleware(output_fn=print) -> list:
    def report_timing(seconds: float) -> None:
        output_fn(f"⏱️  [TIMING] Completed in {seconds:.2f}s")

    def report_function(name: str, arguments: dict) -> None:
        args = ", ".join(f"{key}={value}" for key, value in arguments.items())
        output_fn(f"🔧 [FUNCTION] {name}({args})")

    return [
        TimingMiddleware(report=report_timing),
        SecurityMiddleware(),
        FunctionLoggerMiddleware(report=report_function),
    ]


async def run(config: AppConfig, *, input_fn=input, output_fn=print) -> None:
    llm = build_llm(config.azure_openai())
    tools, approval_required = build_tools("get_weather", "calculate", "get_time", "search_database")

    graph = build_graph(llm, tools, approval_required=approval_required, system_prompt=MIDDLEWARE_PROMPT)
    session = ChatSession(AgentRunner(graph, build_middleware(output_fn)))

    print_welcome_message(
        "Middleware Pipeline",
        "1️⃣  TIMING MIDDLEWARE        → Tracks how long each request takes\n"
        "2️⃣  SECURITY MIDDLEWARE      → Blocks sensitive content\n"
        "3️⃣  FUNCTION LOGGER          → Logs all tool calls",
        output_fn=output_fn,
    )
    output_fn("📝 SUGGESTED TEST PROMPTS:\n")
    for number, (text, triggers, note) in enumerate(SUGGESTED_PROMPTS, start=1):
        output_fn(f"✅ PROMPT {number}: \"{text}\"")
        output_fn(f"   → Triggers: {triggers}")
        output_fn(f"   → {note}\n")

    await run_chat_loop(session.ask, prompt="💬 You: ", input_fn=input_fn, output_fn=output_fn)
