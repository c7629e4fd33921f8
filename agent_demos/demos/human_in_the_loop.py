"""
Demo 2: Human-in-the-Loop Approval
==================================
A file assistant with two tools:

    create_file  → runs immediately
    delete_file  → pauses the agent and asks you first

The agent graph routes any delete_file call through human_review. A
rejected call never touches the disk; the model is told it was rejected.

Try:
    "Create a file named test.txt with some content"
    "Delete test.txt"
"""
from functools import partial

from ..approval import request_approval
from ..chat import print_welcome_message, run_chat_loop
from ..config import AppConfig
from ..graph import build_graph
from ..prompts import FILE_MANAGER_PROMPT
from ..providers import build_llm
from ..session import AgentRunner, ChatSession
from ..tools import build_tools, get_demo_dir


def console_approver(input_fn=input, output_fn=print):
    """request_approval bound to the demo's console, announcing each decision."""
    ask = partial(request_approval, input_fn=input_fn, output_fn=output_fn)

    def approve(function_name: str, arguments: dict) -> bool:
        approved = ask(function_name, arguments)
        if approved:
            output_fn(f"✅ APPROVED: Executing {function_name}")
        else:
            output_fn(f"❌ REJECTED: Not executing {function_name}")
        return approved

    return approve


async def run(config: AppConfig, *, input_fn=input, output_fn=print) -> None:
    llm = build_llm(config.azure_openai())
    tools, approval_required = build_tools("create_file", "delete_file")

    graph = build_graph(
        llm,
        tools,
        approval_required=approval_required,
        approver=console_approver(input_fn, output_fn),
        system_prompt=FILE_MANAGER_PROMPT,
    )
    session = ChatSession(AgentRunner(graph))

    print_welcome_message(
        "Human-in-the-Loop Approval",
        "Dangerous operations wait for your explicit approval before they run.",
        output_fn=output_fn,
    )
    output_fn("📋 This demo has 2 functions:")
    output_fn("   ✅ create_file() - Runs immediately (no approval)")
    output_fn("   🔒 delete_file() - Requires your approval first")

    demo_dir = get_demo_dir()
    try:
        existed = demo_dir.exists()
        demo_dir.mkdir(parents=True, exist_ok=True)
        output_fn(f"✅ {'Using existing' if existed else 'Created'} demo directory: {demo_dir}")
    except OSError as exc:
        output_fn(f"⚠️  Warning: Could not create demo directory: {exc}")
        output_fn("   File operations may fail.")

    output_fn(f"📁 Files will be created in: {demo_dir.resolve()}")
    output_fn("\n💡 Try these commands:")
    output_fn("   • Create a file named test.txt with some content")
    output_fn("   • Delete test.txt")
    output_fn("   • Create file notes.txt saying 'Hello World'")
    output_fn("   • Delete notes.txt\n")

    await run_chat_loop(session.ask, input_fn=input_fn, output_fn=output_fn)
