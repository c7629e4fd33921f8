"""
Demo 9: Agents in a Workflow
============================
Three agents in sequence, each one's answer becoming the next one's input:

    SoftwareArchitect → SoftwareDeveloper → CodeReviewer

The developer gets GitHub and filesystem MCP tools, so it can write the
solution into the workspace folder and push it. Without a GitHub token only
the filesystem tools are attached.

Events are printed as they stream: a header when an agent starts, its
answer when it completes, and any failure.
"""
import logging
from pathlib import Path

from ..chat import print_error, print_welcome_message
from ..config import AppConfig
from ..mcp_clients import filesystem_server, github_server, load_mcp_tools
from ..prompts import ARCHITECT_PROMPT, DEVELOPER_PROMPT_TEMPLATE, REVIEWER_PROMPT, TODO_API_REQUIREMENT
from ..providers import build_llm
from ..session import message_text
from ..tools import get_demo_dir
from ..workflow import (
    EXECUTOR_COMPLETED,
    EXECUTOR_FAILED,
    EXECUTOR_INVOKED,
    WORKFLOW_ERROR,
    WORKFLOW_OUTPUT,
    Workflow,
    WorkflowBuilder,
    WorkflowEvent,
    agent_executor,
)

logger = logging.getLogger(__name__)

ICONS = {"Architect": "📐", "Developer": "💻", "Reviewer": "🔍"}


def friendly_name(executor_id: str) -> str:
    for short in ICONS:
        if short in executor_id:
            return short
    return executor_id


def build_workflow(llm, developer_tools, workspace: Path) -> Workflow:
    architect = agent_executor("SoftwareArchitect", llm, ARCHITECT_PROMPT)
    developer = agent_executor(
        "SoftwareDeveloper", llm,
        DEVELOPER_PROMPT_TEMPLATE.format(workspace=workspace.resolve()),
        tools=developer_tools,
    )
    reviewer = agent_executor("CodeReviewer", llm, REVIEWER_PROMPT)

    return (
        WorkflowBuilder(architect)
        .add_edge(architect, developer)
        .add_edge(developer, reviewer)
        .with_output_from(reviewer)
        .build()
    )


class EventPrinter:
    """Prints streamed workflow events, one section per agent."""

    def __init__(self, output_fn=print):
        self._out = output_fn
        self._last: str | None = None

    def __call__(self, event: WorkflowEvent) -> None:
        if event.kind == EXECUTOR_INVOKED:
            name = friendly_name(event.executor_id)
            if name != self._last:
                if self._last is not None:
                    self._out("\n")
                self._out(f"{ICONS.get(name, '🤖')} {name.upper()}")
                self._out("-" * 70)
                self._last = name
        elif event.kind == EXECUTOR_COMPLETED and event.data is not None:
            self._out(message_text(event.data) if hasattr(event.data, "content") else str(event.data))
        elif event.kind == EXECUTOR_FAILED:
            self._out(f"\n❌ EXECUTOR FAILED: {event.executor_id}")
            self._out(f"   Event details: {event.data}")
        elif event.kind == WORKFLOW_ERROR:
            self._out("\n❌ WORKFLOW ERROR")
            self._out(f"   Event details: {event.data}")
        elif event.kind == WORKFLOW_OUTPUT:
            self._out("\n✅ Final output received from CodeReviewer")


async def run(
    config: AppConfig,
    *,
    output_fn=print,
    requirement: str = TODO_API_REQUIREMENT,
) -> None:
    print_welcome_message(
        "Agent in Workflow",
        "This demo shows how to use agents in a sequential workflow.",
        output_fn=output_fn,
    )
    output_fn("📋 This demo has 3 agents:")
    output_fn("   Architect agent")
    output_fn("   Coder agent")
    output_fn("   Code review agent")

    llm = build_llm(config.azure_openai())
    workspace = get_demo_dir() / "workflow"

    try:
        workspace.mkdir(parents=True, exist_ok=True)
        servers = {"filesystem": filesystem_server(workspace)}
        token = config.github_mcp().github_personal_access_token
        if token.strip():
            servers["github"] = github_server(token)
        else:
            output_fn("ℹ️  No GitHub token configured; the developer gets filesystem tools only.")
        developer_tools = await load_mcp_tools(servers)
        workflow = build_workflow(llm, developer_tools, workspace)
    except Exception as exc:
        logger.warning("[workflow] Agent setup failed: %s", exc, exc_info=True)
        print_error(f"Failed to create agents {exc}", output_fn)
        return

    output_fn("\n=== Software Development Workflow ===")
    output_fn(f"User Requirement:\n{requirement}")
    output_fn("=" * 70)
    output_fn("")

    printer = EventPrinter(output_fn)
    async for event in workflow.stream(requirement):
        printer(event)

    output_fn("\n")
    output_fn("=" * 70)
    output_fn("=== Workflow Completed ===")
