"""
Graph Construction
==================
Assembles the agent StateGraph from nodes, edges, and routing functions.

Architecture:

    START
      │
      ▼
    agent ──────────────────────────────────────► END (final answer)
      │ safe tools                                 ▲
      ▼                                            │
    tools ──────────────────────────────────────── ┘  (ReAct loop)
      ▲
      │ approvals recorded
    human_review ◄──── agent (any dangerous tool call)

No checkpointer: the chat session owns the conversation history and passes
the whole list in on every turn, so the graph itself is stateless between
invocations.
"""
from langgraph.graph import END, StateGraph

from .approval import Approver, request_approval
from .nodes import create_agent_node, create_human_review_node, create_tools_node
from .routing import create_route_after_agent
from .state import AgentState


def build_graph(
    llm,
    tools: list,
    *,
    approval_required: frozenset[str] = frozenset(),
    approver: Approver = request_approval,
    system_prompt: str | None = None,
):
    """
    Build and compile the agent graph.

    Args:
        llm:               A LangChain chat model (anything with bind_tools/ainvoke).
        tools:             LangChain tools: build_tools() output or MCP tools.
        approval_required: Tool names that must pass the approver before running.
        approver:          (function_name, arguments) -> bool. Defaults to the console gate.
        system_prompt:     Injected ahead of the history if it has no SystemMessage.

    Returns:
        A compiled graph ready for ainvoke({"messages": history}).
    """
    llm_with_tools = llm.bind_tools(tools) if tools else llm

    workflow = StateGraph(AgentState)

    workflow.add_node("agent",        create_agent_node(llm_with_tools, system_prompt))
    workflow.add_node("tools",        create_tools_node(tools, approval_required))
    workflow.add_node("human_review", create_human_review_node(approval_required, approver))

    workflow.set_entry_point("agent")

    workflow.add_conditional_edges(
        "agent",
        create_route_after_agent(approval_required),
        {"tools": "tools", "human_review": "human_review", END: END},
    )
    workflow.add_edge("human_review", "tools")
    workflow.add_edge("tools", "agent")   # ReAct loop

    return workflow.compile()
