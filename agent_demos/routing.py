"""
Routing Functions
=================
Pure functions that read AgentState and return a destination node name.
LangGraph calls these at conditional edges to decide where execution goes next.

Graph routing map:
  agent → route_after_agent → "tools" | "human_review" | END
  human_review → "tools"      (fixed edge)
  tools        → "agent"      (fixed edge, ReAct loop)

The approval-required set is bound at graph build time, so the routing
function is created by a factory rather than reading a module constant.
"""
from typing import Callable, Literal

from langgraph.graph import END

from .state import AgentState

AgentRoute = Literal["tools", "human_review", "__end__"]


def pending_tool_calls(state: AgentState) -> list[dict]:
    """Tool calls on the last message, or [] if it didn't request any."""
    messages = state.get("messages") or []
    if not messages:
        return []
    return list(getattr(messages[-1], "tool_calls", None) or [])


def create_route_after_agent(approval_required: frozenset[str]) -> Callable[[AgentState], AgentRoute]:
    """
    After the agent thinks, decide what happens next:
      - No tool calls       → END (LLM produced a final answer)
      - Only safe tools     → "tools"
      - Any dangerous tool  → "human_review" (the whole batch waits for approvals)
    """
    def route_after_agent(state: AgentState) -> AgentRoute:
        calls = pending_tool_calls(state)
        if not calls:
            return END
        if any(tc["name"] in approval_required for tc in calls):
            return "human_review"
        return "tools"

    return route_after_agent
