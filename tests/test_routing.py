"""
Tests for agent_demos/routing.py
================================
Routing functions are pure — they take state dicts and return strings.
No LLM, no graph, no async needed.

Covers:
  - pending_tool_calls: last message only
  - route_after_agent: no tool calls / safe tools / dangerous tools / mixed batch
"""
from langchain_core.messages import AIMessage, HumanMessage
from langgraph.graph import END

from agent_demos.routing import create_route_after_agent, pending_tool_calls

route_after_agent = create_route_after_agent(frozenset({"delete_file"}))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ai_with_tool_calls(names: list[str]) -> AIMessage:
    """Return an AIMessage that requests the named tools."""
    return AIMessage(
        content="",
        tool_calls=[{"name": n, "id": f"call_{i}", "args": {}} for i, n in enumerate(names)],
    )


# ---------------------------------------------------------------------------
# pending_tool_calls
# ---------------------------------------------------------------------------

class TestPendingToolCalls:
    def test_empty_state(self):
        assert pending_tool_calls({"messages": []}) == []

    def test_only_last_message_counts(self):
        state = {"messages": [_ai_with_tool_calls(["get_weather"]), HumanMessage(content="thanks")]}
        assert pending_tool_calls(state) == []

    def test_returns_calls_of_last_ai_message(self):
        state = {"messages": [_ai_with_tool_calls(["get_weather", "calculate"])]}
        assert [tc["name"] for tc in pending_tool_calls(state)] == ["get_weather", "calculate"]


# ---------------------------------------------------------------------------
# route_after_agent
# ---------------------------------------------------------------------------

class TestRouteAfterAgent:
    def test_final_answer_goes_to_end(self):
        state = {"messages": [AIMessage(content="Here is your answer.")]}
        assert route_after_agent(state) == END

    def test_no_messages_goes_to_end(self):
        assert route_after_agent({"messages": []}) == END

    def test_safe_tool_goes_to_tools(self):
        state = {"messages": [_ai_with_tool_calls(["create_file"])]}
        assert route_after_agent(state) == "tools"

    def test_dangerous_tool_goes_to_human_review(self):
        state = {"messages": [_ai_with_tool_calls(["delete_file"])]}
        assert route_after_agent(state) == "human_review"

    def test_mixed_batch_waits_for_review(self):
        state = {"messages": [_ai_with_tool_calls(["create_file", "delete_file"])]}
        assert route_after_agent(state) == "human_review"

    def test_no_dangerous_tools_configured(self):
        route = create_route_after_agent(frozenset())
        state = {"messages": [_ai_with_tool_calls(["delete_file"])]}
        assert route(state) == "tools"
