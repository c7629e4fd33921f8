"""
Graph Nodes
===========
Each factory here returns one node of the agent StateGraph.

Node responsibilities:
  create_agent_node        — the ReAct brain; calls tools or produces a final answer
  create_human_review_node — asks the operator about every dangerous tool call
  create_tools_node        — executes approved/safe tool calls, reports the rest

Design principle: nodes are pure state transformers.
They read AgentState, return a dict of updated fields, and never call
graph.invoke() themselves. Routing is handled by routing.py.
"""
import logging

from langchain_core.messages import SystemMessage, ToolMessage
from langchain_core.tools import BaseTool

from .approval import ApprovalQueue, Approver, ToolInvocationRequest, request_approval
from .errors import ToolExecutionError, UnknownToolError
from .routing import pending_tool_calls
from .state import AgentState

logger = logging.getLogger(__name__)


def create_agent_node(llm_with_tools, system_prompt: str | None = None):
    """
    Factory that returns the agent node bound to a specific LLM + tools.

    Injects the system prompt at position 0 if one is configured and the
    history doesn't already start with a SystemMessage.
    """
    async def agent_node(state: AgentState) -> dict:
        messages = list(state["messages"])

        if system_prompt and (not messages or not isinstance(messages[0], SystemMessage)):
            messages = [SystemMessage(content=system_prompt)] + messages

        response = await llm_with_tools.ainvoke(messages)
        return {"messages": [response]}

    return agent_node


def create_human_review_node(approval_required: frozenset[str], approver: Approver = request_approval):
    """
    Queue every dangerous call on the last AIMessage and drain the queue.

    Runs synchronously: the approver blocks on console input, one request
    at a time, in the order the model issued them. A dangerous call without
    an id is never offered for approval, so the tools node rejects it.
    """
    def human_review_node(state: AgentState) -> dict:
        queue = ApprovalQueue(approver)
        for tc in pending_tool_calls(state):
            if tc["name"] not in approval_required:
                continue
            if not tc.get("id"):
                logger.warning("[human_review] %s has no call id, rejecting", tc["name"])
                continue
            queue.enqueue(ToolInvocationRequest.from_tool_call(tc))

        logger.info("[human_review] %d call(s) awaiting approval", len(queue))
        return {"approvals": queue.drain()}

    return human_review_node


def rejection_message(tool_name: str) -> str:
    return f"⛔ Function '{tool_name}' was rejected by the user."


def create_tools_node(tools: list[BaseTool], approval_required: frozenset[str] = frozenset()):
    """
    Execute the tool calls on the last AIMessage.

    - Unknown tool name        → UnknownToolError (fails the whole turn,
                                 checked before any call executes)
    - Dangerous and not approved → rejection ToolMessage, tool never runs
    - Tool raised              → ToolExecutionError text as the result

    Every tool_call gets exactly one ToolMessage, which the chat API
    requires before the next model invocation.
    """
    by_name = {tool.name: tool for tool in tools}

    async def tools_node(state: AgentState) -> dict:
        calls = pending_tool_calls(state)
        approvals = state.get("approvals") or {}

        for tc in calls:
            if tc["name"] not in by_name:
                raise UnknownToolError(tc["name"])

        results = []
        for tc in calls:
            name = tc["name"]
            call_id = tc.get("id") or ""

            if name in approval_required and not (call_id and approvals.get(call_id, False)):
                logger.info("[tools] Skipping rejected call %s", name)
                results.append(ToolMessage(content=rejection_message(name), tool_call_id=call_id, name=name))
                continue

            try:
                output = await by_name[name].ainvoke(tc.get("args") or {})
            except Exception as exc:
                logger.warning("[tools] %s raised: %s", name, exc)
                output = str(ToolExecutionError(name, str(exc)))

            results.append(ToolMessage(content=str(output), tool_call_id=call_id, name=name))

        return {"messages": results}

    return tools_node
