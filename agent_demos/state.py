"""
Agent State
===========
State carried through one agent turn.

  messages   conversation so far; add_messages appends each node's output
  approvals  human_review decisions for the current batch of tool calls
"""
from typing import Annotated, Sequence

from langchain_core.messages import BaseMessage
from langgraph.graph.message import add_messages
from typing_extensions import TypedDict


def merge_approvals(left: dict[str, bool] | None, right: dict[str, bool] | None) -> dict[str, bool]:
    return {**(left or {}), **(right or {})}


class AgentState(TypedDict, total=False):
    messages: Annotated[Sequence[BaseMessage], add_messages]
    # Decisions from human_review, keyed by tool_call id.
    # The tools node skips any dangerous call that isn't mapped to True.
    approvals: Annotated[dict[str, bool], merge_approvals]
