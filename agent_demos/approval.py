"""
Approval Gate
=============
Synchronous console approval for dangerous tool calls.

request_approval() is the single place a human decides whether a pending
tool invocation runs. It blocks until the operator answers yes/y or no/n,
re-prompting on anything else.

ApprovalQueue holds every dangerous call the model requested in one step and
drains them one at a time, so each call gets its own decision.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

Approver = Callable[[str, dict], bool]

_YES = frozenset({"yes", "y"})
_NO = frozenset({"no", "n"})


@dataclass(frozen=True)
class ToolInvocationRequest:
    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)
    call_id: str = ""

    def __post_init__(self):
        # Read-only snapshot: later mutation of the caller's dict can't leak in.
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))

    @classmethod
    def from_tool_call(cls, tool_call: dict) -> "ToolInvocationRequest":
        """Build from a LangChain tool_call dict ({name, args, id})."""
        return cls(
            name=tool_call["name"],
            arguments=tool_call.get("args") or {},
            call_id=tool_call.get("id") or "",
        )


def request_approval(
    function_name: str,
    arguments: Mapping[str, Any],
    *,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> bool:
    """
    Show the pending call and block until the operator approves or rejects it.

    Returns True for yes/y, False for no/n (case-insensitive). EOFError from
    input_fn propagates; there is no safe default for a closed console.
    """
    output_fn("")
    output_fn("=" * 70)
    output_fn("🚨 APPROVAL REQUIRED")
    output_fn("=" * 70)
    output_fn(f"📝 Function: {function_name}")
    output_fn("📊 Arguments:")
    for key, value in arguments.items():
        output_fn(f"   - {key}: {value}")
    output_fn("-" * 70)

    while True:
        response = input_fn("⚠️ Do you want to APPROVE this action? (yes/no): ").strip().lower()
        if response in _YES:
            return True
        if response in _NO:
            return False
        output_fn("   Please enter 'yes' or 'no'")


class ApprovalQueue:
    """
    FIFO of pending approvals for one agent step.

    Usage:
        queue = ApprovalQueue(approver)
        for tc in dangerous_calls:
            queue.enqueue(ToolInvocationRequest.from_tool_call(tc))
        decisions = queue.drain()      # {call_id: bool}
    """

    def __init__(self, approver: Approver = request_approval):
        self._approver = approver
        self._pending: deque[ToolInvocationRequest] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def enqueue(self, request: ToolInvocationRequest) -> None:
        """
        Add a request. Decisions are keyed by call_id, so a request without
        one, or reusing a pending one, raises ValueError.
        """
        if not request.call_id:
            raise ValueError(f"Tool call '{request.name}' has no call id")
        if any(p.call_id == request.call_id for p in self._pending):
            raise ValueError(f"Duplicate tool call id '{request.call_id}'")
        self._pending.append(request)

    def drain(self) -> dict[str, bool]:
        """Ask the approver about each pending request, oldest first."""
        decisions: dict[str, bool] = {}
        while self._pending:
            request = self._pending.popleft()
            approved = bool(self._approver(request.name, dict(request.arguments)))
            logger.info(
                "[approval] %s %s args=%s",
                "APPROVED" if approved else "REJECTED", request.name, dict(request.arguments),
            )
            decisions[request.call_id] = approved
        return decisions
