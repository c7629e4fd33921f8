"""
Agent Session
=============
High-level interface for one multi-turn conversation.

Two layers:
  AgentRunner  — runs one turn: middleware pipeline → graph.ainvoke(history)
  ChatSession  — owns the conversation history and feeds it to the runner

The graph has no checkpointer. The session passes the whole history on every
turn, and the runner slices the graph's output to find what was added.

A failed turn leaves the history exactly as it was before the user spoke, so
a blocked or errored message never poisons the next model call.

The session is async because MCP tool calls are async — the graph must be
invoked with ainvoke() rather than invoke().
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from .approval import ToolInvocationRequest
from .middleware import Middleware, build_pipeline

logger = logging.getLogger(__name__)


# ── Responses ───────────────────────────────────────────────────────────────

def message_text(message: BaseMessage) -> str:
    """Flatten message content (plain string or list of content blocks) to text."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


@dataclass
class AgentResponse:
    text: str
    messages: list[BaseMessage] = field(default_factory=list)
    tool_calls: list[ToolInvocationRequest] = field(default_factory=list)

    @classmethod
    def from_messages(cls, messages: Sequence[BaseMessage]) -> "AgentResponse":
        """
        Build a response from the messages one turn added.

        text is the last AIMessage that has content and no pending tool calls.
        tool_calls lists every call the model requested, in order.
        """
        messages = list(messages)
        tool_calls = [
            ToolInvocationRequest.from_tool_call(tc)
            for msg in messages if isinstance(msg, AIMessage)
            for tc in (msg.tool_calls or [])
        ]
        text = ""
        for msg in reversed(messages):
            if isinstance(msg, AIMessage) and not msg.tool_calls and message_text(msg):
                text = message_text(msg)
                break
        return cls(text=text, messages=messages, tool_calls=tool_calls)


# ── AgentRunner ─────────────────────────────────────────────────────────────

class AgentRunner:
    """
    Run one agent turn through the middleware pipeline.

    Usage:
        runner   = AgentRunner(build_graph(llm, tools), [TimingMiddleware()])
        response = await runner.run(history)
    """

    def __init__(self, graph, middleware: Sequence[Middleware] = ()):
        self._graph = graph
        self._pipeline = build_pipeline(list(middleware), self._invoke_graph)

    async def _invoke_graph(self, history: list[BaseMessage]) -> AgentResponse:
        result = await self._graph.ainvoke({"messages": history})
        added = list(result["messages"])[len(history):]
        logger.debug("[runner] Turn produced %d message(s)", len(added))
        return AgentResponse.from_messages(added)

    async def run(self, history: Sequence[BaseMessage]) -> AgentResponse:
        return await self._pipeline(list(history))


# ── ChatSession ─────────────────────────────────────────────────────────────

SystemPrompt = str | Callable[[], str] | None


class ChatSession:
    """
    One conversation: history plus the runner that answers it.

    Args:
        runner:        AgentRunner (or anything with `async run(history)`).
        system_prompt: Optional first message. A callable is re-evaluated on
                       every reset(), so the prompt can carry fresh context.

    Usage:
        session = ChatSession(runner, system_prompt="You are helpful.")
        reply   = await session.ask("Hi")
        session.reset()                         # new conversation
    """

    def __init__(self, runner: AgentRunner, system_prompt: SystemPrompt = None):
        self._runner = runner
        self._system_prompt = system_prompt
        self._history: list[BaseMessage] = []
        self.reset()

    def reset(self) -> None:
        """Drop the conversation and start over from the system prompt."""
        prompt = self._system_prompt() if callable(self._system_prompt) else self._system_prompt
        self._history = [SystemMessage(content=prompt)] if prompt else []

    def get_history(self) -> list[BaseMessage]:
        return list(self._history)

    async def send(self, text: str) -> AgentResponse:
        """
        Run one turn. On success the user message and the reply are appended.
        On failure the user message is removed again and the error propagates.
        """
        self._history.append(HumanMessage(content=text))
        try:
            response = await self._runner.run(self._history)
        except Exception:
            self._history.pop()
            raise
        self._history.append(AIMessage(content=response.text))
        return response

    async def ask(self, text: str) -> str:
        """send() for callers that only need the reply text (the chat loop)."""
        return (await self.send(text)).text
