"""
Middleware
==========
Ordered stages wrapped around one agent turn.

Each stage is an object with:

    async def __call__(self, history, call_next) -> AgentResponse

A stage may inspect the history, call `await call_next(history)` to run the
rest of the chain, inspect the response, or raise to short-circuit. When a
stage raises before delegating, no inner stage and no model call runs.

build_pipeline([a, b, c], handler) composes:

    a → b → c → handler

Stage 0 is outermost: it sees the request first and the response last.
"""
import logging
import time
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

from langchain_core.messages import BaseMessage, HumanMessage

from .errors import SecurityBlockedError

if TYPE_CHECKING:
    from .session import AgentResponse

logger = logging.getLogger(__name__)

Handler = Callable[[list[BaseMessage]], Awaitable["AgentResponse"]]

DEFAULT_BLOCKED_KEYWORDS = ("password", "secret", "hack", "exploit", "bypass")


class Middleware:
    """Pass-through stage. Subclasses override __call__."""

    async def __call__(self, history: list[BaseMessage], call_next: Handler) -> "AgentResponse":
        return await call_next(history)


class TimingMiddleware(Middleware):
    """
    Measure how long the rest of the chain takes.

    The duration is logged and, if given, passed to `report(seconds)`.
    Reported even when the inner call raises.
    """

    def __init__(self, report: Callable[[float], None] | None = None):
        self._report = report

    async def __call__(self, history, call_next):
        started = time.perf_counter()
        try:
            return await call_next(history)
        finally:
            elapsed = time.perf_counter() - started
            logger.info("[timing] Turn took %.3fs", elapsed)
            if self._report is not None:
                self._report(elapsed)


class SecurityMiddleware(Middleware):
    """
    Refuse turns whose latest user message mentions a blocked keyword.

    Only the most recent HumanMessage is checked; earlier turns already
    passed. Matching is a case-insensitive substring test, first keyword wins.
    """

    def __init__(self, blocked_keywords: Sequence[str] = DEFAULT_BLOCKED_KEYWORDS):
        self.blocked_keywords = tuple(k.lower() for k in blocked_keywords)

    def find_blocked_keyword(self, history: list[BaseMessage]) -> str | None:
        for message in reversed(history):
            if isinstance(message, HumanMessage):
                text = message.content if isinstance(message.content, str) else str(message.content)
                text = text.lower()
                for keyword in self.blocked_keywords:
                    if keyword in text:
                        return keyword
                return None
        return None

    async def __call__(self, history, call_next):
        keyword = self.find_blocked_keyword(history)
        if keyword is not None:
            logger.warning("[security] Blocked request containing '%s'", keyword)
            raise SecurityBlockedError(keyword)
        return await call_next(history)


class FunctionLoggerMiddleware(Middleware):
    """Report every tool call the agent made during the turn."""

    def __init__(self, report: Callable[[str, dict], None] | None = None):
        self._report = report

    async def __call__(self, history, call_next):
        response = await call_next(history)
        for call in response.tool_calls:
            logger.info("[functions] %s(%s)", call.name, dict(call.arguments))
            if self._report is not None:
                self._report(call.name, dict(call.arguments))
        return response


def build_pipeline(stages: Sequence[Middleware], handler: Handler) -> Handler:
    """Fold the stages around handler, stage 0 outermost."""
    pipeline = handler
    for stage in reversed(stages):
        pipeline = _bind(stage, pipeline)
    return pipeline


def _bind(stage: Middleware, call_next: Handler) -> Handler:
    async def run(history: list[BaseMessage]) -> "AgentResponse":
        return await stage(history, call_next)
    return run
