"""
Workflows
=========
Named executors joined by edges, compiled to a LangGraph StateGraph.

    builder = WorkflowBuilder(start)
    builder.add_edge(start, reverse).with_output_from(reverse)
    workflow = builder.build()

    async for event in workflow.stream("Hello, World!"):
        ...

Message passing:
  The state holds an inbox keyed by executor id. When an executor returns a
  value, that value is posted to the inbox of every successor. A plain
  executor receives the latest value in its inbox; a fan-in executor
  receives every contribution as a list.

  Fan-in uses LangGraph's multi-source edge: add_edge([a, b], join) runs
  `join` once, in the superstep after both a and b finished. Fan-out
  targets run concurrently in the same superstep.

Events:
  Nodes publish WorkflowEvents onto a per-run asyncio.Queue handed to them
  through the run config. Workflow.stream() relays them in the order they
  happen:

    executor_invoked    before the handler runs        data = input
    executor_completed  after it returns               data = result
    executor_failed     the handler raised             data = exception
    workflow_output     result of a with_output_from executor (not None)
    workflow_error      last event when the run aborted

  A failed executor aborts the run. stream() yields workflow_error instead
  of raising, so callers see every event up to the failure.
"""
import asyncio
import inspect
import logging
import operator
import threading
from dataclasses import dataclass, field
from typing import Annotated, Any, AsyncIterator, Callable, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, StateGraph
from typing_extensions import TypedDict

from .graph import build_graph
from .session import AgentRunner

logger = logging.getLogger(__name__)

EXECUTOR_INVOKED = "executor_invoked"
EXECUTOR_COMPLETED = "executor_completed"
EXECUTOR_FAILED = "executor_failed"
WORKFLOW_OUTPUT = "workflow_output"
WORKFLOW_ERROR = "workflow_error"

_EMIT_KEY = "workflow_events"


# ── Types ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WorkflowEvent:
    kind: str
    executor_id: str | None = None
    data: Any = None


@dataclass(frozen=True)
class Executor:
    """
    A named unit of work. handler(input) may be sync or async.

    fan_in=True executors receive a list of every contribution from their
    sources instead of a single value.
    """
    id: str
    handler: Callable[[Any], Any] = field(compare=False)
    fan_in: bool = False


def merge_inbox(left: dict[str, list] | None, right: dict[str, list] | None) -> dict[str, list]:
    merged = {key: list(values) for key, values in (left or {}).items()}
    for key, values in (right or {}).items():
        merged.setdefault(key, []).extend(values)
    return merged


class WorkflowState(TypedDict, total=False):
    inbox: Annotated[dict[str, list], merge_inbox]
    outputs: Annotated[list, operator.add]


# ── Fan-in helper ───────────────────────────────────────────────────────────

class FanInAggregator:
    """
    Collect contributions until `expected` have arrived.

    add() returns the combined list exactly once: on the call that brings
    the count to `expected`. Every other call returns None. Safe to call
    from concurrent branches.
    """

    def __init__(self, expected: int = 2):
        if expected < 1:
            raise ValueError("expected must be at least 1")
        self.expected = expected
        self._items: list = []
        self._lock = threading.Lock()
        self._released = False

    def add(self, contribution) -> list | None:
        with self._lock:
            if self._released:
                return None
            self._items.append(contribution)
            if len(self._items) < self.expected:
                return None
            self._released = True
            return list(self._items)


# ── Workflow ────────────────────────────────────────────────────────────────

class Workflow:
    """A compiled workflow. Build one with WorkflowBuilder."""

    def __init__(self, graph, start_id: str, output_ids: frozenset[str]):
        self._graph = graph
        self.start_id = start_id
        self.output_ids = output_ids

    async def stream(self, message) -> AsyncIterator[WorkflowEvent]:
        events: asyncio.Queue = asyncio.Queue()
        finished = object()
        initial = {"inbox": {self.start_id: [message]}, "outputs": []}
        config = {"configurable": {_EMIT_KEY: events.put_nowait}}

        async def drive() -> None:
            try:
                await self._graph.ainvoke(initial, config=config)
            except Exception as exc:
                logger.warning("[workflow] Run aborted: %s", exc)
                events.put_nowait(WorkflowEvent(WORKFLOW_ERROR, None, exc))
            finally:
                events.put_nowait(finished)

        task = asyncio.create_task(drive())
        try:
            while True:
                event = await events.get()
                if event is finished:
                    break
                yield event
        finally:
            if not task.done():
                task.cancel()

    async def run(self, message) -> list[WorkflowEvent]:
        return [event async for event in self.stream(message)]


def _make_node(executor: Executor, successors: Sequence[str], is_output: bool):
    async def node(state: WorkflowState, config: RunnableConfig) -> dict:
        emit = config["configurable"][_EMIT_KEY]
        received = (state.get("inbox") or {}).get(executor.id, [])
        if not received:
            # Upstream produced nothing for this executor.
            return {"outputs": []}

        value = list(received) if executor.fan_in else received[-1]
        emit(WorkflowEvent(EXECUTOR_INVOKED, executor.id, value))
        logger.info("[workflow] %s invoked", executor.id)

        try:
            result = executor.handler(value)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.warning("[workflow] %s failed: %s", executor.id, exc)
            emit(WorkflowEvent(EXECUTOR_FAILED, executor.id, exc))
            raise

        emit(WorkflowEvent(EXECUTOR_COMPLETED, executor.id, result))

        if result is None:
            return {"outputs": []}

        outputs = []
        if is_output:
            emit(WorkflowEvent(WORKFLOW_OUTPUT, executor.id, result))
            outputs.append(result)
        return {"inbox": {target: [result] for target in successors}, "outputs": outputs}

    return node


class WorkflowBuilder:
    """
    Declare executors and edges, then build() a Workflow.

    Every method that adds an edge returns the builder so calls can chain.
    """

    def __init__(self, start: Executor):
        self._start = start
        self._executors: dict[str, Executor] = {}
        self._edges: list[tuple[str, str]] = []
        self._joins: list[tuple[tuple[str, ...], str]] = []
        self._output_ids: set[str] = set()
        self._register(start)

    def _register(self, executor: Executor) -> str:
        existing = self._executors.get(executor.id)
        if existing is not None and existing is not executor:
            raise ValueError(f"Duplicate executor id: {executor.id}")
        self._executors[executor.id] = executor
        return executor.id

    def add_edge(self, source: Executor, target: Executor) -> "WorkflowBuilder":
        self._edges.append((self._register(source), self._register(target)))
        return self

    def add_fan_out_edge(self, source: Executor, targets: Sequence[Executor]) -> "WorkflowBuilder":
        for target in targets:
            self.add_edge(source, target)
        return self

    def add_fan_in_edge(self, sources: Sequence[Executor], target: Executor) -> "WorkflowBuilder":
        if not target.fan_in:
            raise ValueError(f"Executor {target.id} must be created with fan_in=True")
        if len(sources) < 2:
            raise ValueError("A fan-in edge needs at least two sources")
        source_ids = tuple(self._register(s) for s in sources)
        self._joins.append((source_ids, self._register(target)))
        return self

    def with_output_from(self, *executors: Executor) -> "WorkflowBuilder":
        for executor in executors:
            self._output_ids.add(self._register(executor))
        return self

    def build(self) -> Workflow:
        successors: dict[str, list[str]] = {eid: [] for eid in self._executors}
        for source, target in self._edges:
            successors[source].append(target)
        for sources, target in self._joins:
            for source in sources:
                successors[source].append(target)

        graph = StateGraph(WorkflowState)
        for eid, executor in self._executors.items():
            graph.add_node(eid, _make_node(executor, successors[eid], eid in self._output_ids))

        graph.set_entry_point(self._start.id)
        for source, target in self._edges:
            graph.add_edge(source, target)
        for sources, target in self._joins:
            graph.add_edge(list(sources), target)

        for eid, targets in successors.items():
            if not targets:
                graph.add_edge(eid, END)

        logger.info("[workflow] Built %d executor(s) from %s", len(self._executors), self._start.id)
        return Workflow(graph.compile(), self._start.id, frozenset(self._output_ids))


# ── Agents as executors ─────────────────────────────────────────────────────

def _as_messages(message) -> list[BaseMessage]:
    """Turn executor input into a fresh conversation for the next agent."""
    if isinstance(message, (list, tuple)):
        return [m for item in message for m in _as_messages(item)]
    if isinstance(message, HumanMessage):
        return [message]
    if isinstance(message, BaseMessage):
        # Another agent's reply becomes this agent's user input.
        return [HumanMessage(content=message.content)]
    return [HumanMessage(content=str(message))]


def agent_executor(name: str, llm, instructions: str, tools: Sequence = ()) -> Executor:
    """
    Wrap a one-shot agent as an executor.

    The executor runs a fresh agent graph on its input and returns the
    reply as an AIMessage whose `name` is the agent's name.
    """

    runner = AgentRunner(build_graph(llm, list(tools), system_prompt=instructions))

    async def handle(message) -> AIMessage:
        response = await runner.run(_as_messages(message))
        return AIMessage(content=response.text, name=name)

    return Executor(name, handle)
