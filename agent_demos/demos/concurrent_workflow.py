"""
Demo 8: Concurrent Workflow
===========================
Fan-out to two expert agents, fan-in to an aggregator:

                     ┌─► Physicist ─┐
    ConcurrentStart ─┤              ├─► ConcurrentAggregation → output
                     └─► Chemist  ──┘

Both agents answer in the same superstep. The aggregator runs once, after
both contributions arrived, and formats them as "<agent>: <answer>" lines.
"""
from langchain_core.messages import HumanMessage

from ..config import AppConfig
from ..prompts import CHEMIST_PROMPT, PHYSICIST_PROMPT
from ..providers import build_llm
from ..session import message_text
from ..workflow import WORKFLOW_ERROR, WORKFLOW_OUTPUT, Executor, FanInAggregator, Workflow, WorkflowBuilder, agent_executor

DEFAULT_QUESTION = "What is temperature?"


def format_contributions(messages) -> str:
    return "\n".join(f"{getattr(m, 'name', None) or 'agent'}: {message_text(m)}" for m in messages)


def build_workflow(llm) -> Workflow:
    start = Executor("ConcurrentStartExecutor", lambda question: HumanMessage(content=question))
    physicist = agent_executor("Physicist", llm, PHYSICIST_PROMPT)
    chemist = agent_executor("Chemist", llm, CHEMIST_PROMPT)

    def aggregate(contributions):
        aggregator = FanInAggregator(expected=2)
        combined = None
        for message in contributions:
            combined = aggregator.add(message)
        if combined is None:
            return None
        return format_contributions(combined)

    join = Executor("ConcurrentAggregationExecutor", aggregate, fan_in=True)

    return (
        WorkflowBuilder(start)
        .add_fan_out_edge(start, [physicist, chemist])
        .add_fan_in_edge([physicist, chemist], join)
        .with_output_from(join)
        .build()
    )


async def run(config: AppConfig, *, output_fn=print, question: str = DEFAULT_QUESTION) -> None:
    workflow = build_workflow(build_llm(config.azure_openai()))

    async for event in workflow.stream(question):
        if event.kind == WORKFLOW_OUTPUT:
            output_fn(f"Workflow completed with results:\n{event.data}")
        elif event.kind == WORKFLOW_ERROR:
            output_fn(f"\n❌ WORKFLOW ERROR: {event.data}")
