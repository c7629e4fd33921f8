"""
Demo 7: Sequential Workflow
===========================
Two plain executors in a line, no model involved:

    UppercaseExecutor → ReverseTextExecutor

"Hello, World!" becomes "HELLO, WORLD!" and then "!DLROW ,OLLEH".
"""
from ..config import AppConfig
from ..workflow import EXECUTOR_COMPLETED, Executor, Workflow, WorkflowBuilder

DEFAULT_INPUT = "Hello, World!"


def build_workflow() -> Workflow:
    uppercase = Executor("UppercaseExecutor", str.upper)
    reverse = Executor("ReverseTextExecutor", lambda text: text[::-1])

    return (
        WorkflowBuilder(uppercase)
        .add_edge(uppercase, reverse)
        .with_output_from(reverse)
        .build()
    )


async def run(config: AppConfig | None = None, *, output_fn=print, text: str = DEFAULT_INPUT) -> None:
    async for event in build_workflow().stream(text):
        if event.kind == EXECUTOR_COMPLETED:
            output_fn(f"{event.executor_id}: {event.data}")
