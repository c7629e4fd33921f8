"""
Demos
=====
One module per menu entry. Each exposes `async def run(config)`.

DEMOS maps the menu key to (title, run) in menu order.
"""
from . import (
    agent_workflow,
    concurrent_workflow,
    human_in_the_loop,
    long_term_memory,
    mcp_interactive,
    middleware_pipeline,
    multiple_tools,
    sequential_workflow,
    structured_output,
)

DEMOS = {
    "1": ("Multiple Function Tools",      multiple_tools.run),
    "2": ("Human-in-the-Loop Approval",   human_in_the_loop.run),
    "3": ("Structured Output with JSON",  structured_output.run),
    "4": ("Long-Term Memory",             long_term_memory.run),
    "5": ("Middleware Pipeline",          middleware_pipeline.run),
    "6": ("MCP Interactive Demo",         mcp_interactive.run),
    "7": ("Sequential workflow",          sequential_workflow.run),
    "8": ("Concurrent workflow",          concurrent_workflow.run),
    "9": ("Agents in workflow",           agent_workflow.run),
}

__all__ = ["DEMOS"]
