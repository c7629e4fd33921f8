"""
agent_demos — Tool Calling + HITL + Memory + Middleware + MCP + Workflow Demos
===============================================================================

Package layout:

    errors.py         Typed errors (configuration, tools, security)
    config.py         appsettings.json + env → validated settings sections
    providers.py      AzureChatOpenAI + DSPy construction
    tools.py          Tool functions and the ToolSpec registry
    approval.py       Console approval gate and ApprovalQueue
    state.py          AgentState TypedDict
    nodes.py          LangGraph node factories (agent, human_review, tools)
    routing.py        Routing function for the agent's conditional edge
    graph.py          build_graph() — assembles and compiles the StateGraph
    middleware.py     Timing / Security / FunctionLogger stages + build_pipeline
    session.py        AgentRunner, AgentResponse, ChatSession
    chat.py           run_chat_loop() and console helpers
    profile_store.py  Long-term memory profile with JSON persistence
    models.py         Pydantic extraction records
    extraction.py     StructuredExtractor DSPy module
    workflow.py       Executors, WorkflowBuilder, events, FanInAggregator
    mcp_clients.py    MCP server definitions and tool loading
    prompts.py        Agent instructions
    demos/            One module per menu entry

Entry points for external callers:
"""
from .approval import ApprovalQueue, ToolInvocationRequest, request_approval
from .chat import run_chat_loop
from .config import AppConfig, load_config
from .errors import (
    AgentDemoError,
    ConfigurationError,
    SecurityBlockedError,
    ToolExecutionError,
    UnknownToolError,
)
from .graph import build_graph
from .middleware import FunctionLoggerMiddleware, SecurityMiddleware, TimingMiddleware, build_pipeline
from .profile_store import JsonFileProfileRepository, ProfileStore
from .session import AgentResponse, AgentRunner, ChatSession
from .tools import build_tools
from .workflow import Executor, FanInAggregator, Workflow, WorkflowBuilder, WorkflowEvent

__all__ = [
    "AgentDemoError",
    "AgentResponse",
    "AgentRunner",
    "AppConfig",
    "ApprovalQueue",
    "ChatSession",
    "ConfigurationError",
    "Executor",
    "FanInAggregator",
    "FunctionLoggerMiddleware",
    "JsonFileProfileRepository",
    "ProfileStore",
    "SecurityBlockedError",
    "SecurityMiddleware",
    "TimingMiddleware",
    "ToolExecutionError",
    "ToolInvocationRequest",
    "UnknownToolError",
    "Workflow",
    "WorkflowBuilder",
    "WorkflowEvent",
    "build_graph",
    "build_pipeline",
    "build_tools",
    "load_config",
    "request_approval",
    "run_chat_loop",
]
