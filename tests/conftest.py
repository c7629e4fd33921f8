"""
pytest configuration for the agent_demos test suite.

Sets PYTHONPATH so tests can import from the project root.
Provides a scripted stand-in for the chat model so no test makes a real LLM call.

asyncio_mode = "auto" (set in pyproject.toml) means all async test functions
are automatically collected as asyncio tests — no @pytest.mark.asyncio needed
on individual tests. This keeps the test code clean.
"""
import os
import sys

import pytest
from langchain_core.messages import AIMessage

# Ensure the project root is on sys.path so `import agent_demos` and `import mcp_server` work
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))


class ScriptedLLM:
    """
    Returns queued responses from ainvoke(), in order, and records every call.

    bind_tools() records the tools and returns the same object, so the graph
    talks to this instance whether or not tools are bound.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: list[list] = []
        self.bound_tools = None

    def bind_tools(self, tools):
        self.bound_tools = list(tools)
        return self

    async def ainvoke(self, messages, *args, **kwargs):
        self.calls.append(list(messages))
        if not self.responses:
            raise AssertionError("ScriptedLLM ran out of responses")
        return self.responses.pop(0)


class RoleLLM:
    """Answers according to the system prompt it is given, so concurrent agents can share it."""

    def __init__(self, answers):
        self.answers = answers
        self.prompts: list[str] = []

    async def ainvoke(self, messages, *args, **kwargs):
        system = messages[0].content
        self.prompts.append(system)
        for marker, answer in self.answers.items():
            if marker in system:
                return AIMessage(content=answer)
        raise AssertionError(f"unexpected prompt: {system}")


def scripted_inputs(*lines):
    """input() replacement: returns lines in order, then raises EOFError."""
    remaining = list(lines)
    prompts: list[str] = []

    def fake_input(prompt=""):
        prompts.append(prompt)
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    fake_input.prompts = prompts
    return fake_input


@pytest.fixture
def scripted_llm():
    return ScriptedLLM


@pytest.fixture
def demo_dir(tmp_path, monkeypatch):
    """Point the file tools at a fresh sandbox directory."""
    path = tmp_path / "demo_files"
    monkeypatch.setenv("DEMO_FILES_DIR", str(path))
    return path
