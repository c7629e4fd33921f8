"""
Tests for the interactive demos and the menu in demo.py
========================================================
Each demo is run end to end with scripted console input. build_llm is
patched to return a scripted model and MCP servers are never started.

Covers:
  - menu: invalid choice, quit, ConfigurationError message, demo errors
  - demo 1: tool round trip through the console
  - demo 2: approve / reject a delete from the console
  - demo 4: profile learned, persisted and injected into a new conversation
  - demo 5: security block and function logging
  - demo 6: MCP connection failure prints troubleshooting
  - demo 7: sequential output lines
  - demo 8: aggregated answers from both experts
  - demo 9: three agents in order, MCP setup failure
"""
import json
from unittest.mock import AsyncMock, patch

import pytest
from langchain_core.messages import AIMessage, SystemMessage

import demo
from agent_demos.config import AppConfig
from agent_demos.demos import (
    agent_workflow,
    concurrent_workflow,
    human_in_the_loop,
    long_term_memory,
    mcp_interactive,
    middleware_pipeline,
    multiple_tools,
    sequential_workflow,
)
from agent_demos.errors import ConfigurationError
from agent_demos.workflow import WORKFLOW_OUTPUT
from conftest import RoleLLM, ScriptedLLM, scripted_inputs


@pytest.fixture
def config():
    return AppConfig({
        "AzureOpenAI": {"Endpoint": "https://example", "ModelName": "gpt-4o-mini", "ApiKey": "key"},
    })


def _call(name: str, args: dict, call_id: str = "call_1") -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------

class TestMenu:
    async def test_invalid_choice_then_quit(self, config):
        output = []
        await demo.main(config, input_fn=scripted_inputs("42", "q"), output_fn=output.append)

        assert "\n❌ Invalid choice. Please try again." in output
        assert output[-1] == "\n👋 Goodbye!"

    async def test_menu_lists_every_demo(self, config):
        output = []
        await demo.main(config, input_fn=scripted_inputs("quit"), output_fn=output.append)

        assert "  1. Multiple Function Tools" in output
        assert "  9. Agents in workflow" in output

    async def test_configuration_error_is_explained(self, config):
        failing = AsyncMock(side_effect=ConfigurationError("AzureOpenAI", ["ApiKey"]))
        output = []

        with patch.dict(demo.DEMOS, {"1": ("Multiple Function Tools", failing)}):
            await demo.main(config, input_fn=scripted_inputs("1", "", "q"), output_fn=output.append)

        assert any(line.startswith("\n❌ Error running Multiple Function Tools: Missing AzureOpenAI") for line in output)
        assert "Please check your Azure OpenAI configuration in appsettings.json" in output
        assert output[-1] == "\n👋 Goodbye!"

    async def test_demo_failure_returns_to_menu(self, config):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        fake_input = scripted_inputs("3", "", "q")
        output = []

        with patch.dict(demo.DEMOS, {"3": ("Structured Output with JSON", failing)}):
            await demo.main(config, input_fn=fake_input, output_fn=output.append)

        assert "\n❌ Error running Structured Output with JSON: boom" in output
        assert "\nPress Enter to continue..." in fake_input.prompts

    async def test_bad_settings_file(self, tmp_path, monkeypatch):
        (tmp_path / "appsettings.json").write_text("{broken", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        output = []

        await demo.main(input_fn=scripted_inputs("q"), output_fn=output.append)

        assert output[0].startswith("\n❌ Application error:")


# ---------------------------------------------------------------------------
# Agent demos
# ---------------------------------------------------------------------------

class TestMultipleTools:
    async def test_weather_question(self, config):
        llm = ScriptedLLM([_call("get_weather", {"location": "London"}), AIMessage(content="Rainy, 15°C.")])
        output = []

        with patch.object(multiple_tools, "build_llm", return_value=llm):
            await multiple_tools.run(config, input_fn=scripted_inputs("Weather in London?", "quit"), output_fn=output.append)

        assert "\nAgent: Rainy, 15°C.\n" in output
        assert [t.name for t in llm.bound_tools] == ["get_weather", "calculate", "get_time"]


class TestHumanInTheLoopDemo:
    def _llm(self):
        return ScriptedLLM([_call("delete_file", {"filename": "test.txt"}), AIMessage(content="Handled.")])

    async def test_approve_deletes(self, config, demo_dir):
        demo_dir.mkdir(parents=True)
        (demo_dir / "test.txt").write_text("x", encoding="utf-8")
        output = []

        with patch.object(human_in_the_loop, "build_llm", return_value=self._llm()):
            await human_in_the_loop.run(
                config, input_fn=scripted_inputs("Delete test.txt", "yes", "quit"), output_fn=output.append,
            )

        assert "✅ APPROVED: Executing delete_file" in output
        assert not (demo_dir / "test.txt").exists()

    async def test_reject_keeps_file(self, config, demo_dir):
        demo_dir.mkdir(parents=True)
        (demo_dir / "test.txt").write_text("x", encoding="utf-8")
        output = []

        with patch.object(human_in_the_loop, "build_llm", return_value=self._llm()):
            await human_in_the_loop.run(
                config, input_fn=scripted_inputs("Delete test.txt", "no", "quit"), output_fn=output.append,
            )

        assert "❌ REJECTED: Not executing delete_file" in output
        assert (demo_dir / "test.txt").exists()
        assert "\nAgent: Handled.\n" in output


class TestLongTermMemoryDemo:
    async def test_profile_is_learned_and_carried_over(self, config, tmp_path):
        profile_path = tmp_path / "memory.json"
        llm = ScriptedLLM([
            AIMessage(content="Nice to meet you, Alice!"),
            AIMessage(content='{"name": "Alice"}'),
            AIMessage(content="You are Alice."),
            AIMessage(content="{}"),
        ])
        output = []

        with patch.object(long_term_memory, "build_llm", return_value=llm):
            await long_term_memory.run(
                config,
                input_fn=scripted_inputs("My name is Alice", "new", "Who am I?", "profile", "quit"),
                output_fn=output.append,
                profile_path=str(profile_path),
            )

        assert "   💾 [AI LEARNED] name = Alice" in output
        assert "\n🆕 CONVERSATION #2 started\n" in output
        assert json.loads(profile_path.read_text(encoding="utf-8"))["profile"] == {"name": "Alice"}

        second_conversation = llm.calls[2]
        assert isinstance(second_conversation[0], SystemMessage)
        assert "- name: Alice" in second_conversation[0].content
        assert output[-1] == "   • name: Alice"

    async def test_sentence_starting_with_new_is_chat(self, config, tmp_path):
        llm = ScriptedLLM([AIMessage(content="Welcome, Alice!"), AIMessage(content='{"name": "Alice"}')])
        output = []

        with patch.object(long_term_memory, "build_llm", return_value=llm):
            await long_term_memory.run(
                config,
                input_fn=scripted_inputs("New here, my name is Alice", "quit"),
                output_fn=output.append,
                profile_path=str(tmp_path / "memory.json"),
            )

        assert "\nAgent: Welcome, Alice!\n" in output
        assert "   💾 [AI LEARNED] name = Alice" in output
        assert "\n🆕 CONVERSATION #2 started\n" not in output

    async def test_existing_profile_is_loaded(self, config, tmp_path):
        profile_path = tmp_path / "memory.json"
        profile_path.write_text(json.dumps({"timestamp": "t", "profile": {"city": "Oslo"}}), encoding="utf-8")
        output = []

        with patch.object(long_term_memory, "build_llm", return_value=ScriptedLLM([])):
            await long_term_memory.run(
                config, input_fn=scripted_inputs("quit"), output_fn=output.append, profile_path=str(profile_path),
            )

        assert f"\n📂 [LOADED MEMORY] from {profile_path}" in output
        assert "   🧠 Restored profile: city=Oslo" in output


class TestMiddlewareDemo:
    async def test_blocked_and_logged_turns(self, config):
        llm = ScriptedLLM([_call("get_weather", {"location": "Tokyo"}), AIMessage(content="Cloudy.")])
        output = []

        with patch.object(middleware_pipeline, "build_llm", return_value=llm):
            await middleware_pipeline.run(
                config,
                input_fn=scripted_inputs("what is my password?", "what's the weather in Tokyo?", "quit"),
                output_fn=output.append,
            )

        assert "🚫 Request blocked due to sensitive content: password\n" in output
        assert "🔧 [FUNCTION] get_weather(location=Tokyo)" in output
        assert sum(line.startswith("⏱️  [TIMING] Completed in") for line in output) == 2


class TestMcpDemo:
    def test_github_server_only_with_token(self, config):
        assert list(mcp_interactive.configured_servers(config)) == ["calculator"]

        with_token = AppConfig({"GitHubMCP": {"GitHubPersonalAccessToken": "ghp_x"}})
        servers = mcp_interactive.configured_servers(with_token)
        assert list(servers) == ["calculator", "github"]
        assert servers["github"]["env"] == {"GITHUB_PERSONAL_ACCESS_TOKEN": "ghp_x"}

    async def test_connection_failure_prints_troubleshooting(self, config):
        output = []

        with patch.object(mcp_interactive, "build_llm", return_value=ScriptedLLM([])), \
             patch.object(mcp_interactive, "load_mcp_tools", AsyncMock(side_effect=OSError("spawn failed"))):
            await mcp_interactive.run(config, input_fn=scripted_inputs(), output_fn=output.append)

        assert "\n❌ Error: spawn failed" in output
        assert "\nTROUBLESHOOTING:" in output


# ---------------------------------------------------------------------------
# Workflow demos
# ---------------------------------------------------------------------------

class TestSequentialDemo:
    async def test_prints_each_executor(self):
        output = []
        await sequential_workflow.run(output_fn=output.append)

        assert output == [
            "UppercaseExecutor: HELLO, WORLD!",
            "ReverseTextExecutor: !DLROW ,OLLEH",
        ]


class TestConcurrentDemo:
    async def test_aggregates_both_experts(self, config):
        llm = RoleLLM({"physics": "Average kinetic energy.", "chemistry": "Reaction rates rise."})
        output = []

        with patch.object(concurrent_workflow, "build_llm", return_value=llm):
            await concurrent_workflow.run(config, output_fn=output.append)

        [result] = output
        assert result.startswith("Workflow completed with results:\n")
        assert "Physicist: Average kinetic energy." in result
        assert "Chemist: Reaction rates rise." in result

    async def test_built_workflow_can_run_twice(self):
        llm = RoleLLM({"physics": "Average kinetic energy.", "chemistry": "Reaction rates rise."})
        workflow = concurrent_workflow.build_workflow(llm)

        for _ in range(2):
            events = await workflow.run("What is temperature?")
            [output] = [e.data for e in events if e.kind == WORKFLOW_OUTPUT]
            assert "Physicist: Average kinetic energy." in output


class TestAgentWorkflowDemo:
    async def test_three_agents_in_order(self, config, demo_dir):
        llm = ScriptedLLM([
            AIMessage(content="Architecture plan"),
            AIMessage(content="Implementation"),
            AIMessage(content="Review: approved"),
        ])
        output = []

        with patch.object(agent_workflow, "build_llm", return_value=llm), \
             patch.object(agent_workflow, "load_mcp_tools", AsyncMock(return_value=[])):
            await agent_workflow.run(config, output_fn=output.append, requirement="Build a todo API")

        headers = [line for line in output if line.startswith(("📐", "💻", "🔍"))]
        assert headers == ["📐 ARCHITECT", "💻 DEVELOPER", "🔍 REVIEWER"]
        assert "Review: approved" in output
        assert "\n✅ Final output received from CodeReviewer" in output
        assert (demo_dir / "workflow").is_dir()

    async def test_setup_failure(self, config, demo_dir):
        output = []

        with patch.object(agent_workflow, "build_llm", return_value=ScriptedLLM([])), \
             patch.object(agent_workflow, "load_mcp_tools", AsyncMock(side_effect=OSError("npx not found"))):
            await agent_workflow.run(config, output_fn=output.append)

        assert "\n❌ Error: Failed to create agents npx not found" in output

    def test_friendly_name(self):
        assert agent_workflow.friendly_name("SoftwareArchitect") == "Architect"
        assert agent_workflow.friendly_name("Other") == "Other"
