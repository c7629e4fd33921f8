"""
Demo 4: Long-Term Memory
========================
The model extracts facts about you after every reply and saves them to
ai_memory_profile.json. New conversations start with that profile in the
system prompt, so the agent recognises you across sessions and restarts.

Commands:
    new       start a new conversation (the profile carries over)
    profile   show what has been learned so far
"""
from ..chat import run_chat_loop
from ..config import AppConfig
from ..graph import build_graph
from ..profile_store import DEFAULT_PROFILE_FILE, JsonFileProfileRepository, ProfileStore
from ..prompts import memory_prompt
from ..providers import build_llm
from ..session import AgentRunner, ChatSession, message_text


def print_profile(profile: dict, output_fn=print, empty: str = "   (AI hasn't learned anything about you yet)") -> None:
    if not profile:
        output_fn(empty)
        return
    for key, value in profile.items():
        output_fn(f"   • {key}: {value}")


def model_completer(llm):
    """Adapt a chat model to the ProfileStore's prompt → text contract."""
    async def complete(prompt: str) -> str:
        return message_text(await llm.ainvoke(prompt))
    return complete


async def run(
    config: AppConfig,
    *,
    input_fn=input,
    output_fn=print,
    profile_path: str = DEFAULT_PROFILE_FILE,
) -> None:
    llm = build_llm(config.azure_openai())
    store = ProfileStore(JsonFileProfileRepository(profile_path), model_completer(llm))

    output_fn("")
    output_fn("=" * 70)
    output_fn("🤖 AI-POWERED LONG-TERM MEMORY with FILE PERSISTENCE")
    output_fn("=" * 70)
    output_fn(f"Memory File: {profile_path}")
    output_fn("=" * 70)

    profile = store.load()
    if profile:
        output_fn(f"\n📂 [LOADED MEMORY] from {profile_path}")
        output_fn("   🧠 Restored profile: " + ", ".join(f"{k}={v}" for k, v in profile.items()))
    else:
        output_fn("\n📋 [NEW MEMORY] No saved profile yet")

    def system_prompt() -> str:
        context = store.context()
        if context:
            output_fn("\n   💭 [INJECTING LONG-TERM MEMORY]")
        return memory_prompt(context)

    session = ChatSession(AgentRunner(build_graph(llm, [])), system_prompt=system_prompt)
    conversation = 1

    output_fn("=" * 70)
    output_fn("💡 COMMANDS:")
    output_fn("=" * 70)
    output_fn("  • Chat naturally - AI extracts & saves info to file")
    output_fn("  • 'new' - Create new conversation (test cross-thread memory)")
    output_fn("  • 'profile' - Show what AI learned about you")
    output_fn("  • 'quit' - Exit")
    output_fn("=" * 70)
    output_fn(f"\n🆕 CONVERSATION #{conversation} started\n")

    def new_conversation() -> None:
        nonlocal conversation
        session.reset()
        conversation += 1
        output_fn(f"\n🆕 CONVERSATION #{conversation} started\n")

    def show_profile() -> None:
        output_fn("\n📋 AI-LEARNED PROFILE:")
        print_profile(store.profile, output_fn)
        output_fn("")

    async def remember(user_text: str, _reply: str) -> None:
        before = store.profile
        output_fn(f"   🤖 [AI ANALYZING]: '{user_text}'")
        after = await store.extract_and_merge(user_text)
        for key, value in after.items():
            if before.get(key) != value:
                output_fn(f"   💾 [AI LEARNED] {key} = {value}")

    await run_chat_loop(
        session.ask,
        exact_commands={"new": new_conversation, "profile": show_profile},
        on_turn_complete=remember,
        input_fn=input_fn,
        output_fn=output_fn,
    )

    output_fn("\n📊 Final AI-Learned Profile:")
    print_profile(store.profile, output_fn, empty="   (No profile data learned)")
