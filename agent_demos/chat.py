"""
Chat Driver
===========
The read → dispatch → respond loop every interactive demo runs.

    You: <text>
      blank            → prompt again
      exit word        → goodbye, loop ends
      EOF / Ctrl-C     → goodbye, loop ends
      "<command> ..."  → commands[command](rest)
      "<word>"         → exact_commands[word]()   (whole input only)
      anything else    → reply = await handler(text)
                         print "Agent: <reply>"
                         await on_turn_complete(text, reply)

A failing turn never ends the loop. SecurityBlockedError is shown as a
refusal ("🚫 ..."), anything else as "❌ Error: ...".

input_fn / output_fn default to the console and are injected by tests.
"""
import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping

from .errors import SecurityBlockedError

logger = logging.getLogger(__name__)

EXIT_WORDS = frozenset({"quit", "exit", "q", "bye", "stop"})

TurnHandler = Callable[[str], Awaitable[str]]
Command = Callable[[str], Any]


# ── Console helpers ─────────────────────────────────────────────────────────

def print_welcome_message(title: str, description: str = "", output_fn=print) -> None:
    output_fn("")
    output_fn("=" * 70)
    output_fn(f"🤖 DEMO: {title}")
    output_fn("=" * 70)
    if description:
        output_fn("")
        output_fn(description)
    output_fn("")
    output_fn("=" * 70)
    output_fn("💬 Interactive Chat (Type 'quit' to exit)")
    output_fn("=" * 70)
    output_fn("")


def should_exit(text: str, exit_words=EXIT_WORDS) -> bool:
    return text.strip().lower() in exit_words


def print_goodbye(output_fn=print) -> None:
    output_fn("\n👋 Goodbye!")


def print_error(message: str, output_fn=print) -> None:
    output_fn(f"\n❌ Error: {message}")


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


# ── Loop ────────────────────────────────────────────────────────────────────

async def run_chat_loop(
    handler: TurnHandler,
    *,
    commands: Mapping[str, Command] | None = None,
    exact_commands: Mapping[str, Callable[[], Any]] | None = None,
    on_turn_complete: Callable[[str, str], Any] | None = None,
    exit_words=EXIT_WORDS,
    prompt: str | Callable[[], str] = "You: ",
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> None:
    """
    Drive one interactive session until the user leaves.

    Commands and on_turn_complete may be sync or async. prompt may be a
    callable, re-read before every input. Commands are matched
    on the first word of the input, case-insensitively, and receive the rest
    of the line. exact_commands take no argument and fire only when the whole
    input is the command word, so "new here, I'm Alice" still reaches the
    handler.
    """
    commands = {name.lower(): fn for name, fn in (commands or {}).items()}
    exact_commands = {name.lower(): fn for name, fn in (exact_commands or {}).items()}

    while True:
        try:
            text = input_fn(prompt() if callable(prompt) else prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print_goodbye(output_fn)
            return

        if not text:
            continue

        if should_exit(text, exit_words):
            print_goodbye(output_fn)
            return

        head, _, rest = text.partition(" ")
        command = commands.get(head.lower())
        exact = exact_commands.get(text.lower())

        try:
            if exact is not None:
                await _maybe_await(exact())
                continue
            if command is not None:
                await _maybe_await(command(rest.strip()))
                continue

            reply = await handler(text)
            output_fn(f"\nAgent: {reply}\n")

            if on_turn_complete is not None:
                await _maybe_await(on_turn_complete(text, reply))
        except SecurityBlockedError as exc:
            output_fn(f"🚫 {exc}\n")
        except Exception as exc:
            logger.info("[chat] Turn failed: %s", exc, exc_info=True)
            output_fn(f"❌ Error: {exc}\n")
