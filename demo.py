"""
Interactive CLI Demo
=====================
Menu of agent framework demos in your terminal.

Usage:
    python demo.py

Settings come from appsettings.json (and appsettings.Development.json) in the
current directory, overridden by environment variables such as
AZURE_OPENAI_API_KEY or AzureOpenAI__Endpoint.

  1. Multiple Function Tools      weather / calculator / time
  2. Human-in-the-Loop Approval   "Create test.txt" then "Delete test.txt"
  3. Structured Output            "John is 30, a software engineer in Seattle"
  4. Long-Term Memory             "My name is Alice", then 'new', then "Who am I?"
  5. Middleware Pipeline          "what is my password?" is blocked
  6. MCP Interactive              "What is 12 to the power of 3?"
  7. Sequential workflow          no model needed
  8. Concurrent workflow          physicist + chemist on "What is temperature?"
  9. Agents in workflow           architect → developer → reviewer

Set LOG_LEVEL=INFO (or DEBUG) to see the component logs.
"""
import asyncio
import logging
import os

from agent_demos import AppConfig, ConfigurationError, load_config
from agent_demos.demos import DEMOS

logger = logging.getLogger(__name__)

QUIT_CHOICES = frozenset({"q", "quit", "exit"})


def show_menu(output_fn=print) -> None:
    output_fn("")
    output_fn("=" * 70)
    output_fn("🤖 Agent Framework - Python Examples")
    output_fn("=" * 70)
    output_fn("")
    output_fn("Available Examples:")
    for key, (title, _) in DEMOS.items():
        output_fn(f"  {key}. {title}")
    output_fn("")
    output_fn("  Q. Quit")
    output_fn("")
    output_fn("=" * 70)


async def run_choice(choice: str, config: AppConfig, output_fn=print) -> None:
    """Run one demo. Errors are reported; the menu always survives."""
    title, run = DEMOS[choice]
    try:
        await run(config)
    except ConfigurationError as exc:
        output_fn(f"\n❌ Error running {title}: {exc}")
        output_fn("Please check your Azure OpenAI configuration in appsettings.json")
    except Exception as exc:
        logger.info("[menu] %s failed", title, exc_info=True)
        output_fn(f"\n❌ Error running {title}: {exc}")


async def main(config: AppConfig | None = None, input_fn=input, output_fn=print) -> None:
    try:
        config = config or load_config()
    except ConfigurationError as exc:
        output_fn(f"\n❌ Application error: {exc}")
        return

    while True:
        show_menu(output_fn)
        try:
            choice = input_fn("Enter your choice (1-9 or Q): ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            output_fn("\n👋 Goodbye!")
            return

        if choice in QUIT_CHOICES:
            output_fn("\n👋 Goodbye!")
            return

        if choice not in DEMOS:
            output_fn("\n❌ Invalid choice. Please try again.")
            continue

        await run_choice(choice, config, output_fn)

        try:
            input_fn("\nPress Enter to continue...")
        except (EOFError, KeyboardInterrupt):
            output_fn("\n👋 Goodbye!")
            return


def cli() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    cli()
