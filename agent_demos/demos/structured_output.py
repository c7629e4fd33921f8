"""
Demo 3: Structured Output
=========================
Extracts typed records (person, company, product) from free text with DSPy.

Commands:
    schema <name>   switch the extraction schema
    schemas         list schemas and their fields
    help            show the intro again

Try:
    "John is 30 years old, works as a software engineer in Seattle"
    "schema company" then "Apple Inc. is a technology company founded in 1976 in Cupertino"
    "schema product" then "iPhone 15 is a smartphone by Apple priced at $999"
"""
import asyncio
import logging

from ..chat import run_chat_loop
from ..config import AppConfig
from ..extraction import StructuredExtractor, extraction_confidence
from ..models import SCHEMAS
from ..providers import configure_dspy

logger = logging.getLogger(__name__)


class ExtractionSession:
    """Current schema plus the command handlers that change or describe it."""

    def __init__(self, extractor: StructuredExtractor, output_fn=print, schema: str = "person"):
        self.extractor = extractor
        self.schema = schema
        self._out = output_fn

    def prompt(self) -> str:
        return f"\nYou ({self.schema}): "

    def print_schema_fields(self, schema: str) -> None:
        for name, description in SCHEMAS[schema].field_descriptions().items():
            self._out(f"   • {name}: {description}")

    def show_help(self, _rest: str = "") -> None:
        self._out("")
        self._out("=" * 70)
        self._out("📊 DEMO: Structured Output with JSON")
        self._out("=" * 70)
        self._out("\n✨ This demo extracts structured data from your text using AI")
        self._out(f"🎯 Current extraction schema: {self.schema}")
        self._out("\n📋 Available schemas:")
        for name in SCHEMAS:
            self._out(f"   • {name}")
        self._out(f"\n🔍 Current schema fields ({self.schema}):")
        self.print_schema_fields(self.schema)
        self._out("\n🎮 Commands:")
        self._out("   • Type text to extract information")
        self._out("   • 'schema <name>' - Switch extraction schema")
        self._out("   • 'schemas' - List available schemas")
        self._out("   • 'help' - Show this help")
        self._out("   • 'quit' - Exit demo")
        self._out("\n💡 Example inputs:")
        self._out("   • 'John is 30 years old, works as a software engineer in Seattle'")
        self._out("   • 'Apple Inc. is a technology company founded in 1976 in Cupertino'")
        self._out("   • 'iPhone 15 is a smartphone by Apple priced at $999'")

    def switch_schema(self, rest: str) -> None:
        name = rest.strip().lower()
        if name in SCHEMAS:
            self.schema = name
            self._out(f"\n✅ Switched to '{name}' schema")
            self._out("\n🔍 Schema fields:")
            self.print_schema_fields(name)
        else:
            self._out(f"\n❌ Unknown schema '{name}'")
            self._out(f"Available schemas: {', '.join(SCHEMAS)}")

    def list_schemas(self, _rest: str = "") -> None:
        self._out("\n📋 Available extraction schemas:")
        for name in SCHEMAS:
            self._out(f"\n🎯 {name}:")
            self.print_schema_fields(name)

    def commands(self) -> dict:
        return {"schema": self.switch_schema, "schemas": self.list_schemas, "help": self.show_help}

    def format_record(self, record) -> str:
        if record is None or not record.has_any_data():
            return (
                f"❌ Could not extract {self.schema} information from the provided text\n"
                "💡 Try providing more detailed information or switch to a different schema"
            )
        lines = [f"📊 Extracted {self.schema.capitalize()} Information:"]
        lines += [f"   {key}: {value}" for key, value in record.to_display_dict().items()]
        filled, total, percent = extraction_confidence(record)
        lines.append(f"\n📈 Extraction confidence: {percent:.1f}% ({filled}/{total} fields)")
        return "\n".join(lines)

    async def extract(self, text: str) -> str:
        self._out(f"\n🔄 Extracting {self.schema} information...")
        # DSPy calls are blocking; keep the event loop free.
        record = await asyncio.to_thread(self.extractor.extract, self.schema, text)
        return self.format_record(record)


async def run(config: AppConfig, *, input_fn=input, output_fn=print) -> None:
    configure_dspy(config.azure_openai())
    session = ExtractionSession(StructuredExtractor(), output_fn=output_fn)

    session.show_help()
    output_fn("✅ Extractor ready")

    await run_chat_loop(
        session.extract,
        commands=session.commands(),
        prompt=session.prompt,
        input_fn=input_fn,
        output_fn=output_fn,
    )
