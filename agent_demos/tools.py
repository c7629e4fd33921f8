"""
Tool Functions
==============
Plain functions the agents can call. Every tool returns a string. Failures
come back as descriptive text for the model to relay, never as exceptions.

Tools:
  - calculate       → Safe. Arithmetic over digits and + - * / ( ) .
  - get_weather     → Safe. Static six-city table.
  - get_time        → Safe. One HTTP GET to worldtimeapi.org (5s timeout).
  - search_database → Safe. Canned keyword lookup.
  - create_file     → Safe. Writes into the sandbox directory.
  - delete_file     → DANGEROUS. Requires human approval before it runs.

Registration:
  Each function is wrapped in a ToolSpec. requires_approval is declared here,
  at registration time, and is the only thing that distinguishes a dangerous
  tool from a safe one. build_tools() turns specs into LangChain tools; the
  parameter schema comes from the Annotated hints and the description from
  the docstring.
"""
import ast
import logging
import operator
import os
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Annotated, Callable

import httpx
from langchain_core.tools import BaseTool, StructuredTool

from .errors import ToolExecutionError

logger = logging.getLogger(__name__)

DEFAULT_DEMO_DIR = "demo_files"
TIME_API_URL = "http://worldtimeapi.org/api/timezone/{timezone}"
TIME_API_TIMEOUT = 5.0

_ALLOWED_EXPRESSION_CHARS = frozenset("0123456789+-*/().")

WEATHER_DATA: dict[str, str] = {
    "london":    "🌧️ 15°C, Rainy",
    "paris":     "☀️ 22°C, Sunny",
    "tokyo":     "⛅ 18°C, Partly Cloudy",
    "new york":  "🌤️ 20°C, Clear",
    "stockholm": "❄️ 2°C, Snow",
    "madrid":    "☀️ 25°C, Sunny",
}

SEARCH_RESULTS: dict[str, str] = {
    "users":    "Found 150 users matching criteria",
    "products": "Found 45 products in inventory",
    "orders":   "Found 230 orders in last 30 days",
}


def get_demo_dir() -> Path:
    """
    Return the sandbox directory for file tools.

    Resolution order:
      1. DEMO_FILES_DIR environment variable
      2. DEFAULT_DEMO_DIR ("demo_files" in the cwd)
    """
    return Path(os.getenv("DEMO_FILES_DIR", DEFAULT_DEMO_DIR))


def sanitize_filename(filename: str) -> str:
    """
    Reduce a filename to its base name so it cannot leave the sandbox.

    Both "/" and "\\" count as separators. Raises ValueError for names that
    are empty or refer to a directory ("." / "..").
    """
    name = PureWindowsPath(filename.strip()).name
    if name in ("", ".", ".."):
        raise ValueError(f"Invalid filename '{filename}'")
    return name


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

_BINARY_OPS = {
    ast.Add:  operator.add,
    ast.Sub:  operator.sub,
    ast.Mult: operator.mul,
    ast.Div:  operator.truediv,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _evaluate(node: ast.AST) -> int | float:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left, right = _evaluate(node.left), _evaluate(node.right)
        try:
            return _BINARY_OPS[type(node.op)](left, right)
        except ZeroDivisionError:
            raise ToolExecutionError("calculate", "division by zero") from None
        except ArithmeticError as exc:
            raise ToolExecutionError("calculate", str(exc)) from None
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate(node.operand))
    raise ToolExecutionError("calculate", f"unsupported syntax: {type(node).__name__}")


def evaluate_expression(expression: str) -> int | float:
    """
    Evaluate an arithmetic expression with normal precedence rules.

    Raises ToolExecutionError for anything that is not plain + - * / arithmetic
    (including ** and //), that divides by zero, overflows a float, or is
    nested too deeply to parse.
    """
    try:
        return _evaluate(ast.parse(expression, mode="eval"))
    except SyntaxError as exc:
        raise ToolExecutionError("calculate", f"malformed expression ({exc.msg})") from None
    except ValueError as exc:
        raise ToolExecutionError("calculate", str(exc)) from None
    except (RecursionError, MemoryError):
        raise ToolExecutionError("calculate", "expression is too long or too deeply nested") from None


def calculate(
    expression: Annotated[str, "Mathematical expression to evaluate, e.g. '2 + 2' or '10 * 5'"],
) -> str:
    """Evaluate a mathematical expression"""
    sanitized = expression.replace(" ", "")

    if not sanitized or any(c not in _ALLOWED_EXPRESSION_CHARS for c in sanitized):
        return f"Error: Invalid characters in expression '{expression}'"

    try:
        result = evaluate_expression(sanitized)
        return f"Result: {result}"
    except ToolExecutionError as exc:
        return f"Error: Could not calculate '{expression}' - {exc.reason}"
    except ValueError as exc:
        # int too large to format
        return f"Error: Could not calculate '{expression}' - {exc}"


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def get_weather(location: Annotated[str, "City name"]) -> str:
    """Get current weather for a location"""
    weather = WEATHER_DATA.get(location.strip().lower())
    if weather is None:
        return f"Weather data not available for {location}"
    return weather


def get_time(
    timezone: Annotated[str, "Timezone like 'America/New_York' or 'Europe/London'"],
) -> str:
    """Get current time in a timezone"""
    url = TIME_API_URL.format(timezone=timezone)
    try:
        response = httpx.get(url, timeout=TIME_API_TIMEOUT)
        if response.is_success:
            data = response.json()
            if isinstance(data, dict) and data.get("datetime"):
                time_of_day = str(data["datetime"]).split("T")[1].split(".")[0]
                return f"⏰ Current time in {timezone}: {time_of_day}"
        logger.info("[tools] Time lookup for %s returned HTTP %s", timezone, response.status_code)
        return f"Could not get time for {timezone}"
    except Exception as exc:
        logger.warning("[tools] Time lookup for %s failed: %s", timezone, exc)
        return f"Error getting time for {timezone}: {exc}"


def search_database(query: Annotated[str, "What to search for, e.g. 'users' or 'orders'"]) -> str:
    """Search the company database for users, products or orders"""
    lowered = query.lower()
    for keyword, result in SEARCH_RESULTS.items():
        if keyword in lowered:
            return result
    return f"No results found for: {query}"


# ---------------------------------------------------------------------------
# File operations (sandboxed)
# ---------------------------------------------------------------------------

def create_file(
    filename: Annotated[str, "Name of file to create"],
    content: Annotated[str, "Content to write in file"],
) -> str:
    """Create a new file with content"""
    try:
        name = sanitize_filename(filename)
    except ValueError as exc:
        return f"❌ Error creating file: {exc}"

    demo_dir = get_demo_dir()
    try:
        demo_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError as exc:
        return f"❌ Access denied: {exc}. Check folder permissions."
    except OSError as exc:
        return f"❌ Error creating file: {exc}"

    path = demo_dir / name
    try:
        path.write_text(content, encoding="utf-8")
    except PermissionError:
        return (
            f"❌ Access denied: Cannot write to '{name}'. "
            "File may be locked or insufficient permissions."
        )
    except OSError as exc:
        return f"❌ IO Error: {exc}. File may be locked by another process."

    logger.info("[tools] Created %s (%d chars)", path, len(content))
    return (
        f"✅ File '{name}' created successfully with {len(content)} characters "
        f"at {path.resolve()}"
    )


def delete_file(filename: Annotated[str, "Name of file to delete"]) -> str:
    """Delete a file from the demo directory"""
    try:
        name = sanitize_filename(filename)
    except ValueError as exc:
        return f"❌ Error deleting file: {exc}"

    path = get_demo_dir() / name
    if not path.exists():
        return f"⚠️ File '{name}' not found in demo directory"

    try:
        path.unlink()
    except PermissionError:
        return (
            f"❌ Access denied: Cannot delete '{name}'. "
            "File may be locked or insufficient permissions."
        )
    except OSError as exc:
        return f"❌ IO Error: {exc}. File may be in use by another process."

    logger.info("[tools] Deleted %s", path)
    return f"🗑️ File '{name}' deleted successfully"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolSpec:
    func: Callable[..., str]
    requires_approval: bool = False

    @property
    def name(self) -> str:
        return self.func.__name__

    def as_tool(self) -> BaseTool:
        return StructuredTool.from_function(func=self.func, name=self.name)


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(calculate),
        ToolSpec(get_weather),
        ToolSpec(get_time),
        ToolSpec(search_database),
        ToolSpec(create_file),
        ToolSpec(delete_file, requires_approval=True),
    )
}


def build_tools(*names: str) -> tuple[list[BaseTool], frozenset[str]]:
    """
    Build LangChain tools for the named specs.

    Returns:
        (tools, approval_required) — approval_required holds the names of the
        selected tools declared with requires_approval=True.

    Raises KeyError for a name that isn't registered.
    """
    specs = [TOOLS[name] for name in names]
    return (
        [spec.as_tool() for spec in specs],
        frozenset(spec.name for spec in specs if spec.requires_approval),
    )
