"""
MCP Server: Calculator
======================
Exposes arithmetic tools via the Model Context Protocol.

Tools:
  - add          → a + b
  - subtract     → a - b
  - multiply     → a × b
  - divide       → a ÷ b        (error JSON when b is 0)
  - power        → base ^ exponent
  - square_root  → √number      (error JSON when number < 0)

Results are returned as numbers. Invalid input comes back as
{"error": "..."} so the agent can explain it instead of failing the turn.

Run standalone:   python mcp_server.py
Or via agent:     the MCP demo starts this as a subprocess (stdio transport).
"""
import json
import logging
import math

from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)

mcp = FastMCP("Calculator")


def _error(message: str) -> str:
    return json.dumps({"error": message})


# ---------------------------------------------------------------------------
# Basic operations
# ---------------------------------------------------------------------------

@mcp.tool()
def add(a: float, b: float) -> float:
    """
    Add two numbers.

    Args:
        a: First number
        b: Second number
    """
    logger.info("[calculator] %s + %s", a, b)
    return a + b


@mcp.tool()
def subtract(a: float, b: float) -> float:
    """
    Subtract the second number from the first.

    Args:
        a: First number
        b: Second number
    """
    logger.info("[calculator] %s - %s", a, b)
    return a - b


@mcp.tool()
def multiply(a: float, b: float) -> float:
    """
    Multiply two numbers.

    Args:
        a: First number
        b: Second number
    """
    logger.info("[calculator] %s × %s", a, b)
    return a * b


@mcp.tool()
def divide(a: float, b: float) -> float | str:
    """
    Divide the first number by the second.

    Args:
        a: Dividend
        b: Divisor (must not be zero)
    """
    logger.info("[calculator] %s ÷ %s", a, b)
    if b == 0:
        return _error("Cannot divide by zero")
    return a / b


# ---------------------------------------------------------------------------
# Powers and roots
# ---------------------------------------------------------------------------

@mcp.tool()
def power(base_number: float, exponent: float) -> float | str:
    """
    Raise a number to a power.

    Args:
        base_number: The base number
        exponent:    The exponent
    """
    logger.info("[calculator] %s ^ %s", base_number, exponent)
    try:
        result = math.pow(base_number, exponent)
    except (OverflowError, ValueError) as exc:
        return _error(f"Cannot raise {base_number} to {exponent}: {exc}")
    return result


@mcp.tool()
def square_root(number: float) -> float | str:
    """
    Calculate the square root of a number.

    Args:
        number: The number to take the square root of (must not be negative)
    """
    logger.info("[calculator] √%s", number)
    if number < 0:
        return _error("Cannot calculate square root of negative number")
    return math.sqrt(number)


if __name__ == "__main__":
    mcp.run()
