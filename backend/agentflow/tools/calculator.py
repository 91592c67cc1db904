"""Calculator tools for the arithmetic agent."""

from agentflow.tools.base import Number, tool


@tool(
    args={
        "number1": (Number, "The first number"),
        "number2": (Number, "The second number"),
    }
)
def add(number1: Number, number2: Number) -> Number:
    """Add two numbers."""
    return number1 + number2


@tool(
    args={
        "number1": (Number, "The first number"),
        "number2": (Number, "The number to subtract from the first"),
    }
)
def subtract(number1: Number, number2: Number) -> Number:
    """Subtract two numbers."""
    return number1 - number2


CALCULATOR_TOOLS = [add, subtract]
