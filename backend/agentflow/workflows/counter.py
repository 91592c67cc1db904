"""Countdown to zero.

Shows state fields and conditional edges.  Starting from ``number``:

- number > 10       → subtract 5
- 0 < number <= 10  → subtract 1
- number <= 0       → END

Each node writes the full updated ``history`` list, so the field uses the
default overwrite reducer.
"""

import logging
from typing import Optional, TypedDict

from agentflow.graph import END, START, CompiledGraph, StateField, StateGraph, StateSchema

logger = logging.getLogger(__name__)

SUBTRACT_5 = "subtract5"
SUBTRACT_1 = "subtract1"
ROUTES = [SUBTRACT_5, SUBTRACT_1, END]


class CounterState(TypedDict):
    number: int
    history: list[int]


COUNTER_SCHEMA = StateSchema(
    {
        "number": StateField(int),
        "history": StateField(list, default_factory=list),
    }
)


def _step(state: CounterState, amount: int) -> dict:
    new_number = state["number"] - amount
    logger.info("Subtracting %d: %d -> %d", amount, state["number"], new_number)
    return {
        "number": new_number,
        "history": [*state["history"], new_number],
    }


async def subtract5(state: CounterState) -> dict:
    return _step(state, 5)


async def subtract1(state: CounterState) -> dict:
    return _step(state, 1)


def route_countdown(state: CounterState) -> str:
    """Pick the next step; 10 itself takes the smaller decrement."""
    number = state["number"]
    if number > 10:
        return SUBTRACT_5
    if 0 < number <= 10:
        return SUBTRACT_1
    return END


def build_counter_graph(max_steps: Optional[int] = None) -> CompiledGraph:
    """Compile the countdown graph."""
    workflow = StateGraph(COUNTER_SCHEMA)
    workflow.add_node(SUBTRACT_5, subtract5)
    workflow.add_node(SUBTRACT_1, subtract1)
    workflow.add_conditional_edges(START, route_countdown, ROUTES)
    workflow.add_conditional_edges(SUBTRACT_5, route_countdown, ROUTES)
    workflow.add_conditional_edges(SUBTRACT_1, route_countdown, ROUTES)
    return workflow.compile(max_steps=max_steps)
