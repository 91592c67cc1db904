"""Reusable node functions for the agent <-> tools loop.

Nodes:
    agent_node      — Calls the tool-bound model with the full message history.
    ToolNode        — Runs every tool call requested by the last message.
    tools_condition — Conditional edge: routes to ``"tools"`` or END.

The loop has two states, agent and tools, and alternates until the model
replies without tool calls.  Nothing here caps the number of rounds; pass
``max_steps`` to ``StateGraph.compile`` for that.
"""

import logging
from typing import Any, Iterable

from agentflow.graph.edges import END
from agentflow.graph.state import MessagesState
from agentflow.tools.base import Tool
from agentflow.tools.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

TOOLS_NODE = "tools"


def requested_tool_calls(message: Any) -> list:
    """Tool calls carried by ``message``; missing or ``None`` means none."""
    return list(getattr(message, "tool_calls", None) or [])


async def agent_node(state: MessagesState, llm_with_tools: Any) -> dict:
    """Call the model with the full message history from state.

    Args:
        state: Current state containing the full message history.
        llm_with_tools: Model wrapper with tools bound via ``bind_tools``.

    Returns:
        ``{"messages": [reply]}`` to be appended by the reducer.
    """
    response = await llm_with_tools.ainvoke(state["messages"])
    calls = requested_tool_calls(response)
    if calls:
        logger.info("Agent requested %d tool call(s): %s", len(calls), [c.get("name") for c in calls])
    else:
        logger.info("Agent replied without tool calls")
    return {"messages": [response]}


class ToolNode:
    """Node executing the tool calls of the most recent message."""

    def __init__(self, tools: Iterable[Tool]) -> None:
        self.dispatcher = ToolDispatcher(tools)

    async def __call__(self, state: MessagesState) -> dict:
        messages = state["messages"]
        if not messages:
            return {"messages": []}
        calls = requested_tool_calls(messages[-1])
        return {"messages": await self.dispatcher.dispatch(calls)}


def tools_condition(state: MessagesState) -> str:
    """Route to the tools node if the last message requested tools.

    Returns:
        ``"tools"`` — the last message carries one or more tool calls.
        ``END``     — otherwise (the agent is done).
    """
    messages = state.get("messages") or []
    if messages and requested_tool_calls(messages[-1]):
        return TOOLS_NODE
    return END
