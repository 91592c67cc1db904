"""Calculator agent.

The model is given ``add`` and ``subtract`` tools and alternates with the
tool node until it answers without requesting a tool.
"""

from functools import partial
from typing import Any, Optional

from agentflow.graph import (
    END,
    MESSAGES_SCHEMA,
    TOOLS_NODE,
    CompiledGraph,
    RetryPolicy,
    StateGraph,
    ToolNode,
    agent_node,
    tools_condition,
)
from agentflow.tools import CALCULATOR_TOOLS

SYSTEM_PROMPT = "Use the tools to calculate and answer only the result number, nothing more."


def build_calculator_graph(
    llm: Any,
    tools: Optional[list] = None,
    *,
    max_steps: Optional[int] = None,
    retry: Optional[RetryPolicy] = None,
) -> CompiledGraph:
    """Build and compile the calculator agent graph.

    Args:
        llm: Model wrapper exposing ``bind_tools`` (e.g. ``ChatModelService``).
        tools: Tools to offer; defaults to ``add`` and ``subtract``.
        max_steps: Optional cap on agent/tool rounds; unbounded by default.
        retry: Optional retry policy for the model call.
    """
    tools = tools if tools is not None else CALCULATOR_TOOLS
    llm_with_tools = llm.bind_tools(tools)

    workflow = StateGraph(MESSAGES_SCHEMA)
    workflow.add_node("agent", partial(agent_node, llm_with_tools=llm_with_tools), retry=retry)
    workflow.add_node(TOOLS_NODE, ToolNode(tools))
    workflow.set_entry_point("agent")
    workflow.add_conditional_edges("agent", tools_condition, [TOOLS_NODE, END])
    workflow.add_edge(TOOLS_NODE, "agent")
    return workflow.compile(max_steps=max_steps)
