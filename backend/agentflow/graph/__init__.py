"""Graph engine package.

Contains the state schema, edge table, engine and the reusable agent/tool
nodes every workflow is built from.

Exports:
    StateGraph, CompiledGraph — Build and run a graph
    StateSchema, StateField   — Declare the closed set of state fields
    START, END                — Sentinel pseudo-nodes
    ToolNode, tools_condition — Agent <-> tools loop building blocks
"""

from agentflow.graph.edges import END, START
from agentflow.graph.engine import CompiledGraph, RetryPolicy, StateGraph
from agentflow.graph.nodes import TOOLS_NODE, ToolNode, agent_node, tools_condition
from agentflow.graph.state import (
    APPEND,
    MESSAGES_SCHEMA,
    OVERWRITE,
    MessagesState,
    StateField,
    StateSchema,
    append_field,
)

__all__ = [
    "START",
    "END",
    "StateGraph",
    "CompiledGraph",
    "RetryPolicy",
    "StateSchema",
    "StateField",
    "append_field",
    "APPEND",
    "OVERWRITE",
    "MESSAGES_SCHEMA",
    "MessagesState",
    "TOOLS_NODE",
    "ToolNode",
    "agent_node",
    "tools_condition",
]
