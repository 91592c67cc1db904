"""Web search agent.

Tool-calling with conditional routing:

1. The agent receives a user query.
2. It decides whether to call the Tavily search tool.
3. Tool results are appended to the conversation and the agent runs again.
4. The agent answers without tool calls and the run ends.
"""

from functools import partial
from typing import Any, Optional

from agentflow.graph import (
    END,
    START,
    MESSAGES_SCHEMA,
    TOOLS_NODE,
    CompiledGraph,
    RetryPolicy,
    StateGraph,
    ToolNode,
    agent_node,
    tools_condition,
)
from agentflow.services.tavily_service import TavilyService
from agentflow.tools import create_web_search_tool


def build_web_search_graph(
    llm: Any,
    tavily: TavilyService,
    *,
    max_steps: Optional[int] = None,
    retry: Optional[RetryPolicy] = None,
) -> CompiledGraph:
    """Build and compile the web search agent graph.

    Args:
        llm: Model wrapper exposing ``bind_tools``.
        tavily: Search service backing the ``tavily_search`` tool.
        max_steps: Optional cap on agent/tool rounds; unbounded by default.
        retry: Optional retry policy applied to both the model and the search.
    """
    tools = [create_web_search_tool(tavily)]
    llm_with_tools = llm.bind_tools(tools)

    workflow = StateGraph(MESSAGES_SCHEMA)
    workflow.add_node("agent", partial(agent_node, llm_with_tools=llm_with_tools), retry=retry)
    workflow.add_node(TOOLS_NODE, ToolNode(tools), retry=retry)
    workflow.add_edge(START, "agent")
    workflow.add_edge(TOOLS_NODE, "agent")
    workflow.add_conditional_edges("agent", tools_condition, [TOOLS_NODE, END])
    return workflow.compile(max_steps=max_steps)
