"""Tools that agent graphs can invoke.

This module exports:
- Tool / tool: explicit-schema tool definition and decorator
- ToolDispatcher: runs requested tool calls in order
- add / subtract: calculator tools
- create_web_search_tool: Tavily-backed web search tool
"""

from agentflow.tools.base import Number, Tool, tool
from agentflow.tools.calculator import CALCULATOR_TOOLS, add, subtract
from agentflow.tools.dispatcher import ToolDispatcher, format_tool_result
from agentflow.tools.web_search_tool import SEARCH_TOOL_NAME, create_web_search_tool

__all__ = [
    "Number",
    "Tool",
    "tool",
    "ToolDispatcher",
    "format_tool_result",
    "add",
    "subtract",
    "CALCULATOR_TOOLS",
    "SEARCH_TOOL_NAME",
    "create_web_search_tool",
]
