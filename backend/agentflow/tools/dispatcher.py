"""Execute the tool calls requested by a model reply."""

import json
import logging
from typing import Any, Iterable, Mapping, Sequence

from langchain_core.messages import ToolMessage

from agentflow.exceptions import UnknownToolError
from agentflow.tools.base import Tool
from agentflow.utils.helpers import truncate_text

logger = logging.getLogger(__name__)


def format_tool_result(result: Any) -> str:
    """Render a tool's return value as message content."""
    if isinstance(result, str):
        return result
    if isinstance(result, (dict, list, tuple)):
        return json.dumps(result, default=str)
    return str(result)


class ToolDispatcher:
    """Looks up, validates and runs requested tool calls one by one.

    The dispatcher never decides whether the agent loop should stop; it only
    turns each call into a tool-role message tagged with the call id.
    """

    def __init__(self, tools: Iterable[Tool]) -> None:
        self.tools_by_name: dict[str, Tool] = {}
        for t in tools:
            if t.name in self.tools_by_name:
                raise ValueError(f"Duplicate tool name '{t.name}'")
            self.tools_by_name[t.name] = t

    @property
    def tools(self) -> list[Tool]:
        return list(self.tools_by_name.values())

    def get(self, name: str) -> Tool:
        try:
            return self.tools_by_name[name]
        except KeyError:
            raise UnknownToolError(name, self.tools_by_name) from None

    async def dispatch(self, calls: Sequence[Mapping[str, Any]]) -> list[ToolMessage]:
        """Run ``calls`` in order and return one ``ToolMessage`` per call.

        Raises:
            UnknownToolError: A call names an unregistered tool.
            ArgumentValidationError: A call's arguments fail validation.
        """
        results: list[ToolMessage] = []
        for call in calls:
            name = call.get("name", "")
            call_id = call.get("id") or ""
            selected = self.get(name)
            output = await selected.ainvoke(call.get("args"))
            content = format_tool_result(output)
            logger.info("Tool %s (call %s) returned %s", name, call_id, truncate_text(content, 200))
            results.append(
                ToolMessage(
                    content=content,
                    tool_call_id=call_id,
                    name=name,
                )
            )
        return results
