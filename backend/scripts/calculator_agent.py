"""Calculator agent: the model answers a word problem with add/subtract tools.

Usage:
    python -m scripts.calculator_agent
"""

import sys

from langchain_core.messages import HumanMessage, SystemMessage

from agentflow.config import get_settings
from agentflow.services import ChatModelService
from agentflow.utils import last_message_content, run_script
from agentflow.workflows.calculator import SYSTEM_PROMPT, build_calculator_graph

QUESTION = (
    "If I have 7 apples and I give 3 to my friend, and then I buy 5 more, "
    "how many apples do I have?"
)


async def main() -> None:
    settings = get_settings()
    graph = build_calculator_graph(
        ChatModelService.from_settings(settings),
        max_steps=settings.graph_max_steps,
    )
    final_state = await graph.ainvoke(
        {"messages": [SystemMessage(SYSTEM_PROMPT), HumanMessage(QUESTION)]}
    )
    print(last_message_content(final_state["messages"]))


if __name__ == "__main__":
    sys.exit(run_script(main))
