"""Web search agent: two queries, the second continuing the first conversation.

Requires TAVILY_API_KEY in addition to the model credentials.

Usage:
    python -m scripts.web_search_agent
"""

import sys

from langchain_core.messages import HumanMessage

from agentflow.config import get_settings
from agentflow.services import ChatModelService, TavilyService
from agentflow.utils import banner, last_message_content, run_script
from agentflow.workflows.web_search import build_web_search_graph


async def main() -> None:
    settings = get_settings()
    graph = build_web_search_graph(
        ChatModelService.from_settings(settings),
        TavilyService(settings),
        max_steps=settings.graph_max_steps,
    )

    print(banner("Web Search Agent"))

    print("\n→ Query 1: What is the weather in SF?")
    state1 = await graph.ainvoke({"messages": [HumanMessage("what is the weather in sf")]})
    print("  ✓ Response:", last_message_content(state1["messages"]))

    print("\n→ Query 2: What about NY? (with context)")
    state2 = await graph.ainvoke(
        {"messages": [*state1["messages"], HumanMessage("what about ny")]}
    )
    print("  ✓ Response:", last_message_content(state2["messages"]))

    print("\n" + "=" * 60)


if __name__ == "__main__":
    sys.exit(run_script(main))
