"""Web search tool for agent graphs (Tavily integration)."""

import logging

from agentflow.services.tavily_service import TavilyService
from agentflow.tools.base import Tool

logger = logging.getLogger(__name__)

SEARCH_TOOL_NAME = "tavily_search"


def create_web_search_tool(tavily: TavilyService) -> Tool:
    """Create the ``tavily_search`` tool bound to a search service.

    Args:
        tavily: Service used to run the query.

    Returns:
        A Tool whose result is a list of ``{title, url, snippet}`` dicts.
    """

    async def tavily_search(query: str) -> list[dict]:
        logger.info("tavily_search tool called with query: %s", query)
        results = await tavily.search(query)
        return [r.model_dump(include={"title", "url", "snippet"}) for r in results]

    return Tool(
        name=SEARCH_TOOL_NAME,
        description=(
            "Search the web for current information about weather, news, sports, "
            "time, or other factual questions. Use this tool when you need "
            "up-to-date information that you don't have in your training data."
        ),
        args={"query": (str, "The search query to look up")},
        func=tavily_search,
    )
