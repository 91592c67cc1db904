"""Tavily web search service."""

import asyncio
import logging
from typing import Any, Optional

from tavily import TavilyClient

from agentflow.config import Settings, get_settings
from agentflow.exceptions import ExternalCallFailure
from agentflow.models.search import SearchResult

logger = logging.getLogger(__name__)


class TavilyService:
    """Service for web search using Tavily API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[Any] = None,
    ) -> None:
        """Initialize Tavily search client.

        Args:
            settings: Settings to read the key, depth, limits and timeout from.
            client: Pre-built client exposing ``search(query=..., ...)``;
                skips building a ``TavilyClient`` from the API key.
        """
        self.settings = settings or get_settings()
        if client is not None:
            self.client = client
        elif self.settings.tavily_api_key:
            self.client = TavilyClient(api_key=self.settings.tavily_api_key)
            logger.info("Tavily service initialized successfully")
        else:
            self.client = None
            logger.warning("Tavily API key not provided - web search disabled")

    def is_available(self) -> bool:
        """Check if Tavily service is available."""
        return self.client is not None

    async def search(self, query: str, max_results: Optional[int] = None) -> list[SearchResult]:
        """Execute web search using Tavily.

        The blocking client call runs in a worker thread so the event loop
        stays free while the request is in flight.

        Args:
            query: Search query string
            max_results: Optional override for max results

        Returns:
            Up to ``max_results`` results, best first.

        Raises:
            ExternalCallFailure: No API key is configured, or the request
                failed or timed out.
        """
        if not self.client:
            raise ExternalCallFailure("search", "TAVILY_API_KEY is not configured")

        limit = max_results or self.settings.tavily_max_results
        timeout = self.settings.search_timeout
        logger.info("Executing Tavily search for: %s", query)
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.search,
                    query=query,
                    max_results=limit,
                    search_depth=self.settings.tavily_search_depth,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.error("Tavily search timed out after %ss", timeout)
            raise ExternalCallFailure("search", f"timed out after {timeout}s", timeout=timeout) from exc
        except Exception as exc:
            logger.error("Tavily search failed: %s", exc)
            raise ExternalCallFailure("search", str(exc)) from exc

        results = [SearchResult.from_tavily(r) for r in response.get("results", [])][:limit]
        logger.info("Tavily returned %d results", len(results))
        return results
