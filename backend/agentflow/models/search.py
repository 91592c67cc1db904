"""Web search result model."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A single ranked web search hit."""

    title: str = Field(default="", description="Page title")
    url: str = Field(default="", description="Page URL")
    snippet: str = Field(default="", description="Relevant excerpt from the page")
    score: Optional[float] = Field(default=None, description="Provider relevance score")

    @classmethod
    def from_tavily(cls, raw: dict[str, Any]) -> "SearchResult":
        """Build a result from one entry of a Tavily ``results`` list."""
        return cls(
            title=raw.get("title") or "",
            url=raw.get("url") or "",
            snippet=raw.get("content") or "",
            score=raw.get("score"),
        )
