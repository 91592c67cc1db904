"""Data models package."""

from agentflow.models.entities import Person, Place
from agentflow.models.extraction import PersonNames, PlaceNames
from agentflow.models.search import SearchResult

__all__ = [
    # Entities
    "Person",
    "Place",
    # Structured outputs
    "PersonNames",
    "PlaceNames",
    # Search
    "SearchResult",
]
