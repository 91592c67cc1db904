import os
import sys
from typing import Any, Optional

import pytest

# Allow running the suite from a checkout without installing the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from agentflow.config import Settings


class FakeChatModel:
    """Scripted stand-in for a LangChain chat model.

    ``responses`` are returned in order by ``ainvoke``; an exception instance
    in the list is raised instead of returned.
    """

    def __init__(self, responses: Optional[list] = None, structured: Optional[dict] = None):
        self.responses = list(responses or [])
        self.structured = structured or {}
        self.calls: list[Any] = []
        self.bound_tools: list[dict] = []

    def bind_tools(self, tools):
        self.bound_tools = list(tools)
        return self

    def with_structured_output(self, schema):
        return FakeStructuredModel(self, schema)

    async def ainvoke(self, input):
        self.calls.append(list(input) if isinstance(input, list) else input)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeStructuredModel:
    def __init__(self, parent: FakeChatModel, schema):
        self.parent = parent
        self.schema = schema

    async def ainvoke(self, input):
        self.parent.calls.append(input)
        return self.schema(**self.parent.structured[self.schema.__name__])


class FakeTavilyClient:
    def __init__(self, results: Optional[list] = None, error: Optional[Exception] = None):
        self.results = results or []
        self.error = error
        self.queries: list[dict] = []

    def search(self, **kwargs):
        self.queries.append(kwargs)
        if self.error:
            raise self.error
        return {"query": kwargs["query"], "results": self.results}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        tavily_api_key="",
        tavily_max_results=3,
        model_timeout=5,
        search_timeout=5,
        log_format="text",
    )
