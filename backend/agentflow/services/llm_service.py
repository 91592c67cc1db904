"""Chat model access for graph nodes.

``build_chat_model`` returns the LangChain chat model selected by
``MODEL_PROVIDER``:

  openai → ChatOpenAI (default, needs OPENAI_API_KEY)
  ollama → ChatOllama against a local Ollama server

``ChatModelService`` wraps either one so nodes see a single ``ainvoke``
that honours ``model_timeout`` and raises ``ExternalCallFailure`` on any
provider error.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel

from agentflow.config import Settings, get_settings
from agentflow.exceptions import AgentFlowError, ExternalCallFailure
from agentflow.tools.base import Tool

logger = logging.getLogger(__name__)


def build_chat_model(settings: Optional[Settings] = None) -> BaseChatModel:
    """Return a configured chat model for the configured provider."""
    settings = settings or get_settings()

    if settings.model_provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            temperature=settings.ollama_temperature,
        )
    else:
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            api_key=settings.openai_api_key or None,
        )


class ChatModelService:
    """Timeout-aware wrapper around a chat model runnable."""

    def __init__(self, runnable: Any, *, timeout: Optional[float] = None) -> None:
        self.runnable = runnable
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ChatModelService":
        settings = settings or get_settings()
        logger.info("Using %s chat model", settings.model_provider)
        return cls(build_chat_model(settings), timeout=settings.model_timeout)

    def bind_tools(self, tools: Sequence[Tool]) -> "ChatModelService":
        """Return a wrapper whose replies may carry calls to ``tools``."""
        schemas = [t.to_openai_schema() for t in tools]
        return ChatModelService(self.runnable.bind_tools(schemas), timeout=self.timeout)

    def with_structured_output(self, schema: type) -> "ChatModelService":
        """Return a wrapper whose replies are validated ``schema`` instances."""
        return ChatModelService(
            self.runnable.with_structured_output(schema),
            timeout=self.timeout,
        )

    async def ainvoke(self, input: Any) -> Any:
        """Invoke the model with a prompt string or a message list.

        Raises:
            ExternalCallFailure: The provider call failed or timed out.
        """
        try:
            if self.timeout is None:
                return await self.runnable.ainvoke(input)
            return await asyncio.wait_for(self.runnable.ainvoke(input), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Model call timed out after %ss", self.timeout)
            raise ExternalCallFailure("model", f"timed out after {self.timeout}s", timeout=self.timeout) from exc
        except AgentFlowError:
            raise
        except Exception as exc:
            logger.error("Model call failed: %s", exc)
            raise ExternalCallFailure("model", str(exc)) from exc
