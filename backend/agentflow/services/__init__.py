"""Services package."""

from agentflow.services.tavily_service import TavilyService
from agentflow.services.llm_service import ChatModelService, build_chat_model

__all__ = [
    "TavilyService",
    "ChatModelService",
    "build_chat_model",
]
