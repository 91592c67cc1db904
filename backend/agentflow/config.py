"""Application configuration management using Pydantic Settings."""
from functools import lru_cache
from typing import Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the directory where settings.py is located
BASE_DIR = Path(__file__).resolve().parent

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "AgentFlow Examples"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # Chat model provider
    model_provider: str = Field(default="openai", pattern="^(openai|ollama)$")
    model_timeout: Optional[float] = Field(default=60.0, gt=0, description="Seconds per model call")

    # OpenAI
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_model: str = "gpt-4.1-nano-2025-04-14"
    openai_temperature: float = 0.0

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "gpt-oss:20b"
    ollama_temperature: float = 0.0

    # Tavily
    tavily_api_key: str = Field(default="", description="Tavily API key")
    tavily_search_depth: str = Field(default="basic", pattern="^(basic|advanced)$")
    tavily_max_results: int = Field(default=3, ge=1, le=20)
    search_timeout: Optional[float] = Field(default=30.0, gt=0, description="Seconds per search call")

    # LangSmith
    langsmith_tracing: bool = Field(default=False, description="Enable LangSmith tracing")
    langsmith_endpoint: str = "https://api.smith.langchain.com"
    langsmith_api_key: str = Field(default="", description="LangSmith API key")
    langsmith_project: str = Field(default="agentflow-examples", description="LangSmith project name")

    # Graph execution
    graph_max_steps: Optional[int] = Field(
        default=None,
        ge=1,
        description="Upper bound on executed steps per invocation; unset means unbounded",
    )

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="text", pattern="^(json|text)$")

    model_config = SettingsConfigDict(
        env_file=BASE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
