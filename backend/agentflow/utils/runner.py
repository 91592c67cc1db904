"""Process entry-point wrapper for the example scripts."""

import asyncio
import logging
import os
import sys
from typing import Any, Awaitable, Callable, Optional

from agentflow.config import Settings, get_settings
from agentflow.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def configure_tracing(settings: Settings) -> None:
    """Export LangSmith variables so LangChain model calls are traced."""
    if settings.langsmith_tracing and settings.langsmith_api_key:
        os.environ["LANGCHAIN_TRACING_V2"] = "true"
        os.environ["LANGCHAIN_ENDPOINT"] = settings.langsmith_endpoint
        os.environ["LANGCHAIN_API_KEY"] = settings.langsmith_api_key
        os.environ["LANGCHAIN_PROJECT"] = settings.langsmith_project
        logger.info("LangSmith tracing enabled for project: %s", settings.langsmith_project)


def run_script(
    main: Callable[[], Awaitable[Any]],
    settings: Optional[Settings] = None,
) -> int:
    """Run ``main`` to completion and return the process exit status.

    Unhandled errors are logged and reported on stderr; the status is then 1.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    configure_tracing(settings)
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except Exception as exc:
        logger.error("Unhandled error: %s", exc, exc_info=True)
        print(f"\n❌ Error: {exc}", file=sys.stderr)
        return 1
    return 0
