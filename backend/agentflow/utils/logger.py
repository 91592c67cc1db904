"""Logging configuration."""

import logging
import sys
from typing import Optional, TextIO

from pythonjsonlogger import jsonlogger

from agentflow.config import Settings, get_settings

# Chatty client libraries underneath the model and search providers
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(settings: Optional[Settings] = None, stream: Optional[TextIO] = None) -> None:
    """Configure the root logger for a script run.

    ``DEBUG=true`` forces debug output regardless of ``LOG_LEVEL``.
    """
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(_build_formatter(settings.log_format))
    root.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug("Logging configured: level=%s, format=%s", logging.getLevelName(log_level), settings.log_format)
