"""Utilities package."""

from agentflow.utils.helpers import banner, last_message_content, truncate_text
from agentflow.utils.logger import setup_logging
from agentflow.utils.runner import run_script

__all__ = [
    "setup_logging",
    "run_script",
    "banner",
    "last_message_content",
    "truncate_text",
]
