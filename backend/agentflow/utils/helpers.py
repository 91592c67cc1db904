"""Utility helper functions."""

from typing import Any, Sequence

BANNER_WIDTH = 60


def banner(title: str, width: int = BANNER_WIDTH) -> str:
    """Title framed by rule lines, as printed by the example scripts."""
    rule = "=" * width
    return f"{rule}\n{title}\n{rule}"


def last_message_content(messages: Sequence[Any]) -> Any:
    """Content of the final message, or ``None`` for an empty history."""
    if not messages:
        return None
    return getattr(messages[-1], "content", None)


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to maximum length."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
