"""Helpers to parse Chat Completions outputs."""

from typing import Any, Dict, Optional


def extract_message_text(completion: Any) -> str:
    """Return the stripped content of the first choice, or an empty string."""
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    return (content or "").strip()


def extract_usage(completion: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the completion, if present."""
    usage = getattr(completion, "usage", None)
    return {
        "input_tokens": getattr(usage, "prompt_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "completion_tokens", None) if usage else None,
    }
