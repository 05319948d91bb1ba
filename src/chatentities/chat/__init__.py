"""Chat log input for batch entity extraction.

Loads chat logs (JSON or JSONL) and turns them into messages whose authors
double as the nickname roster.
"""

from .normalize import (
    ChatMessage,
    load_and_normalize,
    load_chat_data,
    normalize_chat_messages,
    roster_from_messages,
)

__all__ = [
    "ChatMessage",
    "load_and_normalize",
    "load_chat_data",
    "normalize_chat_messages",
    "roster_from_messages",
]
