"""Normalize chat logs from various sources into (author, text) messages.

Supports:
  - chat-replay-downloader JSON output
  - Twitch VOD chat (``commenter`` + ``message.body``/``fragments``)
  - Generic JSON / JSONL with ``message``/``text``/``body``/``content`` fields
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple


# Known timestamp field names to check
_TS_KEYS = (
    "time_in_seconds",
    "timestamp",
    "time",
    "ts",
    "offset",
    "seconds",
    "timestamp_ms",
    "time_ms",
    "offset_ms",
    "content_offset_seconds",
)


@dataclass
class ChatMessage:
    """A single normalized chat message."""

    author: str
    text: str = ""
    author_id: str = ""
    t_ms: Optional[int] = None  # Milliseconds, when the source carries a timestamp

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"author": self.author, "text": self.text}
        if self.author_id:
            d["author_id"] = self.author_id
        if self.t_ms is not None:
            d["t_ms"] = self.t_ms
        return d


def _parse_timestamp(val: Any, key: str) -> Optional[float]:
    """Parse a numeric timestamp value to seconds."""
    if isinstance(val, bool) or val is None:
        return None
    if isinstance(val, str):
        try:
            val = float(val.strip())
        except ValueError:
            return None
    if not isinstance(val, (int, float)):
        return None
    x = float(val)
    if "ms" in key.lower():
        return x / 1000.0
    # Epoch milliseconds are ~1e12+. Treat those as ms.
    if x >= 1e11:
        return x / 1000.0
    return x


def _extract_timestamp_ms(msg: Dict[str, Any]) -> Optional[int]:
    for key in _TS_KEYS:
        if key in msg:
            t_sec = _parse_timestamp(msg.get(key), key)
            if t_sec is not None:
                return max(0, int(t_sec * 1000))
    return None


def _extract_message_text(msg: Dict[str, Any]) -> str:
    """Extract message text from various formats."""
    for key in ("message", "text", "body", "content", "data"):
        if key in msg and isinstance(msg[key], str):
            return msg[key]

    fragments = msg.get("fragments")
    if isinstance(fragments, list) and fragments:
        parts = [f.get("text", "") for f in fragments if isinstance(f, dict)]
        if parts:
            return "".join(parts)

    # Nested message object (common in Twitch)
    inner = msg.get("message")
    if isinstance(inner, dict):
        if "body" in inner and isinstance(inner["body"], str):
            return inner["body"]
        return _extract_message_text(inner)

    return ""


def _extract_author(msg: Dict[str, Any]) -> Tuple[str, str]:
    """Extract (author_name, author_id) from message."""
    author = ""
    author_id = ""

    for key in ("author", "nick", "username", "user", "name", "display_name"):
        if key in msg and isinstance(msg[key], str):
            author = msg[key]
            break

    if "author" in msg and isinstance(msg["author"], dict):
        author_obj = msg["author"]
        author = author_obj.get("name", author_obj.get("display_name", ""))
        author_id = str(author_obj.get("id", author_obj.get("channel_id", "")))

    # Commenter object (Twitch)
    if "commenter" in msg and isinstance(msg["commenter"], dict):
        commenter = msg["commenter"]
        author = commenter.get("display_name", commenter.get("name", ""))
        author_id = str(commenter.get("_id", commenter.get("id", "")))

    if not author_id:
        for key in ("author_id", "user_id", "channel_id"):
            if key in msg:
                author_id = str(msg[key])
                break

    return author, author_id


def load_chat_data(path: Path) -> Any:
    """Load chat data from JSON or JSONL.

    Some tools emit newline-delimited JSON (JSONL); this loader accepts both.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Chat log not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        items: List[Dict[str, Any]] = []
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                items.append(obj)
        return items


def _raw_messages(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return [m for m in data if isinstance(m, dict)]
    if isinstance(data, dict):
        for key in ("messages", "chat", "items", "comments"):
            if key in data and isinstance(data[key], list):
                return [m for m in data[key] if isinstance(m, dict)]
    return []


def normalize_chat_messages(data: Any) -> List[ChatMessage]:
    """Normalize parsed chat data into ChatMessage list, keeping file order.

    Entries without any message text are skipped.
    """
    result: List[ChatMessage] = []
    for msg in _raw_messages(data):
        text = _extract_message_text(msg)
        if not text:
            continue
        author, author_id = _extract_author(msg)
        result.append(
            ChatMessage(
                author=author,
                text=text,
                author_id=author_id,
                t_ms=_extract_timestamp_ms(msg),
            )
        )
    return result


def roster_from_messages(messages: Iterable[ChatMessage]) -> Set[str]:
    """Authors seen in a chat log, usable as the nickname roster."""
    return {m.author for m in messages if m.author}


def load_and_normalize(path: Path) -> List[ChatMessage]:
    return normalize_chat_messages(load_chat_data(path))
