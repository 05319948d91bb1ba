"""Tokenizer for chat messages."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List


class TokenKind(str, Enum):
    WORD = "word"
    SPACE = "space"
    BACKTICK = "backtick"
    SPOILER = "spoiler"
    GT = "gt"
    COLON = "colon"
    AT = "at"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    text: str


# Order matters: "||" must win over a lone "|" (which falls through to OTHER).
_TOKEN_RE = re.compile(
    r"(?P<word>\w+)"
    r"|(?P<space>\s+)"
    r"|(?P<backtick>`)"
    r"|(?P<spoiler>\|\|)"
    r"|(?P<gt>>)"
    r"|(?P<colon>:)"
    r"|(?P<at>@)"
    r"|(?P<other>.)",
    re.DOTALL,
)


def tokenize(text: str) -> List[Token]:
    """Split ``text`` into tokens covering every character exactly once."""
    tokens: List[Token] = []
    for m in _TOKEN_RE.finditer(text):
        kind = TokenKind(m.lastgroup)
        tokens.append(Token(kind=kind, start=m.start(), end=m.end(), text=m.group()))
    return tokens
