"""Chat message grammar: vocabularies, tokenizer, parser and node types."""

from .grammar import ParserContext, parse_message
from .lexer import Token, TokenKind, tokenize
from .nodes import Emote, Link, Mention, Node, Span, SpanKind, Tag, count_nodes, iter_nodes
from .vocabulary import (
    DEFAULT_EMOTE_MODIFIERS,
    DEFAULT_TAGS,
    Vocabulary,
    emotes_from_manifest,
    load_emote_manifest,
    load_user_list,
    nicks_from_user_list,
)

__all__ = [
    "ParserContext",
    "parse_message",
    "Token",
    "TokenKind",
    "tokenize",
    "Emote",
    "Link",
    "Mention",
    "Node",
    "Span",
    "SpanKind",
    "Tag",
    "count_nodes",
    "iter_nodes",
    "DEFAULT_EMOTE_MODIFIERS",
    "DEFAULT_TAGS",
    "Vocabulary",
    "emotes_from_manifest",
    "load_emote_manifest",
    "load_user_list",
    "nicks_from_user_list",
]
