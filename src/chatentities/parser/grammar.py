"""Recursive descent parser for chat messages.

Grammar (informal):

    message   := [ ">" inline* ]  (greentext, rest of the message)
               | inline*
    inline    := code | spoiler | mention | word | other
    code      := "`" any* ( "`" | EOF )        content is not classified
    spoiler   := "||" inline* ( "||" | EOF )    spoilers do not nest
    mention   := "@"? NICK
    word      := EMOTE ( ":" MODIFIER )* | NICK | TAG | plain word

Emote names match case-sensitively; nicks, tags and modifiers match
case-insensitively and are reported with the vocabulary's spelling.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .lexer import Token, TokenKind, tokenize
from .nodes import Emote, Mention, Node, Span, SpanKind, Tag
from .vocabulary import Vocabulary


class ParserContext:
    """Read-only lookup tables derived from a ``Vocabulary``.

    Safe to share between threads; build a new one when the vocabulary changes.
    """

    def __init__(self, vocabulary: Vocabulary):
        self.vocabulary = vocabulary
        self._emotes = vocabulary.emotes
        self._nicks: Dict[str, str] = {n.lower(): n for n in sorted(vocabulary.nicks)}
        self._tags: Dict[str, str] = {t.lower(): t for t in sorted(vocabulary.tags)}
        self._modifiers: Dict[str, str] = {m.lower(): m for m in sorted(vocabulary.emote_modifiers)}

    def is_emote(self, word: str) -> bool:
        return word in self._emotes

    def nick(self, word: str) -> Optional[str]:
        return self._nicks.get(word.lower())

    def tag(self, word: str) -> Optional[str]:
        return self._tags.get(word.lower())

    def modifier(self, word: str) -> Optional[str]:
        return self._modifiers.get(word.lower())


class _Parser:
    def __init__(self, ctx: ParserContext, text: str):
        self.ctx = ctx
        self.text = text
        self.tokens: List[Token] = tokenize(text)
        self.pos = 0

    def _peek(self, offset: int = 0) -> Optional[Token]:
        i = self.pos + offset
        if i < len(self.tokens):
            return self.tokens[i]
        return None

    def parse(self) -> Span:
        root = Span(kind=SpanKind.MESSAGE, start=0, end=len(self.text))

        while self._peek() is not None and self._peek().kind == TokenKind.SPACE:
            self.pos += 1

        tok = self._peek()
        if tok is not None and tok.kind == TokenKind.GT:
            self.pos += 1
            greentext = Span(kind=SpanKind.GREENTEXT, start=tok.start, end=len(self.text))
            greentext.nodes = self._parse_inline(in_spoiler=False)
            root.nodes.append(greentext)
        else:
            root.nodes = self._parse_inline(in_spoiler=False)
        return root

    def _parse_inline(self, *, in_spoiler: bool) -> List[Node]:
        nodes: List[Node] = []
        while True:
            tok = self._peek()
            if tok is None:
                return nodes

            if tok.kind == TokenKind.SPOILER:
                if in_spoiler:
                    return nodes
                nodes.append(self._parse_spoiler())
            elif tok.kind == TokenKind.BACKTICK:
                nodes.append(self._parse_code())
            elif tok.kind == TokenKind.AT:
                node = self._parse_at()
                if node is not None:
                    nodes.append(node)
            elif tok.kind == TokenKind.WORD:
                node = self._parse_word()
                if node is not None:
                    nodes.append(node)
            else:
                self.pos += 1

    def _parse_code(self) -> Span:
        open_tok = self.tokens[self.pos]
        self.pos += 1
        while self.pos < len(self.tokens):
            tok = self.tokens[self.pos]
            self.pos += 1
            if tok.kind == TokenKind.BACKTICK:
                return Span(kind=SpanKind.CODE, start=open_tok.start, end=tok.end)
        return Span(kind=SpanKind.CODE, start=open_tok.start, end=len(self.text))

    def _parse_spoiler(self) -> Span:
        open_tok = self.tokens[self.pos]
        self.pos += 1
        children = self._parse_inline(in_spoiler=True)
        close = self._peek()
        if close is not None and close.kind == TokenKind.SPOILER:
            self.pos += 1
            end = close.end
        else:
            end = len(self.text)
        return Span(kind=SpanKind.SPOILER, start=open_tok.start, end=end, nodes=children)

    def _parse_at(self) -> Optional[Node]:
        at = self.tokens[self.pos]
        word = self._peek(1)
        if word is not None and word.kind == TokenKind.WORD and word.start == at.end:
            nick = self.ctx.nick(word.text)
            if nick is not None:
                self.pos += 2
                return Mention(nick=nick, start=at.start, end=word.end)
        self.pos += 1
        return None

    def _parse_word(self) -> Optional[Node]:
        tok = self.tokens[self.pos]
        self.pos += 1

        if self.ctx.is_emote(tok.text):
            return self._parse_emote_modifiers(tok)

        nick = self.ctx.nick(tok.text)
        if nick is not None:
            return Mention(nick=nick, start=tok.start, end=tok.end)

        tag = self.ctx.tag(tok.text)
        if tag is not None:
            return Tag(name=tag, start=tok.start, end=tok.end)

        return None

    def _parse_emote_modifiers(self, tok: Token) -> Emote:
        modifiers: List[str] = []
        end = tok.end
        while True:
            colon, word = self._peek(), self._peek(1)
            if colon is None or colon.kind != TokenKind.COLON or colon.start != end:
                break
            if word is None or word.kind != TokenKind.WORD:
                break
            modifier = self.ctx.modifier(word.text)
            if modifier is None:
                break
            modifiers.append(modifier)
            end = word.end
            self.pos += 2
        return Emote(name=tok.text, start=tok.start, end=end, modifiers=tuple(modifiers))


def parse_message(ctx: ParserContext, text: str) -> Span:
    """Parse ``text`` into a tree rooted at a MESSAGE span covering the whole text."""
    return _Parser(ctx, text).parse()
