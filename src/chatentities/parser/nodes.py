"""Node types produced by the chat grammar.

The node set is closed: a tree is made of ``Span`` nodes (which own an
ordered list of children) and the leaf kinds ``Emote``, ``Mention``, ``Tag``
and ``Link``. Offsets are ``[start, end)`` indices into the message string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple, Union


class SpanKind(str, Enum):
    """Kind of a bracketed region."""
    MESSAGE = "message"
    CODE = "code"
    SPOILER = "spoiler"
    GREENTEXT = "greentext"


@dataclass(frozen=True)
class Emote:
    name: str
    start: int
    end: int
    modifiers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Mention:
    nick: str
    start: int
    end: int


@dataclass(frozen=True)
class Tag:
    name: str
    start: int
    end: int


@dataclass(frozen=True)
class Link:
    url: str
    start: int
    end: int


@dataclass
class Span:
    """A region of the message with ordered, non-overlapping children."""

    kind: SpanKind
    start: int
    end: int
    nodes: List["Node"] = field(default_factory=list)

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end


Leaf = Union[Emote, Mention, Tag, Link]
Node = Union[Span, Emote, Mention, Tag, Link]

LEAF_TYPES = (Emote, Mention, Tag, Link)


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node of a tree in pre-order, depth-first order."""
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Span):
            stack.extend(reversed(node.nodes))


def count_nodes(root: Node) -> int:
    return sum(1 for _ in iter_nodes(root))
