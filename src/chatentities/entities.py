"""Category-indexed entity model.

``Entities`` is what the pipeline hands back: one ordered list per category,
each holding ``Entity`` records with ``[start, end)`` bounds into the message.
Order within a category is the pre-order position of the source node in the
merged tree.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .parser.nodes import SpanKind
from .utils import utf8_offset_table


class EntityCategory(str, Enum):
    """Output category keys."""
    LINKS = "links"
    EMOTES = "emotes"
    MENTIONS = "mentions"
    TAGS = "tags"
    CODE = "code"
    SPOILER = "spoiler"
    GREENTEXT = "greentext"


SPAN_CATEGORIES: Dict[SpanKind, EntityCategory] = {
    SpanKind.CODE: EntityCategory.CODE,
    SpanKind.SPOILER: EntityCategory.SPOILER,
    SpanKind.GREENTEXT: EntityCategory.GREENTEXT,
}


class OffsetUnit(str, Enum):
    """Unit used for bounds when serializing."""
    UTF8 = "utf8"    # byte offsets into the UTF-8 encoded message
    CHARS = "chars"  # indices into the Python string


@dataclass(frozen=True)
class Entity:
    """A classified node: category, bounds and category-specific payload."""

    category: EntityCategory
    start: int
    end: int
    name: str = ""  # emotes, tags
    nick: str = ""  # mentions
    url: str = ""  # links
    modifiers: Tuple[str, ...] = ()  # emotes

    @property
    def bounds(self) -> Tuple[int, int]:
        return (self.start, self.end)

    def to_dict(self, table: Optional[List[int]] = None) -> Dict[str, Any]:
        start, end = self.start, self.end
        if table is not None:
            start, end = table[start], table[end]
        d: Dict[str, Any] = {"bounds": [start, end]}
        if self.name:
            d["name"] = self.name
        if self.nick:
            d["nick"] = self.nick
        if self.url:
            d["url"] = self.url
        if self.modifiers:
            d["modifiers"] = list(self.modifiers)
        return d


@dataclass
class Entities:
    """Entities of one message, grouped by category."""

    links: List[Entity] = field(default_factory=list)
    emotes: List[Entity] = field(default_factory=list)
    mentions: List[Entity] = field(default_factory=list)
    tags: List[Entity] = field(default_factory=list)
    code: List[Entity] = field(default_factory=list)
    spoiler: List[Entity] = field(default_factory=list)
    greentext: List[Entity] = field(default_factory=list)

    def add(self, entity: Entity) -> None:
        self.get(entity.category).append(entity)

    def get(self, category: EntityCategory) -> List[Entity]:
        return getattr(self, EntityCategory(category).value)

    def __iter__(self) -> Iterator[Entity]:
        for category in EntityCategory:
            yield from self.get(category)

    def __len__(self) -> int:
        return sum(len(self.get(c)) for c in EntityCategory)

    def counts(self) -> Dict[str, int]:
        """Number of records per non-empty category."""
        return {c.value: len(self.get(c)) for c in EntityCategory if self.get(c)}

    def to_dict(
        self,
        text: Optional[str] = None,
        *,
        offsets: OffsetUnit = OffsetUnit.UTF8,
    ) -> Dict[str, Any]:
        """Serialize, omitting empty categories.

        Args:
            text: The source message. Needed to convert bounds to UTF-8 byte
                offsets; without it bounds are emitted as string indices.
            offsets: Unit for emitted bounds.
        """
        table: Optional[List[int]] = None
        if text is not None and OffsetUnit(offsets) == OffsetUnit.UTF8 and not text.isascii():
            table = utf8_offset_table(text)

        out: Dict[str, Any] = {}
        for category in EntityCategory:
            records = self.get(category)
            if records:
                out[category.value] = [e.to_dict(table) for e in records]
        return out

    def to_json(
        self,
        text: Optional[str] = None,
        *,
        offsets: OffsetUnit = OffsetUnit.UTF8,
        indent: Optional[int] = None,
    ) -> str:
        return json.dumps(self.to_dict(text, offsets=offsets), ensure_ascii=False, indent=indent)
