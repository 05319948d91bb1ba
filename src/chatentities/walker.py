"""Classify a merged message tree into entities.

Every node is visited once, pre-order and depth-first. Code, spoiler and
greentext spans record their own bounds before their children, so a span
always precedes the entities nested in it. The root MESSAGE span is never
recorded. The tree is checked while it is walked; a tree that breaks the
containment or ordering rules raises ``MalformedTree`` instead of producing
a partial result.
"""

from __future__ import annotations

from .entities import SPAN_CATEGORIES, Entities, Entity, EntityCategory
from .errors import MalformedTree, RecursionLimitExceeded
from .merge import DEFAULT_MAX_DEPTH
from .parser.nodes import LEAF_TYPES, Emote, Link, Mention, Node, Span, SpanKind, Tag

NODE_TYPES = (Span,) + LEAF_TYPES


def _describe(node: Node) -> str:
    return f"{type(node).__name__}[{node.start}, {node.end})"


def _walk_span(span: Span, entities: Entities, depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise RecursionLimitExceeded(max_depth)

    prev_start = span.start
    prev_end = span.start  # end of the last non-link sibling
    for node in span.nodes:
        if not isinstance(node, NODE_TYPES):
            raise MalformedTree(f"unknown node type {type(node).__name__}")
        if node.start > node.end:
            raise MalformedTree(f"{_describe(node)} has start after end")
        if not span.contains(node.start, node.end):
            raise MalformedTree(f"{_describe(node)} is outside its parent {_describe(span)}")
        if node.start < prev_start:
            raise MalformedTree(f"{_describe(node)} is out of order")
        # Links are an overlay and may overlap grammar tokens.
        if not isinstance(node, Link):
            if node.start < prev_end:
                raise MalformedTree(f"{_describe(node)} overlaps a previous sibling")
            prev_end = node.end
        prev_start = node.start

        if isinstance(node, Span):
            category = SPAN_CATEGORIES.get(node.kind)
            if category is None:
                raise MalformedTree(f"{_describe(node)} has kind {node.kind.value} below the root")
            entities.add(Entity(category=category, start=node.start, end=node.end))
            _walk_span(node, entities, depth + 1, max_depth)
        elif isinstance(node, Emote):
            entities.add(
                Entity(
                    category=EntityCategory.EMOTES,
                    start=node.start,
                    end=node.end,
                    name=node.name,
                    modifiers=node.modifiers,
                )
            )
        elif isinstance(node, Mention):
            entities.add(Entity(category=EntityCategory.MENTIONS, start=node.start, end=node.end, nick=node.nick))
        elif isinstance(node, Tag):
            entities.add(Entity(category=EntityCategory.TAGS, start=node.start, end=node.end, name=node.name))
        elif isinstance(node, Link):
            entities.add(Entity(category=EntityCategory.LINKS, start=node.start, end=node.end, url=node.url))
        else:
            raise MalformedTree(f"unknown node type {type(node).__name__}")


def walk(root: Span, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Entities:
    """Produce the entity model of a merged tree.

    Raises:
        MalformedTree: bounds, ordering or node kinds are invalid.
        RecursionLimitExceeded: spans nest deeper than ``max_depth``.
    """
    if not isinstance(root, Span) or root.kind != SpanKind.MESSAGE:
        raise MalformedTree("tree root must be a MESSAGE span")
    if root.start != 0 or root.end < root.start:
        raise MalformedTree(f"root span [{root.start}, {root.end}) must start at 0")

    entities = Entities()
    _walk_span(root, entities, 0, max_depth)
    return entities
