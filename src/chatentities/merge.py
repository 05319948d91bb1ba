"""Merge detected link intervals into a parsed message tree.

Links are found by scanning the raw text, independently of the grammar, so
they have to be placed into the tree afterwards. Each interval becomes a
``Link`` leaf under the innermost span that fully contains it, positioned so
that siblings stay ordered by start offset. A link whose start equals an
existing sibling's start goes in front of it.

A link that only partially overlaps a leaf (an emote name inside a URL) or a
span boundary is not split; it is inserted as a sibling and the overlap is
kept.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidBounds, MalformedTree, RecursionLimitExceeded
from .parser.nodes import Link, Span, SpanKind

DEFAULT_MAX_DEPTH = 64


def check_intervals(intervals: Iterable[Sequence[int]], length: int) -> List[Tuple[int, int]]:
    """Validate link intervals against a message of ``length`` characters.

    Returns the intervals as ``(start, end)`` tuples. Raises ``InvalidBounds``
    if an interval is empty, out of range, unsorted or overlaps the previous one.
    """
    out: List[Tuple[int, int]] = []
    prev_end = 0
    for item in intervals:
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise InvalidBounds(f"link interval must be a (start, end) pair: {item!r}")
        start, end = item
        # bool is an int subclass; floats are rejected rather than truncated.
        if any(isinstance(v, bool) or not isinstance(v, int) for v in (start, end)):
            raise InvalidBounds(f"link interval bounds must be integers: {item!r}")
        if start < 0 or end > length:
            raise InvalidBounds(f"link interval [{start}, {end}) outside message of length {length}")
        if start >= end:
            raise InvalidBounds(f"link interval [{start}, {end}) is empty")
        if start < prev_end:
            raise InvalidBounds(f"link interval [{start}, {end}) is unsorted or overlaps the previous one")
        out.append((start, end))
        prev_end = end
    return out


def _copy_span(span: Span, depth: int, max_depth: int) -> Span:
    if depth > max_depth:
        raise RecursionLimitExceeded(max_depth)
    nodes = [_copy_span(n, depth + 1, max_depth) if isinstance(n, Span) else n for n in span.nodes]
    return Span(kind=span.kind, start=span.start, end=span.end, nodes=nodes)


def _containing_span(span: Span, start: int, end: int) -> Optional[Span]:
    # Sibling spans never overlap, so only the last span starting at or before
    # ``start`` can contain the interval.
    starts = [n.start for n in span.nodes]
    hi = bisect_right(starts, start)
    for node in reversed(span.nodes[:hi]):
        if isinstance(node, Span):
            return node if node.contains(start, end) else None
    return None


def _insert_link(root: Span, link: Link, max_depth: int) -> None:
    span = root
    depth = 0
    while True:
        child = _containing_span(span, link.start, link.end)
        if child is None:
            break
        depth += 1
        if depth > max_depth:
            raise RecursionLimitExceeded(max_depth)
        span = child

    idx = bisect_left([n.start for n in span.nodes], link.start)
    span.nodes.insert(idx, link)


def merge_links(
    root: Span,
    intervals: Iterable[Sequence[int]],
    text: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Span:
    """Return a copy of ``root`` with one ``Link`` leaf per interval.

    Args:
        root: MESSAGE span covering all of ``text``.
        intervals: ``(start, end)`` pairs sorted by start, non-overlapping.
        text: The message the tree and the intervals refer to.
        max_depth: Maximum span nesting to descend through.

    The input tree is left untouched.
    """
    if not isinstance(root, Span) or root.kind != SpanKind.MESSAGE:
        raise MalformedTree("tree root must be a MESSAGE span")
    if root.start != 0 or root.end != len(text):
        raise MalformedTree(
            f"root span [{root.start}, {root.end}) does not cover message of length {len(text)}"
        )

    checked = check_intervals(intervals, len(text))
    merged = _copy_span(root, 0, max_depth)
    for start, end in checked:
        _insert_link(merged, Link(url=text[start:end], start=start, end=end), max_depth)
    return merged
