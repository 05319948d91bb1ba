"""Relaxed URL detection over raw message text.

Finds scheme URLs (``https://...``), ``www.`` hosts and bare ``host.tld``
names. Links are not part of the chat grammar; the intervals returned here
are merged into the parser tree by ``merge.merge_links``. A URL stops at a
backtick or a pipe so it never runs across a code or spoiler delimiter.
"""

from __future__ import annotations

import re
from typing import List, Tuple

# Common generic and country TLDs for scheme-less matches.
_TLDS = (
    "com|net|org|edu|gov|mil|int|io|gg|tv|co|me|ly|be|to|fm|am|sh|so|ai|app|dev|"
    "xyz|info|biz|club|live|online|site|tech|store|blog|news|link|moe|"
    "uk|us|ca|au|de|fr|nl|se|no|fi|dk|pl|ru|jp|kr|cn|in|br|it|es|ch|at|eu|cz|nz|ie|pt"
)

_URL_RE = re.compile(
    r"(?i)\b(?:"
    r"(?:https?|ftp|wss?)://[^\s<>\"`|]+"
    r"|www\.[^\s<>\"`|]+"
    r"|(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+(?:" + _TLDS + r")\b"
    r"(?::\d{1,5})?(?:[/?#][^\s<>\"`|]*)?"
    r")"
)

_TRAILING_PUNCT = ".,:;!?'*"
_PAIRS = {")": "(", "]": "[", "}": "{"}


def _trim_end(url: str) -> int:
    """Return the length of ``url`` once trailing punctuation is dropped."""
    end = len(url)
    while end > 0:
        ch = url[end - 1]
        if ch in _TRAILING_PUNCT:
            end -= 1
            continue
        opener = _PAIRS.get(ch)
        if opener is not None and url.count(opener, 0, end) < url.count(ch, 0, end):
            end -= 1
            continue
        break
    return end


def find_links(text: str) -> List[Tuple[int, int]]:
    """Return ``[start, end)`` intervals of URLs in ``text``.

    Intervals are sorted by start, non-empty and never overlap.
    """
    out: List[Tuple[int, int]] = []
    for m in _URL_RE.finditer(text):
        length = _trim_end(m.group())
        if length <= 0:
            continue
        out.append((m.start(), m.start() + length))
    return out
