"""Parse, detect links, merge and walk: the per-message extraction pipeline."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .entities import Entities
from .links import find_links
from .merge import DEFAULT_MAX_DEPTH, merge_links
from .parser.grammar import ParserContext, parse_message
from .parser.vocabulary import Vocabulary
from .walker import walk

log = logging.getLogger(__name__)

LinkFinder = Callable[[str], Sequence[Tuple[int, int]]]


def extract_entities(
    ctx: ParserContext,
    text: str,
    *,
    link_finder: Optional[LinkFinder] = find_links,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Entities:
    """Extract the entity model of one message.

    Args:
        ctx: Parser context built from the vocabulary.
        text: Raw message text.
        link_finder: Returns sorted, non-overlapping link intervals for
            ``text``; ``None`` disables link detection.
        max_depth: Maximum span nesting accepted by merge and walk.
    """
    tree = parse_message(ctx, text)
    if link_finder is not None:
        tree = merge_links(tree, link_finder(text), text, max_depth=max_depth)
    return walk(tree, max_depth=max_depth)


class EntityExtractor:
    """Reusable extractor bound to one vocabulary.

    The parser context is built once; ``extract`` can be called from several
    threads at a time.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        *,
        detect_links: bool = True,
        link_finder: LinkFinder = find_links,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.vocabulary = vocabulary
        self.ctx = ParserContext(vocabulary)
        self.link_finder: Optional[LinkFinder] = link_finder if detect_links else None
        self.max_depth = int(max_depth)
        log.debug(
            "Extractor ready: %d emotes, %d nicks, %d tags, %d modifiers",
            len(vocabulary.emotes),
            len(vocabulary.nicks),
            len(vocabulary.tags),
            len(vocabulary.emote_modifiers),
        )

    @classmethod
    def from_profile(
        cls,
        profile: Dict[str, Any],
        *,
        emotes: Optional[Iterable[str]] = None,
        nicks: Optional[Iterable[str]] = None,
    ) -> "EntityExtractor":
        vocabulary = Vocabulary.from_profile(profile, emotes=emotes, nicks=nicks)
        links_cfg = profile.get("links", {}) or {}
        walker_cfg = profile.get("walker", {}) or {}
        return cls(
            vocabulary,
            detect_links=bool(links_cfg.get("enabled", True)),
            max_depth=int(walker_cfg.get("max_depth", DEFAULT_MAX_DEPTH)),
        )

    def with_vocabulary(self, vocabulary: Vocabulary) -> "EntityExtractor":
        """Return a new extractor with the same settings and another vocabulary."""
        out = EntityExtractor(vocabulary, max_depth=self.max_depth)
        out.link_finder = self.link_finder
        return out

    def extract(self, text: str) -> Entities:
        entities = extract_entities(self.ctx, text, link_finder=self.link_finder, max_depth=self.max_depth)
        if log.isEnabledFor(logging.DEBUG):
            log.debug("Extracted %d entities from %d chars: %s", len(entities), len(text), entities.counts())
        return entities

    def extract_many(self, messages: Iterable[str]) -> Iterator[Tuple[str, Entities]]:
        for text in messages:
            yield text, self.extract(text)

    def extract_all(self, messages: Iterable[str]) -> List[Entities]:
        return [entities for _, entities in self.extract_many(messages)]
