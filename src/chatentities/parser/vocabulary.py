"""Recognized vocabularies for the chat grammar.

A ``Vocabulary`` is built once (from an emote manifest and the roster of
present users) and handed to ``ParserContext``. It is never mutated:
refreshing it means building a new one, e.g.

    vocab = Vocabulary.from_profile(profile, emotes=load_emote_manifest(path))
    vocab = vocab.with_nicks(nicks_from_user_list(names_payload))
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

log = logging.getLogger(__name__)


DEFAULT_TAGS = ("nsfw", "weeb", "nsfl", "loud")

DEFAULT_EMOTE_MODIFIERS = (
    "mirror",
    "flip",
    "rain",
    "snow",
    "rustle",
    "worth",
    "love",
    "spin",
    "wide",
    "lag",
    "hyper",
)


def _clean(values: Optional[Iterable[Any]]) -> FrozenSet[str]:
    if not values:
        return frozenset()
    out = set()
    for v in values:
        if isinstance(v, str) and v.strip():
            out.add(v.strip())
    return frozenset(out)


@dataclass(frozen=True)
class Vocabulary:
    """Emote names, nicknames, tags and emote modifiers the parser recognizes."""

    emotes: FrozenSet[str] = frozenset()
    nicks: FrozenSet[str] = frozenset()
    tags: FrozenSet[str] = frozenset(DEFAULT_TAGS)
    emote_modifiers: FrozenSet[str] = frozenset(DEFAULT_EMOTE_MODIFIERS)

    @classmethod
    def create(
        cls,
        *,
        emotes: Optional[Iterable[str]] = None,
        nicks: Optional[Iterable[str]] = None,
        tags: Optional[Iterable[str]] = None,
        emote_modifiers: Optional[Iterable[str]] = None,
    ) -> "Vocabulary":
        return cls(
            emotes=_clean(emotes),
            nicks=_clean(nicks),
            tags=_clean(DEFAULT_TAGS if tags is None else tags),
            emote_modifiers=_clean(DEFAULT_EMOTE_MODIFIERS if emote_modifiers is None else emote_modifiers),
        )

    @classmethod
    def from_profile(
        cls,
        profile: Dict[str, Any],
        *,
        emotes: Optional[Iterable[str]] = None,
        nicks: Optional[Iterable[str]] = None,
    ) -> "Vocabulary":
        """Build a vocabulary from the ``vocabulary`` section of a profile.

        Extra ``emotes``/``nicks`` are added to whatever the profile lists. If
        the profile names an ``emote_manifest`` file, its emotes are loaded too.
        """
        cfg = profile.get("vocabulary", {}) or {}
        all_emotes: List[str] = list(cfg.get("emotes") or [])
        manifest = cfg.get("emote_manifest")
        if manifest:
            all_emotes.extend(load_emote_manifest(Path(manifest)))
        if emotes:
            all_emotes.extend(emotes)

        all_nicks: List[str] = list(cfg.get("nicks") or [])
        if nicks:
            all_nicks.extend(nicks)

        return cls.create(
            emotes=all_emotes,
            nicks=all_nicks,
            tags=cfg.get("tags"),
            emote_modifiers=cfg.get("emote_modifiers"),
        )

    def with_emotes(self, emotes: Iterable[str]) -> "Vocabulary":
        return replace(self, emotes=_clean(emotes))

    def with_nicks(self, nicks: Iterable[str]) -> "Vocabulary":
        return replace(self, nicks=_clean(nicks))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emotes": sorted(self.emotes),
            "nicks": sorted(self.nicks),
            "tags": sorted(self.tags),
            "emote_modifiers": sorted(self.emote_modifiers),
        }


def emotes_from_manifest(data: Any) -> List[str]:
    """Extract emote names from a parsed manifest ``{"emotes": [{"name": ...}]}``."""
    if not isinstance(data, dict):
        raise ValueError("Emote manifest must be a JSON object")
    items = data.get("emotes")
    if not isinstance(items, list):
        raise ValueError("Emote manifest is missing an 'emotes' list")

    names: List[str] = []
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("name"), str):
            names.append(item["name"])
        elif isinstance(item, str):
            names.append(item)
    return names


def load_emote_manifest(path: Path) -> List[str]:
    """Read emote names from a local emote manifest file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Emote manifest not found: {path}")
    names = emotes_from_manifest(json.loads(path.read_text(encoding="utf-8")))
    log.info("Loaded %d emotes from %s", len(names), path)
    return names


def nicks_from_user_list(data: Any) -> List[str]:
    """Extract nicknames from a user list payload ``{"users": [{"nick": ...}]}``."""
    if isinstance(data, str):
        data = json.loads(data)
    if not isinstance(data, dict):
        raise ValueError("User list must be a JSON object")
    users = data.get("users")
    if not isinstance(users, list):
        raise ValueError("User list is missing a 'users' list")
    return [u["nick"] for u in users if isinstance(u, dict) and isinstance(u.get("nick"), str)]


def load_user_list(path: Path) -> List[str]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"User list not found: {path}")
    nicks = nicks_from_user_list(path.read_text(encoding="utf-8"))
    log.info("Loaded %d nicks from %s", len(nicks), path)
    return nicks
