from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .parser.vocabulary import DEFAULT_EMOTE_MODIFIERS, DEFAULT_TAGS
from .utils import deep_merge


def default_profile() -> Dict[str, Any]:
    return {
        "vocabulary": {
            "emotes": [],
            "nicks": [],
            "tags": list(DEFAULT_TAGS),
            "emote_modifiers": list(DEFAULT_EMOTE_MODIFIERS),
            "emote_manifest": None,  # local path to an emote manifest JSON
        },
        "links": {
            "enabled": True,
        },
        "walker": {
            "max_depth": 64,  # deepest span nesting accepted
        },
        "output": {
            "offsets": "utf8",  # "utf8" (byte offsets) or "chars" (string indices)
        },
    }


def load_profile(profile_path: Optional[Path]) -> Dict[str, Any]:
    if profile_path is None:
        return default_profile()

    profile_path = Path(profile_path)
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Profile YAML must be a mapping")
    return deep_merge(default_profile(), data)
