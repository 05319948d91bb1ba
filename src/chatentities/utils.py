"""Shared utility functions for chatentities.

This module provides common utilities used across multiple modules:
- utf8_offset_table(): map string indices to UTF-8 byte offsets
- deep_merge(): overlay nested config mappings
"""

from __future__ import annotations

from typing import Any, Dict, List


def utf8_offset_table(text: str) -> List[int]:
    """Return a table mapping each string index (0..len) to a UTF-8 byte offset.

    Usage:
        table = utf8_offset_table("héllo")
        table[2]  # -> 3, "é" takes two bytes
    """
    table = [0] * (len(text) + 1)
    pos = 0
    for i, ch in enumerate(text):
        table[i] = pos
        pos += len(ch.encode("utf-8", "surrogatepass"))
    table[len(text)] = pos
    return table


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated with ``override``, merging nested dicts."""
    out = dict(base)
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], val)
        else:
            out[key] = val
    return out
