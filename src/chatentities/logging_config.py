"""Logging setup for the chatentities command line and batch runs.

Usage:
    from chatentities.logging_config import setup_logging
    setup_logging(resolve_level("info"))  # once, at startup

Library modules only call ``logging.getLogger(__name__)``; nothing is
configured unless the application asks for it. The merge and walk core does
not log at all.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

ROOT_LOGGER = "chatentities"
MODULE_LEVELS_ENV = "CE_LOG_MODULE_LEVELS"

_CONFIGURED = False


def resolve_level(level: Union[int, str, None], default: int = logging.WARNING) -> int:
    """Turn ``"debug"``/``"INFO"``/``10`` into a logging level, falling back to ``default``."""
    if isinstance(level, int):
        return level
    if not level:
        return default
    value = getattr(logging, str(level).strip().upper(), None)
    return value if isinstance(value, int) else default


def _parse_module_levels(value: str) -> Dict[str, int]:
    """Parse per-module levels, e.g. ``"pipeline=DEBUG;chatentities.cli:INFO"``.

    Names are prefixed with ``chatentities.`` when needed; entries that do not
    parse are ignored.
    """
    out: Dict[str, int] = {}
    for part in re.split(r"[;,]+", value or ""):
        name, sep, level_str = part.strip().replace(":", "=", 1).partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        level = getattr(logging, level_str.strip().upper(), None) if level_str.strip() else None
        if not isinstance(level, int):
            continue
        if not name.startswith(ROOT_LOGGER):
            name = f"{ROOT_LOGGER}.{name}"
        out[name] = level
    return out


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> None:
    """Attach stderr (and optionally file) handlers to the package logger.

    Only the first call has an effect. stdout is left alone because it
    carries the entity JSON.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    formatter = logging.Formatter(
        format_string or "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        # Per-module overrides may go below the package level.
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False

    for name, lvl in _parse_module_levels(os.getenv(MODULE_LEVELS_ENV, "")).items():
        logging.getLogger(name).setLevel(lvl)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Logger under the package namespace ('cli' -> 'chatentities.cli')."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
