from __future__ import annotations

import argparse
import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from .chat.normalize import ChatMessage, load_and_normalize, roster_from_messages
from .entities import OffsetUnit
from .errors import EntityError
from .logging_config import get_logger, resolve_level, setup_logging
from .parser.vocabulary import load_emote_manifest, load_user_list
from .pipeline import EntityExtractor
from .profile import load_profile

log = get_logger("cli")


def _extra_emotes(args: argparse.Namespace) -> List[str]:
    emotes: List[str] = list(args.emote or [])
    if args.emotes_manifest is not None:
        emotes.extend(load_emote_manifest(args.emotes_manifest))
    return emotes


def _extra_nicks(args: argparse.Namespace) -> List[str]:
    nicks: List[str] = list(args.nick or [])
    if args.users is not None:
        nicks.extend(load_user_list(args.users))
    return nicks


def _build_extractor(args: argparse.Namespace, profile: Dict[str, Any], nicks: List[str]) -> EntityExtractor:
    if args.no_links:
        profile["links"] = dict(profile.get("links") or {}, enabled=False)
    return EntityExtractor.from_profile(profile, emotes=_extra_emotes(args), nicks=nicks)


def _offsets(args: argparse.Namespace, profile: Dict[str, Any]) -> OffsetUnit:
    if args.offsets:
        return OffsetUnit(args.offsets)
    output_cfg = profile.get("output") or {}
    return OffsetUnit(output_cfg.get("offsets") or OffsetUnit.UTF8.value)


def _write_rows(out_f: TextIO, extractor: EntityExtractor, messages: List[ChatMessage], offsets: OffsetUnit) -> int:
    total = 0
    for msg in messages:
        entities = extractor.extract(msg.text)
        total += len(entities)
        row = msg.to_dict()
        row["entities"] = entities.to_dict(msg.text, offsets=offsets)
        out_f.write(json.dumps(row, ensure_ascii=False) + "\n")
    return total


def _write_rows_atomic(path: Path, extractor: EntityExtractor, messages: List[ChatMessage], offsets: OffsetUnit) -> int:
    """Write to a temp file beside ``path`` and replace it only on success."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp", prefix=path.stem + "_")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            total = _write_rows(f, extractor, messages, offsets)
        os.replace(tmp_path, str(path))
    finally:
        # Gone after a successful replace.
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
    return total


def cmd_extract(args: argparse.Namespace) -> None:
    profile = load_profile(args.profile)
    extractor = _build_extractor(args, profile, _extra_nicks(args))
    entities = extractor.extract(args.text)
    print(entities.to_json(args.text, offsets=_offsets(args, profile), indent=args.indent))


def cmd_extract_chat(args: argparse.Namespace) -> None:
    profile = load_profile(args.profile)
    messages = load_and_normalize(args.path)
    roster = roster_from_messages(messages)
    log.info("Loaded %d messages from %s (%d authors)", len(messages), args.path, len(roster))

    extractor = _build_extractor(args, profile, _extra_nicks(args) + sorted(roster))
    offsets = _offsets(args, profile)

    if args.out is not None:
        total = _write_rows_atomic(args.out, extractor, messages, offsets)
    else:
        total = _write_rows(sys.stdout, extractor, messages, offsets)

    log.info("Extracted %d entities from %d messages", total, len(messages))
    if args.out is not None:
        print(f"Wrote: {args.out}")


def _add_vocabulary_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--profile", type=Path, default=None, help="Path to a YAML profile")
    p.add_argument("--emote", action="append", default=None, help="Recognized emote name (repeatable)")
    p.add_argument("--emotes-manifest", type=Path, default=None, help="Local emote manifest JSON")
    p.add_argument("--nick", action="append", default=None, help="Recognized nickname (repeatable)")
    p.add_argument("--users", type=Path, default=None, help='User list JSON ({"users": [{"nick": ...}]})')
    p.add_argument("--offsets", choices=[u.value for u in OffsetUnit], default=None)
    p.add_argument("--no-links", action="store_true", help="Disable link detection")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="chatentities", description="Chat message entity extraction")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", type=Path, default=None)
    sub = parser.add_subparsers(dest="cmd", required=True)

    e = sub.add_parser("extract", help="Extract entities from a single message.")
    e.add_argument("text")
    e.add_argument("--indent", type=int, default=None)
    _add_vocabulary_args(e)
    e.set_defaults(func=cmd_extract)

    c = sub.add_parser("extract-chat", help="Extract entities for every message of a chat log (JSON/JSONL).")
    c.add_argument("path", type=Path)
    c.add_argument("--out", type=Path, default=None, help="Write JSON lines here instead of stdout")
    _add_vocabulary_args(c)
    c.set_defaults(func=cmd_extract_chat)

    args = parser.parse_args(argv)

    setup_logging(level=resolve_level(args.log_level), log_file=args.log_file)

    try:
        args.func(args)
    except (EntityError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
