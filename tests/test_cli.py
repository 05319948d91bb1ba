import json
from pathlib import Path

import pytest

from chatentities.cli import main


def test_extract_link(capsys):
    main(["extract", "check out https://example.com now"])
    out = json.loads(capsys.readouterr().out)
    assert out == {"links": [{"bounds": [10, 29], "url": "https://example.com"}]}


def test_extract_with_vocabulary(capsys, tmp_path: Path):
    manifest = tmp_path / "emotes.json"
    manifest.write_text(json.dumps({"emotes": [{"name": "Kappa"}]}), encoding="utf-8")
    main(["extract", "héllo Kappa @alice", "--emotes-manifest", str(manifest), "--nick", "alice"])
    out = json.loads(capsys.readouterr().out)
    assert out["emotes"] == [{"bounds": [7, 12], "name": "Kappa"}]
    assert out["mentions"] == [{"bounds": [13, 19], "nick": "alice"}]


def test_extract_char_offsets(capsys):
    main(["extract", "héllo Kappa", "--emote", "Kappa", "--offsets", "chars"])
    out = json.loads(capsys.readouterr().out)
    assert out["emotes"] == [{"bounds": [6, 11], "name": "Kappa"}]


def test_extract_no_links(capsys):
    main(["extract", "https://example.com", "--no-links"])
    assert json.loads(capsys.readouterr().out) == {}


def test_extract_chat(tmp_path: Path):
    log_path = tmp_path / "chat.jsonl"
    log_path.write_text(
        json.dumps({"nick": "alice", "data": "hi bob Kappa"})
        + "\n"
        + json.dumps({"nick": "bob", "data": "> see strims.gg"})
        + "\n",
        encoding="utf-8",
    )
    out_path = tmp_path / "entities.jsonl"
    main(["extract-chat", str(log_path), "--emote", "Kappa", "--out", str(out_path)])

    rows = [json.loads(line) for line in out_path.read_text(encoding="utf-8").splitlines()]
    assert [r["author"] for r in rows] == ["alice", "bob"]
    assert rows[0]["entities"] == {
        "emotes": [{"bounds": [7, 12], "name": "Kappa"}],
        "mentions": [{"bounds": [3, 6], "nick": "bob"}],
    }
    assert rows[1]["entities"] == {
        "links": [{"bounds": [6, 15], "url": "strims.gg"}],
        "greentext": [{"bounds": [0, 15]}],
    }


def test_missing_profile_exits_with_error(capsys, tmp_path: Path):
    with pytest.raises(SystemExit) as exc:
        main(["extract", "hi", "--profile", str(tmp_path / "missing.yaml")])
    assert exc.value.code == 2
    assert "Profile not found" in capsys.readouterr().err


def test_null_profile_sections_use_defaults(capsys, tmp_path: Path):
    profile = tmp_path / "profile.yaml"
    profile.write_text("output: null\nlinks: null\n", encoding="utf-8")
    main(["extract", "héllo https://x.io", "--profile", str(profile)])
    assert json.loads(capsys.readouterr().out) == {"links": [{"bounds": [7, 19], "url": "https://x.io"}]}

    main(["extract", "https://x.io", "--profile", str(profile), "--no-links"])
    assert json.loads(capsys.readouterr().out) == {}


def test_extract_chat_failure_keeps_existing_output(capsys, tmp_path: Path):
    profile = tmp_path / "profile.yaml"
    profile.write_text("walker:\n  max_depth: 0\n", encoding="utf-8")
    log_path = tmp_path / "chat.jsonl"
    log_path.write_text(
        json.dumps({"nick": "alice", "data": "hello"})
        + "\n"
        + json.dumps({"nick": "bob", "data": "||hidden||"})
        + "\n",
        encoding="utf-8",
    )
    out_path = tmp_path / "out" / "entities.jsonl"
    out_path.parent.mkdir()
    out_path.write_text("previous run\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main(["extract-chat", str(log_path), "--profile", str(profile), "--out", str(out_path)])

    assert exc.value.code == 2
    assert "max depth 0" in capsys.readouterr().err
    assert out_path.read_text(encoding="utf-8") == "previous run\n"
    assert sorted(p.name for p in out_path.parent.iterdir()) == ["entities.jsonl"]
