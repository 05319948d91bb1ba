from pathlib import Path

import pytest

from chatentities.logging_config import _parse_module_levels, resolve_level
from chatentities.profile import default_profile, load_profile


def test_default_profile_when_no_path():
    assert load_profile(None) == default_profile()


def test_load_profile_merges_over_defaults(tmp_path: Path):
    path = tmp_path / "profile.yaml"
    path.write_text(
        "vocabulary:\n"
        "  emotes: [Kappa, LUL]\n"
        "walker:\n"
        "  max_depth: 16\n",
        encoding="utf-8",
    )
    profile = load_profile(path)
    assert profile["vocabulary"]["emotes"] == ["Kappa", "LUL"]
    assert profile["vocabulary"]["tags"] == default_profile()["vocabulary"]["tags"]
    assert profile["walker"]["max_depth"] == 16
    assert profile["links"]["enabled"] is True


def test_empty_profile_file(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_profile(path) == default_profile()


def test_missing_profile(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_profile(tmp_path / "missing.yaml")


def test_profile_must_be_mapping(tmp_path: Path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_profile(path)


def test_parse_module_levels():
    levels = _parse_module_levels("pipeline=DEBUG; chatentities.cli:info, bogus, x=NOPE")
    assert levels == {"chatentities.pipeline": 10, "chatentities.cli": 20}


def test_resolve_level():
    assert resolve_level("debug") == 10
    assert resolve_level(20) == 20
    assert resolve_level("nonsense") == 30
    assert resolve_level(None, default=40) == 40
