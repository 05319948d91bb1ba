import json
from pathlib import Path

import pytest

from chatentities.parser.vocabulary import (
    DEFAULT_EMOTE_MODIFIERS,
    DEFAULT_TAGS,
    Vocabulary,
    emotes_from_manifest,
    load_emote_manifest,
    load_user_list,
    nicks_from_user_list,
)
from chatentities.profile import default_profile


class TestVocabulary:
    def test_defaults(self):
        vocab = Vocabulary.create()
        assert vocab.emotes == frozenset()
        assert vocab.nicks == frozenset()
        assert vocab.tags == frozenset(DEFAULT_TAGS)
        assert vocab.emote_modifiers == frozenset(DEFAULT_EMOTE_MODIFIERS)

    def test_blank_entries_dropped(self):
        vocab = Vocabulary.create(emotes=["Kappa", "", "  ", None, " LUL "])
        assert vocab.emotes == frozenset({"Kappa", "LUL"})

    def test_is_immutable(self):
        vocab = Vocabulary.create(nicks=["alice"])
        updated = vocab.with_nicks(["bob"])
        assert vocab.nicks == frozenset({"alice"})
        assert updated.nicks == frozenset({"bob"})
        with pytest.raises(AttributeError):
            vocab.nicks = frozenset()

    def test_from_profile_with_manifest(self, tmp_path: Path):
        manifest = tmp_path / "emote-manifest.json"
        manifest.write_text(json.dumps({"emotes": [{"name": "PepeLaugh"}]}), encoding="utf-8")
        profile = default_profile()
        profile["vocabulary"]["emote_manifest"] = str(manifest)
        profile["vocabulary"]["emotes"] = ["Kappa"]
        profile["vocabulary"]["nicks"] = ["alice"]

        vocab = Vocabulary.from_profile(profile, emotes=["LUL"], nicks=["bob"])
        assert vocab.emotes == frozenset({"Kappa", "PepeLaugh", "LUL"})
        assert vocab.nicks == frozenset({"alice", "bob"})

    def test_to_dict_sorted(self):
        d = Vocabulary.create(emotes=["b", "a"], tags=[], emote_modifiers=[]).to_dict()
        assert d == {"emotes": ["a", "b"], "nicks": [], "tags": [], "emote_modifiers": []}


class TestManifest:
    def test_emotes_from_manifest(self):
        data = {"emotes": [{"name": "Kappa"}, {"name": "LUL", "versions": []}, "PepeLaugh", {"id": 3}]}
        assert emotes_from_manifest(data) == ["Kappa", "LUL", "PepeLaugh"]

    @pytest.mark.parametrize("data", [[], {"emotes": "Kappa"}, {}])
    def test_bad_manifest(self, data):
        with pytest.raises(ValueError):
            emotes_from_manifest(data)

    def test_load_manifest_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_emote_manifest(tmp_path / "nope.json")


class TestUserList:
    def test_nicks_from_user_list(self):
        payload = {"users": [{"nick": "alice", "features": []}, {"nick": "bob"}, {"name": "x"}]}
        assert nicks_from_user_list(payload) == ["alice", "bob"]
        assert nicks_from_user_list(json.dumps(payload)) == ["alice", "bob"]

    def test_bad_user_list(self):
        with pytest.raises(ValueError):
            nicks_from_user_list({"connectioncount": 3})

    def test_load_user_list(self, tmp_path: Path):
        path = tmp_path / "names.json"
        path.write_text(json.dumps({"users": [{"nick": "carol"}]}), encoding="utf-8")
        assert load_user_list(path) == ["carol"]
