import json

from chatentities.entities import Entities, Entity, EntityCategory, OffsetUnit
from chatentities.utils import utf8_offset_table


class TestEntities:
    def test_add_routes_by_category(self):
        entities = Entities()
        entities.add(Entity(EntityCategory.EMOTES, 0, 5, name="Kappa"))
        entities.add(Entity(EntityCategory.CODE, 6, 9))
        assert len(entities.emotes) == 1
        assert len(entities.code) == 1
        assert entities.get(EntityCategory.EMOTES) is entities.emotes
        assert entities.get("code") is entities.code
        assert entities.counts() == {"emotes": 1, "code": 1}

    def test_to_dict_omits_empty_categories_and_fields(self):
        entities = Entities()
        entities.add(Entity(EntityCategory.LINKS, 10, 29, url="https://example.com"))
        entities.add(Entity(EntityCategory.SPOILER, 0, 4))
        assert entities.to_dict() == {
            "links": [{"bounds": [10, 29], "url": "https://example.com"}],
            "spoiler": [{"bounds": [0, 4]}],
        }

    def test_category_key_order(self):
        entities = Entities()
        entities.add(Entity(EntityCategory.GREENTEXT, 0, 4))
        entities.add(Entity(EntityCategory.LINKS, 1, 3, url="a.io"))
        assert list(entities.to_dict()) == ["links", "greentext"]

    def test_utf8_offsets(self):
        text = "héllo https://x.io"
        entities = Entities()
        entities.add(Entity(EntityCategory.LINKS, 6, 18, url="https://x.io"))
        assert entities.to_dict(text)["links"][0]["bounds"] == [7, 19]
        assert entities.to_dict(text, offsets=OffsetUnit.CHARS)["links"][0]["bounds"] == [6, 18]
        # Without the text there is nothing to convert against.
        assert entities.to_dict()["links"][0]["bounds"] == [6, 18]

    def test_to_json(self):
        entities = Entities()
        entities.add(Entity(EntityCategory.MENTIONS, 0, 6, nick="Alice"))
        assert json.loads(entities.to_json()) == {"mentions": [{"bounds": [0, 6], "nick": "Alice"}]}


def test_utf8_offset_table():
    assert utf8_offset_table("") == [0]
    assert utf8_offset_table("ab") == [0, 1, 2]
    assert utf8_offset_table("é😀a") == [0, 2, 6, 7]
