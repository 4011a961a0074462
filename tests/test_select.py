import json

import pytest

from embedded_json_store import AmbiguousIdError, CodecError, JsonStore, UnknownFieldError, where
from models import Account, Address, Person, john


def test_select_all_keeps_insertion_order(people):
    assert [p.id for p in people.select_all()] == ["1", "2", "3"]


def test_select_all_empty(store, db_path):
    assert store.select_all() == []
    db_path.write_text("  \n", encoding="utf-8")
    assert store.select_all() == []
    db_path.write_text("[]", encoding="utf-8")
    assert store.select_all() == []


def test_select_by_id(people):
    person = people.select_by_id("1")
    assert person is not None
    assert person.name == "John"
    assert person == john()
    assert people.select_by_id("42") is None


def test_select_by_id_is_exact(people):
    # identifier comparison is an exact text match
    assert people.select_by_id(" 1") is None
    assert people.select_by_id(1).name == "John"


def test_select_by_id_ambiguous(store, db_path):
    db_path.write_text(json.dumps([{"id": "1", "name": "A"}, {"id": "1", "name": "B"}]), encoding="utf-8")
    with pytest.raises(AmbiguousIdError) as ei:
        store.select_by_id("1")
    assert ei.value.operation == "select_by_id"
    assert ei.value.id == "1"
    assert ei.value.count == 2


def test_select_by_key(people):
    found = people.select_by_key("city", "New York")
    assert [p.id for p in found] == ["1", "3"]
    # key and value are both case-insensitive
    assert len(people.select_by_key("CITY", "new york")) == 2
    assert people.select_by_key("city", "Paris") == []


def test_select_by_key_list_field(people):
    # list fields compare as their "[a, b]" text, not per element
    assert people.select_by_key("cars", "bmw") == []
    assert [p.name for p in people.select_by_key("cars", "[tesla, ford]")] == ["Alice"]
    assert [p.name for p in people.select_where({"cars": {"$contains": "Tesla"}})] == ["Alice"]


def test_select_by_key_unknown_field(people):
    with pytest.raises(UnknownFieldError) as ei:
        people.select_by_key("country", "US")
    assert ei.value.key == "country"
    assert ei.value.operation == "select_by_key"
    assert "country" in str(ei.value)


def test_select_where(people):
    found = people.select_where(lambda p: p.city == "New York")
    assert [p.name for p in found] == ["John", "Alice"]
    assert people.select_where(lambda p: p.name.startswith("Z")) == []


def test_select_where_mapping_query(people):
    assert [p.name for p in people.select_where({"city": "San Francisco"})] == ["Mark"]
    assert [p.name for p in people.select_where(where(city="New York", name="Alice"))] == ["Alice"]
    assert len(people.select_where({"cars": {"$contains": "Audi"}})) == 1


def test_select_where_rejects_non_callable(people):
    with pytest.raises(TypeError):
        people.select_where("city == 'New York'")


def test_select_key(people):
    assert people.select_key("id") == [["1"], ["2"], ["3"]]
    assert people.select_key("cars") == [["Bmw", "Audi"], ["Mercedes", "Nissan"], ["Tesla", "Ford"]]


def test_select_key_skips_nulls(store):
    store.insert(Person("1", "John", None))
    store.insert(Person("2", "Mark", "Rome"))
    assert store.select_key("city") == [["Rome"]]
    # empty lists are kept as empty inner lists
    assert store.select_key("cars") == [[], []]


def test_select_keys(people):
    assert people.select_keys("id", "name") == [["1", "John"], ["2", "Mark"], ["3", "Alice"]]
    assert people.select_keys("NAME", "cars") == [
        ["John", "[Bmw, Audi]"],
        ["Mark", "[Mercedes, Nissan]"],
        ["Alice", "[Tesla, Ford]"],
    ]
    # single key behaves like select_key
    assert people.select_keys("id") == people.select_key("id")


def test_select_keys_omits_nulls_but_keeps_rows(store):
    store.insert(Person("1", None, None))
    store.insert(Person("2", "Mark", None))
    assert store.select_keys("name", "city") == [[], ["Mark"]]


def test_select_keys_validation(people):
    with pytest.raises(ValueError):
        people.select_keys()
    with pytest.raises(UnknownFieldError):
        people.select_keys("id", "nope")


def test_numeric_and_nested_fields(tmp_path):
    db = JsonStore(tmp_path / "acc.json", Account, id_key="id", create_if_missing=True)
    db.insert(Account(id=7, owner="ann", age=30, score=1.5, active=False,
                      address=Address("Main St", "Wien")))
    assert db.select_by_id("7").owner == "ann"
    assert db.select_key("active") == [["false"]]
    assert db.select_key("score") == [["1.5"]]
    assert db.select_keys("id", "address") == [["7", '{"street":"Main St","city":"Wien"}']]
    assert db.select_where({"address": {"city": "Wien"}, "age": {"$gte": 18}})[0].id == 7


def test_malformed_file(store, db_path):
    db_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CodecError) as ei:
        store.select_all()
    assert ei.value.operation == "select_all"
    db_path.write_text('{"id": "1"}', encoding="utf-8")
    with pytest.raises(CodecError):
        store.select_all()
    db_path.write_text('[{"id": "1", "planet": "Mars"}]', encoding="utf-8")
    with pytest.raises(CodecError):
        store.select_by_key("id", "1")
