import os

import pytest

from embedded_json_store import (
    IdentifierFieldMissingError,
    IdentifierNotConfiguredError,
    InvalidIdentifierTypeError,
    JsonStore,
    StoreConfig,
    StoreConfigError,
    StoreNotFoundError,
)
from models import Account, FlagId, ListId, Person, john


def test_missing_file_without_create(tmp_path):
    with pytest.raises(StoreNotFoundError) as ei:
        JsonStore(tmp_path / "invalid_file.json", Person, id_key="id")
    assert ei.value.operation == "open"
    assert "invalid_file.json" in str(ei.value)


def test_create_if_missing_makes_empty_file(tmp_path):
    path = tmp_path / "nested" / "dir" / "people.json"
    db = JsonStore(path, Person, id_key="id", create_if_missing=True)
    assert path.exists()
    assert os.path.getsize(path) == 0
    assert db.select_all() == []


def test_create_keeps_existing_content(tmp_path):
    path = tmp_path / "people.json"
    path.write_text('[{"id": "9", "name": "Zed"}]', encoding="utf-8")
    db = JsonStore(path, Person, id_key="id", create_if_missing=True)
    assert [p.name for p in db.select_all()] == ["Zed"]


def test_create_requires_json_extension(tmp_path):
    with pytest.raises(StoreConfigError):
        JsonStore(tmp_path / "people.txt", Person, create_if_missing=True)
    assert not (tmp_path / "people.txt").exists()


def test_config_validation(tmp_path):
    with pytest.raises(StoreConfigError):
        JsonStore("  ", Person)
    with pytest.raises(StoreConfigError):
        JsonStore(tmp_path / "x.json", None, create_if_missing=True)
    with pytest.raises(StoreConfigError):
        JsonStore(tmp_path / "x.json", dict, create_if_missing=True)
    with pytest.raises(StoreConfigError):
        JsonStore(tmp_path / "x.json", Person, create_if_missing=True, indent=-1)


def test_identifier_field_checks(tmp_path):
    path = tmp_path / "x.json"
    with pytest.raises(IdentifierFieldMissingError):
        JsonStore(path, Person, id_key="uuid", create_if_missing=True)
    with pytest.raises(InvalidIdentifierTypeError):
        JsonStore(path, ListId, id_key="id", create_if_missing=True)
    with pytest.raises(InvalidIdentifierTypeError):
        JsonStore(path, FlagId, id_key="id", create_if_missing=True)
    # int ids are fine
    db = JsonStore(path, Account, id_key="id", create_if_missing=True)
    assert db.id_key == "id"


def test_identifier_name_is_case_insensitive(tmp_path):
    db = JsonStore(tmp_path / "x.json", Person, id_key="ID", create_if_missing=True)
    assert db.id_key == "id"
    db.insert(john())
    assert db.select_by_id("1").name == "John"


def test_blank_id_key_means_not_configured(tmp_path):
    db = JsonStore(tmp_path / "x.json", Person, id_key="  ", create_if_missing=True)
    assert db.id_key is None
    db.insert(john())
    db.insert(john())  # no uniqueness without an identifier
    assert len(db.select_all()) == 2
    with pytest.raises(IdentifierNotConfiguredError) as ei:
        db.select_by_id("1")
    assert ei.value.operation == "select_by_id"
    with pytest.raises(IdentifierNotConfiguredError):
        db.delete_by_id("1")
    with pytest.raises(IdentifierNotConfiguredError):
        db.update_by_id("1", john())


def test_from_config(tmp_path):
    cfg = StoreConfig(path=str(tmp_path / "acc.json"), record_type=Account, id_key="id",
                      create_if_missing=True, indent=2)
    db = JsonStore.from_config(cfg)
    db.insert(Account(id=1, owner="ann"))
    text = (tmp_path / "acc.json").read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert db.record_type is Account
    assert "acc.json" in repr(db)


def test_file_removed_after_open(store, db_path):
    os.remove(db_path)
    with pytest.raises(StoreNotFoundError) as ei:
        store.select_all()
    assert ei.value.operation == "select_all"


def test_progress_events(tmp_path):
    events = []

    def collect(evt):
        events.append(evt.get("phase"))

    db = JsonStore(tmp_path / "events.json", Person, id_key="id",
                   create_if_missing=True, on_progress=collect)
    assert events == ["open.start", "open.done"]

    events.clear()
    db.insert_multiple([john()])
    assert events == ["insert_multiple.start", "insert.start", "insert.done", "insert_multiple.done"]

    events.clear()
    assert db.update_key("city", "Boston") is True
    assert "update_key.start" in events and "update_key.done" in events

    events.clear()
    assert db.delete_by_id("1") is True
    assert events == ["delete_by_id.start", "delete_by_id.done"]
