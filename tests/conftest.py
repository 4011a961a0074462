import pytest

from embedded_json_store import JsonStore
from models import Person, alice, john, mark


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "people.json"


@pytest.fixture
def store(db_path):
    return JsonStore(db_path, Person, id_key="id", create_if_missing=True)


@pytest.fixture
def people(store):
    store.insert_multiple([john(), mark(), alice()])
    return store
