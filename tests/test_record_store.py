"""Tests for the record store mutation API."""

import pytest

from collector.errors.exceptions import NotFoundError, PersistenceError, ValidationError
from collector.models.record import Record
from collector.services.record_store import RecordStore
from collector.storage.local_slot import LocalSlotPersistence

from fakes import VALID_FIELDS


class BrokenPersistence:
    def save(self, record):
        raise PersistenceError("disk full")

    def load(self):
        return None

    def clear(self):
        raise PersistenceError("disk full")


def test_fresh_store_has_one_blank_resource(store):
    record = store.get()
    assert record.name == ""
    assert len(record.resources) == 1
    assert record.resources[0].is_blank()


def test_open_rehydrates_from_slot(persistence):
    persistence.save(Record(name="Jane"))
    assert RecordStore.open(persistence).get().name == "Jane"


def test_set_field_returns_new_record(store):
    before = store.get()
    after = store.set_field("title", "Orbit")
    assert after is store.get()
    assert after.title == "Orbit"
    assert before.title == ""


def test_set_field_persists_before_returning(store, persistence):
    store.set_field("problemStatement", "Why")
    assert persistence.load().problem_statement == "Why"


@pytest.mark.parametrize("name", ["resources", "nickname", "problem_statement"])
def test_set_field_rejects_non_scalar_names(store, name):
    with pytest.raises(ValidationError):
        store.set_field(name, "x")


def test_resource_mutations_persist(store, persistence):
    item = store.add_resource()
    store.update_resource(item.id, "link", "x.com")
    store.reorder_resource(item.id, 0)
    loaded = persistence.load()
    assert loaded.resources[0].id == item.id
    assert loaded.resources[0].link == "x.com"

    store.remove_resource(item.id)
    assert [i.id for i in persistence.load().resources] == [i.id for i in store.get().resources]


def test_remove_unknown_resource(store):
    with pytest.raises(NotFoundError):
        store.remove_resource("res_missing")


def test_reset_all_returns_fresh_record_and_clears_slot(filled_store, persistence):
    record = filled_store.reset_all()
    assert record.name == ""
    assert len(record.resources) == 1
    assert not persistence.path.exists()


def test_reset_project_fields_keeps_identity(filled_store):
    old_resource_id = filled_store.get().resources[0].id
    filled_store.add_resource()

    record = filled_store.reset_project_fields()

    for name in ("name", "whatsapp", "linkedin", "email"):
        assert record.to_storage()[name] == VALID_FIELDS[name]
    for name in ("codebase", "demo", "title", "description", "problemStatement"):
        assert record.to_storage()[name] == ""
    assert len(record.resources) == 1
    assert record.resources[0].is_blank()
    assert record.resources[0].id != old_resource_id


def test_failed_write_keeps_mutation_in_memory():
    store = RecordStore(BrokenPersistence())
    store.set_field("name", "Jane")
    assert store.get().name == "Jane"
    assert store.reset_all().name == ""


def test_unreadable_slot_falls_back_to_fresh(tmp_path):
    slot = LocalSlotPersistence(tmp_path)
    slot.path.write_text("garbage", encoding="utf-8")
    store = RecordStore.open(slot)
    assert store.get().name == ""
    assert len(store.get().resources) == 1


@pytest.mark.parametrize("value", [None, 42, ["Jane"]])
def test_set_field_rejects_non_string_values(store, persistence, value):
    with pytest.raises(ValidationError, match="expects a string"):
        store.set_field("name", value)
    assert store.get().name == ""
    assert persistence.load() is None


def test_update_resource_rejects_non_string_values(store):
    item_id = store.get().resources[0].id
    with pytest.raises(ValidationError):
        store.update_resource(item_id, "link", None)
    assert store.get().resources[0].link == ""
