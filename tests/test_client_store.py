"""Unit tests for crm/store.py -- client repository results.

Covers:
- create/get round trip with generated id and timestamps
- list returns every client in id order
- update is a full replacement (omitted phone is cleared) and refreshes updated_at
- duplicate email on create or update yields ErrorKind.conflict and leaves data intact
- get/update/delete of a missing id yields ErrorKind.not_found
- delete is permanent
"""

import pytest

from core.errors import Err, ErrorKind, Ok
from crm.models import Client
from crm.store import ClientStore


@pytest.fixture
def store(engine):
    return ClientStore(engine)


def _create(store: ClientStore, name: str, email: str, phone=None) -> Client:
    result = store.create_client(Client(name=name, email=email, phone=phone))
    assert isinstance(result, Ok), result
    return result.value


class TestCreateAndRead:
    def test_create_assigns_id_and_timestamps(self, store):
        client = _create(store, "A", "a@x.com", "123")
        assert client.id is not None
        assert client.created_at
        assert client.updated_at == client.created_at

    def test_get_returns_identical_fields(self, store):
        created = _create(store, "A", "a@x.com", "123")
        fetched = store.get_client(created.id)
        assert isinstance(fetched, Ok)
        assert (fetched.value.name, fetched.value.email, fetched.value.phone) == ("A", "a@x.com", "123")
        assert fetched.value == created

    def test_phone_is_optional(self, store):
        client = _create(store, "No Phone", "nophone@x.com")
        assert store.get_client(client.id).value.phone is None

    def test_list_is_ordered_by_id(self, store):
        first = _create(store, "First", "first@x.com")
        second = _create(store, "Second", "second@x.com")
        result = store.list_clients()
        assert isinstance(result, Ok)
        assert [c.id for c in result.value] == [first.id, second.id]

    def test_list_empty(self, store):
        assert store.list_clients() == Ok([])

    def test_get_missing(self, store):
        assert store.get_client(9999) == Err(ErrorKind.not_found)


class TestEmailUniqueness:
    def test_duplicate_email_on_create_is_conflict(self, store):
        first = _create(store, "One", "dup@x.com")
        result = store.create_client(Client(name="Two", email="dup@x.com"))
        assert isinstance(result, Err)
        assert result.kind is ErrorKind.conflict
        assert store.get_client(first.id).value.name == "One"
        assert len(store.list_clients().value) == 1

    def test_duplicate_email_on_update_is_conflict(self, store):
        _create(store, "One", "one@x.com")
        two = _create(store, "Two", "two@x.com")
        result = store.update_client(two.id, name="Two", email="one@x.com", phone=None)
        assert isinstance(result, Err)
        assert result.kind is ErrorKind.conflict
        assert store.get_client(two.id).value.email == "two@x.com"


class TestUpdate:
    def test_update_replaces_all_fields(self, store):
        client = _create(store, "Old", "old@x.com", "111")
        result = store.update_client(client.id, name="New", email="new@x.com", phone="222")
        assert isinstance(result, Ok)
        stored = store.get_client(client.id).value
        assert (stored.name, stored.email, stored.phone) == ("New", "new@x.com", "222")
        assert stored.created_at == client.created_at
        assert stored.updated_at >= client.updated_at

    def test_update_without_phone_clears_it(self, store):
        client = _create(store, "Old", "keep@x.com", "111")
        store.update_client(client.id, name="Old", email="keep@x.com", phone=None)
        assert store.get_client(client.id).value.phone is None

    def test_update_missing(self, store):
        result = store.update_client(9999, name="X", email="x@x.com", phone=None)
        assert result == Err(ErrorKind.not_found)
        assert store.list_clients() == Ok([])


class TestDelete:
    def test_delete_is_permanent(self, store):
        client = _create(store, "Gone", "gone@x.com")
        assert store.delete_client(client.id) == Ok(client.id)
        assert store.get_client(client.id) == Err(ErrorKind.not_found)

    def test_delete_missing(self, store):
        assert store.delete_client(9999) == Err(ErrorKind.not_found)

    def test_email_reusable_after_delete(self, store):
        client = _create(store, "Gone", "reuse@x.com")
        store.delete_client(client.id)
        assert isinstance(store.create_client(Client(name="Back", email="reuse@x.com")), Ok)
