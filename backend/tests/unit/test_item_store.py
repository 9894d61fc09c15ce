# backend/tests/unit/test_item_store.py
"""
Unit tests for the SQL-backed generic item store.
"""

import pytest

from app.repositories.item_store import IndexSpec, SqlItemStore
from app.repositories.lead_repository import LeadRepository


@pytest.fixture
def store(unit_db):
    return SqlItemStore(
        unit_db,
        "test-things",
        indexes=(IndexSpec("owner-index", ("ownerId",)),),
    )


class TestWrites:
    def test_put_if_absent_refuses_existing_key(self, store):
        assert store.put_if_absent({"id": "slot-1", "holder": "a"}) is True
        assert store.put_if_absent({"id": "slot-1", "holder": "b"}) is False
        assert store.get("slot-1")["holder"] == "a"

    def test_put_requires_primary_key(self, store):
        with pytest.raises(ValueError):
            store.put({"name": "no id"})

    def test_update_merges_and_refreshes_updated_at(self, store):
        store.put({"id": "t1", "name": "old", "color": "red", "updatedAt": "2000-01-01T00:00:00Z"})

        updated = store.update("t1", {"name": "new", "id": "ignored"})

        assert updated["id"] == "t1"
        assert updated["name"] == "new"
        assert updated["color"] == "red"
        assert updated["updatedAt"] != "2000-01-01T00:00:00Z"

    def test_update_of_missing_item_returns_none(self, store):
        assert store.update("missing", {"name": "x"}) is None

    def test_soft_delete_is_idempotent(self, store):
        store.put({"id": "t1", "isActive": True})

        store.soft_delete("t1")
        store.soft_delete("t1")

        assert store.get("t1")["isActive"] is False

    def test_hard_delete_is_idempotent(self, store):
        store.put({"id": "t1"})

        store.hard_delete("t1")
        store.hard_delete("t1")

        assert store.get("t1") is None


class TestReads:
    def test_get_missing_returns_none(self, store):
        assert store.get("nope") is None

    def test_returned_items_are_copies(self, store):
        store.put({"id": "t1", "tags": ["a"]})

        store.get("t1")["tags"].append("b")

        assert store.get("t1")["tags"] == ["a"]

    def test_scan_keeps_insertion_order(self, store):
        for key in ("c", "a", "b"):
            store.put({"id": key, "kind": "x"})

        assert [item["id"] for item in store.scan({"kind": "x"})] == ["c", "a", "b"]

    def test_batch_get_skips_missing_keys(self, store):
        store.put({"id": "a"})
        store.put({"id": "b"})

        assert set(store.batch_get(["a", "b", "zzz"])) == {"a", "b"}

    def test_namespaces_are_isolated(self, unit_db, store):
        other = SqlItemStore(unit_db, "test-others")
        store.put({"id": "shared"})

        assert other.get("shared") is None
        assert other.scan() == []

    def test_query_checks_index_partition(self, store):
        store.put({"id": "a", "ownerId": "u1", "status": "open"})
        store.put({"id": "b", "ownerId": "u1", "status": "closed"})
        store.put({"id": "c", "ownerId": "u2", "status": "open"})

        found = store.query({"ownerId": "u1"}, {"status": "open"}, "owner-index")

        assert [item["id"] for item in found] == ["a"]
        with pytest.raises(ValueError):
            store.query({"status": "open"}, None, "owner-index")
        with pytest.raises(ValueError):
            store.query({"ownerId": "u1"}, None, "no-such-index")


class TestBaseRepositoryHelpers:
    @pytest.fixture
    def leads(self, unit_db):
        repo = LeadRepository(unit_db)
        repo.create({"fullName": "Ann", "email": "ann@example.com", "contacted": False})
        repo.create({"fullName": "Bob", "email": "bob@example.com", "contacted": True})
        repo.create({"fullName": "Cid", "email": "cid@example.com", "contacted": False})
        return repo

    def test_create_stamps_id_and_active_flag(self, leads):
        created = leads.create({"fullName": "Dee", "email": "dee@example.com"})

        assert created["id"]
        assert created["isActive"] is True
        assert created["createdAt"] == created["updatedAt"]

    def test_equality_lookups(self, leads):
        assert leads.count(contacted=False) == 2
        assert leads.find_one_by(email="bob@example.com")["fullName"] == "Bob"
        assert leads.find_one_by(email="nobody@example.com") is None
        assert leads.exists(fullName="Cid")
        assert not leads.exists(fullName="Zed")

    def test_bulk_update_counts_only_existing_ids(self, leads):
        ids = [lead["id"] for lead in leads.find_by(contacted=False)]

        updated = leads.bulk_update(ids + ["missing"], {"contacted": True})

        assert updated == 2
        assert leads.count(contacted=True) == 3
