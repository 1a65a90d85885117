"""
Unit tests for the journal document stores.
"""

from unittest.mock import MagicMock

import pytest

from lingobot.db.documents import MemoryDocumentStore, SupabaseDocumentStore
from lingobot.errors import DocumentStoreError, VersionConflict


class TestMemoryDocumentStore:
    def test_missing_document(self):
        assert MemoryDocumentStore().load("u1") == (None, 0)

    def test_save_and_load(self):
        store = MemoryDocumentStore()
        assert store.save("u1", {"words": {}}, 0) == 1
        assert store.save("u1", {"words": {"a": {}}}, 1) == 2
        assert store.load("u1") == ({"words": {"a": {}}}, 2)

    def test_stale_version_rejected(self):
        store = MemoryDocumentStore()
        store.save("u1", {"n": 1}, 0)
        with pytest.raises(VersionConflict) as excinfo:
            store.save("u1", {"n": 2}, 0)
        assert excinfo.value.actual == 1
        assert store.load("u1") == ({"n": 1}, 1)

    def test_loaded_documents_are_copies(self):
        store = MemoryDocumentStore()
        store.save("u1", {"words": {}}, 0)
        document, _ = store.load("u1")
        document["words"]["x"] = {}
        assert store.load("u1")[0] == {"words": {}}


class TestSupabaseDocumentStore:
    def setup_method(self):
        self.client = MagicMock()
        self.query = self.client.table.return_value
        # every builder call returns the same query object
        for name in ("select", "eq", "limit", "insert", "update"):
            getattr(self.query, name).return_value = self.query
        self.store = SupabaseDocumentStore(self.client, table="journals")

    def test_load_existing(self):
        self.query.execute.return_value = MagicMock(data=[{"document": {"words": {}}, "version": 3}])
        assert self.store.load("u1") == ({"words": {}}, 3)
        self.client.table.assert_called_with("journals")
        self.query.eq.assert_called_with("learner_id", "u1")

    def test_load_missing(self):
        self.query.execute.return_value = MagicMock(data=[])
        assert self.store.load("u1") == (None, 0)

    def test_load_failure(self):
        self.query.execute.side_effect = RuntimeError("network")
        with pytest.raises(DocumentStoreError):
            self.store.load("u1")

    def test_first_save_inserts(self):
        self.query.execute.return_value = MagicMock(data=[{"learner_id": "u1"}])
        assert self.store.save("u1", {"words": {}}, 0) == 1
        self.query.insert.assert_called_once_with({"learner_id": "u1", "document": {"words": {}}, "version": 1})

    def test_update_is_conditional_on_version(self):
        self.query.execute.return_value = MagicMock(data=[{"learner_id": "u1"}])
        assert self.store.save("u1", {"words": {}}, 4) == 5
        self.query.update.assert_called_once_with({"document": {"words": {}}, "version": 5})
        self.query.eq.assert_any_call("version", 4)

    def test_update_of_changed_document_conflicts(self):
        self.query.execute.return_value = MagicMock(data=[])
        with pytest.raises(VersionConflict):
            self.store.save("u1", {}, 4)

    def test_concurrent_insert_conflicts(self):
        error = RuntimeError("duplicate key")
        error.code = "23505"
        self.query.execute.side_effect = error
        with pytest.raises(VersionConflict):
            self.store.save("u1", {}, 0)

    def test_save_failure(self):
        self.query.execute.side_effect = RuntimeError("network")
        with pytest.raises(DocumentStoreError) as excinfo:
            self.store.save("u1", {}, 2)
        assert not isinstance(excinfo.value, VersionConflict)
