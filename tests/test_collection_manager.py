"""Tests for vector_store.collection_manager - CollectionManager and AliasTable."""

import json

import pytest

from common.exceptions import VectorIndexError
from vector_store.collection_manager import AliasTable, CollectionManager

VECTOR = [0.1] * 768


class TestLifecycle:
    def test_recreate_creates_empty_collection(self, manager, collection_name):
        manager.recreate(collection_name, metric="cosine", dimension=768)
        assert manager.exists(collection_name)
        assert manager.count(collection_name) == 0

    def test_recreate_stores_metric_and_dimension(self, manager, collection_name):
        manager.recreate(collection_name, metric="cosine", dimension=768)
        collection = manager.get(collection_name)
        assert CollectionManager.metric_of(collection) == "cosine"
        assert CollectionManager.dimension_of(collection) == 768

    def test_recreate_drops_existing_records(self, manager, collection_name):
        manager.recreate(collection_name)
        manager.insert(collection_name, VECTOR, "old text")
        assert manager.count(collection_name) == 1

        manager.recreate(collection_name)
        assert manager.count(collection_name) == 0

    def test_recreate_missing_collection_is_not_an_error(self, manager, collection_name):
        assert not manager.exists(collection_name)
        manager.recreate(collection_name)
        assert manager.exists(collection_name)

    def test_defaults_come_from_config(self, manager, collection_name):
        manager.recreate(collection_name)
        collection = manager.get(collection_name)
        assert CollectionManager.dimension_of(collection) == 768
        assert CollectionManager.metric_of(collection) == "cosine"

    def test_euclidean_metric(self, manager, collection_name):
        manager.recreate(collection_name, metric="euclidean")
        collection = manager.get(collection_name)
        assert CollectionManager.metric_of(collection) == "euclidean"
        assert manager.insert(collection_name, VECTOR, "text")

    def test_unknown_metric(self, manager, collection_name):
        with pytest.raises(ValueError, match="Unsupported metric"):
            manager.recreate(collection_name, metric="manhattan")

    def test_drop(self, manager, collection_name):
        manager.recreate(collection_name)
        assert manager.drop(collection_name) is True
        assert manager.drop(collection_name) is False
        assert not manager.exists(collection_name)

    def test_get_missing_collection(self, manager, collection_name):
        with pytest.raises(VectorIndexError, match="does not exist"):
            manager.get(collection_name)


class TestInsert:
    def test_insert_returns_id(self, manager, collection_name):
        manager.recreate(collection_name)
        record_id = manager.insert(collection_name, VECTOR, "Returns are accepted within 30 days.")
        assert isinstance(record_id, str) and record_id

        stored = manager.get(collection_name).get(ids=[record_id], include=["documents"])
        assert stored["documents"] == ["Returns are accepted within 30 days."]

    def test_insert_with_metadata(self, manager, collection_name):
        manager.recreate(collection_name)
        record_id = manager.insert(
            collection_name, VECTOR, "text", {"source": "faq.txt", "chunk_index": 3}
        )
        stored = manager.get(collection_name).get(ids=[record_id], include=["metadatas"])
        assert stored["metadatas"][0] == {"source": "faq.txt", "chunk_index": 3}

    def test_insert_wrong_dimension(self, manager, collection_name):
        manager.recreate(collection_name)
        with pytest.raises(VectorIndexError, match="dimension"):
            manager.insert(collection_name, [0.1] * 384, "text")
        assert manager.count(collection_name) == 0

    def test_insert_into_missing_collection(self, manager, collection_name):
        with pytest.raises(VectorIndexError):
            manager.insert(collection_name, VECTOR, "text")

    def test_ids_are_unique(self, manager, collection_name):
        manager.recreate(collection_name)
        ids = {manager.insert(collection_name, VECTOR, "same text") for _ in range(5)}
        assert len(ids) == 5
        assert manager.count(collection_name) == 5


class TestVersionedSwap:
    def test_promote_points_alias_at_new_version(self, manager, collection_name):
        version = manager.create_version(collection_name)
        assert version.startswith(f"{collection_name}__v")
        manager.insert(version, VECTOR, "new text")

        manager.promote(collection_name, version)
        assert manager.resolve(collection_name) == version
        assert manager.count(collection_name) == 1

    def test_promote_drops_previous_version(self, manager, collection_name):
        first = manager.create_version(collection_name)
        manager.promote(collection_name, first)
        second = manager.create_version(collection_name)
        manager.promote(collection_name, second)

        assert not manager.exists(first)
        assert manager.resolve(collection_name) == second

    def test_promote_drops_shadowed_plain_collection(self, manager, collection_name):
        manager.recreate(collection_name)
        version = manager.create_version(collection_name)
        manager.promote(collection_name, version)
        assert collection_name not in manager.list_collections()

    def test_recreate_after_promote_starts_empty(self, manager, collection_name):
        version = manager.create_version(collection_name)
        manager.insert(version, VECTOR, "old text")
        manager.promote(collection_name, version)

        manager.recreate(collection_name)
        assert manager.count(collection_name) == 0
        assert manager.resolve(collection_name) == collection_name
        assert not manager.exists(version)

        manager.insert(collection_name, VECTOR, "new text")
        docs = manager.get(collection_name).get(include=["documents"])["documents"]
        assert docs == ["new text"]

    def test_promote_missing_version(self, manager, collection_name):
        with pytest.raises(VectorIndexError):
            manager.promote(collection_name, f"{collection_name}__v0")


class TestAliasTable:
    def test_in_memory(self):
        table = AliasTable()
        assert table.set("team", "team__v1") is None
        assert table.set("team", "team__v2") == "team__v1"
        assert table.get("team") == "team__v2"
        table.remove("team")
        assert table.get("team") is None

    def test_persisted(self, tmp_path):
        path = tmp_path / "aliases.json"
        AliasTable(path).set("team", "team__v1")
        assert json.loads(path.read_text()) == {"team": "team__v1"}
        assert AliasTable(path).get("team") == "team__v1"

    def test_manager_persists_aliases(self, chroma_client, collection_name, tmp_path):
        path = tmp_path / "aliases.json"
        manager = CollectionManager(chroma_client=chroma_client, alias_path=path)
        version = manager.create_version(collection_name)
        manager.promote(collection_name, version)

        reopened = CollectionManager(chroma_client=chroma_client, alias_path=path)
        assert reopened.resolve(collection_name) == version
