"""Tests for Redis-specific namespace store behavior.

Covers key layout, index hygiene, malformed documents and error
translation. Generic adapter behavior lives in test_storage_backends.py.
"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from docspace.components.namespace.errors import MalformedRecord, StoreUnavailable
from docspace.components.namespace.redis_storage import NamespaceRedisStorage
from docspace.db.redis_cache import RedisCache
from docspace.db.redis_db import ROOT_PARENT_MARKER, RedisKeyPrefix

from tests.factories import make_file, make_folder


class TestRedisKeyPrefix:
    """Key helpers."""

    def test_document_keys(self):
        """Document keys share the docspace namespace."""
        assert RedisKeyPrefix.folder_key("fld_1") == "docspace:ns:folder:fld_1"
        assert RedisKeyPrefix.file_key("fil_1") == "docspace:ns:file:fil_1"

    def test_children_key_for_roots(self):
        """Root folders use the separator as parent marker."""
        assert RedisKeyPrefix.children_key(None) == f"docspace:ns:children:{ROOT_PARENT_MARKER}"
        assert RedisKeyPrefix.children_key("A/B") == "docspace:ns:children:A/B"

    def test_list_all(self):
        """Every prefix is described."""
        listing = RedisKeyPrefix.list_all()
        assert set(listing) == {m.name for m in RedisKeyPrefix}
        assert all(entry["description"] != "undefined" for entry in listing.values())


class TestRedisIndexes:
    """Index maintenance on writes."""

    def test_insert_writes_indexes(self, redis_storage, fake_redis_client):
        """A folder insert sets path key, child set and lex index."""
        folder = make_folder("A/B")
        redis_storage.insert_folder(folder)

        assert fake_redis_client.get(RedisKeyPrefix.folder_path_key("A/B")) == folder.id
        assert fake_redis_client.sismember(RedisKeyPrefix.children_key("A"), folder.id)
        assert fake_redis_client.zscore(RedisKeyPrefix.folder_paths_index_key(), "A/B") is not None

    def test_save_moves_child_membership(self, redis_storage, fake_redis_client):
        """Re-parenting a folder moves it between child sets."""
        folder = make_folder("A/B")
        redis_storage.insert_folder(folder)

        redis_storage.save_folder(folder.model_copy(update={"path": "X/B", "parentPath": "X"}))

        assert not fake_redis_client.sismember(RedisKeyPrefix.children_key("A"), folder.id)
        assert fake_redis_client.sismember(RedisKeyPrefix.children_key("X"), folder.id)
        assert fake_redis_client.get(RedisKeyPrefix.folder_path_key("A/B")) is None
        assert fake_redis_client.zscore(RedisKeyPrefix.folder_paths_index_key(), "A/B") is None

    def test_stale_index_entries_are_ignored(self, redis_storage, fake_redis_client):
        """Ids left in index sets without a matching document are skipped."""
        redis_storage.insert_folder(make_folder("A"))
        fake_redis_client.sadd(RedisKeyPrefix.children_key(None), "fld_ghost")
        fake_redis_client.sadd(RedisKeyPrefix.container_key("A"), "fil_ghost")

        assert [f.path for f in redis_storage.list_child_folders(None)] == ["A"]
        assert redis_storage.list_files_in("A") == []

    def test_mismatched_membership_is_filtered(self, redis_storage, fake_redis_client):
        """A document listed under the wrong parent is not returned."""
        folder = make_folder("A/B")
        redis_storage.insert_folder(folder)
        fake_redis_client.sadd(RedisKeyPrefix.children_key("Q"), folder.id)

        assert redis_storage.list_child_folders("Q") == []

    def test_file_container_index(self, redis_storage, fake_redis_client):
        """Files register their container in the lex index."""
        redis_storage.insert_file(make_file("a.txt", "A/B", "fil_1"))

        assert fake_redis_client.sismember(RedisKeyPrefix.container_key("A/B"), "fil_1")
        assert fake_redis_client.zscore(RedisKeyPrefix.containers_index_key(), "A/B") is not None


class TestRedisFailures:
    """Malformed documents and connection errors."""

    def test_malformed_document(self, redis_storage, fake_redis_client):
        """A document with unknown fields raises MalformedRecord."""
        fake_redis_client.set(RedisKeyPrefix.folder_key("fld_bad"), json.dumps({"id": "fld_bad", "bogus": 1}))

        with pytest.raises(MalformedRecord):
            redis_storage.get_folder("fld_bad")

    def test_read_error_is_store_unavailable(self):
        """Connection errors on reads become StoreUnavailable."""
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("connection refused")
        storage = NamespaceRedisStorage(cache=RedisCache(client=client))

        with pytest.raises(StoreUnavailable):
            storage.get_folder("fld_1")

    def test_write_error_is_store_unavailable(self):
        """Connection errors on writes become StoreUnavailable."""
        client = MagicMock()
        client.set.side_effect = redis.ConnectionError("connection refused")
        storage = NamespaceRedisStorage(cache=RedisCache(client=client))

        with pytest.raises(StoreUnavailable):
            storage.insert_folder(make_folder("A"))

    def test_failed_insert_releases_path_claim(self, redis_storage, fake_redis_client, monkeypatch):
        """A path claimed by an insert whose transaction failed is freed again."""
        pipe = MagicMock()
        pipe.execute.side_effect = redis.ConnectionError("connection lost")
        monkeypatch.setattr(fake_redis_client, "pipeline", lambda transaction=True: pipe)

        with pytest.raises(StoreUnavailable):
            redis_storage.insert_folder(make_folder("A"))
        assert fake_redis_client.get(RedisKeyPrefix.folder_path_key("A")) is None

        monkeypatch.undo()
        redis_storage.insert_folder(make_folder("A", folder_id="fld_retry"))
        assert redis_storage.get_folder_by_path("A").id == "fld_retry"

    def test_failed_save_releases_new_path_claim(self, redis_storage, fake_redis_client, monkeypatch):
        """A rename whose transaction failed keeps the old claim and frees the new one."""
        folder = make_folder("A")
        redis_storage.insert_folder(folder)
        pipe = MagicMock()
        pipe.execute.side_effect = redis.ConnectionError("connection lost")
        monkeypatch.setattr(fake_redis_client, "pipeline", lambda transaction=True: pipe)

        with pytest.raises(StoreUnavailable):
            redis_storage.save_folder(folder.model_copy(update={"name": "B", "path": "B"}))
        assert fake_redis_client.get(RedisKeyPrefix.folder_path_key("B")) is None
        assert fake_redis_client.get(RedisKeyPrefix.folder_path_key("A")) == folder.id

        monkeypatch.undo()
        redis_storage.insert_folder(make_folder("B"))
        assert redis_storage.get_folder_by_path("B").id == "fld_B"

    def test_clear_all_scoped_to_namespace(self, redis_storage, fake_redis_client):
        """clear_all leaves keys of other applications alone."""
        redis_storage.insert_folder(make_folder("A"))
        fake_redis_client.set("other:key", "1")

        redis_storage.clear_all()

        assert redis_storage.list_folders() == []
        assert fake_redis_client.get("other:key") == "1"


class TestRedisCache:
    """RedisCache helpers."""

    def test_mget_json_keeps_positions(self, fake_redis_client):
        """Misses come back as None in key order."""
        fake_redis_client.set("k1", json.dumps({"a": 1}))
        cache = RedisCache(client=fake_redis_client)

        assert cache.mget_json(["k1", "k2"]) == [{"a": 1}, None]
        assert cache.mget_json([]) == []

    def test_ping(self, fake_redis_client):
        """ping reports reachability without raising."""
        assert RedisCache(client=fake_redis_client).ping()

        broken = MagicMock()
        broken.ping.side_effect = redis.ConnectionError("connection refused")
        assert not RedisCache(client=broken).ping()
