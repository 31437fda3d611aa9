"""
Durable local cache tests.
"""

import json

from agency.client.cache import LocalCache


def test_collections_share_one_blob_without_clobbering():
    cache = LocalCache()

    cache.write_collection("projects", [{"id": "p1"}])
    cache.write_collection("accounts", [{"id": "a1"}])

    assert cache.read_collection("projects") == [{"id": "p1"}]
    assert cache.read_collection("accounts") == [{"id": "a1"}]
    assert cache.read_collection("proposals") == []


def test_file_backed_cache_survives_reopen(tmp_path):
    path = tmp_path / "cache.json"
    LocalCache(path=str(path)).write_collection("projects", [{"id": "p1"}])

    reopened = LocalCache(path=str(path))

    assert reopened.read_collection("projects") == [{"id": "p1"}]


def test_legacy_namespace_is_migrated_once():
    cache = LocalCache(namespace="agency_data_v4", legacy_namespaces=("agency_data_v3",))
    cache.set("agency_data_v3", json.dumps({"projects": [{"id": "old"}]}))

    assert cache.read_collection("projects") == [{"id": "old"}]
    assert cache.get("agency_data_v3") is None

    cache.set("agency_data_v3", json.dumps({"projects": [{"id": "stale"}]}))
    assert cache.read_collection("projects") == [{"id": "old"}]


def test_corrupt_blob_reads_as_empty():
    cache = LocalCache()
    cache.set(cache.namespace, "{not json")

    assert cache.read_snapshot() == {}

    cache.set(cache.namespace, json.dumps(["not", "a", "dict"]))
    assert cache.read_snapshot() == {}


def test_unreadable_file_starts_empty(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("garbage", encoding="utf-8")

    cache = LocalCache(path=str(path))

    assert cache.read_snapshot() == {}


def test_clear_session_removes_only_session_keys():
    cache = LocalCache(session_keys=("auth", "client_session"))
    cache.set("auth", "token")
    cache.set("client_session", "abc")
    cache.write_collection("projects", [{"id": "p1"}])

    cache.clear_session()

    assert cache.get("auth") is None
    assert cache.get("client_session") is None
    assert cache.read_collection("projects") == [{"id": "p1"}]
