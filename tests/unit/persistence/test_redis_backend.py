"""Unit tests for RedisCacheBackend using fakeredis."""

from __future__ import annotations

from unittest.mock import patch

import fakeredis
import pytest
import redis

from hrledger.core.exceptions import CacheError
from hrledger.persistence.redis_backend import RedisCacheBackend


@pytest.fixture
def fake_server():
    return fakeredis.FakeServer()


@pytest.fixture
def raw(fake_server):
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def backend(raw):
    with patch("redis.Redis", return_value=raw):
        return RedisCacheBackend(host="localhost", port=6379, db=0, namespace="hrtest")


class TestGet:
    def test_returns_none_on_miss(self, backend):
        assert backend.get("nonexistent") is None

    def test_returns_stored_value(self, backend):
        backend.setex("session:revoked:abc", 300, "user-1")
        assert backend.get("session:revoked:abc") == "user-1"


class TestSetex:
    def test_keys_are_namespaced(self, backend, raw):
        backend.setex("mykey", 60, "v")
        assert raw.get("hrtest:mykey") == "v"
        assert 0 < raw.ttl("hrtest:mykey") <= 60

    def test_ttl_floor_is_one_second(self, backend, raw):
        backend.setex("short", 0, "v")
        assert raw.ttl("hrtest:short") == 1

    def test_overwrites_existing_value(self, backend):
        backend.setex("k", 60, "old")
        backend.setex("k", 60, "new")
        assert backend.get("k") == "new"


class TestDeleteAndExists:
    def test_removes_existing_key(self, backend):
        backend.setex("del_me", 60, "val")
        assert backend.exists("del_me") is True
        backend.delete("del_me")
        assert backend.exists("del_me") is False

    def test_noop_on_missing_key(self, backend):
        backend.delete("never_existed")  # should not raise


def test_empty_namespace_uses_bare_keys(raw):
    backend = RedisCacheBackend(namespace="", client=raw)
    backend.setex("bare", 60, "v")
    assert raw.get("bare") == "v"


class TestErrorWrapping:
    def test_connection_error_becomes_cache_error(self, fake_server, raw):
        fake_server.connected = False
        backend = RedisCacheBackend(client=raw)
        with pytest.raises(CacheError) as err:
            backend.exists("k")
        assert isinstance(err.value.__cause__, redis.ConnectionError)
