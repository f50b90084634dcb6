"""Redis backend implementing ICacheBackend.

Holds short-lived session state (revoked token ids). Keys are namespaced so
several deployments can share one Redis database.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import redis

from hrledger.core.exceptions import CacheError

T = TypeVar("T")


class RedisCacheBackend:
    """Production ICacheBackend backed by Redis."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 namespace: str = "hrledger", client: Any = None) -> None:
        self._namespace = namespace
        self._client = client or redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    def _call(self, op: str, key: str, fn: Callable[[str], T]) -> T:
        try:
            return fn(self._key(key))
        except redis.RedisError as exc:
            raise CacheError(f"Redis {op} failed for key={key!r}: {exc}") from exc

    def get(self, key: str) -> str | None:
        return self._call("GET", key, self._client.get)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._call("SETEX", key, lambda k: self._client.setex(k, max(ttl, 1), value))

    def delete(self, key: str) -> None:
        self._call("DELETE", key, self._client.delete)

    def exists(self, key: str) -> bool:
        return bool(self._call("EXISTS", key, self._client.exists))
