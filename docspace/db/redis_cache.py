"""
JSON document reads for the Redis-backed namespace store.

Everything lives in one logical db, separated by RedisKeyPrefix. Writes go
through the store's own transaction pipelines; this layer only decodes
documents and owns the lazily created client.

A missing key means "no such document", so Redis errors are logged and
re-raised rather than reported as misses.

Usage:
    from docspace.db.redis_cache import get_redis_cache
    from docspace.db.redis_db import RedisKeyPrefix

    cache = get_redis_cache()
    folder_doc = cache.get_json(RedisKeyPrefix.folder_key("fld_abc123"))
"""

import json
from typing import Any

import redis

from docspace.db.redis_factory import create_redis_client
from docspace.utils import get_logger

logger = get_logger(__name__)


class RedisCache:
    """Redis client holder with JSON decoding."""

    def __init__(self, client: redis.Redis | None = None):
        """
        Args:
            client: Injected client, e.g. fakeredis in tests
        """
        self._client: redis.Redis | None = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = create_redis_client()
        return self._client

    def get_json(self, key: str) -> Any | None:
        """Decoded document at key, None when absent."""
        try:
            raw = self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis GET {key} failed: {e}")
            raise
        return None if raw is None else json.loads(raw)

    def mget_json(self, keys: list[str]) -> list[Any | None]:
        """Decoded documents for keys in one round trip, None for misses."""
        if not keys:
            return []
        try:
            raws = self.client.mget(keys)
        except redis.RedisError as e:
            logger.error(f"Redis MGET of {len(keys)} keys failed: {e}")
            raise
        return [None if raw is None else json.loads(raw) for raw in raws]

    def ping(self) -> bool:
        """True when the server answers."""
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis ping failed: {e}")
            return False


_redis_cache: RedisCache | None = None


def get_redis_cache() -> RedisCache:
    """Process-wide RedisCache."""
    global _redis_cache
    if _redis_cache is None:
        _redis_cache = RedisCache()
    return _redis_cache
