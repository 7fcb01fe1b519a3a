"""Redis-backed snippet byte store."""

from __future__ import annotations

import logging
from typing import Iterator, Tuple

import redis

logger = logging.getLogger("snipkeep")

SCAN_BATCH_SIZE = 200


def create_redis_connection(redis_url: str) -> redis.Redis:
    """Instantiate a Redis client for ``redis_url``."""

    return redis.Redis.from_url(redis_url)


class RedisSnippetStore:
    """Store encoded snippets in Redis, one key per snippet index.

    A sorted set scored by index keeps the listing order and an ``INCR``
    counter hands out new indices.
    """

    INDEX_KEY = "snippets:index"
    COUNTER_KEY = "snippets:counter"
    RECORD_PREFIX = "snippet:record:"

    def __init__(self, redis_client: redis.Redis, *, key_prefix: str = "snipkeep:") -> None:
        self.redis = redis_client
        self.key_prefix = key_prefix

    def get(self, index: int) -> bytes | None:
        raw = self.redis.get(self._record_key(index))
        if raw is None:
            return None
        return bytes(raw)

    def put(self, index: int, payload: bytes) -> None:
        pipe = self.redis.pipeline()
        pipe.set(self._record_key(index), payload)
        pipe.zadd(self._index_key(), {str(index): index})
        pipe.execute()
        logger.debug("Stored snippet #%d (%d bytes)", index, len(payload))

    def delete(self, index: int) -> bool:
        pipe = self.redis.pipeline()
        pipe.delete(self._record_key(index))
        pipe.zrem(self._index_key(), str(index))
        deleted, _ = pipe.execute()
        return bool(deleted)

    def scan(self) -> Iterator[Tuple[int, bytes]]:
        ids = self.redis.zrange(self._index_key(), 0, -1)
        indices = [int(raw_id.decode("utf-8") if isinstance(raw_id, bytes) else raw_id) for raw_id in ids]
        for start in range(0, len(indices), SCAN_BATCH_SIZE):
            batch = indices[start : start + SCAN_BATCH_SIZE]
            payloads = self.redis.mget([self._record_key(index) for index in batch])
            for index, raw in zip(batch, payloads):
                if raw is None:
                    logger.debug("Index entry #%d has no record", index)
                    continue
                yield index, bytes(raw)

    def next_index(self) -> int:
        return int(self.redis.incr(self._counter_key()))

    def _record_key(self, index: int) -> str:
        return f"{self.key_prefix}{self.RECORD_PREFIX}{index}"

    def _index_key(self) -> str:
        return f"{self.key_prefix}{self.INDEX_KEY}"

    def _counter_key(self) -> str:
        return f"{self.key_prefix}{self.COUNTER_KEY}"


__all__ = ["RedisSnippetStore", "create_redis_connection"]
