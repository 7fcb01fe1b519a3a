"""Byte stores for encoded snippets and the repository built on them."""

from .base import MemorySnippetStore, SnippetStore
from .redis_store import RedisSnippetStore, create_redis_connection
from .repository import SnippetRepository

__all__ = [
    "MemorySnippetStore",
    "RedisSnippetStore",
    "SnippetRepository",
    "SnippetStore",
    "create_redis_connection",
]
