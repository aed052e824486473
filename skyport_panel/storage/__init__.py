"""Storage backends for the node registry.

- RedisStore: production persistence via redis.asyncio
- InMemoryStore: process-local store for standalone mode and tests
"""

from skyport_panel.storage.base import KeyValueStore
from skyport_panel.storage.memory_store import InMemoryStore
from skyport_panel.storage.redis_store import RedisStore

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "RedisStore",
]
