"""In-memory key-value store — zero-dependency drop-in replacement for Redis.

Used in standalone mode and by the test suite so the panel works without
any external services.

Same interface as RedisStore: connect, disconnect, get, set, delete,
health_check. Values are kept JSON-encoded, exactly as Redis would hold
them.
"""

import json
from typing import Any, Optional

import structlog

from skyport_panel.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)


class InMemoryStore(KeyValueStore):
    """Process-local key-value store.

    All data lives in the process and is lost on exit.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._is_connected = False

    async def connect(self) -> None:
        """No-op — always available."""
        self._is_connected = True
        await logger.ainfo("memory_store_connected")

    async def disconnect(self) -> None:
        self._is_connected = False
        await logger.ainfo("memory_store_disconnected")

    async def get(self, key: str) -> Optional[Any]:
        """Retrieve a value by key."""
        value = self._data.get(key)
        if value is None:
            return None
        return json.loads(value)

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value."""
        self._data[key] = json.dumps(value)

    async def delete(self, key: str) -> bool:
        """Delete a key."""
        return self._data.pop(key, None) is not None

    async def health_check(self) -> bool:
        """Always healthy — it's in-memory."""
        return True
