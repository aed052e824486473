"""Abstract key-value store consumed by the node registry.

Values are JSON-compatible (dicts, lists, strings, numbers). Concrete
backends serialise on ``set`` and hand back a fresh copy on ``get``, so
callers may mutate what they read without touching stored state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """Generic get/set/delete persistence by string key."""

    async def connect(self) -> None:
        """Open the backend connection (no-op by default)."""

    async def disconnect(self) -> None:
        """Close the backend connection (no-op by default)."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the value stored under *key*, or ``None`` when absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove *key*. Returns ``True`` if it existed. Missing keys are not an error."""
        ...

    async def health_check(self) -> bool:
        return True
