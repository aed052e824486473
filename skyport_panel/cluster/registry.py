"""Node registry — panel-side tracking of registered node daemons.

Node records live in the store under ``<id>_node``; the ordered list of
ids under ``nodes`` is the authoritative answer to "which nodes exist".
Two-step mutations are ordered so the index never names a missing record:

- ``create`` writes the record, probes it, and only then appends the id.
- ``delete`` drops the id from the index first, then deletes the record.

A crash between the two steps can leave an unindexed record behind. It is
invisible to listing and harmless.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Optional

import structlog

from skyport_panel.cluster.health import HealthChecker
from skyport_panel.cluster.models import INDEX_KEY, Node, NodeSpec, record_key
from skyport_panel.cluster.orchestrator import ProbeOrchestrator
from skyport_panel.errors import NodeLookupError
from skyport_panel.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)


class NodeRegistry:
    """Create, delete, look up and list nodes.

    Index read-modify-write sections are serialised by a lock so that
    concurrent callers in this process cannot drop each other's updates.
    """

    def __init__(
        self,
        store: KeyValueStore,
        checker: HealthChecker,
        orchestrator: Optional[ProbeOrchestrator] = None,
    ) -> None:
        self.store = store
        self.checker = checker
        self.orchestrator = orchestrator or ProbeOrchestrator(checker)
        self._index_lock = asyncio.Lock()

    # ── Index ─────────────────────────────────────────────────────

    async def node_ids(self) -> list[str]:
        """Return the registry index (empty when never written)."""
        return list(await self.store.get(INDEX_KEY) or [])

    # ── Mutations ─────────────────────────────────────────────────

    async def create(self, spec: NodeSpec) -> Node:
        """Register a new node and return it after its first probe."""
        node = Node.from_spec(str(uuid.uuid4()), spec)

        await self.store.set(record_key(node.id), node.to_dict())
        node = await self.checker.probe(node)

        async with self._index_lock:
            ids = await self.node_ids()
            ids.append(node.id)
            await self.store.set(INDEX_KEY, ids)

        await logger.ainfo(
            "node_created",
            node_id=node.id,
            name=node.name,
            address=node.address,
            port=node.port,
            status=node.status.value,
        )
        return node

    async def delete(self, node_id: str) -> None:
        """Remove a node. Unknown ids are ignored."""
        async with self._index_lock:
            ids = await self.node_ids()
            remaining = [i for i in ids if i != node_id]
            await self.store.set(INDEX_KEY, remaining)

        existed = await self.store.delete(record_key(node_id))
        await logger.ainfo(
            "node_deleted",
            node_id=node_id,
            was_indexed=len(remaining) != len(ids),
            had_record=existed,
        )

    # ── Queries ───────────────────────────────────────────────────

    async def get(self, node_id: str) -> Optional[Node]:
        """Get a specific node by ID, without probing it."""
        data = await self.store.get(record_key(node_id))
        if data is None:
            return None
        return Node.from_dict(data)

    async def load_all(self) -> list[Node]:
        """Load every indexed node in index order, without probing.

        Raises:
            NodeLookupError: If an indexed id has no record.
        """
        nodes = []
        for node_id in await self.node_ids():
            node = await self.get(node_id)
            if node is None:
                await logger.aerror("node_record_missing", node_id=node_id)
                raise NodeLookupError(node_id)
            nodes.append(node)
        return nodes

    async def list(self) -> list[Node]:
        """Load every indexed node and refresh its status with a probe round."""
        return await self.orchestrator.probe_all(await self.load_all())
