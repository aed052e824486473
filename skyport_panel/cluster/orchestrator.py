"""Probe orchestrator — concurrent fan-out/fan-in over many nodes.

Every node gets one probe; the aggregate is returned only after all of
them have settled. ``max_concurrency`` caps in-flight probes and
``deadline`` caps the whole round: probes still running when it expires
are cancelled and their nodes recorded as offline.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

import structlog

from skyport_panel.cluster.health import HealthChecker
from skyport_panel.cluster.models import (
    Node,
    NodeStatus,
    ProbeOffline,
    apply_probe,
    record_key,
)

logger = structlog.get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 32
DEFAULT_DEADLINE = 30.0


class ProbeOrchestrator:
    """Runs a HealthChecker across a batch of nodes.

    Args:
        checker: Performs and persists the individual probes.
        max_concurrency: Upper bound on simultaneous probes; ``None`` or 0
            means unbounded.
        deadline: Seconds allowed for a whole round; ``None`` waits forever.
    """

    def __init__(
        self,
        checker: HealthChecker,
        max_concurrency: Optional[int] = DEFAULT_MAX_CONCURRENCY,
        deadline: Optional[float] = DEFAULT_DEADLINE,
    ) -> None:
        self.checker = checker
        self.max_concurrency = max_concurrency or None
        self.deadline = deadline

    async def probe_all(self, nodes: Sequence[Node]) -> list[Node]:
        """Probe every node concurrently and return them in input order."""
        if not nodes:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def _bounded(node: Node) -> Node:
            if semaphore is None:
                return await self.checker.probe(node)
            async with semaphore:
                return await self.checker.probe(node)

        tasks = [asyncio.create_task(_bounded(node)) for node in nodes]
        done, pending = await asyncio.wait(tasks, timeout=self.deadline)

        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            await logger.awarning(
                "probe_deadline_exceeded",
                deadline=self.deadline,
                pending=len(pending),
                total=len(tasks),
            )

        results: list[Node] = []
        for node, task in zip(nodes, tasks):
            if task in pending:
                apply_probe(node, ProbeOffline(cause="deadline exceeded"))
                await self.checker.store.set(record_key(node.id), node.to_dict())
                results.append(node)
            else:
                # Re-raises store failures from the probe's write-back
                results.append(task.result())

        await logger.adebug(
            "probe_round_complete",
            total=len(results),
            online=sum(1 for n in results if n.status is NodeStatus.ONLINE),
        )
        return results
