"""Tests for concurrent probe fan-out/fan-in."""

import asyncio
import time

import httpx
import pytest

from skyport_panel.cluster.health import HealthChecker
from skyport_panel.cluster.models import Node, NodeStatus
from skyport_panel.cluster.orchestrator import ProbeOrchestrator
from skyport_panel.storage.memory_store import InMemoryStore
from tests.helpers import ONLINE_PAYLOAD, transport_by_host


def _nodes(*hosts: str) -> list[Node]:
    return [
        Node(id=f"id-{i}", name=host, address=host, port=8080, api_key="k")
        for i, host in enumerate(hosts)
    ]


async def _online(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=ONLINE_PAYLOAD)


def _delayed(seconds: float):
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(seconds)
        return httpx.Response(200, json=ONLINE_PAYLOAD)

    return handler


class _CountingChecker:
    """Stand-in checker that records how many probes overlap."""

    def __init__(self, store: InMemoryStore, delay: float = 0.05) -> None:
        self.store = store
        self.delay = delay
        self.in_flight = 0
        self.peak = 0
        self.calls = 0

    async def probe(self, node: Node) -> Node:
        self.calls += 1
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        node.status = NodeStatus.ONLINE
        return node


class TestProbeAll:
    """Fan-out/fan-in behaviour."""

    @pytest.mark.asyncio
    async def test_empty(self, store: InMemoryStore) -> None:
        orchestrator = ProbeOrchestrator(HealthChecker(store))

        assert await orchestrator.probe_all([]) == []

    @pytest.mark.asyncio
    async def test_preserves_order_and_mixes_outcomes(self, store: InMemoryStore) -> None:
        checker = HealthChecker(
            store,
            transport=transport_by_host({"up-1": _online, "up-2": _online}),
        )
        orchestrator = ProbeOrchestrator(checker)

        results = await orchestrator.probe_all(_nodes("up-1", "down", "up-2"))

        assert [n.name for n in results] == ["up-1", "down", "up-2"]
        assert [n.status for n in results] == [
            NodeStatus.ONLINE,
            NodeStatus.OFFLINE,
            NodeStatus.ONLINE,
        ]

    @pytest.mark.asyncio
    async def test_waits_for_slowest_probe(self, store: InMemoryStore) -> None:
        """The aggregate is only returned once the delayed node has answered."""
        checker = HealthChecker(
            store,
            transport=transport_by_host(
                {"fast-1": _online, "fast-2": _online, "slow": _delayed(0.3)}
            ),
        )
        orchestrator = ProbeOrchestrator(checker)

        started = time.monotonic()
        results = await orchestrator.probe_all(_nodes("fast-1", "slow", "fast-2"))
        elapsed = time.monotonic() - started

        assert elapsed >= 0.3
        assert len(results) == 3
        assert all(n.status is NodeStatus.ONLINE for n in results)

    @pytest.mark.asyncio
    async def test_probes_run_concurrently(self, store: InMemoryStore) -> None:
        checker = HealthChecker(
            store,
            transport=transport_by_host(
                {"a": _delayed(0.2), "b": _delayed(0.2), "c": _delayed(0.2)}
            ),
        )
        orchestrator = ProbeOrchestrator(checker, max_concurrency=None)

        started = time.monotonic()
        await orchestrator.probe_all(_nodes("a", "b", "c"))

        assert time.monotonic() - started < 0.55

    @pytest.mark.asyncio
    async def test_concurrency_bound(self, store: InMemoryStore) -> None:
        checker = _CountingChecker(store)
        orchestrator = ProbeOrchestrator(checker, max_concurrency=2)

        results = await orchestrator.probe_all(_nodes(*[f"h{i}" for i in range(6)]))

        assert len(results) == 6
        assert checker.calls == 6
        assert checker.peak == 2

    @pytest.mark.asyncio
    async def test_zero_concurrency_means_unbounded(self, store: InMemoryStore) -> None:
        checker = _CountingChecker(store)
        orchestrator = ProbeOrchestrator(checker, max_concurrency=0)

        await orchestrator.probe_all(_nodes(*[f"h{i}" for i in range(5)]))

        assert checker.peak == 5


class TestDeadline:
    """Overall deadline on a probe round."""

    @pytest.mark.asyncio
    async def test_pending_probes_marked_offline(self, store: InMemoryStore) -> None:
        checker = HealthChecker(
            store,
            transport=transport_by_host({"fast": _online, "hung": _delayed(5)}),
        )
        orchestrator = ProbeOrchestrator(checker, deadline=0.2)

        started = time.monotonic()
        results = await orchestrator.probe_all(_nodes("fast", "hung"))
        elapsed = time.monotonic() - started

        assert elapsed < 2
        assert results[0].status is NodeStatus.ONLINE
        assert results[1].status is NodeStatus.OFFLINE
        stored = await store.get("id-1_node")
        assert stored["status"] == "Offline"

    @pytest.mark.asyncio
    async def test_no_deadline_waits(self, store: InMemoryStore) -> None:
        checker = HealthChecker(store, transport=transport_by_host({"slow": _delayed(0.2)}))
        orchestrator = ProbeOrchestrator(checker, deadline=None)

        results = await orchestrator.probe_all(_nodes("slow"))

        assert results[0].status is NodeStatus.ONLINE
