"""Shared fixtures: in-memory store and a sample node."""

import pytest

from skyport_panel.cluster.models import Node, NodeStatus
from skyport_panel.storage.memory_store import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    """Create an empty InMemoryStore."""
    return InMemoryStore()


@pytest.fixture
def node() -> Node:
    """A node that has never been probed."""
    return Node(
        id="node-1",
        name="node-a",
        tags="eu",
        ram=4096,
        disk=100,
        processor="x86",
        address="10.0.0.5",
        port=8080,
        api_key="abc",
        status=NodeStatus.UNKNOWN,
    )
