"""Node registry, health probing and probe fan-out."""

from skyport_panel.cluster.health import HealthChecker
from skyport_panel.cluster.models import Node, NodeSpec, NodeStatus, ProbeOffline, ProbeOnline
from skyport_panel.cluster.orchestrator import ProbeOrchestrator
from skyport_panel.cluster.registry import NodeRegistry

__all__ = [
    "HealthChecker",
    "Node",
    "NodeRegistry",
    "NodeSpec",
    "NodeStatus",
    "ProbeOffline",
    "ProbeOnline",
    "ProbeOrchestrator",
]
