"""Node data model and probe result types.

A ``Node`` is stored and served in its camelCase wire form (``apiKey``,
``versionFamily`` ...). ``ProbeOnline`` / ``ProbeOffline`` are the internal
outcome of a single health probe; only the resulting ``status`` is kept on
the node, the offline cause goes to the log.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

INDEX_KEY = "nodes"


def record_key(node_id: str) -> str:
    """Store key holding the serialized record of ``node_id``."""
    return f"{node_id}_node"


class NodeStatus(str, Enum):
    """Reachability of a node as of its last probe."""

    UNKNOWN = "Unknown"
    ONLINE = "Online"
    OFFLINE = "Offline"


class NodeSpec(BaseModel):
    """Operator-supplied fields for a new node.

    Everything is optional and loosely typed; the panel treats these values
    as opaque and forwards them unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[Any] = None
    tags: Optional[Any] = None
    ram: Optional[Any] = None
    disk: Optional[Any] = None
    processor: Optional[Any] = None
    address: Optional[Any] = None
    port: Optional[Any] = None
    api_key: Optional[Any] = Field(default=None, alias="apiKey")


@dataclass
class Node:
    """A registered worker daemon.

    Attributes:
        id: UUID assigned at creation, never changes.
        name, tags, ram, disk, processor: Descriptive metadata.
        address: Host the node API listens on.
        port: Port the node API listens on.
        api_key: Password used for the probe's Basic auth.
        status: Result of the most recent probe.
        version_family, version_release, remote, docker: Last values the
            node reported while online. Left stale when it goes offline.
    """

    id: str
    name: Any = None
    tags: Any = None
    ram: Any = None
    disk: Any = None
    processor: Any = None
    address: Any = None
    port: Any = None
    api_key: Any = None
    status: NodeStatus = NodeStatus.UNKNOWN
    version_family: Any = None
    version_release: Any = None
    remote: Any = None
    docker: Any = None

    @classmethod
    def from_spec(cls, node_id: str, spec: NodeSpec) -> "Node":
        return cls(
            id=node_id,
            name=spec.name,
            tags=spec.tags,
            ram=spec.ram,
            disk=spec.disk,
            processor=spec.processor,
            address=spec.address,
            port=spec.port,
            api_key=spec.api_key,
        )

    @property
    def base_url(self) -> str:
        return f"http://{self.address}:{self.port}/"

    def to_dict(self) -> dict:
        """Serialise to the camelCase record stored under ``<id>_node``."""
        return {
            "id": self.id,
            "name": self.name,
            "tags": self.tags,
            "ram": self.ram,
            "disk": self.disk,
            "processor": self.processor,
            "address": self.address,
            "port": self.port,
            "apiKey": self.api_key,
            "status": self.status.value,
            "versionFamily": self.version_family,
            "versionRelease": self.version_release,
            "remote": self.remote,
            "docker": self.docker,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(
            id=data["id"],
            name=data.get("name"),
            tags=data.get("tags"),
            ram=data.get("ram"),
            disk=data.get("disk"),
            processor=data.get("processor"),
            address=data.get("address"),
            port=data.get("port"),
            api_key=data.get("apiKey"),
            status=NodeStatus(data.get("status", NodeStatus.UNKNOWN.value)),
            version_family=data.get("versionFamily"),
            version_release=data.get("versionRelease"),
            remote=data.get("remote"),
            docker=data.get("docker"),
        )


@dataclass(frozen=True)
class ProbeOnline:
    """The node answered with a status document."""

    version_family: Any = None
    version_release: Any = None
    online: Any = None
    remote: Any = None
    docker: Any = None

    @classmethod
    def from_payload(cls, payload: dict) -> "ProbeOnline":
        return cls(
            version_family=payload.get("versionFamily"),
            version_release=payload.get("versionRelease"),
            online=payload.get("online"),
            remote=payload.get("remote"),
            docker=payload.get("docker"),
        )


@dataclass(frozen=True)
class ProbeOffline:
    """The probe failed; ``cause`` describes why."""

    cause: str


ProbeResult = Union[ProbeOnline, ProbeOffline]


def apply_probe(node: Node, result: ProbeResult) -> Node:
    """Project a probe result onto ``node`` in place and return it."""
    if isinstance(result, ProbeOnline):
        node.status = NodeStatus.ONLINE
        node.version_family = result.version_family
        node.version_release = result.version_release
        node.remote = result.remote
        node.docker = result.docker
    else:
        node.status = NodeStatus.OFFLINE
    return node
