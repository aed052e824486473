"""Tests for node serialisation and probe projection."""

from skyport_panel.cluster.models import (
    Node,
    NodeSpec,
    NodeStatus,
    ProbeOffline,
    ProbeOnline,
    apply_probe,
    record_key,
)


def test_record_key() -> None:
    assert record_key("abc") == "abc_node"


def test_spec_accepts_wire_names_and_ignores_extras() -> None:
    spec = NodeSpec.model_validate(
        {"name": "n", "apiKey": "k", "port": "8080", "unexpected": 1}
    )

    assert spec.api_key == "k"
    assert spec.port == "8080"
    assert spec.address is None


def test_new_node_is_unknown() -> None:
    node = Node.from_spec("id-1", NodeSpec(name="n", address="h", port=1, apiKey="k"))

    assert node.status is NodeStatus.UNKNOWN
    assert node.api_key == "k"
    assert node.base_url == "http://h:1/"


def test_to_dict_uses_wire_keys() -> None:
    data = Node(id="id-1", api_key="k", version_family="v1").to_dict()

    assert data["apiKey"] == "k"
    assert data["versionFamily"] == "v1"
    assert data["status"] == "Unknown"
    assert set(data) == {
        "id", "name", "tags", "ram", "disk", "processor", "address", "port",
        "apiKey", "status", "versionFamily", "versionRelease", "remote", "docker",
    }


def test_from_dict_tolerates_sparse_records() -> None:
    node = Node.from_dict({"id": "id-1", "status": "Offline"})

    assert node.status is NodeStatus.OFFLINE
    assert node.docker is None
    assert Node.from_dict(node.to_dict()) == node


def test_apply_online_then_offline() -> None:
    node = Node(id="id-1")

    apply_probe(node, ProbeOnline(version_family="v1", version_release="2", remote=True, docker=False))
    assert node.status is NodeStatus.ONLINE
    assert node.remote is True

    apply_probe(node, ProbeOffline(cause="refused"))
    assert node.status is NodeStatus.OFFLINE
    assert node.version_family == "v1"
    assert node.version_release == "2"
    assert node.docker is False
