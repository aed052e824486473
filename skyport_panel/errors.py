"""Exception hierarchy for the Skyport panel."""


class PanelError(Exception):
    """Base class for all panel errors."""


class ConfigError(PanelError):
    """Configuration file is missing required values or cannot be parsed."""


class StoreError(PanelError):
    """The key-value backend failed to complete an operation.

    Attributes:
        key: Store key involved in the failed operation (if any).
    """

    def __init__(self, message: str, key: str = "") -> None:
        super().__init__(message)
        self.key = key


class NodeLookupError(PanelError):
    """An id is present in the registry index but its record is missing."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Indexed node {node_id!r} has no stored record")
        self.node_id = node_id
