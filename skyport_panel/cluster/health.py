"""Health checker — probes a single node's API and records the outcome.

The probe is a plain ``GET http://{address}:{port}/`` authenticated with
HTTP Basic credentials (``Skyport`` / the node's API key). A 2xx answer
with a JSON object body means the node is online and its version fields
are copied from the body. Anything else marks it offline and leaves the
remaining fields as they were.
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog

from skyport_panel.cluster.models import (
    Node,
    ProbeOffline,
    ProbeOnline,
    ProbeResult,
    apply_probe,
    record_key,
)
from skyport_panel.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)

PROBE_USERNAME = "Skyport"
DEFAULT_PROBE_TIMEOUT = 5.0


class HealthChecker:
    """Issues status probes against node daemons.

    Args:
        store: Store the probed node is written back to.
        timeout: Per-probe timeout in seconds (``None`` disables it).
        max_connections: Connection pool size; match it to the
            orchestrator's concurrency bound. ``None``/``0`` = unbounded.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        store: KeyValueStore,
        timeout: Optional[float] = DEFAULT_PROBE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_connections: Optional[int] = None,
    ) -> None:
        self.store = store
        self.timeout = timeout
        self.max_connections = max_connections or None
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            # Waiting for a pooled connection is not part of a node's probe
            # time; the orchestrator deadline bounds it instead.
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, pool=None),
                limits=httpx.Limits(
                    max_connections=self.max_connections,
                    max_keepalive_connections=self.max_connections,
                ),
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def check(self, node: Node) -> ProbeResult:
        """Probe *node* without touching it or the store."""
        client = self._get_http_client()
        try:
            response = await client.get(
                node.base_url,
                auth=httpx.BasicAuth(PROBE_USERNAME, str(node.api_key or "")),
                headers={"Content-Type": "application/json"},
                follow_redirects=True,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException:
            return ProbeOffline(cause="timeout")
        except httpx.HTTPStatusError as exc:
            return ProbeOffline(cause=f"http {exc.response.status_code}")
        except ValueError as exc:
            return ProbeOffline(cause=f"bad response: {exc}")
        except Exception as exc:
            return ProbeOffline(cause=f"{type(exc).__name__}: {exc}")

        if not isinstance(payload, dict):
            return ProbeOffline(cause="bad response: body is not a JSON object")
        return ProbeOnline.from_payload(payload)

    async def probe(self, node: Node) -> Node:
        """Probe *node*, update its status in place and persist it.

        Network and protocol failures never raise; they mark the node
        offline. Store failures while persisting do raise.
        """
        result = await self.check(node)
        apply_probe(node, result)

        if isinstance(result, ProbeOffline):
            await logger.ainfo(
                "node_probe_offline",
                node_id=node.id,
                address=node.address,
                port=node.port,
                cause=result.cause,
            )
        else:
            await logger.adebug(
                "node_probe_online",
                node_id=node.id,
                version_family=result.version_family,
                version_release=result.version_release,
            )

        await self.store.set(record_key(node.id), node.to_dict())
        return node
