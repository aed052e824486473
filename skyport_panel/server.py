"""Wire configuration into a runnable panel application."""

from typing import Optional

import httpx
import structlog
import uvicorn
from starlette.applications import Starlette

from skyport_panel.api.app import create_app
from skyport_panel.cluster.health import HealthChecker
from skyport_panel.cluster.orchestrator import ProbeOrchestrator
from skyport_panel.cluster.registry import NodeRegistry
from skyport_panel.config import PanelConfig
from skyport_panel.errors import ConfigError
from skyport_panel.security.auth import AuthManager
from skyport_panel.storage import InMemoryStore, KeyValueStore, RedisStore

logger = structlog.get_logger(__name__)


def build_store(config: PanelConfig) -> KeyValueStore:
    if config.store.backend == "redis":
        return RedisStore(url=config.store.redis_url)
    return InMemoryStore()


def build_auth(config: PanelConfig) -> AuthManager:
    if not config.auth.secret_key:
        raise ConfigError("auth.secret_key (or SKYPORT_SECRET_KEY) must be set")
    return AuthManager(
        secret_key=config.auth.secret_key,
        token_expiry_minutes=config.auth.token_expiry_minutes,
    )


def build_registry(
    config: PanelConfig,
    store: Optional[KeyValueStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> NodeRegistry:
    """Assemble store → health checker → orchestrator → registry."""
    store = store or build_store(config)
    checker = HealthChecker(
        store,
        timeout=config.probe.timeout,
        transport=transport,
        max_connections=config.probe.max_concurrency,
    )
    orchestrator = ProbeOrchestrator(
        checker,
        max_concurrency=config.probe.max_concurrency,
        deadline=config.probe.deadline,
    )
    return NodeRegistry(store, checker, orchestrator)


def build_app(
    config: PanelConfig,
    store: Optional[KeyValueStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Starlette:
    return create_app(
        registry=build_registry(config, store=store, transport=transport),
        auth=build_auth(config),
    )


def serve(config: PanelConfig) -> None:
    """Run the panel API until interrupted."""
    app = build_app(config)
    logger.info(
        "panel_serving",
        host=config.server.host,
        port=config.server.port,
        store=config.store.backend,
        probe_timeout=config.probe.timeout,
        probe_deadline=config.probe.deadline,
    )
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
        access_log=False,
    )
