"""Admin HTTP API for node management.

Every node route is wrapped by ``admin_only``: callers without an admin
identity are redirected to ``/`` rather than receiving data or an error
document.

Routes:
  GET    /nodes/debug     all nodes with freshly probed status (JSON)
  GET    /account/debug   the caller's identity (JSON)
  POST   /nodes/create    register a node, 201 with the probed node
  DELETE /nodes/delete    remove a node by ``nodeId``, 204
  GET    /admin/nodes     HTML node listing
"""

from __future__ import annotations

import functools
import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import structlog
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import (
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
    Response,
)
from starlette.routing import Route
from starlette.templating import Jinja2Templates

from skyport_panel.cluster.models import NodeSpec
from skyport_panel.cluster.registry import NodeRegistry
from skyport_panel.errors import PanelError
from skyport_panel.security.auth import AuthManager, Identity
from skyport_panel.security.gate import AdminGate

logger = structlog.get_logger(__name__)

PANEL_NAME_KEY = "name"
DEFAULT_PANEL_NAME = "Skyport"

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

Handler = Callable[[Request], Awaitable[Response]]


# ── Identity ──────────────────────────────────────────────────────────

def _request_token(request: Request) -> Optional[str]:
    """Pull the identity token from the Authorization header or cookie."""
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get("token")


def resolve_identity(request: Request) -> Optional[Identity]:
    auth: AuthManager = request.app.state.auth
    return auth.identify(_request_token(request))


def admin_only(handler: Handler) -> Handler:
    """Run *handler* only for admin callers; redirect everyone else to ``/``."""

    @functools.wraps(handler)
    async def wrapper(request: Request) -> Response:
        identity = resolve_identity(request)
        gate: AdminGate = request.app.state.gate
        if not gate.is_authorized(identity):
            await logger.awarning(
                "admin_access_denied",
                path=request.url.path,
                username=identity.username if identity else None,
            )
            return RedirectResponse("/", status_code=302)
        request.state.identity = identity
        return await handler(request)

    return wrapper


# ── Helpers ───────────────────────────────────────────────────────────

async def _json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object or fail with 400."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return body


def _registry(request: Request) -> NodeRegistry:
    return request.app.state.registry


async def _panel_name(request: Request) -> str:
    return await _registry(request).store.get(PANEL_NAME_KEY) or DEFAULT_PANEL_NAME


# ── Routes ────────────────────────────────────────────────────────────

async def index(request: Request) -> Response:
    return JSONResponse({"name": await _panel_name(request)})


@admin_only
async def nodes_debug(request: Request) -> Response:
    nodes = await _registry(request).list()
    return JSONResponse([node.to_dict() for node in nodes])


@admin_only
async def account_debug(request: Request) -> Response:
    identity: Optional[Identity] = getattr(request.state, "identity", None)
    if identity is None:
        return PlainTextResponse("no identity present!")
    return JSONResponse(identity.model_dump())


@admin_only
async def create_node(request: Request) -> Response:
    spec = NodeSpec.model_validate(await _json_object(request))
    node = await _registry(request).create(spec)
    return JSONResponse(node.to_dict(), status_code=201)


@admin_only
async def delete_node(request: Request) -> Response:
    body = await _json_object(request)
    node_id = body.get("nodeId")
    if node_id is None:
        raise HTTPException(status_code=400, detail="nodeId is required")
    await _registry(request).delete(str(node_id))
    return Response(status_code=204)


@admin_only
async def admin_nodes(request: Request) -> Response:
    nodes = await _registry(request).list()
    return templates.TemplateResponse(
        request,
        "nodes.html",
        {
            "user": request.state.identity,
            "nodes": nodes,
            "name": await _panel_name(request),
        },
    )


# ── Error handling ────────────────────────────────────────────────────

async def http_error(request: Request, exc: HTTPException) -> Response:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


async def panel_error(request: Request, exc: PanelError) -> Response:
    await logger.aerror(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse({"error": "Internal server error"}, status_code=500)


# ── Application ───────────────────────────────────────────────────────

def create_app(
    registry: NodeRegistry,
    auth: AuthManager,
    gate: Optional[AdminGate] = None,
) -> Starlette:
    """Build the Starlette app around an already-wired registry.

    The registry's store is connected on startup; on shutdown the probe
    HTTP client is closed and the store disconnected.
    """

    @asynccontextmanager
    async def lifespan(app: Starlette):
        await registry.store.connect()
        await logger.ainfo("panel_started")
        try:
            yield
        finally:
            await registry.checker.close()
            await registry.store.disconnect()
            await logger.ainfo("panel_stopped")

    app = Starlette(
        routes=[
            Route("/", index, methods=["GET"]),
            Route("/nodes/debug", nodes_debug, methods=["GET"]),
            Route("/account/debug", account_debug, methods=["GET"]),
            Route("/nodes/create", create_node, methods=["POST"]),
            Route("/nodes/delete", delete_node, methods=["DELETE"]),
            Route("/admin/nodes", admin_nodes, methods=["GET"]),
        ],
        exception_handlers={
            HTTPException: http_error,
            PanelError: panel_error,
        },
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.auth = auth
    app.state.gate = gate or AdminGate()
    return app
