"""Mock node endpoints for probe tests."""

from typing import Awaitable, Callable

import httpx

ONLINE_PAYLOAD = {
    "versionFamily": "v1",
    "versionRelease": "2",
    "online": True,
    "remote": False,
    "docker": True,
}


def online_transport(payload: dict = ONLINE_PAYLOAD) -> httpx.MockTransport:
    """Every node answers 200 with *payload*."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    return httpx.MockTransport(handler)


def refused_transport() -> httpx.MockTransport:
    """Every connection is refused."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return httpx.MockTransport(handler)


def transport_by_host(
    handlers: dict[str, Callable[[httpx.Request], Awaitable[httpx.Response]]],
) -> httpx.MockTransport:
    """Dispatch to a per-host async handler; unknown hosts are refused."""

    async def handler(request: httpx.Request) -> httpx.Response:
        host_handler = handlers.get(request.url.host)
        if host_handler is None:
            raise httpx.ConnectError("Connection refused", request=request)
        return await host_handler(request)

    return httpx.MockTransport(handler)
