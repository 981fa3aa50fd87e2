"""In-memory API served through ``httpx.MockTransport``."""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ

import httpx

BASE_URL = "https://api.example.test"
USERS: list[dict[str, typ.Any]] = [{"id": 1, "name": "John Smith"}]
IMAGE_BYTES = b"abcd/efgh"

_Route = typ.Callable[[httpx.Request], httpx.Response]


def _error_network(request: httpx.Request) -> httpx.Response:
    msg = "connection refused"
    raise httpx.ConnectError(msg, request=request)


def _error_timeout(request: httpx.Request) -> httpx.Response:
    msg = "timed out"
    raise httpx.ReadTimeout(msg, request=request)


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "path": request.url.path,
            "content_type": request.headers.get("content-type"),
            "body": request.content.decode("utf-8", errors="replace"),
        },
    )


_ROUTES: dict[tuple[str, str], _Route] = {
    ("GET", "/users"): lambda _: httpx.Response(200, json=USERS),
    ("PUT", "/users"): lambda _: httpx.Response(200, json=True),
    ("POST", "/users"): lambda _: httpx.Response(200, json=True),
    ("DELETE", "/users"): lambda _: httpx.Response(200, json=True),
    ("GET", "/images/valid"): lambda _: httpx.Response(
        200, content=IMAGE_BYTES, headers={"content-type": "IMAGE/JPEG"}
    ),
    ("GET", "/images/invalid"): lambda _: httpx.Response(400),
    ("GET", "/error_400"): lambda _: httpx.Response(400, json=False),
    ("PUT", "/error_400"): lambda _: httpx.Response(400, json=False),
    ("POST", "/error_400"): lambda _: httpx.Response(400, json=False),
    ("DELETE", "/error_400"): lambda _: httpx.Response(400, json=False),
    ("GET", "/error_500"): lambda _: httpx.Response(500, json={"error": "boom"}),
    ("GET", "/created"): lambda _: httpx.Response(201, json={"id": 2}),
    ("GET", "/text"): lambda _: httpx.Response(200, text="plain words"),
}

# Failure routes answer every method the same way.
_FAILURE_ROUTES: dict[str, _Route] = {
    "/error_network": _error_network,
    "/error_timeout": _error_timeout,
}


@dataclasses.dataclass(slots=True)
class MockApi:
    """Route table plus a log of every request that reached it.

    Paths under ``/echo`` reflect the request back as JSON. Paths under
    ``/slow/<ms>`` sleep before echoing so concurrent calls can overlap.
    """

    requests: list[httpx.Request] = dataclasses.field(default_factory=list)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        """Serve ``request`` from the route table."""
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/slow/"):
            delay_ms = int(path.split("/")[2])
            await asyncio.sleep(delay_ms / 1000)
            return _echo(request)
        if path.startswith("/echo"):
            return _echo(request)
        route = _FAILURE_ROUTES.get(path) or _ROUTES.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        """Return a mock transport bound to this API."""
        return httpx.MockTransport(self.handle)

    @property
    def last_request(self) -> httpx.Request:
        """Return the most recent request."""
        return self.requests[-1]
