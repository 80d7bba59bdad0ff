"""In-process test client for roost routers.

Requests go through the router's ASGI interface, so the full pipeline
runs: scope parsing, middleware, matching, error translation and the
sender. Responses come back as the same ``Response`` type handlers use.
"""

from __future__ import annotations

import json as json_module
from typing import Any
from urllib.parse import urlsplit

from roost._internal.asgi import Message, bytes_receive
from roost.http.headers import HeaderSource, Headers, MutableHeaders
from roost.http.query import QueryParams
from roost.http.response import Response
from roost.routing.router import Router


class TestClient:
    """Async test client for roost routers.

    Usage::

        async with TestClient(router) as client:
            response = await client.get("/users/42")
            assert response.status == 200

            created = await client.post("/users", json={"name": "Ada"})
            assert created.status == 201
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("router",)

    def __init__(self, router: Router) -> None:
        self.router = router

    async def __aenter__(self) -> TestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        pass

    async def get(self, path: str, **kwargs: Any) -> Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Response:
        return await self.request("DELETE", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: HeaderSource | None = None,
        params: dict[str, str] | None = None,
        body: bytes | str | None = None,
        json: Any = None,
    ) -> Response:
        """Send *method* *path* through the router and collect the response.

        *path* is sent verbatim, percent-escapes and dot segments included.
        *params* are appended to any query string already in *path*.
        """
        parts = urlsplit(path)
        query = QueryParams(parts.query)
        for name, value in (params or {}).items():
            query.append(name, value)

        request_headers = MutableHeaders(headers)
        payload = b""
        if json is not None:
            payload = json_module.dumps(json).encode("utf-8")
            request_headers.setdefault("content-type", "application/json")
        elif isinstance(body, str):
            payload = body.encode("utf-8")
            request_headers.setdefault("content-type", "text/plain; charset=utf-8")
        elif body is not None:
            payload = body

        raw_path = parts.path or "/"
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": raw_path,
            "raw_path": raw_path.encode("latin-1"),
            "query_string": str(query).encode("latin-1"),
            "root_path": "",
            "headers": list(request_headers.raw),
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        messages: list[Message] = []

        async def send(message: Message) -> None:
            messages.append(message)

        await self.router(scope, bytes_receive(payload), send)
        return _collect(messages)


def _collect(messages: list[Message]) -> Response:
    start = next(m for m in messages if m["type"] == "http.response.start")
    body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")

    headers = Headers(tuple(start.get("headers", ())))
    extra = tuple(
        (name, value)
        for name, value in headers.multi_items()
        if name not in ("content-type", "content-length")
    )
    return Response(
        body=body,
        status=start["status"],
        content_type=headers.get("content-type", "text/plain; charset=utf-8"),
        headers=extra,
    )
