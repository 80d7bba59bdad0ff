"""Immutable HTTP request.

Frozen metadata with async body access. Global middlewares that want to
change a request return a new one built with ``with_header()`` or
``dataclasses.replace``.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, unquote, urlsplit

from roost._internal.asgi import Receive, Scope, bytes_receive
from roost.http.headers import Headers, HeaderSource
from roost.http.query import QueryParams

if TYPE_CHECKING:
    from roost.http.forms import FormData


def content_charset(content_type: str | None, default: str = "utf-8") -> str:
    """Return the ``charset`` parameter of a Content-Type, or *default*."""
    if not content_type:
        return default
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return default


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is percent-decoded for display; ``raw_path`` keeps the
    encoding the client sent and is what route patterns are matched
    against. Body is read asynchronously via ``.body()``, ``.json()``,
    ``.text()`` or ``.form()`` and cached after the first read.
    """

    method: str
    path: str
    raw_path: str
    headers: Headers
    query: QueryParams
    http_version: str = "1.1"
    server: tuple[str, int | None] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(
        default_factory=lambda: bytes_receive(b""), repr=False, compare=False
    )

    # Private: mutable cache for body and parsed form data. Shared with
    # requests derived through with_header() so the body is read once.
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Request target: raw path plus query string."""
        qs = str(self.query)
        if qs:
            return f"{self.raw_path}?{qs}"
        return self.raw_path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The receive channel is consumed once; later calls return the
        cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if "_body" in self._cache:
            yield self._cache["_body"]
            return
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text, honouring the declared charset."""
        raw = await self.body()
        return raw.decode(content_charset(self.content_type), errors="replace")

    async def form(self) -> FormData:
        """Parse the body as form data (URL-encoded or multipart).

        The parsed ``FormData`` is cached.

        Raises:
            ValueError: If Content-Type is not a form encoding.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        from roost.http.forms import parse_form_data

        ct = self.content_type or "application/x-www-form-urlencoded"
        raw = await self.body()
        result = await parse_form_data(raw, ct)
        self._cache["_form"] = result
        return result

    # -- Derived requests --

    def with_header(self, name: str, value: str) -> Request:
        """Return a new Request with *name* set to *value*."""
        headers = self.headers.mutable_copy()
        headers.set(name, value)
        return replace(self, headers=Headers(headers.multi_items()))

    def with_headers(self, headers: Mapping[str, str]) -> Request:
        """Return a new Request with every header in *headers* set."""
        merged = self.headers.mutable_copy().update(headers)
        return replace(self, headers=Headers(merged.multi_items()))

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        raw = scope.get("raw_path")
        if raw:
            raw_path = raw.decode("latin-1").split("?", 1)[0]
        else:
            raw_path = quote(scope["path"])
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=unquote(raw_path),
            raw_path=raw_path,
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @classmethod
    def create(
        cls,
        method: str,
        url: str,
        *,
        headers: HeaderSource | None = None,
        body: bytes | str | None = None,
        json: Any = None,
    ) -> Request:
        """Build a Request in-process, without a server.

        *url* may be absolute (``https://example.com/users?page=2``) or a
        bare path. Passing *json* encodes it as the body and sets
        ``Content-Type: application/json`` unless a content type is given.

        Usage::

            request = Request.create("POST", "/users", json={"name": "Ada"})
            response = await router.POST(request)
        """
        parts = urlsplit(url)
        request_headers = Headers(headers).mutable_copy()

        payload = b""
        if json is not None:
            payload = json_module.dumps(json).encode("utf-8")
            request_headers.setdefault("content-type", "application/json")
        elif isinstance(body, str):
            payload = body.encode("utf-8")
            request_headers.setdefault("content-type", "text/plain;charset=UTF-8")
        elif body is not None:
            payload = body

        raw_path = parts.path or "/"
        server = (parts.hostname, parts.port) if parts.hostname else None
        return cls(
            method=method.upper(),
            path=unquote(raw_path),
            raw_path=raw_path,
            headers=Headers(request_headers.multi_items()),
            query=QueryParams(parts.query),
            server=server,
            _receive=bytes_receive(payload),
        )
