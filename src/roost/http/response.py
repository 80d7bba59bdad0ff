"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response, so handlers and middleware
can share one without copying.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from http import HTTPStatus
from typing import Any

from roost.http.headers import Headers

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    reason: str | None = None

    # -- Chainable transformations --

    def with_status(self, status: int, reason: str | None = None) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status, reason=reason)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers.

        Multi-valued collections (``Headers``, ``MutableHeaders``)
        contribute every value.
        """
        if isinstance(headers, Headers):
            new = tuple(headers.multi_items())
        else:
            new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Accessors --

    @property
    def status_text(self) -> str:
        """Explicit reason if set, otherwise the standard phrase."""
        if self.reason:
            return self.reason
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return ""

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive lookup of the first value for *name*."""
        return Headers(self.headers).get(name, default)

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json_module.loads(self.body_bytes)


def json_response(
    data: Any,
    *,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
    reason: str | None = None,
) -> Response:
    """Build an ``application/json`` Response from any JSON-serializable value.

    Usage::

        return json_response({"message": "User created"}, status=201)
    """
    response = Response(
        body=json_module.dumps(data),
        status=status,
        content_type=JSON_CONTENT_TYPE,
        reason=reason,
    )
    if headers:
        response = response.with_headers(headers)
    return response
