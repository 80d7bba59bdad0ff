"""ASGI response sending: turns a roost Response into two ASGI messages."""

from http import HTTPStatus

from roost._internal.asgi import Send
from roost.http.headers import Headers
from roost.http.response import Response

# Set by the sender, never copied from the response
_MANAGED = frozenset({"content-type", "content-length"})

_NO_BODY = frozenset({HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED})


def has_body(status: int) -> bool:
    """Whether a response with *status* may carry a body (not 1xx, 204 or 304)."""
    return status >= 200 and status not in _NO_BODY


async def send_response(response: Response, send: Send) -> None:
    """Send *response* as ``http.response.start`` plus one body message.

    An explicit ``Content-Type`` header wins over ``response.content_type``.
    Content-Length is always computed from the body actually sent.
    """
    headers = Headers(response.headers)
    content_type = headers.get("content-type") or response.content_type
    body = response.body_bytes if has_body(response.status) else b""

    raw = [(b"content-type", content_type.encode("latin-1"))]
    raw.extend(
        (name.encode("latin-1"), value.encode("latin-1"))
        for name, value in headers.multi_items()
        if name not in _MANAGED
    )
    raw.append((b"content-length", str(len(body)).encode("latin-1")))

    await send({"type": "http.response.start", "status": response.status, "headers": raw})
    await send({"type": "http.response.body", "body": body})
