"""Request context construction.

Every matched request gets a fresh ``RequestContext`` holding its route
params, search params, decoded body and a mutable copy of its headers.
Endpoint middlewares mutate it in place; the handler receives the result.
"""

import json as json_module
from dataclasses import dataclass
from typing import Any

from roost._internal.multimap import last_values
from roost.errors import ErrorKind, RouterError
from roost.http.blob import Blob
from roost.http.headers import MutableHeaders
from roost.http.request import Request
from roost.routing.endpoint import EndpointConfig, is_body_method
from roost.routing.pattern import get_route_params
from roost.validation.result import Invalid, Valid
from roost.validation.schema import run_schema

_FORM_TYPES = frozenset({"application/x-www-form-urlencoded", "multipart/form-data"})
_BLOB_PREFIXES = ("image/", "video/", "audio/")


@dataclass(slots=True)
class RequestContext:
    """Per-request data handed to endpoint middlewares and the handler.

    ``search_params`` is the validator's output when the endpoint has a
    search-params schema, otherwise a mutable ``QueryParams`` copy.
    ``body`` is ``None`` for GET and DELETE.
    """

    params: dict[str, str]
    search_params: Any
    body: Any
    headers: MutableHeaders


def _media_type(content_type: str | None) -> str:
    """``"Text/HTML; charset=latin-1"`` -> ``"text/html"``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


async def get_search_params(request: Request, config: EndpointConfig) -> Any:
    """Search params for the context, validated when a schema is set.

    Raises:
        RouterError: ``INVALID_SEARCH_PARAMS`` when validation fails.
    """
    schema = config.schemas.search_params
    if schema is None:
        return request.query.copy()

    match await run_schema(schema, last_values(request.query)):
        case Valid(value=value):
            return value
        case Invalid(detail=detail):
            raise RouterError(
                ErrorKind.INVALID_SEARCH_PARAMS,
                f"Invalid search parameters: {detail}",
                detail=detail,
            )


async def get_body(request: Request, config: EndpointConfig) -> Any:
    """Decode the request body by Content-Type.

    Only POST, PUT and PATCH bodies are read; other methods yield
    ``None``. JSON is the only encoding validated against the body
    schema.

    Raises:
        RouterError: ``INVALID_REQUEST_BODY`` for malformed JSON or
            form data, or a failed body schema.
    """
    if not is_body_method(request.method):
        return None

    media_type = _media_type(request.content_type)

    if media_type == "application/json" or media_type.endswith("+json"):
        return await _get_json_body(request, config)
    if media_type in _FORM_TYPES:
        try:
            return await request.form()
        except ValueError as exc:
            raise RouterError(
                ErrorKind.INVALID_REQUEST_BODY,
                "Invalid request body",
                detail=str(exc),
            ) from exc
    if media_type.startswith("text/"):
        return await request.text()
    if media_type == "application/octet-stream":
        return await request.body()
    if media_type.startswith(_BLOB_PREFIXES):
        return Blob(await request.body(), content_type=request.content_type or media_type)

    # Unknown or missing Content-Type: best-effort text
    raw = await request.body()
    if not raw:
        return None
    return raw.decode("utf-8", errors="replace")


async def _get_json_body(request: Request, config: EndpointConfig) -> Any:
    raw = await request.body()
    try:
        data = json_module.loads(raw)
    except ValueError as exc:
        raise RouterError(
            ErrorKind.INVALID_REQUEST_BODY,
            "Invalid request body",
            detail=f"malformed JSON: {exc}",
        ) from exc

    schema = config.schemas.body
    if schema is None:
        return data

    match await run_schema(schema, data):
        case Valid(value=value):
            return value
        case Invalid(detail=detail):
            raise RouterError(
                ErrorKind.INVALID_REQUEST_BODY,
                "Invalid request body",
                detail=detail,
            )


def get_headers(request: Request) -> MutableHeaders:
    """A mutable copy of the request headers."""
    return request.headers.mutable_copy()


async def build_context(request: Request, route: str, config: EndpointConfig) -> RequestContext:
    """Assemble the context for *request* matched against *route*.

    *route* is the full pattern, base path included. The body is read
    before the search params are validated, so a malformed body is
    reported ahead of bad search params.
    """
    body = await get_body(request, config)
    return RequestContext(
        params=get_route_params(route, request.raw_path),
        search_params=await get_search_params(request, config),
        body=body,
        headers=get_headers(request),
    )
