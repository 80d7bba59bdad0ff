"""Endpoint definitions.

An endpoint is an HTTP method, a route pattern, a handler and its
configuration. Everything is checked when the endpoint is created, so a
bad registration fails at import time rather than on the first request.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from roost._internal.types import Handler
from roost.errors import ErrorKind, RouterError
from roost.routing.pattern import is_valid_route
from roost.validation.schema import Schema, is_schema

if TYPE_CHECKING:
    from roost.middleware.protocol import EndpointMiddleware

SUPPORTED_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})

# Methods whose requests carry a body the context builder decodes
BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH"})


def is_supported_method(method: object) -> bool:
    return method in SUPPORTED_METHODS


def is_body_method(method: object) -> bool:
    return method in BODY_METHODS


def is_valid_handler(handler: object) -> bool:
    return callable(handler)


def check_middlewares(middlewares: Iterable[Any]) -> tuple[Any, ...]:
    """Return *middlewares* as a tuple, rejecting non-callables.

    Raises:
        RouterError: ``INVALID_HANDLER_REGISTRATION`` naming the bad entry.
    """
    checked = tuple(middlewares)
    for index, middleware in enumerate(checked):
        if not callable(middleware):
            raise RouterError(
                ErrorKind.INVALID_HANDLER_REGISTRATION,
                "Middleware must be a callable",
                detail=f"middleware #{index} is {type(middleware).__name__}",
            )
    return checked


@dataclass(frozen=True, slots=True)
class EndpointSchemas:
    """Optional validators for the request body and search params."""

    body: Schema | None = None
    search_params: Schema | None = None

    def __post_init__(self) -> None:
        for name in ("body", "search_params"):
            schema = getattr(self, name)
            if schema is not None and not is_schema(schema):
                raise RouterError(
                    ErrorKind.INVALID_HANDLER_REGISTRATION,
                    f"Schema for {name!r} must have a validate() method",
                    detail=type(schema).__name__,
                )


@dataclass(frozen=True, slots=True)
class EndpointConfig:
    """Per-endpoint configuration. Immutable after creation.

    ``middlewares`` run in order after the context is built and before
    the handler. Each receives ``(request, context)`` and returns the
    context.
    """

    schemas: EndpointSchemas = field(default_factory=EndpointSchemas)
    middlewares: tuple[EndpointMiddleware, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "middlewares", check_middlewares(self.middlewares))


def create_endpoint_config(
    *,
    body: Schema | None = None,
    search_params: Schema | None = None,
    middlewares: Iterable[EndpointMiddleware] = (),
) -> EndpointConfig:
    """Convenience constructor for ``EndpointConfig``::

        config = create_endpoint_config(
            search_params=RuleSchema({"redirect_uri": [required]}),
            middlewares=[attach_session],
        )
    """
    return EndpointConfig(
        schemas=EndpointSchemas(body=body, search_params=search_params),
        middlewares=tuple(middlewares),
    )


@dataclass(frozen=True, slots=True)
class RouteEndpoint:
    """A registered endpoint. Created by ``create_endpoint()``."""

    method: str
    route: str
    handler: Handler
    config: EndpointConfig = field(default_factory=EndpointConfig)


def create_endpoint(
    method: str,
    route: str,
    handler: Handler,
    config: EndpointConfig | None = None,
) -> RouteEndpoint:
    """Validate and build a ``RouteEndpoint``.

    Usage::

        async def get_user(request, context):
            return json_response({"id": context.params["userId"]})

        endpoint = create_endpoint("GET", "/users/:userId", get_user)

    Raises:
        RouterError: ``INVALID_ROUTE_REGISTRATION`` for an unsupported
            method or malformed route, ``INVALID_HANDLER_REGISTRATION``
            for a non-callable handler.
    """
    if not is_supported_method(method):
        raise RouterError(
            ErrorKind.INVALID_ROUTE_REGISTRATION,
            f"Unsupported HTTP method: {method}",
        )
    if not is_valid_route(route):
        raise RouterError(
            ErrorKind.INVALID_ROUTE_REGISTRATION,
            f"Invalid route format: {route}",
        )
    if not is_valid_handler(handler):
        raise RouterError(
            ErrorKind.INVALID_HANDLER_REGISTRATION,
            "Handler must be a callable",
            detail=type(handler).__name__,
        )
    if config is None:
        config = EndpointConfig()
    elif not isinstance(config, EndpointConfig):
        raise RouterError(
            ErrorKind.INVALID_HANDLER_REGISTRATION,
            "Endpoint config must be an EndpointConfig",
            detail=type(config).__name__,
        )
    return RouteEndpoint(method=method, route=route, handler=handler, config=config)
