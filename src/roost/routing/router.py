"""Compiled per-method routing table and the request dispatcher.

Endpoints are grouped by method and their patterns compiled once, when
the router is created. The table is read-only afterwards.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from roost._internal.asgi import Receive, Scope, Send
from roost._internal.invoke import invoke
from roost.config import RouterConfig
from roost.context import build_context
from roost.errors import (
    ErrorKind,
    RouterError,
    method_not_allowed,
    not_found,
    unsupported_method,
)
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.pipeline import run_endpoint_middlewares, run_global_middlewares
from roost.middleware.protocol import Halt
from roost.routing.endpoint import SUPPORTED_METHODS, RouteEndpoint, is_supported_method
from roost.routing.pattern import CompiledPattern, compile_pattern, join_base_path, match_path
from roost.server.errors import translate_error
from roost.server.handler import handle_asgi
from roost.server.negotiation import negotiate

logger = logging.getLogger("roost.routing")

type MethodHandler = Callable[[Request], Awaitable[Response]]


@dataclass(frozen=True, slots=True)
class CompiledEndpoint:
    """An endpoint with its base-path-prefixed route, compiled."""

    endpoint: RouteEndpoint
    route: str
    pattern: CompiledPattern


class Router:
    """Dispatches requests to endpoints.

    Exposes one async handler per method that has at least one endpoint::

        router = create_router([get_users, create_user])
        response = await router.GET(request)
        hasattr(router, "PUT")  # False

    The router is also an ASGI application.
    """

    __slots__ = ("_allowed", "_config", "_handlers", "_table")

    def __init__(
        self,
        endpoints: Iterable[RouteEndpoint],
        config: RouterConfig | None = None,
    ) -> None:
        if config is None:
            config = RouterConfig()
        elif not isinstance(config, RouterConfig):
            raise RouterError(
                ErrorKind.INVALID_HANDLER_REGISTRATION,
                "Router config must be a RouterConfig",
                detail=type(config).__name__,
            )
        self._config = config

        groups: dict[str, list[CompiledEndpoint]] = {}
        for endpoint in endpoints:
            if not isinstance(endpoint, RouteEndpoint):
                raise RouterError(
                    ErrorKind.INVALID_ROUTE_REGISTRATION,
                    "Endpoints must be created with create_endpoint()",
                    detail=type(endpoint).__name__,
                )
            route = join_base_path(config.base_path, endpoint.route)
            compiled = CompiledEndpoint(endpoint, route, compile_pattern(route))
            groups.setdefault(endpoint.method, []).append(compiled)

        self._table: Mapping[str, tuple[CompiledEndpoint, ...]] = MappingProxyType(
            {method: tuple(group) for method, group in groups.items()}
        )
        self._allowed = frozenset(self._table)
        self._handlers: Mapping[str, MethodHandler] = MappingProxyType(
            {method: self._method_handler(method) for method in self._table}
        )

        for method, group in self._table.items():
            for compiled in group:
                logger.debug("Registered %s %s", method, compiled.route)

    def _method_handler(self, method: str) -> MethodHandler:
        async def handle(request: Request) -> Response:
            return await self.dispatch(request)

        handle.__name__ = method
        handle.__qualname__ = f"Router.{method}"
        return handle

    # -- Introspection --

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def handlers(self) -> Mapping[str, MethodHandler]:
        """Method name to async handler, for every registered method."""
        return self._handlers

    @property
    def methods(self) -> frozenset[str]:
        return self._allowed

    @property
    def table(self) -> Mapping[str, tuple[CompiledEndpoint, ...]]:
        """The read-only routing table, in registration order per method."""
        return self._table

    def __getattr__(self, name: str) -> MethodHandler:
        # Only reached when normal lookup fails; private names are never handlers
        if name.startswith("_") or name not in SUPPORTED_METHODS:
            raise AttributeError(name)
        handler = self._handlers.get(name)
        if handler is None:
            msg = f"Router has no {name} endpoints"
            raise AttributeError(msg)
        return handler

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._handlers})

    def __repr__(self) -> str:
        counts = ", ".join(f"{m}={len(g)}" for m, g in self._table.items())
        return f"Router({counts})"

    # -- Dispatch --

    def find(self, method: str, path: str) -> CompiledEndpoint | None:
        """First endpoint registered for *method* whose pattern matches *path*."""
        for compiled in self._table.get(method, ()):
            if match_path(compiled.pattern, path) is not None:
                return compiled
        return None

    async def dispatch(self, request: Request) -> Response:
        """Run the full pipeline for *request* and return its response.

        Never raises: every failure is translated into a response.
        """
        try:
            return await self._dispatch(request)
        except Exception as exc:
            return await translate_error(exc, request, self._config.on_error)

    async def _dispatch(self, request: Request) -> Response:
        method = request.method
        if not is_supported_method(method):
            raise unsupported_method(method)
        if method not in self._allowed:
            raise method_not_allowed(method, self._allowed)

        match await run_global_middlewares(request, self._config.middlewares):
            case Halt(response=response):
                return response
            case outcome:
                request = outcome.request

        compiled = self.find(request.method, request.raw_path)
        if compiled is None:
            raise not_found()

        endpoint = compiled.endpoint
        if endpoint.method != request.method:
            raise method_not_allowed(request.method, self._allowed)

        context = await build_context(request, compiled.route, endpoint.config)
        context = await run_endpoint_middlewares(request, context, endpoint.config.middlewares)
        result = await invoke(endpoint.handler, request, context)
        return negotiate(result)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await handle_asgi(scope, receive, send, router=self)


def create_router(
    endpoints: Iterable[RouteEndpoint],
    config: RouterConfig | None = None,
) -> Router:
    """Build a ``Router`` from *endpoints*.

    Usage::

        router = create_router(
            [get_session, sign_in],
            RouterConfig(base_path="/api/auth"),
        )
        response = await router.GET(Request.create("GET", "/api/auth/session"))

    Raises:
        RouterError: If *config* is not a ``RouterConfig`` or an entry of
            *endpoints* was not built by ``create_endpoint()``.
    """
    return Router(endpoints, config)
