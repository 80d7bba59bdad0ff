"""Middleware protocols and the global pipeline outcome.

A global middleware is any callable matching::

    async def mw(request: Request) -> Request | Response | Proceed | Halt: ...

Returning a ``Request`` (or ``Proceed``) continues the chain with that
request. Returning a ``Response`` (or ``Halt``) stops it; the router
sends the response without matching a route.

An endpoint middleware matches::

    async def mw(request: Request, context: RequestContext) -> RequestContext: ...

It cannot answer the request itself; to abort, raise a ``RouterError``.

Both tiers may be plain ``def`` functions or callable objects.
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol

from roost.context import RequestContext
from roost.http.request import Request
from roost.http.response import Response


@dataclass(frozen=True, slots=True)
class Proceed:
    """Continue with ``request``."""

    request: Request


@dataclass(frozen=True, slots=True)
class Halt:
    """Stop the pipeline and send ``response``."""

    response: Response


type GlobalOutcome = Proceed | Halt


class GlobalMiddleware(Protocol):
    """Protocol for router-wide middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def require_json(request: Request) -> Request | Response:
            if request.content_type != "application/json":
                return json_response({"message": "JSON only"}, status=415)
            return request

        # Class middleware
        class Tagger:
            def __call__(self, request: Request) -> Request:
                return request.with_header("x-tagged", "1")
    """

    def __call__(
        self, request: Request
    ) -> Request | Response | GlobalOutcome | Awaitable[Request | Response | GlobalOutcome]: ...


class EndpointMiddleware(Protocol):
    """Protocol for per-endpoint middleware.

    ::

        def attach_session(request: Request, context: RequestContext) -> RequestContext:
            context.headers["session-token"] = "abc"
            return context
    """

    def __call__(
        self, request: Request, context: RequestContext
    ) -> RequestContext | Awaitable[RequestContext]: ...
