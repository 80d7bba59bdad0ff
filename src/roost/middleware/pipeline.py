"""Serial execution of the two middleware tiers.

Each middleware is awaited to completion before the next one starts.
Exceptions propagate unchanged to the router, which translates them.
"""

from collections.abc import Iterable
from typing import Any

from roost._internal.invoke import invoke
from roost.context import RequestContext
from roost.errors import ErrorKind, RouterError
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.protocol import GlobalOutcome, Halt, Proceed


def _check_callable(middleware: Any) -> None:
    if not callable(middleware):
        raise RouterError(
            ErrorKind.INVALID_HANDLER_REGISTRATION,
            "Middleware must be a callable",
            detail=type(middleware).__name__,
        )


def to_outcome(result: Any) -> GlobalOutcome:
    """Normalise a global middleware's return value.

    Raises:
        TypeError: For anything other than Request, Response, Proceed or Halt.
    """
    match result:
        case Proceed() | Halt():
            return result
        case Request():
            return Proceed(result)
        case Response():
            return Halt(result)
        case _:
            msg = (
                f"Global middleware must return a Request or Response, "
                f"got {type(result).__name__}"
            )
            raise TypeError(msg)


async def run_global_middlewares(
    request: Request,
    middlewares: Iterable[Any],
) -> GlobalOutcome:
    """Run router-wide middlewares in order.

    Returns ``Proceed`` with the final request, or the first ``Halt``.
    """
    outcome: GlobalOutcome = Proceed(request)
    for middleware in middlewares:
        _check_callable(middleware)
        outcome = to_outcome(await invoke(middleware, outcome.request))
        if isinstance(outcome, Halt):
            return outcome
    return outcome


async def run_endpoint_middlewares(
    request: Request,
    context: RequestContext,
    middlewares: Iterable[Any],
) -> RequestContext:
    """Run per-endpoint middlewares in order, threading the context through.

    Raises:
        TypeError: If a middleware returns something other than a
            ``RequestContext``.
    """
    for middleware in middlewares:
        _check_callable(middleware)
        result = await invoke(middleware, request, context)
        if not isinstance(result, RequestContext):
            msg = (
                f"Endpoint middleware must return a RequestContext, "
                f"got {type(result).__name__}"
            )
            raise TypeError(msg)
        context = result
    return context
