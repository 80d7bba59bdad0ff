"""Error translation for roost requests.

Maps RouterError exceptions and unexpected failures to JSON Response
objects, through the ``on_error`` hook when one is configured.
"""

import logging
from http import HTTPStatus

from roost._internal.invoke import invoke
from roost._internal.types import ErrorHook
from roost.errors import ErrorKind, RouterError
from roost.http.request import Request
from roost.http.response import Response, json_response
from roost.server.negotiation import negotiate

logger = logging.getLogger("roost.server")


def internal_error_response() -> Response:
    """The fixed 500 body. Never carries exception detail."""
    return json_response(
        {"message": "Internal Server Error"},
        status=500,
        reason=HTTPStatus.INTERNAL_SERVER_ERROR.name,
    )


def render_router_error(exc: RouterError) -> Response:
    """``{"message": ...}`` with the error's status, reason and headers."""
    match exc.kind:
        case ErrorKind.INVALID_ROUTE_REGISTRATION | ErrorKind.INVALID_HANDLER_REGISTRATION:
            # Registration messages describe server code, not the request
            return internal_error_response()
        case _:
            return json_response(
                {"message": exc.message},
                status=exc.status,
                headers=dict(exc.headers),
                reason=exc.status_text,
            )


async def call_error_hook(hook: ErrorHook, exc: Exception, request: Request) -> Response:
    """Invoke a user ``on_error`` hook, falling back to the fixed 500.

    The hook is called once as ``hook(error, request)``. If it raises,
    the failure is logged and never retried.
    """
    try:
        result = await invoke(hook, exc, request)
        return negotiate(result)
    except Exception:
        logger.exception("on_error hook failed for %s %s", request.method, request.path)
        return internal_error_response()


async def translate_error(
    exc: Exception,
    request: Request,
    on_error: ErrorHook | None = None,
) -> Response:
    """Turn any exception raised while handling *request* into a Response."""
    if isinstance(exc, RouterError):
        logger.debug(
            "%d %s %s: %s", exc.status, request.method, request.path, exc.detail or exc.message
        )
    else:
        logger.exception("500 %s %s", request.method, request.path)

    if on_error is not None:
        return await call_error_hook(on_error, exc, request)

    if isinstance(exc, RouterError):
        return render_router_error(exc)
    return internal_error_response()
