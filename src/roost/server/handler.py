"""ASGI handler: translates ASGI scope/messages to roost types.

The only component that touches raw ASGI directly. Converts HTTP scopes
to typed Request objects, dispatches them through the router, and sends
the Response back through ASGI send().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roost._internal.asgi import Receive, Scope, Send
from roost.http.request import Request
from roost.server.sender import send_response

if TYPE_CHECKING:
    from roost.routing.router import Router

logger = logging.getLogger("roost.server")


async def handle_asgi(scope: Scope, receive: Receive, send: Send, *, router: Router) -> None:
    """Serve one ASGI connection scope with *router*.

    HTTP scopes are dispatched, lifespan scopes are acknowledged, and
    anything else (websockets) is ignored.
    """
    scope_type = scope["type"]
    if scope_type == "lifespan":
        await handle_lifespan(receive, send)
        return
    if scope_type != "http":
        logger.debug("Ignoring unsupported ASGI scope type %r", scope_type)
        return

    request = Request.from_asgi(scope, receive)
    response = await router.dispatch(request)
    await send_response(response, send)


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge startup and shutdown. The router holds no resources."""
    while True:
        message = await receive()
        msg_type = message["type"]

        if msg_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
