"""Middleware: protocol-based, no inheritance required.

Two tiers:
    Global middleware -- ``mw(request)``, runs before route matching and
        may short-circuit with a Response
    Endpoint middleware -- ``mw(request, context)``, runs after the
        context is built and returns the context
"""

from roost.middleware.pipeline import run_endpoint_middlewares, run_global_middlewares, to_outcome
from roost.middleware.protocol import (
    EndpointMiddleware,
    GlobalMiddleware,
    GlobalOutcome,
    Halt,
    Proceed,
)

__all__ = [
    "EndpointMiddleware",
    "GlobalMiddleware",
    "GlobalOutcome",
    "Halt",
    "Proceed",
    "run_endpoint_middlewares",
    "run_global_middlewares",
    "to_outcome",
]
