"""Roost: an async request router.

Matches requests to endpoints, builds a validated context, runs two
tiers of middleware and turns every failure into a JSON response.

Basic usage::

    from roost import Request, create_endpoint, create_router, json_response

    async def get_user(request, context):
        return json_response({"id": context.params["userId"]})

    router = create_router([create_endpoint("GET", "/users/:userId", get_user)])

    response = await router.GET(Request.create("GET", "/users/42"))

The router is an ASGI application, so any ASGI server can host it.
"""

__version__ = "0.1.0"
__all__ = [
    "EndpointConfig",
    "EndpointSchemas",
    "ErrorKind",
    "Halt",
    "Headers",
    "Invalid",
    "MutableHeaders",
    "Proceed",
    "PydanticSchema",
    "QueryParams",
    "Request",
    "RequestContext",
    "Response",
    "RouteEndpoint",
    "Router",
    "RouterConfig",
    "RouterError",
    "RuleSchema",
    "Valid",
    "create_endpoint",
    "create_endpoint_config",
    "create_router",
    "get_route_params",
    "json_response",
    "sanitize_path",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    if name in ("Router", "create_router"):
        from roost.routing import router as _router

        return getattr(_router, name)

    if name in (
        "EndpointConfig",
        "EndpointSchemas",
        "RouteEndpoint",
        "create_endpoint",
        "create_endpoint_config",
    ):
        from roost.routing import endpoint as _endpoint

        return getattr(_endpoint, name)

    if name in ("get_route_params", "sanitize_path"):
        from roost.routing import pattern as _pattern

        return getattr(_pattern, name)

    if name == "RouterConfig":
        from roost.config import RouterConfig

        return RouterConfig

    if name == "RequestContext":
        from roost.context import RequestContext

        return RequestContext

    if name == "Request":
        from roost.http.request import Request

        return Request

    if name in ("Response", "json_response"):
        from roost.http import response as _resp

        return getattr(_resp, name)

    if name in ("Headers", "MutableHeaders"):
        from roost.http import headers as _headers

        return getattr(_headers, name)

    if name == "QueryParams":
        from roost.http.query import QueryParams

        return QueryParams

    if name in ("Proceed", "Halt"):
        from roost.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("PydanticSchema", "RuleSchema", "Valid", "Invalid"):
        import roost.validation as _validation

        return getattr(_validation, name)

    if name in ("ErrorKind", "RouterError"):
        from roost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
