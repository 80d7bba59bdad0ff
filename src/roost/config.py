"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation and checked
when built, so a bad base path or middleware fails at import time.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from roost._internal.types import ErrorHook
from roost.errors import ErrorKind, RouterError
from roost.routing.endpoint import check_middlewares
from roost.routing.pattern import is_valid_route

if TYPE_CHECKING:
    from roost.middleware.protocol import GlobalMiddleware


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router-wide configuration. Immutable after creation.

    All fields are optional::

        config = RouterConfig(
            base_path="/api/auth",
            middlewares=(require_json,),
            on_error=report_error,
        )
    """

    # Prefix applied to every endpoint route before compilation
    base_path: str | None = None

    # Global middlewares, run in order before route matching
    middlewares: tuple[GlobalMiddleware, ...] = ()

    # on_error(error, request) -> response value; replaces the default renderer
    on_error: ErrorHook | None = None

    def __post_init__(self) -> None:
        if self.base_path is not None and not is_valid_route(self.base_path):
            raise RouterError(
                ErrorKind.INVALID_ROUTE_REGISTRATION,
                f"Invalid base path: {self.base_path}",
            )
        object.__setattr__(self, "middlewares", check_middlewares(self.middlewares))
        if self.on_error is not None and not callable(self.on_error):
            raise RouterError(
                ErrorKind.INVALID_HANDLER_REGISTRATION,
                "on_error must be a callable",
                detail=type(self.on_error).__name__,
            )


def create_router_config(
    *,
    base_path: str | None = None,
    middlewares: Iterable[GlobalMiddleware] = (),
    on_error: ErrorHook | None = None,
) -> RouterConfig:
    """Build a ``RouterConfig`` from any iterable of middlewares."""
    return RouterConfig(base_path=base_path, middlewares=tuple(middlewares), on_error=on_error)
