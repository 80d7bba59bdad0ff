"""Roost error type.

A single exception tagged with an ``ErrorKind``. Raised by the pattern
compiler, context builder, pipeline, and dispatcher; rendered by the
error translator with one flat match over the kind.
"""

from enum import Enum


class ErrorKind(Enum):
    """Every failure the router knows how to report."""

    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    UNSUPPORTED_METHOD = "unsupported_method"
    INVALID_SEARCH_PARAMS = "invalid_search_params"
    INVALID_REQUEST_BODY = "invalid_request_body"
    INVALID_ROUTE_REGISTRATION = "invalid_route_registration"
    INVALID_HANDLER_REGISTRATION = "invalid_handler_registration"
    INTERNAL = "internal"

    @property
    def status(self) -> int:
        """Default HTTP status for this kind."""
        return _STATUS_BY_KIND[self][0]

    @property
    def status_text(self) -> str:
        """Status name, fixed per kind so it does not vary with the interpreter."""
        return _STATUS_BY_KIND[self][1]

    @property
    def phrase(self) -> str:
        """Default client-facing message."""
        return _STATUS_BY_KIND[self][2]


# HTTPStatus names 422 UNPROCESSABLE_CONTENT from Python 3.13 on
_STATUS_BY_KIND: dict[ErrorKind, tuple[int, str, str]] = {
    ErrorKind.NOT_FOUND: (404, "NOT_FOUND", "Not Found"),
    ErrorKind.METHOD_NOT_ALLOWED: (405, "METHOD_NOT_ALLOWED", "Method Not Allowed"),
    ErrorKind.UNSUPPORTED_METHOD: (405, "METHOD_NOT_ALLOWED", "Method Not Allowed"),
    ErrorKind.INVALID_SEARCH_PARAMS: (422, "UNPROCESSABLE_ENTITY", "Unprocessable Entity"),
    ErrorKind.INVALID_REQUEST_BODY: (422, "UNPROCESSABLE_ENTITY", "Unprocessable Entity"),
    ErrorKind.INVALID_ROUTE_REGISTRATION: (500, "INTERNAL_SERVER_ERROR", "Internal Server Error"),
    ErrorKind.INVALID_HANDLER_REGISTRATION: (500, "INTERNAL_SERVER_ERROR", "Internal Server Error"),
    ErrorKind.INTERNAL: (500, "INTERNAL_SERVER_ERROR", "Internal Server Error"),
}

_REGISTRATION_KINDS = frozenset(
    {ErrorKind.INVALID_ROUTE_REGISTRATION, ErrorKind.INVALID_HANDLER_REGISTRATION}
)


class RouterError(Exception):
    """An error raised anywhere inside the router.

    Attributes:
        kind: What went wrong.
        message: Client-safe message rendered in the response body.
        detail: Optional extra context (validator output, offending value).
            Logged, never rendered.
        headers: Extra response headers (e.g. ``Allow`` on 405).
    """

    __slots__ = ("detail", "headers", "kind", "message")

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        detail: str = "",
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        self.kind = kind
        self.message = message or kind.phrase
        self.detail = detail
        self.headers = headers
        super().__init__(self.message)

    @property
    def status(self) -> int:
        """HTTP status code for this error."""
        return self.kind.status

    @property
    def status_text(self) -> str:
        """Status name, e.g. ``NOT_FOUND`` or ``UNPROCESSABLE_ENTITY``."""
        return self.kind.status_text

    @property
    def is_registration_error(self) -> bool:
        """True for errors raised while building endpoints or routers."""
        return self.kind in _REGISTRATION_KINDS

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status} {self.kind.name}: {self.message} ({self.detail})"
        return f"{self.status} {self.kind.name}: {self.message}"

    def __repr__(self) -> str:
        return f"RouterError({self.kind.name}, {self.message!r})"


def not_found() -> RouterError:
    """404: no endpoint matched the request path."""
    return RouterError(ErrorKind.NOT_FOUND, "Not Found")


def method_not_allowed(method: str, allowed: frozenset[str] = frozenset()) -> RouterError:
    """405: the method is recognized but this router has no endpoint for it.

    Includes an ``Allow`` header listing the methods the router serves.
    """
    headers = (("Allow", ", ".join(sorted(allowed))),) if allowed else ()
    return RouterError(
        ErrorKind.METHOD_NOT_ALLOWED,
        f"The HTTP method '{method}' is not allowed",
        headers=headers,
    )


def unsupported_method(method: str) -> RouterError:
    """405: the method is not one the router recognizes at all."""
    return RouterError(
        ErrorKind.UNSUPPORTED_METHOD,
        f"The HTTP method '{method}' is not supported",
    )
