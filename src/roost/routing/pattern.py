"""Route pattern compilation and matching.

A route pattern is a path template such as ``/users/:userId/books/:bookId``.
Each ``:name`` segment becomes a capture group matching one path segment;
everything else is matched literally. Compiled patterns are anchored at
both ends, so matching is exact and case-sensitive.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import unquote

# Valid route pattern: leading slash, then letters, digits, / _ : -
ROUTE_PATTERN_RE = re.compile(r"^/[A-Za-z0-9/_:-]*$")

# A dynamic segment: colon followed by anything up to the next slash
_PARAM_RE = re.compile(r":[^/]+")

# Capture used in place of each dynamic segment
_SEGMENT_CAPTURE = "([^/]+)"

# Relative path segments never bind to a parameter
_DOT_SEGMENTS = frozenset({".", ".."})


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A route pattern compiled to an anchored regex.

    ``param_names`` lists the dynamic segment names in the order they
    appear, matching the regex's capture groups one to one.
    """

    pattern: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]


def is_valid_route(route: object) -> bool:
    """True if *route* is a string satisfying the route pattern syntax."""
    return isinstance(route, str) and ROUTE_PATTERN_RE.fullmatch(route) is not None


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile *pattern* into a ``CompiledPattern``.

    Examples::

        "/about"                 -> ^/about$
        "/users/:userId/books"   -> ^/users/([^/]+)/books$

    Results are cached; compiling the same pattern twice returns the
    same object.
    """
    parts: list[str] = []
    names: list[str] = []
    position = 0
    for param in _PARAM_RE.finditer(pattern):
        parts.append(re.escape(pattern[position : param.start()]))
        parts.append(_SEGMENT_CAPTURE)
        names.append(param.group()[1:])
        position = param.end()
    parts.append(re.escape(pattern[position:]))
    regex = re.compile(f"^{''.join(parts)}$")
    return CompiledPattern(pattern=pattern, regex=regex, param_names=tuple(names))


def match_path(compiled: CompiledPattern, path: str) -> tuple[str, ...] | None:
    """Match *path* against *compiled*.

    Returns the raw (still percent-encoded) captures in pattern order,
    or ``None`` when the path does not match. A capture that is a dot
    segment (``.``, ``..`` or their encodings) is a mismatch, so
    ``/users/.`` never reaches a ``/users/:id`` handler.
    """
    found = compiled.regex.fullmatch(path)
    if found is None:
        return None
    values = found.groups()
    if any(unquote(value) in _DOT_SEGMENTS for value in values):
        return None
    return values


def extract_params(compiled: CompiledPattern, path: str) -> dict[str, str]:
    """Percent-decoded parameter values for *path*, or ``{}`` on no match."""
    values = match_path(compiled, path)
    if values is None:
        return {}
    return {name: unquote(value) for name, value in zip(compiled.param_names, values, strict=True)}


def get_route_params(route: str, path: str) -> dict[str, str]:
    """Extract route parameters from *path* using the *route* pattern.

    Examples::

        get_route_params("/users/:userId/books/:bookId", "/users/123/books/456")
        # {"userId": "123", "bookId": "456"}

        get_route_params("/users/:userId", "/users/123/books")
        # {}  (segment count differs)

        get_route_params("/users/:userId", "/users/..")
        # {}  (a parameter never captures "." or "..", encoded or not)

    Segment counts alone do not decide a match: a dot-segment value
    fails it, and the router answers such paths with 404.
    """
    return extract_params(compile_pattern(route), path)


def join_base_path(base_path: str | None, route: str) -> str:
    """Prefix *route* with *base_path*.

    A trailing slash on the base path is dropped, and the root route
    maps onto the base path itself::

        join_base_path("/api/v1", "/users")  # "/api/v1/users"
        join_base_path("/api/v1/", "/")      # "/api/v1"
    """
    if not base_path:
        return route
    base = base_path.rstrip("/")
    if not base:
        return route
    if route == "/":
        return base
    return f"{base}{route}"


_UNSAFE_PATH_CHARS = re.compile(r"[^a-zA-Z0-9/_-]")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def sanitize_path(value: str) -> str:
    """Normalize a user-supplied path fragment.

    Percent-decodes, strips every character outside ``[A-Za-z0-9/_-]``,
    collapses repeated slashes and removes a trailing slash::

        sanitize_path("/users//%3Cb%3E42/")  # "/users/b42"
    """
    cleaned = _UNSAFE_PATH_CHARS.sub("", unquote(value))
    cleaned = _REPEATED_SLASHES.sub("/", cleaned)
    return cleaned.removesuffix("/")
