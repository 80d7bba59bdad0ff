"""Search-param rules for ``RuleSchema``.

Query values arrive as strings. A rule receives a field's current value
and returns the value to hand on, converted or not, or raises
``RuleError`` with a client-safe message. Rules run left to right, so
later rules see earlier conversions::

    RuleSchema({
        "redirect_uri": [required, url],
        "page": [integer, between(1, 500)],
        "sort": [one_of("asc", "desc")],
        "draft": [boolean],
    })

Here ``page`` reaches the handler as an ``int`` and ``draft`` as a
``bool``.
"""

import math
import re
from collections.abc import Callable
from typing import Any

type Rule = Callable[[Any], Any]


class RuleError(ValueError):
    """A rule rejected a value. The message is rendered to the client."""


def required(value: Any) -> Any:
    """Field must be present and not blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RuleError("This field is required")
    return value


def integer(value: Any) -> int:
    """Convert to ``int``; ``"4.2"`` is rejected."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RuleError("Must be a whole number") from None


def number(value: Any) -> float:
    """Convert to a finite ``float``."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise RuleError("Must be a number") from None
    if not math.isfinite(result):
        raise RuleError("Must be a number")
    return result


_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def boolean(value: Any) -> bool:
    """Convert ``true/false``, ``1/0``, ``yes/no`` or ``on/off``."""
    if isinstance(value, bool):
        return value
    token = str(value).strip().lower()
    if token in _TRUE:
        return True
    if token in _FALSE:
        return False
    raise RuleError("Must be true or false")


def between(low: float | None = None, high: float | None = None) -> Rule:
    """Inclusive bounds for a value already converted by ``integer`` or ``number``."""

    def check(value: Any) -> Any:
        if low is not None and value < low:
            raise RuleError(f"Must be at least {low}")
        if high is not None and value > high:
            raise RuleError(f"Must be at most {high}")
        return value

    return check


def length(low: int = 0, high: int | None = None) -> Rule:
    """Character count between *low* and *high*, inclusive."""

    def check(value: Any) -> Any:
        size = len(str(value))
        if size < low:
            raise RuleError(f"Must be at least {low} characters")
        if high is not None and size > high:
            raise RuleError(f"Must be at most {high} characters")
        return value

    return check


def one_of(*choices: str) -> Rule:
    allowed = frozenset(choices)
    listing = ", ".join(sorted(allowed))

    def check(value: Any) -> Any:
        if value not in allowed:
            raise RuleError(f"Must be one of: {listing}")
        return value

    return check


def matches(pattern: str, message: str | None = None) -> Rule:
    """Whole value must match the regex *pattern*."""
    compiled = re.compile(pattern)

    def check(value: Any) -> Any:
        if compiled.fullmatch(str(value)) is None:
            raise RuleError(message or f"Must match pattern: {pattern}")
        return value

    return check


_URL_RE = re.compile(r"https?://[^\s/$.?#][^\s]*", re.IGNORECASE)


def url(value: Any) -> Any:
    """Absolute http or https URL, e.g. a ``redirect_uri``."""
    if _URL_RE.fullmatch(str(value)) is None:
        raise RuleError("Must be a valid URL")
    return value
