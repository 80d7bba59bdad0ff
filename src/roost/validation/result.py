"""Validation outcomes.

``Valid`` and ``Invalid`` are the two variants every schema returns.
``ValidationResult`` is the per-field report produced by rule checks.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Valid:
    """Validation passed. ``value`` is the validator's (possibly coerced) output."""

    value: Any


@dataclass(frozen=True, slots=True)
class Invalid:
    """Validation failed. ``detail`` is a short, client-safe reason."""

    detail: str = ""


type Outcome = Valid | Invalid


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of running field rules over a mapping.

    Falsy when invalid, so ``if not result:`` reads naturally.

    ``data`` holds the converted values of fields that passed; ``errors``
    maps each failing field to the message of the rule that stopped it::

        {"page": "Must be a whole number"}
    """

    data: dict[str, Any]
    errors: dict[str, str]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def summary(self) -> str:
        """One-line description of the failing fields."""
        return "; ".join(f"{name}: {message}" for name, message in sorted(self.errors.items()))
