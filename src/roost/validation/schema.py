"""Schema capability and adapters.

The router only knows one thing about a schema: it has a ``validate``
method that takes the decoded input and returns ``Valid(value)`` or
``Invalid(detail)``, directly or as an awaitable. Any validation library
can sit behind that contract; two adapters ship here.
"""

from collections.abc import Awaitable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from roost._internal.invoke import invoke
from roost.validation.result import Invalid, Outcome, Valid, ValidationResult
from roost.validation.rules import Rule, RuleError, required


@runtime_checkable
class Schema(Protocol):
    """Anything that can validate a decoded body or query mapping."""

    def validate(self, value: Any) -> Outcome | Awaitable[Outcome]: ...


def is_schema(obj: object) -> bool:
    """True if *obj* exposes a callable ``validate``."""
    return callable(getattr(obj, "validate", None))


async def run_schema(schema: Schema, value: Any) -> Outcome:
    """Validate *value* with *schema*, awaiting async validators.

    Raises:
        TypeError: If the schema returns something other than an outcome.
    """
    outcome = await invoke(schema.validate, value)
    match outcome:
        case Valid() | Invalid():
            return outcome
        case _:
            msg = (
                f"{type(schema).__name__}.validate() must return Valid or Invalid, "
                f"got {type(outcome).__name__}"
            )
            raise TypeError(msg)


class PydanticSchema:
    """Validate with pydantic.

    Accepts a ``BaseModel`` subclass or any type pydantic understands
    (``TypedDict``, ``dict[str, int]``, dataclasses)::

        class Credentials(BaseModel):
            username: str
            password: str

        config = EndpointConfig(schemas=EndpointSchemas(body=PydanticSchema(Credentials)))

    The handler receives the validated instance as ``context.body``.
    """

    __slots__ = ("_adapter", "type_")

    def __init__(self, type_: Any) -> None:
        self.type_ = type_
        self._adapter: TypeAdapter[Any] = TypeAdapter(type_)

    def validate(self, value: Any) -> Outcome:
        try:
            return Valid(self._adapter.validate_python(value))
        except ValidationError as exc:
            return Invalid(format_pydantic_errors(exc))

    def __repr__(self) -> str:
        return f"PydanticSchema({getattr(self.type_, '__name__', self.type_)!r})"


def format_pydantic_errors(exc: ValidationError) -> str:
    """Compact ``loc: msg`` summary, e.g. ``password: Field required``."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)


def check_fields(
    data: Mapping[str, Any],
    rules: Mapping[str, Sequence[Rule]],
) -> ValidationResult:
    """Run each field's rule chain over *data*.

    A field missing from *data* is skipped and left out of the output,
    unless its chain includes ``required``. The first ``RuleError`` ends
    a field's chain.
    """
    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    for name, chain in rules.items():
        value = data.get(name)
        if value is None and required not in chain:
            continue
        try:
            for rule in chain:
                value = rule(value)
        except RuleError as exc:
            errors[name] = str(exc)
        else:
            cleaned[name] = value

    return ValidationResult(data=cleaned, errors=errors)


class RuleSchema:
    """Validate a flat mapping with per-field rules.

    Suited to search params, which arrive as strings and leave converted::

        RuleSchema({"redirect_uri": [required], "page": [integer]})

    ``?page=2`` validates to ``{"page": 2}``. The output keeps only the
    fields named in *rules* that were present or required.
    """

    __slots__ = ("rules",)

    def __init__(self, rules: Mapping[str, Sequence[Rule]]) -> None:
        self.rules = {name: tuple(field_rules) for name, field_rules in rules.items()}

    def validate(self, value: Any) -> Outcome:
        if not isinstance(value, Mapping):
            return Invalid(f"expected an object, got {type(value).__name__}")
        result = check_fields(value, self.rules)
        if not result:
            return Invalid(result.summary())
        return Valid(result.data)

    def __repr__(self) -> str:
        return f"RuleSchema({sorted(self.rules)!r})"
