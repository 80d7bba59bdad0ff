"""Schema validation for request bodies and search params.

Usage::

    from pydantic import BaseModel

    from roost.validation import PydanticSchema, RuleSchema, integer, required, url

    class Credentials(BaseModel):
        username: str
        password: str

    body = PydanticSchema(Credentials)
    search = RuleSchema({"redirect_uri": [required, url], "page": [integer]})

Custom validators need only a ``validate(value)`` method returning
``Valid(value)`` or ``Invalid(detail)``.
"""

from roost.validation.result import Invalid, Outcome, Valid, ValidationResult
from roost.validation.rules import (
    Rule,
    RuleError,
    between,
    boolean,
    integer,
    length,
    matches,
    number,
    one_of,
    required,
    url,
)
from roost.validation.schema import (
    PydanticSchema,
    RuleSchema,
    Schema,
    check_fields,
    format_pydantic_errors,
    is_schema,
    run_schema,
)

__all__ = [
    "Invalid",
    "Outcome",
    "PydanticSchema",
    "Rule",
    "RuleError",
    "RuleSchema",
    "Schema",
    "Valid",
    "ValidationResult",
    "between",
    "boolean",
    "check_fields",
    "format_pydantic_errors",
    "integer",
    "is_schema",
    "length",
    "matches",
    "number",
    "one_of",
    "required",
    "run_schema",
    "url",
]
