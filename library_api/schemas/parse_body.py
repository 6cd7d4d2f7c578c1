"""Body Parsing — turn raw JSON into a schema instance or MalformedInputError.

Invariants:
    - Never raises pydantic.ValidationError to callers
    - Field paths in the error details are dotted wire names ("0.op", "title")
"""

from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from library_api.core.errors import MalformedInputError

T = TypeVar("T")


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"]) or "body"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def parse_body(schema: type[T], raw: Any) -> T:
    """Validate `raw` against `schema` (a model or any type TypeAdapter accepts)."""
    try:
        return TypeAdapter(schema).validate_python(raw)
    except ValidationError as exc:
        raise MalformedInputError(
            "Request body is not structurally valid", fields=field_errors(exc),
        )
