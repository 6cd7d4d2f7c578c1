"""Representation Validation — semantic checks over input shapes.

Invariants:
    - All functions are PURE: return {field: [messages]}, empty dict means valid
    - Never raise for bad input: type problems are reported as field messages
    - Field keys are wire (camelCase) names so clients can map them back

Design Decisions:
    - Plain functions over annotation-driven validation: the same checks run for a
      request body (PUT/POST) and for a patched representation (PATCH)
    - Type checks live here too, because after a PATCH a wrong type is a 422
      (validation) outcome, not a 400 (malformed request)
"""

from typing import Any

NAME_MAX_LENGTH = 150
TITLE_MAX_LENGTH = 150
DESCRIPTION_MAX_LENGTH = 2500

AUTHOR_FOR_UPDATE_FIELDS = ("firstName", "lastName")


def _add(errors: dict[str, list[str]], field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _check_text(
    errors: dict[str, list[str]],
    data: dict[str, Any],
    field: str,
    max_length: int,
    required: bool,
) -> None:
    value = data.get(field)
    if value is None:
        if required:
            _add(errors, field, f"The {field} field is required.")
        return
    if not isinstance(value, str):
        _add(errors, field, f"The {field} field must be a string.")
        return
    if required and not value.strip():
        _add(errors, field, f"The {field} field is required.")
    if len(value) > max_length:
        _add(
            errors, field,
            f"The field {field} must have a maximum length of {max_length}.",
        )


def validate_author_for_update(representation: Any) -> dict[str, list[str]]:
    """firstName/lastName required, non-blank, at most 150 chars, no other fields."""
    if not isinstance(representation, dict):
        return {"": ["An author must be a JSON object."]}
    errors: dict[str, list[str]] = {}
    for field in AUTHOR_FOR_UPDATE_FIELDS:
        _check_text(errors, representation, field, NAME_MAX_LENGTH, required=True)
    for field in representation:
        if field not in AUTHOR_FOR_UPDATE_FIELDS:
            _add(errors, field, f"The field {field} does not exist on an author.")
    return errors


def validate_book_for_creation(
    representation: Any, with_amount_of_pages: bool = False,
) -> dict[str, list[str]]:
    """title required (<=150), description optional (<=2500), amountOfPages >= 0."""
    if not isinstance(representation, dict):
        return {"": ["A book must be a JSON object."]}
    errors: dict[str, list[str]] = {}
    _check_text(errors, representation, "title", TITLE_MAX_LENGTH, required=True)
    _check_text(
        errors, representation, "description", DESCRIPTION_MAX_LENGTH, required=False,
    )
    if with_amount_of_pages:
        pages = representation.get("amountOfPages")
        if pages is not None:
            if isinstance(pages, bool) or not isinstance(pages, int):
                _add(errors, "amountOfPages", "The amountOfPages field must be an integer.")
            elif pages < 0:
                _add(errors, "amountOfPages", "The amountOfPages field cannot be negative.")
    return errors
