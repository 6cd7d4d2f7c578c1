"""Representation Mapping — entity <-> externally visible shapes, selected by kind.

Invariants:
    - All functions are PURE and total for well-formed entities
    - Output keys are camelCase (wire shape); entity deltas use attribute names
    - An unsupported kind for a direction is a programmer error (ValueError), never a
      request-time failure
    - from_representation returns a delta: only attributes the shape carries

Design Decisions:
    - Entities are read by attribute (duck-typed): core never imports the ORM
    - Explicit per-kind functions in a dict over reflection: every mapping visible in one place
"""

from typing import Any, Callable

from library_api.core.domain_types import RepresentationKind


def _author(entity: Any) -> dict[str, Any]:
    return {
        "id": str(entity.id),
        "firstName": entity.first_name,
        "lastName": entity.last_name,
    }


def _author_for_update(entity: Any) -> dict[str, Any]:
    return {"firstName": entity.first_name, "lastName": entity.last_name}


def _book(entity: Any) -> dict[str, Any]:
    return {
        "id": str(entity.id),
        "authorFirstName": entity.author.first_name,
        "authorLastName": entity.author.last_name,
        "title": entity.title,
        "description": entity.description,
    }


def _book_with_concatenated_author_name(entity: Any) -> dict[str, Any]:
    return {
        "id": str(entity.id),
        "author": f"{entity.author.first_name} {entity.author.last_name}",
        "title": entity.title,
        "description": entity.description,
    }


_TO_REPRESENTATION: dict[RepresentationKind, Callable[[Any], dict[str, Any]]] = {
    RepresentationKind.AUTHOR: _author,
    RepresentationKind.AUTHOR_FOR_UPDATE: _author_for_update,
    RepresentationKind.BOOK: _book,
    RepresentationKind.BOOK_WITH_CONCATENATED_AUTHOR_NAME: _book_with_concatenated_author_name,
}

# wire key -> entity attribute
_FROM_REPRESENTATION: dict[RepresentationKind, dict[str, str]] = {
    RepresentationKind.AUTHOR_FOR_UPDATE: {
        "firstName": "first_name",
        "lastName": "last_name",
    },
    RepresentationKind.BOOK_FOR_CREATION: {
        "title": "title",
        "description": "description",
    },
    RepresentationKind.BOOK_FOR_CREATION_WITH_AMOUNT_OF_PAGES: {
        "title": "title",
        "description": "description",
        "amountOfPages": "amount_of_pages",
    },
}


def to_representation(entity: Any, kind: RepresentationKind) -> dict[str, Any]:
    """Shape an entity for output."""
    try:
        mapper = _TO_REPRESENTATION[kind]
    except KeyError:
        raise ValueError(f"No output mapping for representation kind {kind!r}") from None
    return mapper(entity)


def to_representations(entities: Any, kind: RepresentationKind) -> list[dict[str, Any]]:
    return [to_representation(entity, kind) for entity in entities]


def from_representation(
    representation: dict[str, Any], kind: RepresentationKind,
) -> dict[str, Any]:
    """Translate an input shape into an entity attribute delta."""
    try:
        fields = _FROM_REPRESENTATION[kind]
    except KeyError:
        raise ValueError(f"No input mapping for representation kind {kind!r}") from None
    return {
        attribute: representation[wire_key]
        for wire_key, attribute in fields.items()
        if wire_key in representation
    }


def apply_delta(entity: Any, delta: dict[str, Any]) -> Any:
    """Copy a delta onto an entity in place."""
    for attribute, value in delta.items():
        setattr(entity, attribute, value)
    return entity
