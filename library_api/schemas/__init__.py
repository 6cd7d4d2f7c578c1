"""Pydantic Schemas — structural validation of request bodies.

Invariants:
    - Schemas check shape and JSON types only; semantic rules live in
      core/validate_representations.py
    - A structural failure is MalformedInput (400); a semantic one is ValidationFailed (422)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
