"""Patch Engine — apply an ordered JSON-Patch-like sequence to a representation.

Invariants:
    - All functions are PURE: the caller's document is never mutated (deep-copied scratch)
    - Operations run strictly in input order: Pending -> Applying(i) -> Applied | Failed(i, reason)
    - The first failing operation halts the run; the scratch copy is discarded
    - `add` never creates missing ancestors: a missing parent is InvalidPath
    - Validation runs only after Applied and is reported separately from operation failures

Design Decisions:
    - Return a PatchResult (not exceptions) from the engine: callers decide how to surface it;
      raise_for_outcome() maps it onto the error hierarchy for HTTP handlers
    - ignore_case resolves object keys case-insensitively against existing keys, so
      `/firstname` addresses `firstName` the way typed property binding does
    - JSON equality for `test` distinguishes booleans from numbers (True != 1)
"""

import copy
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from library_api.core.domain_types import PatchFailureReason, PatchOp, PatchStatus
from library_api.core.errors import PatchApplicationError, ValidationFailedError

Validator = Callable[[Any], dict[str, list[str]]]

_MISSING = object()
_ARRAY_INDEX = re.compile(r"0|[1-9][0-9]*")


@dataclass(frozen=True)
class PatchOperation:
    """One patch step. `from_path` is set for move/copy only."""

    op: PatchOp
    path: str
    value: Any = None
    from_path: str | None = None


@dataclass
class PatchResult:
    """Outcome of a patch run."""

    status: PatchStatus
    document: Any = None
    failed_index: int | None = None
    operation: PatchOperation | None = None
    reason: PatchFailureReason | None = None
    validation_errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status is PatchStatus.APPLIED and not self.validation_errors

    def raise_for_outcome(self) -> Any:
        """Return the patched document or raise the matching LibraryError."""
        if self.status is PatchStatus.FAILED:
            raise PatchApplicationError(
                self.failed_index, self.operation.op.value,
                self.operation.path, self.reason.value,
            )
        if self.validation_errors:
            raise ValidationFailedError(self.validation_errors)
        return self.document


class _Halt(Exception):
    def __init__(self, reason: PatchFailureReason):
        super().__init__(reason.value)
        self.reason = reason


def parse_pointer(pointer: str) -> list[str]:
    """'/a/b~1c' -> ['a', 'b/c']. The empty pointer addresses the whole document."""
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise _Halt(PatchFailureReason.INVALID_PATH)
    return [
        token.replace("~1", "/").replace("~0", "~")
        for token in pointer[1:].split("/")
    ]


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality with JSON typing (bool is not a number)."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            json_equal(left[k], right[k]) for k in left
        )
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            json_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return False
    return left == right


class PatchEngine:
    """Applies patch operations to a scratch copy of a representation."""

    def __init__(self, ignore_case: bool = False):
        self.ignore_case = ignore_case

    def apply(
        self,
        document: Any,
        operations: Sequence[PatchOperation],
        validate: Validator | None = None,
    ) -> PatchResult:
        scratch = copy.deepcopy(document)
        for index, operation in enumerate(operations):
            try:
                scratch = self._apply_one(scratch, operation)
            except _Halt as halt:
                return PatchResult(
                    status=PatchStatus.FAILED, failed_index=index,
                    operation=operation, reason=halt.reason,
                )
        result = PatchResult(status=PatchStatus.APPLIED, document=scratch)
        if validate is not None:
            result.validation_errors = validate(scratch) or {}
        return result

    # --- operations ---------------------------------------------------------

    def _apply_one(self, document: Any, operation: PatchOperation) -> Any:
        tokens = parse_pointer(operation.path)
        if operation.op is PatchOp.ADD:
            return self._add(document, tokens, copy.deepcopy(operation.value))
        if operation.op is PatchOp.REMOVE:
            self._remove(document, tokens)
            return document
        if operation.op is PatchOp.REPLACE:
            return self._replace(document, tokens, copy.deepcopy(operation.value))
        if operation.op is PatchOp.TEST:
            if not json_equal(self._get(document, tokens), operation.value):
                raise _Halt(PatchFailureReason.TEST_FAILED)
            return document

        if operation.from_path is None:
            raise _Halt(PatchFailureReason.INVALID_OPERATION)
        source = parse_pointer(operation.from_path)
        if operation.op is PatchOp.COPY:
            value = copy.deepcopy(self._get(document, source))
            return self._add(document, tokens, value)
        if operation.op is PatchOp.MOVE:
            source, tokens = self._resolve(document, source), self._resolve(document, tokens)
            if tokens[:len(source)] == source and len(tokens) > len(source):
                raise _Halt(PatchFailureReason.INVALID_PATH)
            if tokens == source:
                self._get(document, source)
                return document
            value = self._remove(document, source)
            return self._add(document, tokens, value)
        raise _Halt(PatchFailureReason.INVALID_OPERATION)

    def _add(self, document: Any, tokens: list[str], value: Any) -> Any:
        if not tokens:
            return value
        parent = self._parent(document, tokens, missing=PatchFailureReason.INVALID_PATH)
        last = tokens[-1]
        if isinstance(parent, dict):
            parent[self._key(parent, last) or last] = value
        elif isinstance(parent, list):
            if last == "-":
                parent.append(value)
            else:
                parent.insert(self._index(parent, last, allow_end=True), value)
        else:
            raise _Halt(PatchFailureReason.INVALID_PATH)
        return document

    def _remove(self, document: Any, tokens: list[str]) -> Any:
        if not tokens:
            raise _Halt(PatchFailureReason.INVALID_OPERATION)
        parent = self._parent(document, tokens)
        last = tokens[-1]
        if isinstance(parent, dict):
            key = self._key(parent, last)
            if key is None:
                raise _Halt(PatchFailureReason.PATH_NOT_FOUND)
            return parent.pop(key)
        if isinstance(parent, list):
            return parent.pop(self._index(parent, last))
        raise _Halt(PatchFailureReason.PATH_NOT_FOUND)

    def _replace(self, document: Any, tokens: list[str], value: Any) -> Any:
        if not tokens:
            return value
        parent = self._parent(document, tokens)
        last = tokens[-1]
        if isinstance(parent, dict):
            key = self._key(parent, last)
            if key is None:
                raise _Halt(PatchFailureReason.PATH_NOT_FOUND)
            parent[key] = value
        elif isinstance(parent, list):
            parent[self._index(parent, last)] = value
        else:
            raise _Halt(PatchFailureReason.PATH_NOT_FOUND)
        return document

    # --- navigation ---------------------------------------------------------

    def _get(self, document: Any, tokens: list[str]) -> Any:
        current = document
        for token in tokens:
            current = self._child(current, token)
            if current is _MISSING:
                raise _Halt(PatchFailureReason.PATH_NOT_FOUND)
        return current

    def _resolve(self, document: Any, tokens: list[str]) -> list[str]:
        """Spell each token as the existing key it addresses, as far as the path exists."""
        resolved, current = [], document
        for index, token in enumerate(tokens):
            if isinstance(current, dict):
                token = self._key(current, token) or token
            resolved.append(token)
            current = self._child(current, token)
            if current is _MISSING:
                return resolved + list(tokens[index + 1:])
        return resolved

    def _parent(
        self, document: Any, tokens: list[str],
        missing: PatchFailureReason = PatchFailureReason.PATH_NOT_FOUND,
    ) -> Any:
        current = document
        for token in tokens[:-1]:
            current = self._child(current, token)
            if current is _MISSING:
                raise _Halt(missing)
        return current

    def _child(self, container: Any, token: str) -> Any:
        if isinstance(container, dict):
            key = self._key(container, token)
            return _MISSING if key is None else container[key]
        if isinstance(container, list):
            if not _ARRAY_INDEX.fullmatch(token) or int(token) >= len(container):
                return _MISSING
            return container[int(token)]
        return _MISSING

    def _key(self, mapping: dict, token: str) -> str | None:
        if token in mapping:
            return token
        if self.ignore_case:
            folded = token.casefold()
            for key in mapping:
                if isinstance(key, str) and key.casefold() == folded:
                    return key
        return None

    @staticmethod
    def _index(sequence: list, token: str, allow_end: bool = False) -> int:
        if not _ARRAY_INDEX.fullmatch(token):
            raise _Halt(PatchFailureReason.INVALID_INDEX)
        index = int(token)
        if allow_end and index > len(sequence):
            raise _Halt(PatchFailureReason.INVALID_INDEX)
        if not allow_end and index >= len(sequence):
            raise _Halt(PatchFailureReason.PATH_NOT_FOUND)
        return index


def apply_patch(
    document: Any,
    operations: Sequence[PatchOperation],
    validate: Validator | None = None,
    ignore_case: bool = False,
) -> PatchResult:
    """Convenience wrapper around PatchEngine.apply."""
    return PatchEngine(ignore_case=ignore_case).apply(document, operations, validate)
