"""Patch Schemas — structural parsing of a JSON Patch document.

Invariants:
    - The document is a JSON array of operation objects
    - op is one of add/remove/replace/move/copy/test
    - move/copy require `from`; add/replace/test require `value` (null is a value)
    - Paths are strings; whether they resolve is decided by the patch engine

Design Decisions:
    - `value` presence is checked via model_fields_set so an explicit null survives
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

from library_api.core.apply_patch import PatchOperation
from library_api.core.domain_types import PatchOp

_NEEDS_VALUE = {"add", "replace", "test"}
_NEEDS_FROM = {"move", "copy"}


class PatchOperationIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: StrictStr
    from_path: StrictStr | None = Field(None, alias="from")
    value: Any = None

    @model_validator(mode="after")
    def check_operands(self) -> "PatchOperationIn":
        if self.op in _NEEDS_VALUE and "value" not in self.model_fields_set:
            raise ValueError(f"'{self.op}' requires a value")
        if self.op in _NEEDS_FROM and self.from_path is None:
            raise ValueError(f"'{self.op}' requires a from path")
        return self

    def to_operation(self) -> PatchOperation:
        return PatchOperation(
            op=PatchOp(self.op), path=self.path,
            value=self.value, from_path=self.from_path,
        )


PatchDocument = list[PatchOperationIn]
