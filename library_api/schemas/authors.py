"""Author Schemas — wire shapes for author input.

Invariants:
    - Strict string types: numbers are not coerced into names
    - Missing fields parse as None; the semantic validator reports them as required
"""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class AuthorForUpdate(BaseModel):
    """Full replacement body for PUT."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: StrictStr | None = Field(None, alias="firstName")
    last_name: StrictStr | None = Field(None, alias="lastName")

    def to_representation(self) -> dict:
        return self.model_dump(by_alias=True)
