"""Book Schemas — the two creation shapes negotiated by Content-Type."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class BookForCreation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: StrictStr | None = None
    description: StrictStr | None = None

    def to_representation(self) -> dict:
        return self.model_dump(by_alias=True)


class BookForCreationWithAmountOfPages(BookForCreation):
    amount_of_pages: StrictInt | None = Field(None, alias="amountOfPages")
