"""Item API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ItemPayload(BaseModel):
    """Full item body used by both create and replace."""

    name: str = Field(min_length=1)
    description: str | None = None
    price: float = Field(gt=0)
    category: str | None = None
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Item(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None
    price: float | None = None
    category: str | None = None
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ItemList(BaseModel):
    items: list[Item]


class CreateItemResponse(BaseModel):
    message: str
    id: str
