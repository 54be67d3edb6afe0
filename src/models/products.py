"""
Pydantic models for MongoDB 'products' collection.

Reviews are embedded in the product document under `reviews`.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from src.errors import ValidationFailure

MIN_RATING = 1
MAX_RATING = 5


class Review(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Reviews written before ids were assigned carry none
    id: str | None = None
    reviewer_name: str
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: str = ""
    date: str
    author_id: str | None = Field(
        None,
        validation_alias=AliasChoices("authorId", "author_id", "uid"),
        serialization_alias="authorId",
    )


class Product(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    category: str
    description: str | None = None
    price: float = Field(..., ge=0)
    rating: float = Field(0.0, ge=0, le=5)
    stock: int = Field(0, ge=0)
    tags: list[str] = []
    images: list[str] = []
    reviews: list[Review] = []

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Product":
        """Build a Product from a raw MongoDB document."""
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValidationFailure(f"Malformed product document {data.get('id')}: {e.error_count()} errors") from e

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
