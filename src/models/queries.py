"""
Query parameters and page results for list endpoints.
"""

import math
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from src.config import DEFAULT_PAGE_SIZE
from src.errors import ValidationFailure

SORTABLE_FIELDS = ("price", "rating")


class QueryParams(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)
    category: str | None = None
    search_term: str | None = None
    sort_field: str | None = None
    sort_direction: Literal["asc", "desc"] = "asc"

    @classmethod
    def from_request(
        cls,
        page: int | None = None,
        limit: int | None = None,
        category: str | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        order: str | None = None,
    ) -> "QueryParams":
        """
        Normalize raw list-endpoint parameters.

        Empty strings disable their filter, unknown sort fields fall back to the
        default order and anything but "desc" sorts ascending.
        """
        try:
            return cls(
                page=1 if page is None else page,
                page_size=DEFAULT_PAGE_SIZE if limit is None else limit,
                category=category or None,
                search_term=search or None,
                sort_field=sort_by if sort_by in SORTABLE_FIELDS else None,
                sort_direction="desc" if order == "desc" else "asc",
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise ValidationFailure(f"Invalid pagination parameters: {fields} must be at least 1") from e

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PageResult(BaseModel):
    items: list[Any]
    current_page: int
    page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)

    def to_response(self, items_key: str) -> dict[str, Any]:
        items = [item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item for item in self.items]
        return {
            items_key: items,
            "currentPage": self.current_page,
            "totalItems": self.total_items,
            "totalPages": self.total_pages,
        }
