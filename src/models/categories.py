"""
Pydantic models for MongoDB 'categories' collection.
"""

from pydantic import BaseModel


class Category(BaseModel):
    id: str
    name: str
    image: str | None = None
