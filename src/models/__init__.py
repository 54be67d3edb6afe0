"""
Init file for the Pydantic document models.
"""

from .categories import Category
from .products import Product, Review
from .queries import PageResult, QueryParams
from .users import User, UserProfile

__all__ = [
    "Category",
    "PageResult",
    "Product",
    "QueryParams",
    "Review",
    "User",
    "UserProfile",
]
