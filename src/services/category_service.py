"""Category listing with Redis caching."""

import logging

from pymongo.errors import PyMongoError

from src.config import CATEGORY_CACHE_TTL
from src.db.mongodb_client import mongo_client
from src.db.redis_client import redis_client
from src.errors import StoreFailure
from src.models.categories import Category

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self):
        self.cache_ttl = CATEGORY_CACHE_TTL
        self.cache_key = "categories:all"
        self.cache_hit_count = 0
        self.cache_miss_count = 0

    def get_cache_hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total_requests = self.cache_hit_count + self.cache_miss_count
        if total_requests == 0:
            return 0.0
        return self.cache_hit_count / total_requests

    def list_categories(self) -> list[Category]:
        """All categories, served from cache when possible."""
        cached_result = redis_client.get_json(self.cache_key)
        if cached_result is not None:
            self.cache_hit_count += 1
            logger.info("Cache hit for categories")
            return [Category.model_validate(item) for item in cached_result]

        self.cache_miss_count += 1
        logger.info("Cache miss for categories")

        try:
            docs = list(mongo_client.get_collection("categories").find({}))
        except PyMongoError as e:
            logger.error(f"Error fetching categories: {e}")
            raise StoreFailure("Failed to fetch categories", cause=e) from e

        categories = [Category.model_validate({**doc, "id": str(doc["_id"])}) for doc in docs]
        redis_client.set_json(self.cache_key, [c.model_dump() for c in categories], self.cache_ttl)
        return categories

    def clear_cache(self) -> bool:
        """Drop cached category listings."""
        try:
            removed = redis_client.delete_pattern("categories:*")
            logger.info(f"Cleared {removed} category cache entries")
            return True
        except Exception as e:
            logger.error(f"Error clearing category cache: {e}")
            return False


# Singleton instance
category_service = CategoryService()
