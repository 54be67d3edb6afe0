"""Load catalogue documents into MongoDB."""

import json
import logging

from src.config import DATA_DIR
from src.db.mongodb_client import mongo_client
from src.models.categories import Category
from src.models.products import Product
from src.services.category_service import category_service

logger = logging.getLogger(__name__)


class DocumentLoader:
    def __init__(self):
        self.client = mongo_client
        self.data_dir = DATA_DIR

    def _read(self, filename: str) -> list[dict]:
        path = self.data_dir / filename
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def load_categories(self):
        """Load category documents into MongoDB."""
        col = self.client.get_collection("categories")
        col.delete_many({})
        docs = []
        for item in self._read("categories.json"):
            category = Category.model_validate(item)
            docs.append({"_id": category.id, **category.model_dump(exclude={"id"})})
        if docs:
            col.insert_many(docs)
        category_service.clear_cache()
        logger.info(f"Loaded {len(docs)} categories into MongoDB")
        return len(docs)

    def load_products(self):
        """Load product documents into MongoDB, validating each one first."""
        col = self.client.get_collection("products")
        col.delete_many({})
        docs = []
        for item in self._read("products.json"):
            product = Product.model_validate(item)
            doc = product.model_dump(by_alias=True, exclude={"id"})
            doc["_id"] = product.id
            docs.append(doc)
        if docs:
            col.insert_many(docs)
        logger.info(f"Loaded {len(docs)} products into MongoDB")
        return len(docs)

    def load_all(self):
        """Execute all document loading tasks."""
        self.client.create_indexes()
        self.load_categories()
        self.load_products()
        logger.info("Document data loading complete!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    loader = DocumentLoader()
    loader.load_all()
