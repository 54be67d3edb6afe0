"""MongoDB connection and utilities."""

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from src.config import MONGO_CONFIG


class MongoDBClient:
    def __init__(self):
        self.client = MongoClient(MONGO_CONFIG["uri"])
        self.db: Database = self.client[MONGO_CONFIG["database"]]

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        return self.db[name]

    def create_indexes(self):
        """Create necessary indexes."""
        # Products indexes, compound with _id to back cursor pagination
        products = self.db.get_collection("products")
        products.create_index([("category", ASCENDING), ("_id", ASCENDING)])
        products.create_index([("price", ASCENDING), ("_id", ASCENDING)])
        products.create_index([("rating", ASCENDING), ("_id", ASCENDING)])
        products.create_index("reviews.id")
        # Users indexes
        self.db.get_collection("users").create_index("email", unique=True)
        # Categories indexes
        self.db.get_collection("categories").create_index("name", unique=True)

    def ping(self) -> bool:
        """Check that the server answers."""
        self.client.admin.command("ping")
        return True


# Singleton instance
mongo_client = MongoDBClient()
