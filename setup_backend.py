"""
Infrastructure Setup Script for Food-Com Store Backend
This script checks the database connections, creates indexes and seeds the catalogue.
"""

import argparse
import logging

from src.db.mongodb_client import mongo_client
from src.db.redis_client import redis_client
from src.loaders.document_loader import DocumentLoader

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def check_database_connections() -> bool:
    """Check if all database connections are working."""
    logger.info("Checking database connections...")

    try:
        mongo_client.ping()
        logger.info("MongoDB connection: OK")
    except Exception as e:
        logger.error(f"MongoDB connection error: {e}")
        return False

    try:
        redis_client.client.ping()
        logger.info("Redis connection: OK")
    except Exception as e:
        logger.error(f"Redis connection error: {e}")
        return False

    return True


def check_data_availability() -> bool:
    """Check if catalogue data is available."""
    product_count = mongo_client.get_collection("products").count_documents({})
    category_count = mongo_client.get_collection("categories").count_documents({})
    logger.info(f"Products in database: {product_count}")
    logger.info(f"Categories in database: {category_count}")
    if product_count == 0:
        logger.warning("No products found. Run with --seed to load the sample catalogue.")
        return False
    return True


def main(seed: bool = False) -> bool:
    """Main setup function."""
    logger.info("Setting up Food-Com Store Backend...")

    if not check_database_connections():
        logger.error("Database connection check failed!")
        return False

    if seed:
        DocumentLoader().load_all()
    else:
        mongo_client.create_indexes()

    if not check_data_availability():
        return False

    logger.info("Setup complete! Ready to start the server.")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Check and seed the Food-Com Store databases")
    parser.add_argument("--seed", action="store_true", help="load data/ into MongoDB")
    args = parser.parse_args()
    main(seed=args.seed)
