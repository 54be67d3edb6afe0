"""Configuration for the Food-Com Store backend."""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

MONGO_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DATABASE", "food_com_store"),
}

REDIS_CONFIG = {
    "host": os.getenv("REDIS_HOST", "localhost"),
    "port": int(os.getenv("REDIS_PORT", "6379")),
    "db": int(os.getenv("REDIS_DB", "0")),
}

CACHE_TTL = int(os.getenv("CACHE_TTL", "3600"))
CATEGORY_CACHE_TTL = int(os.getenv("CATEGORY_CACHE_TTL", "600"))

AUTH_CONFIG = {
    "secret": os.getenv("JWT_SECRET", "dev-secret-change-me-before-deploying"),
    "algorithm": "HS256",
    "token_ttl_hours": int(os.getenv("JWT_TTL_HOURS", "168")),
}

# Pagination
DEFAULT_PAGE_SIZE = 20
REVIEW_PAGE_SIZE = 10

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
