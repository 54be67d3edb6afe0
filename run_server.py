#!/usr/bin/env python3
"""
Food-Com Store Backend Startup Script
This script starts the FastAPI server with all services.
"""

import logging

import uvicorn

from src.config import LOG_FORMAT

# Configure logging
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("Starting Food-Com Store Backend...")
    logger.info("Available endpoints:")
    logger.info("  - Health Check: GET /health")
    logger.info("  - Products: GET /api/products, GET /api/products/{id}")
    logger.info("  - Reviews: GET/POST/DELETE /api/products/{id}/reviews, PUT /api/products/{id}/reviews/{review_id}")
    logger.info("  - Categories: GET /api/categories")
    logger.info("  - Auth: POST /api/auth/signup, POST /api/auth/login")
    logger.info("  - API Docs: http://localhost:8000/docs")

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
