"""Main application entry point for the dining catalog service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from dining_catalog_service.data.static_data import EXTERNAL_EATERIES, HARDCODED_MENUS
from dining_catalog_service.handlers.api_handler import create_app
from dining_catalog_service.observability import configure_logging, setup_observability
from dining_catalog_service.repositories.response_cache_repositories import (
    InMemoryResponseCacheRepository,
)
from dining_catalog_service.services.data_manager import DataManager
from dining_catalog_service.services.dining_api_client import DEFAULT_BASE_URL, DiningApiClient

logger = logging.getLogger(__name__)


def create_data_manager() -> DataManager:
    """Create the catalog from environment configuration.

    Returns:
        DataManager backed by an in-memory response cache
    """
    api_client = DiningApiClient(
        base_url=os.getenv("DINING_API_BASE_URL", DEFAULT_BASE_URL),
        timeout_seconds=float(os.getenv("DINING_API_TIMEOUT_SECONDS", "30")),
    )
    logger.info(f"Dining API client configured - URL: {api_client.eateries_url}")

    return DataManager(
        api_client=api_client,
        response_cache=InMemoryResponseCacheRepository(),
        hardcoded_menus=HARDCODED_MENUS,
        external_eateries=EXTERNAL_EATERIES,
        timezone=os.getenv("DINING_TIMEZONE", "America/New_York"),
    )


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the dining API client and catalog
    3. Creates the FastAPI app
    4. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing dining catalog service...")

    app = create_app(data_manager=create_data_manager())
    setup_observability(app)

    logger.info("Dining catalog service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
