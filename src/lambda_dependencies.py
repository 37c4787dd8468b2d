"""Shared dependency factory for Lambda handlers.

Dependencies are created once and reused across invocations within the same
Lambda container, so a warm container keeps its in-memory catalog.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from dining_catalog_service.data.static_data import EXTERNAL_EATERIES, HARDCODED_MENUS
from dining_catalog_service.handlers.api_handler import create_app
from dining_catalog_service.handlers.event_handler import RefreshEventHandler
from dining_catalog_service.observability import configure_logging
from dining_catalog_service.repositories.response_cache_repositories import (
    DynamoDBResponseCacheRepository,
    InMemoryResponseCacheRepository,
    ResponseCacheRepository,
)
from dining_catalog_service.services.data_manager import DataManager
from dining_catalog_service.services.dining_api_client import DEFAULT_BASE_URL, DiningApiClient

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_response_cache: ResponseCacheRepository | None = None
_data_manager: DataManager | None = None
_refresh_handler: RefreshEventHandler | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=region)

    return _dynamodb_resource


def get_response_cache() -> ResponseCacheRepository:
    """Create or retrieve the cached response cache repository.

    RESPONSE_CACHE_BACKEND selects "memory" (default) or "dynamodb".

    Returns:
        Configured response cache repository
    """
    global _response_cache

    if _response_cache is not None:
        return _response_cache

    backend = os.getenv("RESPONSE_CACHE_BACKEND", "memory").lower()
    if backend == "dynamodb":
        table_name = os.getenv("DYNAMODB_RESPONSE_CACHE_TABLE", "dining-response-cache")
        _response_cache = DynamoDBResponseCacheRepository(
            dynamodb_resource=get_dynamodb_resource(), table_name=table_name
        )
        logger.info(f"Response cache stored in DynamoDB table {table_name}")
    else:
        if backend != "memory":
            logger.warning(f"Unknown RESPONSE_CACHE_BACKEND '{backend}', using in-memory cache")
        _response_cache = InMemoryResponseCacheRepository()
        logger.info("Response cache kept in memory")

    return _response_cache


def get_data_manager() -> DataManager:
    """Create or retrieve the cached catalog.

    Returns:
        Configured DataManager instance
    """
    global _data_manager

    if _data_manager is not None:
        return _data_manager

    api_client = DiningApiClient(
        base_url=os.getenv("DINING_API_BASE_URL", DEFAULT_BASE_URL),
        timeout_seconds=float(os.getenv("DINING_API_TIMEOUT_SECONDS", "30")),
    )

    _data_manager = DataManager(
        api_client=api_client,
        response_cache=get_response_cache(),
        hardcoded_menus=HARDCODED_MENUS,
        external_eateries=EXTERNAL_EATERIES,
        timezone=os.getenv("DINING_TIMEZONE", "America/New_York"),
    )

    logger.info(f"Data manager initialized for {api_client.eateries_url}")
    return _data_manager


def get_refresh_handler() -> RefreshEventHandler:
    """Create or retrieve the cached scheduled refresh handler.

    Returns:
        Configured RefreshEventHandler instance
    """
    global _refresh_handler

    if _refresh_handler is not None:
        return _refresh_handler

    _refresh_handler = RefreshEventHandler(data_manager=get_data_manager())

    logger.info("Refresh event handler initialized")
    return _refresh_handler


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(data_manager=get_data_manager())

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
