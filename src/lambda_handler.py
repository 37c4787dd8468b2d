"""AWS Lambda handler for both API Gateway and scheduled EventBridge events.

This module provides a single Lambda entry point that handles:
1. API Gateway requests (via Mangum ASGI adapter for FastAPI)
2. Scheduled EventBridge events that refresh the catalog

The handler detects the event type and routes accordingly.
"""

import asyncio
import logging
import os
from typing import Any

from mangum import Mangum

from dining_catalog_service.handlers.event_handler import parse_scheduled_event
from lambda_dependencies import get_fastapi_app, get_refresh_handler, initialize_lambda_environment

# Initialize Lambda environment during cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()

logger = logging.getLogger(__name__)

# Create FastAPI app and Mangum adapter (cached for warm starts, skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    app = get_fastapi_app()
    mangum_handler = Mangum(app, lifespan="off")
else:
    app = None  # type: ignore
    mangum_handler = None  # type: ignore


def is_eventbridge_event(event: dict[str, Any]) -> bool:
    """Determine if the event is from EventBridge.

    Args:
        event: The Lambda event payload

    Returns:
        True if this is an EventBridge event, False otherwise
    """
    # API Gateway events carry 'requestContext' instead
    return "source" in event and "detail-type" in event and "detail" in event


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Multi-purpose Lambda handler for API Gateway and EventBridge events.

    Args:
        event: The Lambda event payload (EventBridge or API Gateway)
        context: The Lambda context object

    Returns:
        Response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        if is_eventbridge_event(event):
            logger.info(
                f"Processing EventBridge event: {event.get('source')} - {event.get('detail-type')}"
            )
            return handle_eventbridge_event(event)

        logger.info("Processing API Gateway request via Mangum")
        result: dict[str, Any] = mangum_handler(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": f"Internal server error: {str(e)}",
        }


def handle_eventbridge_event(event: dict[str, Any]) -> dict[str, Any]:
    """Handle scheduled refresh events.

    Args:
        event: The EventBridge event payload

    Returns:
        Response dict with statusCode and body
    """
    refresh_event = parse_scheduled_event(event)
    if refresh_event is None:
        return {
            "statusCode": 400,
            "body": f"Unsupported event type: {event.get('source')}/{event.get('detail-type')}",
        }

    try:
        success = asyncio.run(get_refresh_handler().handle_refresh(refresh_event))
    except Exception as e:
        logger.exception(f"Error processing EventBridge event: {e}")
        return {
            "statusCode": 500,
            "body": f"Error processing event: {str(e)}",
        }

    if success:
        return {"statusCode": 200, "body": "Catalog refreshed"}

    return {"statusCode": 502, "body": "Catalog refresh failed"}
