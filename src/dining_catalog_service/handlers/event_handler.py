"""EventBridge handler for scheduled catalog refreshes."""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from dining_catalog_service.services.data_manager import DataManager

logger = logging.getLogger(__name__)

SCHEDULED_EVENT_SOURCE = "aws.events"
SCHEDULED_EVENT_DETAIL_TYPE = "Scheduled Event"


class ScheduledRefreshEvent(BaseModel):
    """Scheduled EventBridge event requesting a catalog refresh.

    Attributes:
        source: Event source, "aws.events" for schedules
        detail_type: EventBridge detail type
        time: ISO 8601 timestamp of the schedule tick
        force: Whether to bypass memory and response cache (default True)
    """

    source: str
    detail_type: str = Field(alias="detail-type")
    time: str = ""
    force: bool = True


def parse_scheduled_event(event: dict[str, Any]) -> ScheduledRefreshEvent | None:
    """Parse an EventBridge event into a ScheduledRefreshEvent.

    A ``force`` flag inside ``detail`` overrides the default forced refresh.

    Args:
        event: Raw EventBridge event dictionary

    Returns:
        ScheduledRefreshEvent if the event is a schedule tick, None otherwise
    """
    try:
        detail = event.get("detail") or {}
        parsed = ScheduledRefreshEvent.model_validate(
            {
                "source": event.get("source", ""),
                "detail-type": event.get("detail-type", ""),
                "time": event.get("time", ""),
                "force": detail.get("force", True),
            }
        )
    except (ValidationError, TypeError, AttributeError) as e:
        logger.error(f"Failed to parse EventBridge event: {e}")  # pragma: no cover
        return None

    if parsed.source != SCHEDULED_EVENT_SOURCE or parsed.detail_type != SCHEDULED_EVENT_DETAIL_TYPE:
        logger.warning(f"Unsupported event type: {parsed.source}/{parsed.detail_type}")
        return None
    return parsed


class RefreshEventHandler:
    """Refreshes the catalog when a schedule tick arrives."""

    def __init__(self, data_manager: DataManager) -> None:
        """Initialize the event handler.

        Args:
            data_manager: Catalog to refresh
        """
        self.data_manager = data_manager

    async def handle_refresh(self, event: ScheduledRefreshEvent) -> bool:
        """Refresh the catalog for a schedule tick.

        Args:
            event: The parsed schedule event

        Returns:
            True if the catalog holds data from the refresh, False if it failed
        """
        logger.info(f"Scheduled catalog refresh at {event.time or 'unknown time'} (force={event.force})")

        result = await self.data_manager.fetch_eateries(force=event.force)

        if result.success:
            logger.info(f"Catalog holds {result.eatery_count} eateries (source: {result.source})")
        else:
            logger.error(f"Scheduled catalog refresh failed: {result.error!r}")
        return result.success
