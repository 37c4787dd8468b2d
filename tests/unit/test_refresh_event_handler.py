"""Unit tests for the scheduled refresh event handler."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from dining_catalog_service.handlers.event_handler import (
    RefreshEventHandler,
    ScheduledRefreshEvent,
    parse_scheduled_event,
)
from dining_catalog_service.services.data_manager import DataManager, FetchResult, ServerError


def _schedule_event(**overrides: object) -> dict:
    event = {
        "version": "0",
        "id": "53dc4d37-cffa-4f76-80c9-8b7d4a4d2eaa",
        "source": "aws.events",
        "detail-type": "Scheduled Event",
        "time": "2024-03-04T10:00:00Z",
        "resources": ["arn:aws:events:us-east-1:123456789012:rule/dining-refresh"],
        "detail": {},
    }
    event.update(overrides)
    return event


@pytest.mark.unit
class TestParseScheduledEvent:
    """Tests for parse_scheduled_event."""

    def test_parses_schedule_tick(self) -> None:
        """Test that a schedule tick defaults to a forced refresh."""
        parsed = parse_scheduled_event(_schedule_event())

        assert parsed is not None
        assert parsed.time == "2024-03-04T10:00:00Z"
        assert parsed.force is True

    def test_detail_can_disable_force(self) -> None:
        """Test the force flag in the event detail."""
        parsed = parse_scheduled_event(_schedule_event(detail={"force": False}))

        assert parsed is not None
        assert parsed.force is False

    def test_rejects_other_sources(self) -> None:
        """Test that non-schedule events are not handled."""
        assert parse_scheduled_event(_schedule_event(source="com.other.service")) is None
        assert parse_scheduled_event(_schedule_event(**{"detail-type": "MenuChanged"})) is None

    def test_rejects_malformed_detail(self) -> None:
        """Test that a non-object detail is rejected."""
        assert parse_scheduled_event(_schedule_event(detail="force")) is None


@pytest.mark.unit
class TestRefreshEventHandler:
    """Test suite for RefreshEventHandler."""

    @pytest.fixture
    def data_manager(self) -> MagicMock:
        """Create a mocked catalog."""
        return MagicMock(spec=DataManager)

    @pytest.fixture
    def handler(self, data_manager: MagicMock) -> RefreshEventHandler:
        """Create a handler over the mocked catalog."""
        return RefreshEventHandler(data_manager=data_manager)

    @pytest.mark.asyncio
    async def test_successful_refresh(
        self, handler: RefreshEventHandler, data_manager: MagicMock
    ) -> None:
        """Test that a successful refresh returns True."""
        data_manager.fetch_eateries = AsyncMock(
            return_value=FetchResult(success=True, source="network", eatery_count=30)
        )
        event = ScheduledRefreshEvent.model_validate(
            {"source": "aws.events", "detail-type": "Scheduled Event"}
        )

        assert await handler.handle_refresh(event) is True
        data_manager.fetch_eateries.assert_awaited_once_with(force=True)

    @pytest.mark.asyncio
    async def test_failed_refresh(self, handler: RefreshEventHandler, data_manager: MagicMock) -> None:
        """Test that a failed refresh returns False."""
        data_manager.fetch_eateries = AsyncMock(
            return_value=FetchResult(
                success=False, source="network", eatery_count=0, error=ServerError("down")
            )
        )
        event = ScheduledRefreshEvent.model_validate(
            {"source": "aws.events", "detail-type": "Scheduled Event", "force": False}
        )

        assert await handler.handle_refresh(event) is False
        data_manager.fetch_eateries.assert_awaited_once_with(force=False)
