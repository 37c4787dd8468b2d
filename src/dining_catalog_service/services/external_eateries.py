"""Expansion of static external eatery records.

External eateries are not part of the live feed. Their hours are given per
weekday span (``"monday-friday"``) with ``h:mma`` times, so before they can be
normalized like feed eateries each span is pinned to concrete dates: the next
occurrence of every weekday in the span, today included.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from dining_catalog_service.models.eatery_models import day_key, to_zone
from dining_catalog_service.models.feed_models import EateryRecord, OperatingHoursRecord

logger = logging.getLogger(__name__)

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_weekday_span(text: str) -> list[int] | None:
    """Parse a weekday or weekday span into ``date.weekday()`` indexes.

    Spans may wrap past Sunday, e.g. ``"friday-monday"``.

    Args:
        text: ``"tuesday"`` or ``"monday-friday"`` (case-insensitive)

    Returns:
        Weekday indexes in span order, or None if the text is not a valid span
    """
    parts = [part.strip() for part in text.lower().split("-")]
    if any(part not in WEEKDAYS for part in parts):
        return None

    if len(parts) == 1:
        return [WEEKDAYS.index(parts[0])]

    if len(parts) == 2:
        start = WEEKDAYS.index(parts[0])
        end = WEEKDAYS.index(parts[1])
        if end < start:
            end += len(WEEKDAYS)
        return [day % len(WEEKDAYS) for day in range(start, end + 1)]

    return None


def next_weekday(weekday: int, today: date) -> date:
    """The first date on or after ``today`` falling on ``weekday``."""
    return today + timedelta(days=(weekday - today.weekday()) % 7)


def expand_external_record(raw: dict[str, Any], now: datetime, tz: ZoneInfo) -> EateryRecord:
    """Decode an external eatery record, pinning weekday spans to dates.

    Hour entries that already carry a date are kept as they are. Entries with
    an invalid span are dropped with a warning.

    Args:
        raw: Raw external eatery record
        now: Reference instant for "next occurrence"
        tz: Timezone of the eatery

    Returns:
        EateryRecord with dated operating hours and ``external`` set
    """
    record = EateryRecord.model_validate(raw)
    today = to_zone(now, tz).date()

    hours: list[OperatingHoursRecord] = []
    for entry in record.operating_hours:
        if entry.date:
            hours.append(entry)
            continue

        weekdays = parse_weekday_span(entry.weekday)
        if weekdays is None:
            logger.warning(f"Skipping hours of external eatery {record.slug}: bad span '{entry.weekday}'")
            continue

        for weekday in weekdays:
            hours.append(
                OperatingHoursRecord(date=day_key(next_weekday(weekday, today)), events=entry.events)
            )

    return record.model_copy(update={"operating_hours": hours, "external": True})
