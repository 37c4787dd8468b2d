"""Shared pytest fixtures and configuration for all tests."""

import json
import os
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import pytest

# Keep module-level app creation and exporters out of test runs
os.environ.setdefault("ENVIRONMENT", "test")

TZ = ZoneInfo("America/New_York")


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    """Aware datetime in the dining timezone."""
    return datetime(year, month, day, hour, minute, second, tzinfo=TZ)


def ts(instant: datetime) -> int:
    """Epoch seconds of an instant."""
    return int(instant.timestamp())


def raw_event(
    descr: str,
    start: datetime,
    end: datetime,
    menu: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Raw feed event with epoch timestamps."""
    return {
        "descr": descr,
        "calSummary": f"{descr} summary",
        "startTimestamp": ts(start),
        "endTimestamp": ts(end),
        "menu": menu or [],
    }


def raw_eatery(
    slug: str = "Okenshields",
    hours: list[dict[str, Any]] | None = None,
    dining_items: list[dict[str, Any]] | None = None,
    eatery_id: int = 1,
) -> dict[str, Any]:
    """Raw feed eatery record."""
    return {
        "id": eatery_id,
        "slug": slug,
        "name": slug.replace("-", " "),
        "nameshort": slug[:8],
        "aboutshort": "All you care to eat",
        "contactPhone": "607-255-0000",
        "campusArea": {"descr": "Central Campus", "descrshort": "Central"},
        "eateryTypes": [{"descr": "All You Care To Eat", "descrshort": "All You Care To Eat"}],
        "location": "Willard Straight Hall",
        "latitude": 42.446,
        "longitude": -76.485,
        "payMethods": [{"descr": "Swipes", "descrshort": "Meal Plan - Swipe"}],
        "operatingHours": hours or [],
        "diningItems": dining_items or [],
    }


def feed_body(eateries: list[dict[str, Any]], status: str = "success") -> bytes:
    """Serialized feed envelope."""
    envelope = {
        "status": status,
        "data": {"eateries": eateries},
        "meta": {"copyright": "Cornell Dining", "responseDttm": "2024-03-04T08:00:00-05:00"},
    }
    return json.dumps(envelope).encode("utf-8")


@pytest.fixture
def tz() -> ZoneInfo:
    """Fixture providing the dining timezone."""
    return TZ


@pytest.fixture
def lunch_menu() -> list[dict[str, Any]]:
    """Fixture providing a raw menu in category-block form."""
    return [
        {
            "category": "Soup",
            "items": [{"item": "Tomato Bisque", "healthy": True}],
        },
        {
            "category": "Hot Traditional Station - Entrees",
            "items": [
                {"item": "Roast Turkey", "healthy": True},
                {"item": "Mac and Cheese", "healthy": False},
            ],
        },
    ]


@pytest.fixture
def sample_feed(lunch_menu: list[dict[str, Any]]) -> bytes:
    """Fixture providing a feed with one eatery open for lunch and dinner on 2024-03-04."""
    hours = [
        {
            "date": "2024-03-04",
            "events": [
                raw_event("Lunch", at(2024, 3, 4, 11), at(2024, 3, 4, 14), lunch_menu),
                raw_event("Dinner", at(2024, 3, 4, 17), at(2024, 3, 4, 20)),
            ],
        }
    ]
    return feed_body([raw_eatery("Okenshields", hours)])
