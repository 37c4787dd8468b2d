"""Decoded records of the dining feed.

This module is the single boundary where raw feed JSON becomes typed records.
The feed is parsed leniently on purpose: a missing or mistyped field takes a
zero value (``0``, ``""``, ``[]`` or an all-default record) instead of failing
the whole refresh. Nothing past this module inspects raw JSON.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUCCESS_STATUS = "success"


def as_str(value: Any) -> str:
    """Coerce a JSON value to a string, ``""`` when absent or structured."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, int | float):
        return str(value)
    return ""


def as_int(value: Any) -> int:
    """Coerce a JSON value to an integer, ``0`` when absent or invalid."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float | str):
        try:
            return int(float(value.strip()) if isinstance(value, str) else value)
        except (ValueError, OverflowError):
            return 0
    return 0


def as_optional_int(value: Any) -> int | None:
    """Coerce a JSON value to an integer, keeping absence as None."""
    if value is None or value == "":
        return None
    return as_int(value)


def as_float(value: Any) -> float:
    """Coerce a JSON value to a finite float, ``0.0`` when absent or invalid."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int | float | str):
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (ValueError, OverflowError):
            return 0.0
        return number if math.isfinite(number) else 0.0
    return 0.0


def as_bool(value: Any) -> bool:
    """Coerce a JSON value to a boolean, ``False`` when absent or invalid."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return False


def as_object(value: Any) -> dict[str, Any]:
    """Coerce a JSON value to an object, ``{}`` when absent or not an object."""
    return value if isinstance(value, dict) else {}


def as_object_list(value: Any) -> list[Any]:
    """Coerce a JSON value to a list of objects.

    Non-list values become an empty list and non-object entries become ``{}``
    so they decode to all-default records. Already decoded records pass through.
    """
    if not isinstance(value, list):
        return []
    return [entry if isinstance(entry, BaseModel) else as_object(entry) for entry in value]


class FeedRecord(BaseModel):
    """Base class for lenient feed records."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DescriptorRecord(FeedRecord):
    """Descriptor object used for campus areas, eatery types and payment methods."""

    descr: str = ""
    descrshort: str = ""

    @field_validator("descr", "descrshort", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)


class MenuEntryRecord(FeedRecord):
    """A single menu or dining item entry."""

    item: str = ""
    category: str = ""
    healthy: bool = False

    @field_validator("item", "category", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)

    @field_validator("healthy", mode="before")
    @classmethod
    def coerce_bool(cls, v: Any) -> bool:
        return as_bool(v)


class MenuBlockRecord(FeedRecord):
    """Category block of an event menu."""

    category: str = ""
    items: list[MenuEntryRecord] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[Any]:
        return as_object_list(v)


def decode_menu_blocks(value: Any) -> list[MenuBlockRecord]:
    """Decode a raw list of menu category blocks, e.g. from a static menu table."""
    return [MenuBlockRecord.model_validate(block) for block in as_object_list(value)]


def _group_flat_menu(entries: list[dict[str, Any]]) -> list[Any]:
    blocks: dict[str, list[dict[str, Any]]] = {}
    for entry in entries:
        blocks.setdefault(as_str(entry.get("category")), []).append(entry)
    return [{"category": category, "items": items} for category, items in blocks.items()]


class EventRecord(FeedRecord):
    """Raw serving event inside an operating-hours record."""

    descr: str = ""
    cal_summary: str = Field(default="", alias="calSummary")
    start_timestamp: int | None = Field(default=None, alias="startTimestamp")
    end_timestamp: int | None = Field(default=None, alias="endTimestamp")
    start: str = ""
    end: str = ""
    menu: list[MenuBlockRecord] = Field(default_factory=list)

    @field_validator("descr", "cal_summary", "start", "end", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)

    @field_validator("start_timestamp", "end_timestamp", mode="before")
    @classmethod
    def coerce_timestamps(cls, v: Any) -> int | None:
        return as_optional_int(v)

    @field_validator("menu", mode="before")
    @classmethod
    def coerce_menu(cls, v: Any) -> list[Any]:
        """Accept category blocks or a flat ``{"items": [...]}`` menu."""
        if isinstance(v, dict):
            return _group_flat_menu(as_object_list(v.get("items")))
        return as_object_list(v)


class OperatingHoursRecord(FeedRecord):
    """Events of one calendar day, or of a weekday span for external eateries."""

    date: str = ""
    weekday: str = ""
    events: list[EventRecord] = Field(default_factory=list)

    @field_validator("date", "weekday", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)

    @field_validator("events", mode="before")
    @classmethod
    def coerce_events(cls, v: Any) -> list[Any]:
        return as_object_list(v)


class EateryRecord(FeedRecord):
    """Raw eatery record from ``data.eateries``."""

    id: int = 0
    slug: str = ""
    name: str = ""
    nameshort: str = ""
    aboutshort: str = ""
    contact_phone: str = Field(default="", alias="contactPhone")
    campus_area: DescriptorRecord = Field(default_factory=DescriptorRecord, alias="campusArea")
    eatery_types: list[DescriptorRecord] = Field(default_factory=list, alias="eateryTypes")
    location: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    pay_methods: list[DescriptorRecord] = Field(default_factory=list, alias="payMethods")
    operating_hours: list[OperatingHoursRecord] = Field(
        default_factory=list, alias="operatingHours"
    )
    dining_items: list[MenuEntryRecord] = Field(default_factory=list, alias="diningItems")
    external: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> int:
        return as_int(v)

    @field_validator(
        "slug", "name", "nameshort", "aboutshort", "contact_phone", "location", mode="before"
    )
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def coerce_floats(cls, v: Any) -> float:
        return as_float(v)

    @field_validator("campus_area", mode="before")
    @classmethod
    def coerce_object(cls, v: Any) -> dict[str, Any]:
        return as_object(v)

    @field_validator(
        "eatery_types", "pay_methods", "operating_hours", "dining_items", mode="before"
    )
    @classmethod
    def coerce_lists(cls, v: Any) -> list[Any]:
        return as_object_list(v)

    @field_validator("external", mode="before")
    @classmethod
    def coerce_bool(cls, v: Any) -> bool:
        return as_bool(v)


class FeedMeta(FeedRecord):
    """Envelope metadata."""

    copyright: str = ""
    response_dttm: str = Field(default="", alias="responseDttm")

    @field_validator("copyright", "response_dttm", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)


class FeedData(FeedRecord):
    """Envelope payload."""

    eateries: list[EateryRecord] = Field(default_factory=list)

    @field_validator("eateries", mode="before")
    @classmethod
    def coerce_eateries(cls, v: Any) -> list[Any]:
        return as_object_list(v)


class FeedEnvelope(FeedRecord):
    """Top-level response of ``GET /eateries.json``."""

    status: str = ""
    message: str = ""
    data: FeedData = Field(default_factory=FeedData)
    meta: FeedMeta = Field(default_factory=FeedMeta)

    @field_validator("status", "message", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return as_str(v)

    @field_validator("data", "meta", mode="before")
    @classmethod
    def coerce_objects(cls, v: Any) -> dict[str, Any]:
        return as_object(v)

    @property
    def is_success(self) -> bool:
        """Whether the envelope reports a successful response."""
        return self.status == SUCCESS_STATUS
