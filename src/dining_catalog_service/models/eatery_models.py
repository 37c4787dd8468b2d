"""Eatery (dining location) model and its lookup enumerations.

An eatery owns a day-indexed event index built once from a decoded feed record:
``{"2015-03-01": {"Lunch": Event, "Dinner": Event}}``. Adjacent hour records
describing the same serving window are merged, and repeated event names on one
day are made unique.
"""

import logging
from datetime import date, datetime, time, timedelta
from enum import Enum
from zoneinfo import ZoneInfo

from dining_catalog_service.models.event_models import Event
from dining_catalog_service.models.feed_models import (
    EateryRecord,
    EventRecord,
)
from dining_catalog_service.models.menu_models import (
    GENERAL_CATEGORY,
    Menu,
    MenuItem,
    menu_from_blocks,
    menu_iterable,
    menu_text,
    sorted_menu,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/New_York"
DAY_KEY_FORMAT = "%Y-%m-%d"
TIME_OF_DAY_FORMAT = "%I:%M%p"
NEXT_EVENT_HORIZON = timedelta(days=1)


class EateryType(str, Enum):
    """Kinds of eateries on campus."""

    UNKNOWN = ""
    DINING = "all you care to eat"
    CAFE = "cafe"
    CART = "cart"
    FOOD_COURT = "food court"
    CONVENIENCE_STORE = "convenience store"
    COFFEE_SHOP = "coffee shop"
    BAKERY = "bakery"

    @classmethod
    def parse(cls, value: str) -> "EateryType":
        """Map a feed description to a type, UNKNOWN when unrecognised."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class CampusArea(str, Enum):
    """General location on campus."""

    UNKNOWN = ""
    WEST = "West"
    NORTH = "North"
    CENTRAL = "Central"

    @classmethod
    def parse(cls, value: str) -> "CampusArea":
        """Map a feed description to an area, UNKNOWN when unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class PaymentType(str, Enum):
    """Accepted payment methods."""

    OTHER = ""
    BRB = "Meal Plan - Debit"
    SWIPES = "Meal Plan - Swipe"
    CASH = "Cash"
    CORNELL_CARD = "Cornell Card"
    CREDIT_CARD = "Major Credit Cards"
    NFC = "Mobile Payments"

    @classmethod
    def parse(cls, value: str) -> "PaymentType":
        """Map a feed description to a payment type, OTHER when unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


def to_zone(instant: datetime, tz: ZoneInfo) -> datetime:
    """Express an instant in ``tz``; naive datetimes are taken as local to ``tz``."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def day_key(day: date) -> str:
    """ISO ``yyyy-MM-dd`` key of a calendar day."""
    return day.strftime(DAY_KEY_FORMAT)


def parse_time_of_day(value: str) -> time | None:
    """Parse an ``h:mma`` time such as ``"7:30am"``; None when unparseable."""
    text = value.strip().upper().replace(" ", "")
    if not text:
        return None
    for fmt in (TIME_OF_DAY_FORMAT, "%I%p", "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


def _from_timestamp(value: int | None, epoch: datetime, tz: ZoneInfo) -> datetime:
    if not value:
        return epoch
    try:
        return datetime.fromtimestamp(value, tz)
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Timestamp {value} is out of range, using the epoch")
        return epoch


def _event_bounds(record: EventRecord, day: str, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Resolve the start and end instants of a raw event.

    Epoch timestamps win. Otherwise ``start``/``end`` times of day are applied
    to the hour record's date, moving the end to the next day when it falls
    before the start. Anything missing falls back to the epoch.
    """
    epoch = datetime.fromtimestamp(0, tz)
    if record.start_timestamp is not None or record.end_timestamp is not None:
        start = _from_timestamp(record.start_timestamp, epoch, tz)
        end = _from_timestamp(record.end_timestamp, epoch, tz)
    else:
        start, end = epoch, epoch
        try:
            base = datetime.strptime(day, DAY_KEY_FORMAT).date()
        except ValueError:
            base = None
        start_time = parse_time_of_day(record.start)
        end_time = parse_time_of_day(record.end)
        if base is not None and start_time is not None and end_time is not None:
            start = datetime.combine(base, start_time, tzinfo=tz)
            end = datetime.combine(base, end_time, tzinfo=tz)
            if end < start:
                end += timedelta(days=1)

    if end < start:
        logger.debug(f"Event '{record.descr}' on {day} ends before it starts, clamping end")
        end = start
    return start, end


def build_event(record: EventRecord, day: str, tz: ZoneInfo) -> Event:
    """Build an event from a raw event record of the hour record for ``day``."""
    start, end = _event_bounds(record, day, tz)
    return Event(
        description=record.descr,
        summary=record.cal_summary,
        start=start,
        end=end,
        menu=menu_from_blocks(record.menu),
    )


def _unique_description(description: str, taken: dict[str, Event]) -> str:
    counter = 1
    while f"{description} {counter}" in taken:
        counter += 1
    return f"{description} {counter}"


def normalize_day(
    day: str, records: list[EventRecord], tz: ZoneInfo
) -> tuple[dict[str, Event], bool]:
    """Merge the raw events of one day into a name-to-event mapping.

    Events are processed greedily in feed order. A repeated name either
    extends the existing event (when one ends exactly where the other starts)
    or is stored under ``"{name} N"`` with the smallest free ``N >= 1``.

    Args:
        day: Day key of the hour record
        records: Raw events of that day in feed order
        tz: Timezone of the eatery

    Returns:
        Mapping from (possibly uniquified) event name to event, and whether any
        raw event carried a non-empty menu (checked before merging)
    """
    events: dict[str, Event] = {}
    menu_found = False
    for record in records:
        event = build_event(record, day, tz)
        menu_found = menu_found or event.has_menu
        existing = events.get(event.description)
        if existing is not None:
            if existing.is_mergeable_with(event):
                if existing.end == event.start:
                    existing.end = event.end
                else:
                    existing.start = event.start
                continue
            event.description = _unique_description(event.description, events)
        events[event.description] = event
    return events, menu_found


class Eatery:
    """A dining location with its day-indexed events and menus.

    Built once from a decoded feed record and never mutated afterwards. All
    query methods are pure reads and never raise for missing data.
    """

    def __init__(
        self,
        record: EateryRecord,
        hardcoded_menus: dict[str, Menu] | None = None,
        timezone: ZoneInfo | None = None,
    ) -> None:
        """Normalize an eatery record.

        Args:
            record: Decoded eatery record
            hardcoded_menus: Static fallback menus keyed by eatery slug
            timezone: Timezone in which day keys are computed
        """
        self.timezone = timezone or ZoneInfo(DEFAULT_TIMEZONE)

        self.id = record.id
        self.slug = record.slug
        self.name = record.name
        self.name_short = record.nameshort
        self.about = record.aboutshort
        self.phone = record.contact_phone
        self.area = CampusArea.parse(record.campus_area.descrshort)
        self.eatery_type = (
            EateryType.parse(record.eatery_types[0].descrshort)
            if record.eatery_types
            else EateryType.UNKNOWN
        )
        self.address = record.location
        self.latitude = record.latitude
        self.longitude = record.longitude
        self.payment_methods = [PaymentType.parse(m.descrshort) for m in record.pay_methods]
        self.external = record.external

        self.hardcoded_menu: Menu | None = (hardcoded_menus or {}).get(self.slug)

        self.events: dict[str, dict[str, Event]] = {}
        menu_found = False
        for hours in record.operating_hours:
            day_events, day_has_menu = normalize_day(hours.date, hours.events, self.timezone)
            if day_has_menu:
                menu_found = True
            self.events[hours.date] = day_events

        self.dining_items: Menu | None = None
        if not menu_found and record.dining_items:
            self.dining_items = {
                GENERAL_CATEGORY: [
                    MenuItem(name=entry.item, healthy=entry.healthy)
                    for entry in record.dining_items
                ]
            }

    def __repr__(self) -> str:
        return f"Eatery(slug={self.slug!r}, id={self.id})"

    def _local_day(self, instant: datetime) -> date:
        return to_zone(instant, self.timezone).date()

    def _now(self) -> datetime:
        return datetime.now(self.timezone)

    def events_on_date(self, instant: datetime) -> dict[str, Event]:
        """Events indexed under the calendar day of ``instant``.

        Returns:
            Mapping from event name to event, empty when the day has none
        """
        return self.events.get(day_key(self._local_day(instant)), {})

    def _events_on_day(self, day: date) -> dict[str, Event]:
        return self.events.get(day_key(day), {})

    def is_open_on_date(self, instant: datetime) -> bool:
        """Tell whether an event is running at a specific instant.

        Events of the previous day are checked too, since a serving window
        may cross midnight.
        """
        instant = to_zone(instant, self.timezone)
        day = instant.date()
        for candidate in (day, day - timedelta(days=1)):
            for event in self._events_on_day(candidate).values():
                if event.occurring_on(instant):
                    return True
        return False

    def is_open_for_date(self, instant: datetime) -> bool:
        """Tell whether any event is scheduled on the calendar day of ``instant``."""
        return len(self.events_on_date(instant)) != 0

    def is_open_now(self) -> bool:
        """Whether the eatery is open at the present instant."""
        return self.is_open_on_date(self._now())

    def is_open_today(self) -> bool:
        """Whether the eatery has an event at some point today."""
        return self.is_open_for_date(self._now())

    def active_event_for_date(self, instant: datetime) -> Event | None:
        """Find the running event at an instant, or the next one to start.

        Events of the previous, same and next calendar day are scanned. An
        event running at ``instant`` is returned as soon as it is found.
        Otherwise the event starting soonest after ``instant`` is returned,
        provided it starts within a day.

        Args:
            instant: Instant to evaluate

        Returns:
            The active or upcoming event, or None
        """
        instant = to_zone(instant, self.timezone)
        day = instant.date()
        best_gap = NEXT_EVENT_HORIZON
        upcoming: Event | None = None

        for candidate in (day - timedelta(days=1), day, day + timedelta(days=1)):
            for event in self._events_on_day(candidate).values():
                if event.occurring_on(instant):
                    return event
                gap = event.start - instant
                if timedelta(0) < gap <= best_gap and (upcoming is None or gap < best_gap):
                    best_gap = gap
                    upcoming = event

        return upcoming

    def hardcoded_menu_iterable(self) -> list[tuple[str, list[str]]]:
        return menu_iterable(self.hardcoded_menu)

    def dining_items_menu_iterable(self) -> list[tuple[str, list[str]]]:
        return menu_iterable(self.dining_items)

    def alternate_menu_iterable(self) -> list[tuple[str, list[str]]]:
        """Menu to show when events carry no menu.

        Prefers the feed's dining items, then the hardcoded menu.
        """
        if self.dining_items is not None:
            return self.dining_items_menu_iterable()
        if self.hardcoded_menu is not None:
            return self.hardcoded_menu_iterable()
        return []

    def sorted_menu(self, menu: Menu) -> list[tuple[str, list[MenuItem]]]:
        """Categories of ``menu`` with the hot traditional station pinned first."""
        return sorted_menu(menu)

    def menu_text(self, instant: datetime) -> str:
        """Menus of the events on the day of ``instant``, joined for text search."""
        return "\n".join(menu_text(event.menu) for event in self.events_on_date(instant).values())
