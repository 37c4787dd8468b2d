"""FastAPI application exposing read-only catalog queries."""

import logging
from datetime import date, datetime, time

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from dining_catalog_service.models.eatery_models import Eatery
from dining_catalog_service.models.event_models import Event
from dining_catalog_service.services.data_manager import DataManager

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class EventResponse(BaseModel):
    """Serving event with its menu flattened to item names."""

    name: str
    summary: str
    start: datetime
    end: datetime
    menu: list[tuple[str, list[str]]]


class EaterySummary(BaseModel):
    """Catalog listing entry."""

    id: int
    slug: str
    name: str
    name_short: str
    eatery_type: str
    campus_area: str
    external: bool
    is_open_now: bool


class EateryDetail(EaterySummary):
    """Eatery detail including today's events."""

    about: str
    phone: str
    address: str
    latitude: float
    longitude: float
    payment_methods: list[str]
    is_open_today: bool
    events_today: list[EventResponse]


class EateryStatusResponse(BaseModel):
    """Open/closed state of an eatery at an instant."""

    slug: str
    at: datetime
    is_open: bool
    is_open_for_date: bool
    active_event: EventResponse | None = None


class EateryMenuResponse(BaseModel):
    """Fallback menu of an eatery (dining items or hardcoded menu)."""

    slug: str
    menu: list[tuple[str, list[str]]]


class RefreshResponse(BaseModel):
    """Response model for a forced catalog refresh."""

    success: bool
    source: str
    eatery_count: int
    error_message: str | None = None


def _event_response(eatery: Eatery, name: str, event: Event) -> EventResponse:
    return EventResponse(
        name=name,
        summary=event.summary,
        start=event.start,
        end=event.end,
        menu=[
            (category, [item.name for item in items])
            for category, items in eatery.sorted_menu(event.menu)
        ],
    )


def _summary_fields(eatery: Eatery) -> dict:
    return {
        "id": eatery.id,
        "slug": eatery.slug,
        "name": eatery.name,
        "name_short": eatery.name_short,
        "eatery_type": eatery.eatery_type.value,
        "campus_area": eatery.area.value,
        "external": eatery.external,
        "is_open_now": eatery.is_open_now(),
    }


def create_app(data_manager: DataManager) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        data_manager: Catalog to serve queries from

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Dining Catalog API",
        description="Read-only queries over the campus dining catalog",
        version="1.0.0",
    )

    # Store the catalog in app state for access in route handlers
    app.state.data_manager = data_manager

    async def load_catalog() -> DataManager:
        """Ensure the catalog holds data, raising 502 if it cannot be loaded."""
        manager: DataManager = app.state.data_manager
        result = await manager.fetch_eateries(force=False)
        if not result.success and not manager.eateries:
            raise HTTPException(status_code=502, detail=f"Catalog unavailable: {result.error}")
        return manager

    async def find_eatery(slug: str) -> Eatery:
        manager = await load_catalog()
        eatery = manager.get_eatery(slug)
        if eatery is None:
            raise HTTPException(status_code=404, detail=f"Eatery '{slug}' not found")
        return eatery

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    @app.get("/eateries", response_model=list[EaterySummary], tags=["Eateries"])
    async def list_eateries() -> list[EaterySummary]:
        """List all eateries in the catalog."""
        manager = await load_catalog()
        return [EaterySummary(**_summary_fields(eatery)) for eatery in manager.eateries]

    @app.get("/eateries/{slug}", response_model=EateryDetail, tags=["Eateries"])
    async def get_eatery(slug: str) -> EateryDetail:
        """Get an eatery with today's events.

        Raises:
            HTTPException: If the slug is unknown
        """
        eatery = await find_eatery(slug)
        now = datetime.now(eatery.timezone)
        return EateryDetail(
            **_summary_fields(eatery),
            about=eatery.about,
            phone=eatery.phone,
            address=eatery.address,
            latitude=eatery.latitude,
            longitude=eatery.longitude,
            payment_methods=[method.value for method in eatery.payment_methods],
            is_open_today=eatery.is_open_for_date(now),
            events_today=[
                _event_response(eatery, name, event)
                for name, event in eatery.events_on_date(now).items()
            ],
        )

    @app.get("/eateries/{slug}/status", response_model=EateryStatusResponse, tags=["Eateries"])
    async def get_eatery_status(
        slug: str,
        at: datetime | None = Query(None, description="Instant to evaluate, defaults to now"),
    ) -> EateryStatusResponse:
        """Tell whether an eatery is open at an instant and which event is active."""
        eatery = await find_eatery(slug)
        instant = at or datetime.now(eatery.timezone)
        active = eatery.active_event_for_date(instant)
        return EateryStatusResponse(
            slug=slug,
            at=instant,
            is_open=eatery.is_open_on_date(instant),
            is_open_for_date=eatery.is_open_for_date(instant),
            active_event=_event_response(eatery, active.description, active) if active else None,
        )

    @app.get("/eateries/{slug}/events", response_model=list[EventResponse], tags=["Eateries"])
    async def get_eatery_events(
        slug: str,
        day: date | None = Query(None, alias="date", description="Calendar day, defaults to today"),
    ) -> list[EventResponse]:
        """List the events of an eatery on a calendar day."""
        eatery = await find_eatery(slug)
        instant = (
            datetime.combine(day, time(12), tzinfo=eatery.timezone)
            if day
            else datetime.now(eatery.timezone)
        )
        events = eatery.events_on_date(instant)
        return [_event_response(eatery, name, event) for name, event in events.items()]

    @app.get("/eateries/{slug}/menu", response_model=EateryMenuResponse, tags=["Eateries"])
    async def get_eatery_menu(slug: str) -> EateryMenuResponse:
        """Get the fallback menu of an eatery."""
        eatery = await find_eatery(slug)
        return EateryMenuResponse(slug=slug, menu=eatery.alternate_menu_iterable())

    @app.post("/refresh", response_model=RefreshResponse, tags=["Catalog"])
    async def refresh_catalog() -> RefreshResponse:
        """Force a catalog refresh from the feed.

        Raises:
            HTTPException: 502 if the refresh failed
        """
        logger.info("Forced catalog refresh requested")
        result = await app.state.data_manager.fetch_eateries(force=True)
        response = RefreshResponse(
            success=result.success,
            source=result.source,
            eatery_count=result.eatery_count,
            error_message=str(result.error) if result.error else None,
        )
        if not result.success:
            raise HTTPException(status_code=502, detail=response.model_dump())
        return response

    return app
