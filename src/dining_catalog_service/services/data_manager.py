"""Catalog of eateries and the fetch/cache orchestration that refreshes it."""

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from dining_catalog_service.models.cache_models import FRESHNESS_WINDOW, CachedResponse
from dining_catalog_service.models.eatery_models import DEFAULT_TIMEZONE, Eatery
from dining_catalog_service.models.feed_models import FeedEnvelope, decode_menu_blocks
from dining_catalog_service.models.menu_models import Menu, menu_from_blocks
from dining_catalog_service.observability import metrics
from dining_catalog_service.observability.decorators import traced
from dining_catalog_service.repositories.response_cache_repositories import (
    ResponseCacheRepository,
)
from dining_catalog_service.services.dining_api_client import DiningApiClient
from dining_catalog_service.services.external_eateries import expand_external_record

logger = logging.getLogger(__name__)

SOURCE_MEMORY = "memory"
SOURCE_CACHE = "cache"
SOURCE_NETWORK = "network"

CompletionCallback = Callable[[Exception | None], None]


class DiningDataError(Exception):
    """Base class for errors raised while refreshing the catalog."""


class ServerError(DiningDataError):
    """The feed answered, but not with a successful envelope."""

    def __init__(self, message: str, status: str = "") -> None:
        super().__init__(message)
        self.status = status


@dataclass
class FetchResult:
    """Outcome of a catalog refresh.

    Attributes:
        success: Whether the catalog holds data from this refresh (or already held data)
        source: Where the data came from: "memory", "cache" or "network"
        eatery_count: Number of eateries in the catalog after the refresh
        error: The surfaced error if the refresh failed, None otherwise
    """

    success: bool
    source: str
    eatery_count: int
    error: Exception | None = None


def build_hardcoded_menus(raw_menus: dict[str, Any]) -> dict[str, Menu]:
    """Decode a static menu table keyed by eatery slug."""
    return {slug: menu_from_blocks(decode_menu_blocks(blocks)) for slug, blocks in raw_menus.items()}


class DataManager:
    """Owns the current list of eateries and refreshes it from the feed.

    Construct one instance and pass it to whatever needs the catalog. The
    list is replaced wholesale by a successful refresh and left untouched by
    a failed one. Concurrent refreshes are coalesced: callers that arrive
    while a refresh is in flight wait for that refresh and share its result.
    A forced call never joins a non-forced refresh, which may serve the cache;
    it queues a forced refresh to run once that one finishes.
    """

    def __init__(
        self,
        api_client: DiningApiClient,
        response_cache: ResponseCacheRepository,
        hardcoded_menus: dict[str, Any] | None = None,
        external_eateries: list[dict[str, Any]] | None = None,
        timezone: str = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] | None = None,
        max_age: timedelta = FRESHNESS_WINDOW,
    ) -> None:
        """Initialize the DataManager.

        Args:
            api_client: Transport for the eateries feed
            response_cache: Store of raw responses keyed by request
            hardcoded_menus: Raw static menus keyed by eatery slug
            external_eateries: Raw records of eateries missing from the feed
            timezone: IANA timezone in which day keys are computed
            clock: Source of the current time (timezone-aware)
            max_age: Maximum age of a cached response that may be reused
        """
        self.api_client = api_client
        self.response_cache = response_cache
        self.hardcoded_menus = build_hardcoded_menus(hardcoded_menus or {})
        self.external_eateries = list(external_eateries or [])
        self.timezone = ZoneInfo(timezone)
        self.clock = clock or (lambda: datetime.now(UTC))
        self.max_age = max_age

        self._eateries: list[Eatery] = []
        self._inflight: asyncio.Task[FetchResult] | None = None
        self._inflight_force = False
        self.last_response_time: str | None = None
        self.last_refreshed_at: datetime | None = None

    @property
    def eateries(self) -> list[Eatery]:
        """Snapshot of the current catalog."""
        return list(self._eateries)

    def get_eatery(self, slug: str) -> Eatery | None:
        """Look up an eatery by slug; the first match wins when slugs repeat."""
        for eatery in self._eateries:
            if eatery.slug == slug:
                return eatery
        return None

    @traced("fetch_eateries")
    async def fetch_eateries(
        self,
        force: bool = False,
        on_complete: CompletionCallback | None = None,
    ) -> FetchResult:
        """Make sure the catalog holds eatery data.

        Without ``force``, data already in memory is served as is, and a
        cached response younger than the freshness window is reused instead
        of calling the API.

        Args:
            force: Bypass in-memory data and the response cache
            on_complete: Called exactly once with None on success or the error

        Returns:
            FetchResult for this call
        """
        if not force and self._eateries:
            result = FetchResult(success=True, source=SOURCE_MEMORY, eatery_count=len(self._eateries))
            metrics.record_refresh_success(SOURCE_MEMORY)
        else:
            if self._inflight is None:
                self._start_refresh(self._refresh(force), force)
            elif force and not self._inflight_force:
                logger.info("Non-forced catalog refresh in flight, queueing a forced one after it")
                self._start_refresh(self._refresh_after(self._inflight, force), force)
            else:
                logger.info("Catalog refresh already in flight, joining it")
            result = await asyncio.shield(self._inflight)

        if on_complete is not None:
            on_complete(result.error)
        return result

    def _start_refresh(self, refresh: Coroutine[Any, Any, FetchResult], force: bool) -> None:
        self._inflight = asyncio.ensure_future(refresh)
        self._inflight_force = force
        self._inflight.add_done_callback(self._clear_inflight)

    def _clear_inflight(self, task: "asyncio.Task[FetchResult]") -> None:
        if self._inflight is task:
            self._inflight = None
            self._inflight_force = False

    async def _refresh_after(self, previous: "asyncio.Task[FetchResult]", force: bool) -> FetchResult:
        await asyncio.wait([previous])
        return await self._refresh(force)

    async def _refresh(self, force: bool) -> FetchResult:
        started = time.monotonic()
        source = SOURCE_NETWORK
        try:
            body: bytes | None = None
            if not force:
                body = self._load_cached_body()
            if body is not None:
                source = SOURCE_CACHE
            else:
                body = await self.api_client.fetch_eateries()
                self._store_cached_body(body)

            self.process_payload(body)

        except Exception as e:
            logger.error(f"Catalog refresh from {source} failed: {e!r}")
            metrics.record_refresh_failure(type(e).__name__)
            return FetchResult(success=False, source=source, eatery_count=len(self._eateries), error=e)

        metrics.record_refresh_success(source)
        metrics.record_refresh_duration(source, time.monotonic() - started)
        logger.info(f"Catalog refreshed from {source} with {len(self._eateries)} eateries")
        return FetchResult(success=True, source=source, eatery_count=len(self._eateries))

    def _load_cached_body(self) -> bytes | None:
        """Return the cached feed body if it is within the freshness window."""
        cached = self.response_cache.get_response(self.api_client.eateries_request_key())
        if cached is None:
            metrics.record_cache_lookup("miss")
            return None

        if not cached.is_fresh(self.clock(), self.max_age):
            logger.info(f"Cached eateries response from {cached.fetched_at.isoformat()} is stale")
            metrics.record_cache_lookup("stale")
            return None

        metrics.record_cache_lookup("hit")
        return cached.body

    def _store_cached_body(self, body: bytes) -> None:
        cached = CachedResponse(
            request_key=self.api_client.eateries_request_key(),
            body=body,
            fetched_at=self.clock(),
        )
        if not self.response_cache.save_response(cached):
            logger.warning("Failed to store eateries response in the response cache")

    def process_payload(self, body: bytes) -> None:
        """Parse a feed body and replace the catalog with its eateries.

        Args:
            body: Raw feed response

        Raises:
            ServerError: The body is not JSON or its status is not "success"
        """
        try:
            envelope = FeedEnvelope.model_validate_json(body)
        except ValidationError as e:
            raise ServerError(f"Malformed eateries response: {e.error_count()} error(s)") from e

        if not envelope.is_success:
            raise ServerError(
                f"Eateries response status is '{envelope.status}': {envelope.message}",
                status=envelope.status,
            )

        now = self.clock()
        eateries = [
            Eatery(record, hardcoded_menus=self.hardcoded_menus, timezone=self.timezone)
            for record in envelope.data.eateries
        ]
        eateries.extend(
            Eatery(
                expand_external_record(raw, now, self.timezone),
                hardcoded_menus=self.hardcoded_menus,
                timezone=self.timezone,
            )
            for raw in self.external_eateries
        )

        self._eateries = eateries
        self.last_response_time = envelope.meta.response_dttm or None
        self.last_refreshed_at = now
        metrics.record_catalog_size(len(eateries))
