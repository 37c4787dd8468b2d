"""Client for the campus dining feed API."""

import logging

import httpx

from dining_catalog_service.observability.decorators import traced

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://now.dining.cornell.edu/api/1.0/dining"
EATERIES_PATH = "/eateries.json"


class DiningApiClient:
    """HTTP client for fetching the raw eateries feed.

    The client only moves bytes. Transport failures and non-2xx responses
    are raised as ``httpx`` errors and left for the caller to surface.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout_seconds: float = 30.0) -> None:
        """Initialize the dining API client.

        Args:
            base_url: Base URL of the dining API
            timeout_seconds: Transport timeout for each request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @property
    def eateries_url(self) -> str:
        """Full URL of the eateries feed."""
        return f"{self.base_url}{EATERIES_PATH}"

    def eateries_request_key(self) -> str:
        """Identity of the eateries request, used as response cache key."""
        return f"GET {self.eateries_url}"

    @traced("fetch_eateries_feed", service_name="dining-catalog")
    async def fetch_eateries(self) -> bytes:
        """Fetch the raw eateries feed.

        Returns:
            Raw response body

        Raises:
            httpx.HTTPStatusError: The API answered with a non-2xx status
            httpx.RequestError: The request could not be completed
        """
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.get(self.eateries_url, headers={"Accept": "application/json"})
            response.raise_for_status()
            logger.info(f"Fetched eateries feed ({len(response.content)} bytes)")
            return response.content
