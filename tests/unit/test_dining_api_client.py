"""Unit tests for DiningApiClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from dining_catalog_service.services.dining_api_client import DiningApiClient


@pytest.mark.unit
class TestDiningApiClient:
    """Test suite for DiningApiClient."""

    @pytest.fixture
    def client(self) -> DiningApiClient:
        """Create a DiningApiClient with test configuration."""
        return DiningApiClient(base_url="https://dining.test/api/", timeout_seconds=5)

    def test_client_initialization(self, client: DiningApiClient) -> None:
        """Test URL normalization and request key."""
        assert client.base_url == "https://dining.test/api"
        assert client.eateries_url == "https://dining.test/api/eateries.json"
        assert client.eateries_request_key() == "GET https://dining.test/api/eateries.json"

    @pytest.mark.asyncio
    async def test_fetch_eateries_returns_body(self, client: DiningApiClient) -> None:
        """Test that the raw body is returned untouched."""
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content = b'{"status": "success"}'

        with patch(
            "httpx.AsyncClient.get", new_callable=AsyncMock, return_value=mock_response
        ) as mock_get:
            body = await client.fetch_eateries()

        assert body == b'{"status": "success"}'
        mock_get.assert_called_once()
        assert mock_get.call_args.args[0] == "https://dining.test/api/eateries.json"

    @pytest.mark.asyncio
    async def test_fetch_eateries_status_error_propagates(self, client: DiningApiClient) -> None:
        """Test that non-2xx responses raise HTTPStatusError."""
        mock_response = MagicMock()
        mock_response.status_code = 503
        error = httpx.HTTPStatusError("Unavailable", request=MagicMock(), response=mock_response)
        mock_response.raise_for_status.side_effect = error

        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=mock_response):
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await client.fetch_eateries()

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_fetch_eateries_network_error_propagates(self, client: DiningApiClient) -> None:
        """Test that transport errors are raised verbatim."""
        error = httpx.ConnectError("Connection refused", request=MagicMock())

        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, side_effect=error):
            with pytest.raises(httpx.ConnectError) as exc_info:
                await client.fetch_eateries()

        assert exc_info.value is error
