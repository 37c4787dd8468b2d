"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from dining_catalog_service.repositories.response_cache_repositories import (
    InMemoryResponseCacheRepository,
)
from src.main import create_application, create_data_manager


@pytest.mark.unit
class TestCreateDataManager:
    """Tests for create_data_manager function."""

    @patch.dict(
        os.environ,
        {
            "DINING_API_BASE_URL": "https://dining.test/api/",
            "DINING_API_TIMEOUT_SECONDS": "12.5",
            "DINING_TIMEZONE": "America/Chicago",
        },
        clear=True,
    )
    def test_uses_environment_configuration(self) -> None:
        """Test that the feed URL, timeout and timezone come from the environment."""
        manager = create_data_manager()

        assert manager.api_client.eateries_url == "https://dining.test/api/eateries.json"
        assert manager.api_client.timeout_seconds == 12.5
        assert str(manager.timezone) == "America/Chicago"
        assert isinstance(manager.response_cache, InMemoryResponseCacheRepository)

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self) -> None:
        """Test the default feed and timezone."""
        manager = create_data_manager()

        assert manager.api_client.eateries_url.startswith("https://now.dining.cornell.edu/")
        assert str(manager.timezone) == "America/New_York"
        assert {raw["slug"] for raw in manager.external_eateries} == {"Terrace", "Macs-Cafe"}


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.create_app")
    @patch("src.main.configure_logging")
    @patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True)
    def test_creates_application_with_all_dependencies(
        self,
        mock_configure_logging: Mock,
        mock_create_app: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that logging, the app and observability are wired together."""
        mock_app = MagicMock(spec=FastAPI)
        mock_create_app.return_value = mock_app

        result = create_application()

        assert result is mock_app
        mock_configure_logging.assert_called_once_with("WARNING")
        mock_create_app.assert_called_once()
        assert mock_create_app.call_args.kwargs["data_manager"].api_client is not None
        mock_setup_observability.assert_called_once_with(mock_app)
