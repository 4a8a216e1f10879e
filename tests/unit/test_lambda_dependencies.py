"""Unit tests for Lambda dependency factory."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest

from restaurant_menu_service.repositories.postgrest_gateway import PostgrestGateway
from src.lambda_dependencies import (
    get_config,
    get_fastapi_app,
    get_gateway,
    initialize_lambda_environment,
)

STORE_ENV = {"SUPABASE_URL": "https://proj.supabase.co", "SUPABASE_KEY": "key"}


class _CacheReset:
    def teardown_method(self) -> None:
        """Clear cached dependencies after each test."""
        import src.lambda_dependencies as deps

        deps._config = None
        deps._gateway = None
        deps._fastapi_app = None


@pytest.mark.unit
class TestGetConfig(_CacheReset):
    """Tests for get_config function."""

    @patch.dict(os.environ, {**STORE_ENV, "FILTER_INACTIVE_MENUS": "true"}, clear=True)
    def test_reads_environment_once(self) -> None:
        """Test that configuration is read from the environment and cached."""
        config = get_config()

        assert config.filter_inactive_menus is True
        assert get_config() is config

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_credentials(self) -> None:
        """Test that missing store credentials raise ValueError."""
        with pytest.raises(ValueError):
            get_config()


@pytest.mark.unit
class TestGetGateway(_CacheReset):
    """Tests for get_gateway function."""

    @patch.dict(os.environ, {**STORE_ENV, "STORE_TIMEOUT_SECONDS": "3"}, clear=True)
    def test_creates_and_caches_gateway(self) -> None:
        """Test that one PostgREST gateway is shared across calls."""
        gateway = get_gateway()

        assert isinstance(gateway, PostgrestGateway)
        assert gateway.rest_url == "https://proj.supabase.co/rest/v1"
        assert gateway.timeout_seconds == 3.0
        assert get_gateway() is gateway


@pytest.mark.unit
class TestGetFastAPIApp(_CacheReset):
    """Tests for get_fastapi_app function."""

    @patch.dict(os.environ, STORE_ENV, clear=True)
    @patch("src.lambda_dependencies.setup_observability")
    @patch("src.lambda_dependencies.build_app")
    def test_builds_app_once(self, mock_build_app: Mock, mock_observability: Mock) -> None:
        """Test that the app is built with the cached gateway and reused."""
        mock_build_app.return_value = MagicMock()

        app = get_fastapi_app()

        assert get_fastapi_app() is app
        mock_build_app.assert_called_once()
        assert mock_build_app.call_args.kwargs["gateway"] is get_gateway()
        mock_observability.assert_not_called()

    @patch.dict(os.environ, {**STORE_ENV, "OTEL_ENABLED": "1"}, clear=True)
    @patch("src.lambda_dependencies.setup_observability")
    @patch("src.lambda_dependencies.build_app")
    def test_enables_observability(self, mock_build_app: Mock, mock_observability: Mock) -> None:
        """Test that OTEL_ENABLED instruments the app."""
        app = get_fastapi_app()

        mock_observability.assert_called_once_with(app)


@pytest.mark.unit
class TestInitializeLambdaEnvironment:
    """Tests for initialize_lambda_environment function."""

    @patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True)
    @patch("src.lambda_dependencies.configure_logging")
    def test_configures_logging(self, mock_logging: Mock) -> None:
        """Test that logging is configured with LOG_LEVEL."""
        initialize_lambda_environment()

        mock_logging.assert_called_once_with("WARNING")
