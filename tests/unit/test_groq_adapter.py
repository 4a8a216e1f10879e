"""Unit tests for the Groq translation adapter."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from restaurant_menu_service.adapters.groq_adapter import GroqTranslationAdapter


def _completion(content: str, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


@pytest.mark.unit
class TestGroqTranslationAdapter:
    """Test suite for GroqTranslationAdapter."""

    @pytest.fixture
    def adapter(self) -> GroqTranslationAdapter:
        """Create a Groq adapter for testing."""
        return GroqTranslationAdapter(api_key="test-groq-key", base_url="https://groq.test/v1/")

    def test_initialization(self, adapter: GroqTranslationAdapter) -> None:
        """Test adapter configuration."""
        assert adapter.service_name == "groq"
        assert adapter.base_url == "https://groq.test/v1"
        assert adapter.model == "llama-3.1-8b-instant"

    @pytest.mark.asyncio
    async def test_translate_success(self, adapter: GroqTranslationAdapter) -> None:
        """Test that the completion content is returned without surrounding quotes."""
        mock_post = AsyncMock(return_value=_completion(' "Hola, quisiera un burrito." '))

        with patch("httpx.AsyncClient.post", mock_post):
            result = await adapter.translate("Hi, I would like a burrito.", "spanish")

        assert result == "Hola, quisiera un burrito."
        assert mock_post.call_args.args[0] == "https://groq.test/v1/chat/completions"
        kwargs = mock_post.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer test-groq-key"
        assert "spanish" in kwargs["json"]["messages"][1]["content"]
        assert "Hi, I would like a burrito." in kwargs["json"]["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_translate_error_status(self, adapter: GroqTranslationAdapter) -> None:
        """Test that a non-200 response returns None."""
        with patch(
            "httpx.AsyncClient.post",
            new_callable=AsyncMock,
            return_value=_completion("", status_code=401),
        ):
            result = await adapter.translate("Hi", "french")

        assert result is None

    @pytest.mark.asyncio
    async def test_translate_network_error(self, adapter: GroqTranslationAdapter) -> None:
        """Test that network errors return None."""
        with patch(
            "httpx.AsyncClient.post",
            new_callable=AsyncMock,
            side_effect=httpx.RequestError("Connection failed", request=MagicMock()),
        ):
            result = await adapter.translate("Hi", "french")

        assert result is None

    @pytest.mark.asyncio
    async def test_translate_malformed_body(self, adapter: GroqTranslationAdapter) -> None:
        """Test that a response without choices returns None."""
        response = MagicMock()
        response.status_code = 200
        response.json.return_value = {"choices": []}

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=response):
            result = await adapter.translate("Hi", "french")

        assert result is None
