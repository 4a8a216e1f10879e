"""Unit tests for the adapter base classes and the Pollinations adapter."""

import pytest

from restaurant_menu_service.adapters.base_adapter import ImageAdapter, TranslationAdapter
from restaurant_menu_service.adapters.pollinations_adapter import PollinationsImageAdapter


class EchoTranslationAdapter(TranslationAdapter):
    """Concrete implementation for testing the abstract base class."""

    def __init__(self) -> None:
        """Initialize test adapter."""
        super().__init__("echo")

    async def translate(self, text: str, language: str) -> str | None:
        """Test implementation that tags the text with the language."""
        return f"[{language}] {text}"


@pytest.mark.unit
class TestTranslationAdapter:
    """Test suite for TranslationAdapter abstract base class."""

    def test_concrete_adapter_can_be_instantiated(self) -> None:
        """Test that concrete implementation can be instantiated."""
        adapter = EchoTranslationAdapter()
        assert adapter.service_name == "echo"

    def test_translate_must_be_implemented(self) -> None:
        """Test that translate must be implemented by subclasses."""

        class IncompleteAdapter(TranslationAdapter):
            pass

        with pytest.raises(TypeError):
            IncompleteAdapter("incomplete")  # type: ignore

    @pytest.mark.asyncio
    async def test_translate_signature(self) -> None:
        """Test that translate returns text."""
        result = await EchoTranslationAdapter().translate("Hi", "spanish")
        assert result == "[spanish] Hi"


@pytest.mark.unit
class TestImageAdapter:
    """Test suite for ImageAdapter abstract base class."""

    def test_build_image_url_must_be_implemented(self) -> None:
        """Test that build_image_url must be implemented by subclasses."""

        class IncompleteAdapter(ImageAdapter):
            pass

        with pytest.raises(TypeError):
            IncompleteAdapter("incomplete")  # type: ignore


@pytest.mark.unit
class TestPollinationsImageAdapter:
    """Test suite for PollinationsImageAdapter."""

    def test_initialization(self) -> None:
        """Test adapter defaults."""
        adapter = PollinationsImageAdapter(api_key="tok")

        assert adapter.service_name == "pollinations"
        assert adapter.base_url == "https://image.pollinations.ai"
        assert (adapter.width, adapter.height) == (512, 512)

    def test_build_image_url_encodes_prompt(self) -> None:
        """Test that the prompt is fully percent-encoded into the path."""
        adapter = PollinationsImageAdapter(api_key="tok", base_url="https://img.test/", width=256)

        url = adapter.build_image_url("Tacos & salsa/verde", seed=7)

        assert url == (
            "https://img.test/prompt/Tacos%20%26%20salsa%2Fverde"
            "?width=256&height=512&seed=7&token=tok"
        )
