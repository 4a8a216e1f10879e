"""Base adapters for external text translation and image generation services.

Adapters use simple return values (None) for expected failures rather than
raising exceptions; the service layer decides which error to surface.
"""

from abc import ABC, abstractmethod


class TranslationAdapter(ABC):
    """Abstract base class for text translation services."""

    def __init__(self, service_name: str) -> None:
        """Initialize the translation adapter.

        Args:
            service_name: Name of the external service (e.g. 'groq')
        """
        self.service_name = service_name

    @abstractmethod
    async def translate(self, text: str, language: str) -> str | None:
        """Translate English text into the target language.

        Args:
            text: English source text
            language: Target language name, lowercased (e.g. 'spanish')

        Returns:
            str: Translated text, or None if the service call failed

        Note:
            Returns None on expected failures (HTTP errors, network issues,
            malformed responses). Let exceptions bubble up only for unexpected errors.
        """
        pass


class ImageAdapter(ABC):
    """Abstract base class for prompt-to-image services."""

    def __init__(self, service_name: str) -> None:
        """Initialize the image adapter.

        Args:
            service_name: Name of the external service (e.g. 'pollinations')
        """
        self.service_name = service_name

    @abstractmethod
    def build_image_url(self, prompt: str, seed: int) -> str:
        """Build the URL that renders an image for a prompt.

        Args:
            prompt: Plain-text image description
            seed: Seed making the generated image reproducible

        Returns:
            str: Image URL
        """
        pass
