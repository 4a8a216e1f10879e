"""Groq translation adapter.

Translates order scripts through Groq's OpenAI-compatible chat completions API.
"""

import logging
import time

import httpx

from restaurant_menu_service.adapters.base_adapter import TranslationAdapter
from restaurant_menu_service.observability.metrics import record_external_call

logger = logging.getLogger(__name__)


class GroqTranslationAdapter(TranslationAdapter):
    """Adapter for the Groq chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "llama-3.1-8b-instant",
        base_url: str = "https://api.groq.com/openai/v1",
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize Groq adapter.

        Args:
            api_key: Groq API key
            model: Chat model used for translation
            base_url: API base URL
            timeout_seconds: Request timeout
        """
        super().__init__("groq")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _payload(self, text: str, language: str) -> dict:
        return {
            "model": self.model,
            "temperature": 0,
            "messages": [
                {
                    "role": "system",
                    "content": "You are a translator. Reply with the translation only.",
                },
                {
                    "role": "user",
                    "content": f'Translate the following English text to {language}: "{text}"',
                },
            ],
        }

    async def translate(self, text: str, language: str) -> str | None:
        """Translate text with a single chat completion.

        Args:
            text: English source text
            language: Target language name

        Returns:
            str: Translated text, or None if the call failed
        """
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=self._payload(text, language),
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )

            if response.status_code != 200:
                logger.error(f"Groq translation failed: {response.status_code}")
                return None

            translated = response.json()["choices"][0]["message"]["content"].strip()
            logger.info(f"Translated order script to {language}")
            return translated.strip('"')

        except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
            logger.error(f"Groq translate failed: {e}")
            return None
        finally:
            record_external_call(self.service_name, "translate", time.perf_counter() - start)
