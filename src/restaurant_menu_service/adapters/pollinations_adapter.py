"""Pollinations image adapter.

Pollinations renders an image on GET of a prompt URL, so generating an image
only requires building that URL.
"""

from urllib.parse import quote, urlencode

from restaurant_menu_service.adapters.base_adapter import ImageAdapter


class PollinationsImageAdapter(ImageAdapter):
    """Adapter building Pollinations prompt URLs."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://image.pollinations.ai",
        width: int = 512,
        height: int = 512,
    ) -> None:
        """Initialize Pollinations adapter.

        Args:
            api_key: Pollinations API token
            base_url: Image service base URL
            width: Image width in pixels
            height: Image height in pixels
        """
        super().__init__("pollinations")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.width = width
        self.height = height

    def build_image_url(self, prompt: str, seed: int) -> str:
        """Build the prompt URL for an image.

        Args:
            prompt: Plain-text image description
            seed: Image seed

        Returns:
            str: ``{base}/prompt/{prompt}?width=..&height=..&seed=..&token=..``
        """
        query = urlencode(
            {"width": self.width, "height": self.height, "seed": seed, "token": self.api_key}
        )
        return f"{self.base_url}/prompt/{quote(prompt, safe='')}?{query}"
