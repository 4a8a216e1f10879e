"""Menu item image prompt and URL generation."""

import logging
import random

from restaurant_menu_service.adapters.base_adapter import ImageAdapter
from restaurant_menu_service.models.response_models import MenuImageResponse
from restaurant_menu_service.observability import traced
from restaurant_menu_service.repositories.menu_repositories import MenuItemRepository
from restaurant_menu_service.repositories.option_repositories import CustomOptionRepository
from restaurant_menu_service.services.customization_service import (
    load_item_option_values,
    option_name_for,
)
from restaurant_menu_service.services.errors import ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)


def build_image_prompt(item_name: str, value_name: str | None = None) -> str:
    """Describe the image to generate for a menu item."""
    if value_name:
        return f"Appetizing image of {item_name} featuring {value_name}"
    return f"Appetizing image of {item_name}"


class MenuImageService:
    """Service producing image URLs for menu items."""

    def __init__(
        self,
        menu_item_repository: MenuItemRepository,
        option_repository: CustomOptionRepository,
        image_adapter: ImageAdapter | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the MenuImageService.

        Args:
            menu_item_repository: Repository for menu items
            option_repository: Repository for custom options and values
            image_adapter: Image service, None when no API key is configured
            rng: Random source for option value and seed selection
        """
        self.menu_item_repository = menu_item_repository
        self.option_repository = option_repository
        self.image_adapter = image_adapter
        self.rng = rng or random.Random()

    @traced("generate_menu_image", record_args=("menu_item_id",))
    async def generate(self, menu_item_id: str) -> MenuImageResponse:
        """Build an image prompt from the item and one random option value.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            MenuImageResponse: Prompt and image URL

        Raises:
            NotFoundError: If the menu item does not exist
            ExternalServiceError: If no image service is configured
        """
        item = await self.menu_item_repository.get(menu_item_id)
        if item is None:
            raise NotFoundError("Menu item not found")

        customizations, values = await load_item_option_values(
            self.option_repository, menu_item_id
        )
        option_name = value_name = None
        if values:
            value = self.rng.choice(values)
            option_name = option_name_for(customizations, value.option_id)
            value_name = value.value_name

        if self.image_adapter is None:
            raise ExternalServiceError("Image generation API key not configured")

        prompt = build_image_prompt(item.display_name, value_name)
        seed = self.rng.randrange(1_000_000)
        logger.info(f"Generated image prompt for menu item {menu_item_id}")

        return MenuImageResponse(
            menu_item_id=item.menu_item_id,
            menu_item_name=item.display_name,
            option_name=option_name,
            option_value_name=value_name,
            prompt=prompt,
            image_url=self.image_adapter.build_image_url(prompt, seed),
        )
