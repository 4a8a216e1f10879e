"""Natural-language order scripts for menu items."""

import logging
import random
import re
from collections.abc import Sequence

from restaurant_menu_service.adapters.base_adapter import TranslationAdapter
from restaurant_menu_service.models.menu_models import Restaurant
from restaurant_menu_service.models.response_models import (
    BilingualOrderScript,
    CustomizationChoice,
    MenuItemSummary,
    OrderScriptResponse,
    RestaurantSummary,
    TranslatedOrderScriptResponse,
    TranslatedScript,
)
from restaurant_menu_service.observability import traced
from restaurant_menu_service.repositories.menu_repositories import MenuItemRepository
from restaurant_menu_service.repositories.option_repositories import CustomOptionRepository
from restaurant_menu_service.services.errors import (
    ExternalServiceError,
    InputValidationError,
    NotFoundError,
    TranslationError,
)

logger = logging.getLogger(__name__)

# Language names such as "Spanish" or "Haitian Creole"
LANGUAGE_PATTERN = re.compile(r"^[A-Za-z][A-Za-z -]{1,31}$")


def render_order_script(item_name: str, choices: Sequence[CustomizationChoice]) -> str:
    """Render the English order sentence for an item and its chosen values.

    Args:
        item_name: Menu item display name
        choices: One chosen value per customization, in customization order

    Returns:
        str: The order script
    """
    script = f"Hi, I would like to order {item_name}."
    if choices:
        script += "".join(
            f" My choice of {c.option_name.lower()} is {c.value_name.lower()}." for c in choices
        )
    else:
        script += " No customizations needed."
    return script + " Thank you!"


def _restaurant_summary(restaurant: Restaurant | None) -> RestaurantSummary:
    if restaurant is None:
        return RestaurantSummary()
    summary = RestaurantSummary(restaurant_id=restaurant.restaurant_id, name=restaurant.name)
    if restaurant.location:
        summary.location = restaurant.location
    return summary


class OrderScriptService:
    """Service generating order scripts, optionally translated."""

    def __init__(
        self,
        menu_item_repository: MenuItemRepository,
        option_repository: CustomOptionRepository,
        translation_adapter: TranslationAdapter | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the OrderScriptService.

        Args:
            menu_item_repository: Repository for menu items
            option_repository: Repository for custom options and values
            translation_adapter: Translation service, None when no API key is configured
            rng: Random source for value selection
        """
        self.menu_item_repository = menu_item_repository
        self.option_repository = option_repository
        self.translation_adapter = translation_adapter
        self.rng = rng or random.Random()

    async def _choose_values(self, menu_item_id: str) -> list[CustomizationChoice]:
        customizations = await self.option_repository.list_item_customizations(menu_item_id)
        if not customizations:
            return []

        values = await self.option_repository.list_values([c.option_id for c in customizations])

        choices = []
        for customization in customizations:
            candidates = [v for v in values if v.option_id == customization.option_id]
            if not candidates:
                continue
            value = self.rng.choice(candidates)
            choices.append(
                CustomizationChoice(
                    option_name=customization.option_name, value_name=value.value_name
                )
            )
        return choices

    @traced("generate_order_script", record_args=("menu_item_id",))
    async def generate(self, menu_item_id: str) -> OrderScriptResponse:
        """Generate an English order script with one random value per customization.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            OrderScriptResponse: Restaurant, item, chosen values and script

        Raises:
            NotFoundError: If the menu item does not exist
        """
        found = await self.menu_item_repository.get_with_restaurant(menu_item_id)
        if found is None:
            raise NotFoundError("Menu item not found")

        item, restaurant = found
        choices = await self._choose_values(menu_item_id)

        return OrderScriptResponse(
            restaurant=_restaurant_summary(restaurant),
            menu_item=MenuItemSummary.from_menu_item(item),
            customizations=choices,
            order_script=render_order_script(item.display_name, choices),
        )

    @traced("generate_translated_order_script", record_args=("menu_item_id", "language"))
    async def generate_translated(
        self, menu_item_id: str, language: str
    ) -> TranslatedOrderScriptResponse:
        """Generate an order script and translate it.

        Args:
            menu_item_id: Menu item identifier
            language: Target language name (letters, spaces and hyphens)

        Returns:
            TranslatedOrderScriptResponse: English and translated scripts

        Raises:
            InputValidationError: If the language is not a plausible language name
            NotFoundError: If the menu item does not exist
            ExternalServiceError: If no translation service is configured
            TranslationError: If the translation call failed
        """
        if not language or not LANGUAGE_PATTERN.match(language):
            raise InputValidationError("Invalid language code")

        english = await self.generate(menu_item_id=menu_item_id)

        if self.translation_adapter is None:
            raise ExternalServiceError("Translation API key not configured")

        target = language.lower()
        translated = await self.translation_adapter.translate(english.order_script, target)
        if translated is None:
            raise TranslationError(
                f"Translation error: {self.translation_adapter.service_name} request failed"
            )

        return TranslatedOrderScriptResponse(
            restaurant=english.restaurant,
            menu_item=english.menu_item,
            customizations=english.customizations,
            order_script=BilingualOrderScript(
                english=english.order_script,
                translated=TranslatedScript(language=target, script=translated),
            ),
        )
