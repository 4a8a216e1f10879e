"""Customization option resolution, protein ranking and random value selection."""

import logging
import random
from collections.abc import Sequence

from restaurant_menu_service.models.menu_models import Customization, CustomOption, OptionValue
from restaurant_menu_service.models.response_models import (
    CustomOptionValues,
    OptionValueDetail,
    ProteinMenuItem,
    ProteinOptionWithPortions,
    RandomOptionValue,
    RandomOptionValueDetail,
    RankedProteinOption,
    SelectedPortion,
)
from restaurant_menu_service.observability import traced
from restaurant_menu_service.repositories.menu_repositories import MenuItemRepository
from restaurant_menu_service.repositories.option_repositories import CustomOptionRepository
from restaurant_menu_service.services.errors import NotFoundError
from restaurant_menu_service.services.portion_scaler import (
    PORTION_MULTIPLIERS,
    resolve_multiplier,
    scale_for_portions,
    scale_nutrition,
)

logger = logging.getLogger(__name__)


def rank_protein_options(values: Sequence[OptionValue]) -> list[OptionValue]:
    """Order protein option values: best vegan value first, then non-vegan by protein.

    Both partitions are sorted descending by protein grams with a stable sort,
    so equal values keep their store order. Only the single highest-protein
    vegan value is kept.

    Args:
        values: Option values enriched with nutrition and diets

    Returns:
        list[OptionValue]: ``[best vegan] + non-vegan`` in descending protein order
    """

    def protein(value: OptionValue) -> float:
        return value.nutrition.protein_grams or 0

    vegan = sorted((v for v in values if v.is_vegan), key=protein, reverse=True)
    non_vegan = sorted((v for v in values if not v.is_vegan), key=protein, reverse=True)
    return vegan[:1] + non_vegan


def option_name_for(customizations: Sequence[Customization], option_id: object) -> str:
    """Name of the customization whose option matches, "Unknown" if none does."""
    for customization in customizations:
        if customization.option_id == option_id:
            return customization.option_name
    return "Unknown"


async def load_item_option_values(
    option_repository: CustomOptionRepository, menu_item_id: str
) -> tuple[list[Customization], list[OptionValue]]:
    """Load a menu item's customizations and every value of their options.

    Args:
        option_repository: Repository for custom options
        menu_item_id: Menu item identifier

    Returns:
        tuple: (customizations, option values); values is empty without customizations
    """
    customizations = await option_repository.list_item_customizations(menu_item_id)
    if not customizations:
        return [], []

    values = await option_repository.list_values([c.option_id for c in customizations])
    return customizations, values


class CustomizationService:
    """Service for customization options and their values."""

    def __init__(
        self,
        option_repository: CustomOptionRepository,
        menu_item_repository: MenuItemRepository,
        protein_option_name: str = "protein",
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the CustomizationService.

        Args:
            option_repository: Repository for custom options, values and portions
            menu_item_repository: Repository for menu items
            protein_option_name: Name fragment identifying the protein option
            rng: Random source for value and portion selection
        """
        self.option_repository = option_repository
        self.menu_item_repository = menu_item_repository
        self.protein_option_name = protein_option_name
        self.rng = rng or random.Random()

    async def resolve_option(self, name_fragment: str) -> CustomOption:
        """Resolve a custom option by case-insensitive name fragment.

        Several matches resolve to the lowest option identifier.

        Raises:
            NotFoundError: If no option name contains the fragment
        """
        options = await self.option_repository.find_by_name(name_fragment)
        if not options:
            raise NotFoundError(f"Custom option matching '{name_fragment}' not found")

        if len(options) > 1:
            logger.warning(
                f"{len(options)} custom options match '{name_fragment}', using {options[0].option_id}"
            )
        return options[0]

    async def get_enriched_values(self, option_id: object) -> list[OptionValue]:
        """Return every value of an option with zero-filled nutrition and diets.

        Raises:
            NotFoundError: If the option has no values
        """
        values = await self.option_repository.list_values([option_id])
        if not values:
            raise NotFoundError("No option values found for the custom option")
        return values

    @traced("get_protein_menu_items")
    async def get_protein_menu_items(self) -> list[ProteinMenuItem]:
        """List active menu items carrying the protein option, with ranked protein values.

        Returns:
            list[ProteinMenuItem]: Items ordered by identifier
        """
        option = await self.resolve_option(self.protein_option_name)
        ranked = [
            RankedProteinOption(
                value_id=value.value_id,
                value_name=value.value_name,
                protein_grams=value.nutrition.protein_grams,
                is_vegan=value.is_vegan,
            )
            for value in rank_protein_options(await self.get_enriched_values(option.option_id))
        ]

        item_ids = await self.option_repository.list_item_ids_for_option(option.option_id)
        items = await self.menu_item_repository.list_with_restaurant(item_ids)

        return [
            ProteinMenuItem(
                menu_item_id=item.menu_item_id,
                display_name=item.display_name,
                short_name=item.short_name,
                description=item.item_description,
                base_price=item.base_price,
                menu_id=item.menu_id,
                restaurant_id=restaurant.restaurant_id if restaurant else None,
                restaurant_name=restaurant.name if restaurant else None,
                protein_options=ranked,
            )
            for item, restaurant in items
            if item.is_active
        ]

    @traced("get_protein_options_with_portions")
    async def get_protein_options_with_portions(self) -> list[ProteinOptionWithPortions]:
        """List protein option values with base and per-portion scaled nutrition."""
        option = await self.resolve_option(self.protein_option_name)
        values = await self.get_enriched_values(option.option_id)
        portions = await self.option_repository.list_portions(option.option_id)

        return [
            ProteinOptionWithPortions(
                value_id=value.value_id,
                value_name=value.value_name,
                default_portion=value.default_portion,
                base_nutrition=value.nutrition,
                available_portions=scale_for_portions(value.nutrition, portions),
            )
            for value in values
        ]

    @traced("get_custom_option_values", record_args=("option_id",))
    async def get_option_values(
        self, option_id: str, limit: int | None = None
    ) -> CustomOptionValues:
        """List the values of one option, highest protein first.

        Args:
            option_id: Custom option identifier
            limit: Keep only the first ``limit`` values

        Returns:
            CustomOptionValues: The option and its values

        Raises:
            NotFoundError: If the option does not exist
        """
        option = await self.option_repository.get(option_id)
        if option is None:
            raise NotFoundError("Custom option not found")

        values = await self.option_repository.list_values([option.option_id])
        values = sorted(values, key=lambda v: v.nutrition.protein_grams or 0, reverse=True)
        if limit is not None:
            values = values[:limit]

        return CustomOptionValues(
            option_id=option.option_id,
            option_name=option.name,
            option_values=[OptionValueDetail.from_option_value(v) for v in values],
        )

    @traced("get_random_option_value", record_args=("menu_item_id",))
    async def get_random_option_value(self, menu_item_id: str) -> RandomOptionValue:
        """Pick one random value across the item's options and a random portion.

        Raises:
            NotFoundError: If the item, its customizations or their values are missing
        """
        item = await self.menu_item_repository.get(menu_item_id)
        if item is None:
            raise NotFoundError("Menu item not found")

        customizations, values = await load_item_option_values(
            self.option_repository, menu_item_id
        )
        if not customizations:
            raise NotFoundError("No custom options found for this menu item")
        if not values:
            raise NotFoundError("No option values found for the custom options")

        value = self.rng.choice(values)

        portions = [
            portion
            for portion in await self.option_repository.list_portions(value.option_id)
            if portion.portion_type in PORTION_MULTIPLIERS
        ]
        if portions:
            portion = self.rng.choice(portions)
            portion_type = portion.portion_type
            multiplier = resolve_multiplier(portion.portion_type, portion.nutrition_multiplier)
        else:
            portion_type, multiplier = "single", 1.0

        return RandomOptionValue(
            menu_item_id=item.menu_item_id,
            menu_item_name=item.display_name,
            option_id=value.option_id,
            option_name=option_name_for(customizations, value.option_id),
            option_value=RandomOptionValueDetail(
                value_id=value.value_id,
                value_name=value.value_name,
                default_portion=value.default_portion,
                selected_portion=SelectedPortion(
                    portion_type=portion_type,
                    multiplier=multiplier,
                    adjusted_nutrition=scale_nutrition(value.nutrition, multiplier),
                ),
                diets=value.diets,
            ),
        )
