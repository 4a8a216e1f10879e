"""Allergen lookups for menu items and allergen-free option value swaps."""

import logging
import random

from restaurant_menu_service.models.menu_models import (
    Allergen,
    Customization,
    Ingredient,
    MenuItem,
    OptionValue,
)
from restaurant_menu_service.models.response_models import (
    AllergenReport,
    AllergenSummary,
    AllergenSwapResult,
    IngredientMatch,
    MenuItemSummary,
    OriginalOptionValue,
    SelectedOptionValue,
)
from restaurant_menu_service.observability import traced
from restaurant_menu_service.observability.metrics import record_allergen_swap
from restaurant_menu_service.repositories.menu_repositories import MenuItemRepository
from restaurant_menu_service.repositories.option_repositories import (
    AllergenRepository,
    CustomOptionRepository,
)
from restaurant_menu_service.services.customization_service import (
    load_item_option_values,
    option_name_for,
)
from restaurant_menu_service.services.errors import NotFoundError

logger = logging.getLogger(__name__)

NO_SWAP_MESSAGE = "No allergen-free option values available"


def _match(ingredient: Ingredient) -> IngredientMatch:
    return IngredientMatch(
        ingredient_id=ingredient.ingredient_id,
        ingredient_name=ingredient.name,
        possible_allergens=ingredient.possible_allergens,
    )


def _selected(value: OptionValue, customizations: list[Customization]) -> SelectedOptionValue:
    return SelectedOptionValue(
        option_name=option_name_for(customizations, value.option_id),
        value_id=value.value_id,
        value_name=value.value_name,
        default_portion=value.default_portion,
        nutrition=value.nutrition,
        diets=value.diets,
    )


class AllergenService:
    """Service resolving which ingredients of a menu item carry an allergen.

    Option value selection is uniformly random over every value of every
    option attached to the item; pass a seeded ``random.Random`` to pin it.
    """

    def __init__(
        self,
        menu_item_repository: MenuItemRepository,
        option_repository: CustomOptionRepository,
        allergen_repository: AllergenRepository,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the AllergenService.

        Args:
            menu_item_repository: Repository for menu items
            option_repository: Repository for custom options and values
            allergen_repository: Repository for allergens and ingredient links
            rng: Random source for option value selection
        """
        self.menu_item_repository = menu_item_repository
        self.option_repository = option_repository
        self.allergen_repository = allergen_repository
        self.rng = rng or random.Random()

    async def _require_item_and_allergen(
        self, menu_item_id: str, allergen_id: str
    ) -> tuple[MenuItem, Allergen]:
        item = await self.menu_item_repository.get(menu_item_id)
        if item is None:
            raise NotFoundError("Menu item not found")

        allergen = await self.allergen_repository.get_allergen(allergen_id)
        if allergen is None:
            raise NotFoundError("Allergen not found")

        return item, allergen

    @traced("find_allergen_ingredients", record_args=("menu_item_id", "allergen_id"))
    async def find_allergen_ingredients(
        self, menu_item_id: str, allergen_id: str
    ) -> AllergenReport:
        """Find the ingredients of a menu item linked to an allergen.

        The item's own ingredients are combined with those of one randomly
        selected option value when the item has customizations.

        Args:
            menu_item_id: Menu item identifier
            allergen_id: Allergen identifier

        Returns:
            AllergenReport: The item, allergen, selected value and matching ingredients

        Raises:
            NotFoundError: If the item or the allergen does not exist
        """
        item, allergen = await self._require_item_and_allergen(menu_item_id, allergen_id)

        ingredient_ids = await self.allergen_repository.list_item_ingredient_ids(menu_item_id)

        customizations, values = await load_item_option_values(
            self.option_repository, menu_item_id
        )
        selected = None
        if values:
            value = self.rng.choice(values)
            links = await self.allergen_repository.list_value_ingredient_ids([value.value_id])
            ingredient_ids = ingredient_ids + links.get(value.value_id, [])
            selected = _selected(value, customizations)

        matches = await self.allergen_repository.list_ingredients_with_allergen(
            allergen.allergen_id, ingredient_ids
        )
        logger.info(
            f"Menu item {menu_item_id} has {len(matches)} ingredients with allergen {allergen_id}"
        )

        return AllergenReport(
            menu_item=MenuItemSummary.from_menu_item(item),
            allergen=AllergenSummary(allergen_id=allergen.allergen_id, allergen_name=allergen.name),
            option_value=selected,
            ingredients_with_allergen=[_match(i) for i in matches],
        )

    @traced("swap_option_value", record_args=("menu_item_id", "allergen_id"))
    async def swap_option_value(self, menu_item_id: str, allergen_id: str) -> AllergenSwapResult:
        """Replace a random option value carrying an allergen with an allergen-free sibling.

        The original value is chosen at random across the item's options. When
        it has ingredients linked to the allergen, the other values of the same
        option are scanned in store order and the first one without any such
        ingredient is returned.

        Args:
            menu_item_id: Menu item identifier
            allergen_id: Allergen identifier

        Returns:
            AllergenSwapResult: Original value, swap candidate (or None) and outcome

        Raises:
            NotFoundError: If the item, the allergen, the item's customizations
                or their option values are missing
        """
        item, allergen = await self._require_item_and_allergen(menu_item_id, allergen_id)

        customizations, values = await load_item_option_values(
            self.option_repository, menu_item_id
        )
        if not customizations:
            raise NotFoundError("No custom options found for this menu item")
        if not values:
            raise NotFoundError("No option values found for the custom options")

        original = self.rng.choice(values)
        siblings = [
            v for v in values if v.option_id == original.option_id and v.value_id != original.value_id
        ]

        links = await self.allergen_repository.list_value_ingredient_ids(
            [original.value_id] + [v.value_id for v in siblings]
        )
        flagged = await self.allergen_repository.list_ingredients_with_allergen(
            allergen.allergen_id, links.get(original.value_id, [])
        )

        swapped_value: SelectedOptionValue | None = None
        swapped = False
        message = None

        if not flagged:
            swapped_value = _selected(original, customizations)
            outcome = "not_needed"
        else:
            sibling_ingredients = [i for v in siblings for i in links.get(v.value_id, [])]
            allergen_ingredients = {
                i.ingredient_id
                for i in await self.allergen_repository.list_ingredients_with_allergen(
                    allergen.allergen_id, sibling_ingredients
                )
            }

            for candidate in siblings:
                if allergen_ingredients.isdisjoint(links.get(candidate.value_id, [])):
                    swapped_value = _selected(candidate, customizations)
                    swapped = True
                    break

            if swapped:
                outcome = "swapped"
            else:
                outcome = "unavailable"
                message = NO_SWAP_MESSAGE

        record_allergen_swap(outcome)
        logger.info(
            f"Allergen swap for menu item {menu_item_id}, allergen {allergen_id}: {outcome}"
        )

        original_detail = _selected(original, customizations)
        return AllergenSwapResult(
            menu_item=MenuItemSummary.from_menu_item(item),
            allergen=AllergenSummary(allergen_id=allergen.allergen_id, allergen_name=allergen.name),
            original_option_value=OriginalOptionValue(
                **original_detail.model_dump(),
                ingredients_with_allergen=[_match(i) for i in flagged],
            ),
            swapped_option_value=swapped_value,
            swapped=swapped,
            message=message,
        )
