"""Store repositories for customization options, ingredients and allergens."""

from collections.abc import Sequence
from typing import Any

from restaurant_menu_service.models.menu_models import (
    Allergen,
    Customization,
    CustomOption,
    Ingredient,
    OptionValue,
    Portion,
)
from restaurant_menu_service.repositories.menu_repositories import NUTRITION_COLUMNS
from restaurant_menu_service.repositories.store_gateway import (
    Order,
    StoreGateway,
    eq,
    ilike,
    in_,
)

OPTION_VALUE_COLUMNS = f"""
    value_id, option_id, value_name, default_portion,
    nutrition ( {NUTRITION_COLUMNS} ),
    option_value_diet ( diet ( diet_id, diet_name ) )
"""


class CustomOptionRepository:
    """Repository for custom options, their values, portions and item links."""

    def __init__(self, gateway: StoreGateway) -> None:
        """Initialize repository.

        Args:
            gateway: Relational store gateway
        """
        self.gateway = gateway

    async def find_by_name(self, name_fragment: str) -> list[CustomOption]:
        """Find options whose name contains a fragment, case-insensitively.

        Args:
            name_fragment: Substring to look for (e.g. "protein")

        Returns:
            list: Matching options ordered by identifier
        """
        rows = await self.gateway.select(
            "custom_option",
            "*",
            filters=[ilike("name", f"%{name_fragment}%")],
            order=[Order("option_id")],
        )
        return [CustomOption(**row) for row in rows]

    async def get(self, option_id: str) -> CustomOption | None:
        """Retrieve a custom option by identifier.

        Returns:
            CustomOption if found, None otherwise
        """
        rows = await self.gateway.select(
            "custom_option", "*", filters=[eq("option_id", option_id)], limit=1
        )
        return CustomOption(**rows[0]) if rows else None

    async def list_values(self, option_ids: Sequence[Any]) -> list[OptionValue]:
        """List the values of one or more options with nutrition and diets.

        Args:
            option_ids: Custom option identifiers

        Returns:
            list: Option values in store order (by value identifier)
        """
        if not option_ids:
            return []

        rows = await self.gateway.select(
            "option_value",
            OPTION_VALUE_COLUMNS,
            filters=[in_("option_id", option_ids)],
            order=[Order("value_id")],
        )
        return [OptionValue.from_row(row) for row in rows]

    async def list_item_customizations(self, menu_item_id: str) -> list[Customization]:
        """List the custom options attached to a menu item.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            list: Customization links ordered by option identifier
        """
        rows = await self.gateway.select(
            "menu_item_customization",
            "option_id, custom_option ( option_id, name )",
            filters=[eq("menu_item_id", menu_item_id)],
            order=[Order("option_id")],
        )
        return [Customization.from_row(row) for row in rows]

    async def list_item_ids_for_option(self, option_id: Any) -> list[str]:
        """List the menu items carrying a custom option.

        Args:
            option_id: Custom option identifier

        Returns:
            list: Distinct menu item identifiers
        """
        rows = await self.gateway.select(
            "menu_item_customization",
            "menu_item_id",
            filters=[eq("option_id", option_id)],
            order=[Order("menu_item_id")],
        )
        return list(dict.fromkeys(row["menu_item_id"] for row in rows))

    async def list_portions(self, option_id: Any) -> list[Portion]:
        """List the portion tiers defined for a custom option.

        Args:
            option_id: Custom option identifier

        Returns:
            list: Portions ordered by portion identifier
        """
        rows = await self.gateway.select(
            "custom_portion",
            "portion_id, portion ( portion_id, portion_type, nutrition_multiplier )",
            filters=[eq("option_id", option_id)],
            order=[Order("portion_id")],
        )
        return [Portion.from_custom_portion_row(row) for row in rows]


class AllergenRepository:
    """Repository for allergens and ingredient links."""

    def __init__(self, gateway: StoreGateway) -> None:
        """Initialize repository.

        Args:
            gateway: Relational store gateway
        """
        self.gateway = gateway

    async def get_allergen(self, allergen_id: str) -> Allergen | None:
        """Retrieve an allergen by identifier.

        Returns:
            Allergen if found, None otherwise
        """
        rows = await self.gateway.select(
            "allergen", "allergen_id, name", filters=[eq("allergen_id", allergen_id)], limit=1
        )
        return Allergen(**rows[0]) if rows else None

    async def list_item_ingredient_ids(self, menu_item_id: str) -> list[Any]:
        """List ingredient identifiers linked directly to a menu item."""
        rows = await self.gateway.select(
            "menu_item_ingredient",
            "ingredient_id",
            filters=[eq("menu_item_id", menu_item_id)],
        )
        return [row["ingredient_id"] for row in rows]

    async def list_value_ingredient_ids(
        self, value_ids: Sequence[Any]
    ) -> dict[Any, list[Any]]:
        """Map option values to their linked ingredient identifiers.

        Args:
            value_ids: Option value identifiers

        Returns:
            dict: value_id -> ingredient ids; values without ingredients map to []
        """
        links: dict[Any, list[Any]] = {value_id: [] for value_id in value_ids}
        if not value_ids:
            return links

        rows = await self.gateway.select(
            "option_value_ingredient",
            "value_id, ingredient_id",
            filters=[in_("value_id", value_ids)],
        )
        for row in rows:
            links.setdefault(row["value_id"], []).append(row["ingredient_id"])
        return links

    async def list_ingredients_with_allergen(
        self, allergen_id: Any, ingredient_ids: Sequence[Any]
    ) -> list[Ingredient]:
        """Find which of the given ingredients are linked to an allergen.

        Args:
            allergen_id: Allergen identifier
            ingredient_ids: Candidate ingredient identifiers

        Returns:
            list: Matching ingredients, empty list when no candidates are given
        """
        candidates = list(dict.fromkeys(ingredient_ids))
        if not candidates:
            return []

        rows = await self.gateway.select(
            "ingredient_allergen",
            "ingredient_id, ingredient ( * )",
            filters=[eq("allergen_id", allergen_id), in_("ingredient_id", candidates)],
            order=[Order("ingredient_id")],
        )
        return [Ingredient.from_allergen_link_row(row) for row in rows]
