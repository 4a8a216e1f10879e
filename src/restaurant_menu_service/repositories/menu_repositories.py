"""Store repositories for restaurants, menus and menu items.

These repositories translate domain reads and writes into gateway calls and
parse the returned rows into models. Missing rows come back as None; store
failures propagate as UpstreamQueryError from the gateway.
"""

import logging
from typing import Any

from restaurant_menu_service.models.menu_models import MenuItem, Nutrition, Restaurant
from restaurant_menu_service.repositories.store_gateway import Order, StoreGateway, eq, in_

logger = logging.getLogger(__name__)

NUTRITION_COLUMNS = """
    nutrition_id, calories, protein_grams, fat_grams, saturated_fat_grams,
    carbohydrates_grams, sugar_grams, fiber_grams, sodium_mg, cholesterol_mg, is_verified
"""

RESTAURANT_TREE_COLUMNS = """
    restaurant_id, name, description, phone, website, status, dining_status, is_active,
    menu (
        menu_id, menu_name, is_active,
        menu_item (
            menu_item_id, display_name, short_name, item_description, base_price,
            portion_size, meal_type, availability, is_customizable, is_active
        )
    )
"""

RESTAURANT_TREE_ORDER = (
    Order("restaurant_id"),
    Order("menu_id", foreign_table="menu"),
    Order("menu_item_id", foreign_table="menu.menu_item"),
)

ITEM_WITH_RESTAURANT_COLUMNS = """
    *,
    menu (
        menu_id, restaurant_id,
        restaurant ( restaurant_id, name, location )
    )
"""


def _parse_item_with_restaurant(row: dict[str, Any]) -> tuple[MenuItem, Restaurant | None]:
    menu = row.pop("menu", None) or {}
    restaurant_row = menu.get("restaurant")
    restaurant = Restaurant(**restaurant_row) if restaurant_row else None
    return MenuItem(**row), restaurant


class RestaurantRepository:
    """Repository for restaurants and the nested restaurant -> menu -> item tree."""

    def __init__(self, gateway: StoreGateway) -> None:
        """Initialize repository.

        Args:
            gateway: Relational store gateway
        """
        self.gateway = gateway

    async def list_restaurant_trees(self, active_only: bool = True) -> list[dict[str, Any]]:
        """Read every restaurant with its menus and menu items embedded.

        Args:
            active_only: Only return restaurants whose is_active flag is true

        Returns:
            list: Restaurant rows with nested ``menu`` and ``menu_item`` lists
        """
        filters = [eq("is_active", True)] if active_only else []
        return await self.gateway.select(
            "restaurant",
            RESTAURANT_TREE_COLUMNS,
            filters=filters,
            order=RESTAURANT_TREE_ORDER,
        )

    async def get_restaurant_tree(self, restaurant_id: str) -> dict[str, Any] | None:
        """Read one restaurant with its menus and menu items embedded.

        Args:
            restaurant_id: Restaurant identifier

        Returns:
            Restaurant row with nested menus if found, None otherwise
        """
        rows = await self.gateway.select(
            "restaurant",
            RESTAURANT_TREE_COLUMNS,
            filters=[eq("restaurant_id", restaurant_id)],
            order=RESTAURANT_TREE_ORDER[1:],
            limit=1,
        )
        return rows[0] if rows else None

    async def create(self, restaurant: Restaurant) -> Restaurant:
        """Insert a restaurant.

        Args:
            restaurant: Restaurant to insert

        Returns:
            Restaurant: The row as stored
        """
        row = await self.gateway.insert("restaurant", restaurant.model_dump(exclude_none=True))
        return Restaurant(**row)


class MenuRepository:
    """Repository for menus."""

    def __init__(self, gateway: StoreGateway) -> None:
        """Initialize repository.

        Args:
            gateway: Relational store gateway
        """
        self.gateway = gateway

    async def get_first_active_menu_id(self, restaurant_id: str) -> str | None:
        """Find the lowest-identifier active menu of a restaurant.

        Args:
            restaurant_id: Restaurant identifier

        Returns:
            Menu identifier if the restaurant has an active menu, None otherwise
        """
        rows = await self.gateway.select(
            "menu",
            "menu_id",
            filters=[eq("restaurant_id", restaurant_id), eq("is_active", True)],
            order=[Order("menu_id")],
            limit=1,
        )
        return rows[0]["menu_id"] if rows else None


class MenuItemRepository:
    """Repository for menu item CRUD operations."""

    def __init__(self, gateway: StoreGateway) -> None:
        """Initialize repository.

        Args:
            gateway: Relational store gateway
        """
        self.gateway = gateway

    async def get(self, menu_item_id: str) -> MenuItem | None:
        """Retrieve a menu item by identifier, active or not.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise
        """
        rows = await self.gateway.select(
            "menu_item", "*", filters=[eq("menu_item_id", menu_item_id)], limit=1
        )
        return MenuItem(**rows[0]) if rows else None

    async def get_with_nutrition(self, menu_item_id: str) -> tuple[MenuItem, Nutrition] | None:
        """Retrieve a menu item and its nutrition record.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            (MenuItem, Nutrition) with zero-filled nutrition when none is attached,
            or None if the item does not exist
        """
        rows = await self.gateway.select(
            "menu_item",
            f"*, nutrition ( {NUTRITION_COLUMNS} )",
            filters=[eq("menu_item_id", menu_item_id)],
            limit=1,
        )
        if not rows:
            return None

        row = dict(rows[0])
        nutrition = Nutrition.from_row(row.pop("nutrition", None))
        return MenuItem(**row), nutrition

    async def get_with_restaurant(
        self, menu_item_id: str
    ) -> tuple[MenuItem, Restaurant | None] | None:
        """Retrieve a menu item with the restaurant owning its menu.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            (MenuItem, Restaurant or None) if the item exists, None otherwise
        """
        rows = await self.gateway.select(
            "menu_item",
            ITEM_WITH_RESTAURANT_COLUMNS,
            filters=[eq("menu_item_id", menu_item_id)],
            limit=1,
        )
        return _parse_item_with_restaurant(dict(rows[0])) if rows else None

    async def list_with_restaurant(
        self, menu_item_ids: list[str]
    ) -> list[tuple[MenuItem, Restaurant | None]]:
        """Retrieve several menu items with their restaurants, ordered by identifier.

        Args:
            menu_item_ids: Menu item identifiers

        Returns:
            list: (MenuItem, Restaurant or None) pairs, empty list if none match
        """
        if not menu_item_ids:
            return []

        rows = await self.gateway.select(
            "menu_item",
            ITEM_WITH_RESTAURANT_COLUMNS,
            filters=[in_("menu_item_id", menu_item_ids)],
            order=[Order("menu_item_id")],
        )
        return [_parse_item_with_restaurant(dict(row)) for row in rows]

    async def create(self, values: dict[str, Any]) -> MenuItem:
        """Insert a menu item.

        Args:
            values: Column values for the new row

        Returns:
            MenuItem: The row as stored
        """
        row = await self.gateway.insert("menu_item", values)
        return MenuItem(**row)

    async def update(self, menu_item_id: str, values: dict[str, Any]) -> MenuItem | None:
        """Overwrite the given columns of a menu item.

        Args:
            menu_item_id: Menu item identifier
            values: Columns to overwrite

        Returns:
            MenuItem as updated, None if no row matched
        """
        rows = await self.gateway.update(
            "menu_item", values, filters=[eq("menu_item_id", menu_item_id)]
        )
        return MenuItem(**rows[0]) if rows else None

    async def delete(self, menu_item_id: str) -> bool:
        """Remove a menu item row.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            bool: True if a row was removed, False otherwise
        """
        rows = await self.gateway.delete("menu_item", filters=[eq("menu_item_id", menu_item_id)])
        if not rows:
            logger.warning(f"Hard delete matched no menu item {menu_item_id}")
        return bool(rows)
