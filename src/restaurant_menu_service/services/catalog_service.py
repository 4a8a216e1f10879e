"""Catalog writes and direct lookups for menu items and restaurants."""

import logging
import random
import time
from datetime import UTC, datetime

from restaurant_menu_service.models.menu_models import MenuItem, Restaurant
from restaurant_menu_service.models.request_models import (
    MenuItemCreate,
    MenuItemUpdate,
    RestaurantCreate,
)
from restaurant_menu_service.models.response_models import (
    DeletedMenuItem,
    MenuItemDeleteResponse,
    MenuItemNutrition,
    MenuItemWriteResponse,
    RestaurantWriteResponse,
)
from restaurant_menu_service.observability import traced
from restaurant_menu_service.repositories.menu_repositories import (
    MenuItemRepository,
    MenuRepository,
    RestaurantRepository,
)
from restaurant_menu_service.services.errors import InputValidationError, NotFoundError

logger = logging.getLogger(__name__)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_id(prefix: str, rng: random.Random | None = None, now_ms: int | None = None) -> str:
    """Generate a row identifier of the form ``{prefix}_{unix_ms}_{suffix}``.

    Args:
        prefix: Identifier prefix (e.g. "item", "rest")
        rng: Random source for the nine-character base36 suffix
        now_ms: Timestamp override in milliseconds

    Returns:
        str: New identifier
    """
    rng = rng or random.Random()
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(rng.choice(_BASE36_DIGITS) for _ in range(9))
    return f"{prefix}_{timestamp}_{suffix}"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class CatalogService:
    """Service for creating, patching and deleting catalog rows.

    Multi-step writes (resolve a menu, then insert) are not transactional.
    """

    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        menu_repository: MenuRepository,
        menu_item_repository: MenuItemRepository,
        soft_delete: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the CatalogService.

        Args:
            restaurant_repository: Repository for restaurants
            menu_repository: Repository for menus
            menu_item_repository: Repository for menu items
            soft_delete: Flip is_active on delete instead of removing the row
            rng: Random source for identifier suffixes
        """
        self.restaurant_repository = restaurant_repository
        self.menu_repository = menu_repository
        self.menu_item_repository = menu_item_repository
        self.soft_delete = soft_delete
        self.rng = rng or random.Random()

    async def _require_item(self, menu_item_id: str) -> MenuItem:
        item = await self.menu_item_repository.get(menu_item_id)
        if item is None:
            raise NotFoundError("Menu item not found")
        return item

    @traced("create_menu_item")
    async def create_menu_item(self, body: MenuItemCreate) -> MenuItemWriteResponse:
        """Create a menu item in the given menu or the restaurant's first active menu.

        Args:
            body: Create request

        Returns:
            MenuItemWriteResponse: The created row

        Raises:
            InputValidationError: If display_name, base_price or a menu target is missing
            NotFoundError: If the restaurant has no active menu
        """
        if not body.display_name or not body.display_name.strip() or body.base_price is None:
            raise InputValidationError("display_name and base_price are required")
        if not body.menu_id and not body.restaurant_id:
            raise InputValidationError("Either menu_id or restaurant_id is required")

        menu_id = body.menu_id
        if not menu_id:
            menu_id = await self.menu_repository.get_first_active_menu_id(body.restaurant_id)
            if menu_id is None:
                raise NotFoundError("No active menu found for restaurant")

        values = {
            "menu_item_id": generate_id("item", self.rng),
            "menu_id": menu_id,
            "display_name": body.display_name,
            "short_name": body.short_name or body.display_name,
            "item_description": body.item_description,
            "base_price": body.base_price,
            "portion_size": body.portion_size,
            "meal_type": body.meal_type,
            "item_type": "Food",
            "availability": "Available",
            "is_active": True,
            "updated_at": _now_iso(),
        }
        item = await self.menu_item_repository.create(values)
        logger.info(f"Created menu item {item.menu_item_id} in menu {menu_id}")
        return MenuItemWriteResponse(message="Menu item created successfully", menu_item=item)

    @traced("update_menu_item", record_args=("menu_item_id",))
    async def update_menu_item(
        self, menu_item_id: str, body: MenuItemUpdate
    ) -> MenuItemWriteResponse:
        """Patch the provided fields of a menu item and refresh updated_at.

        Args:
            menu_item_id: Menu item identifier
            body: Fields to overwrite; fields absent from the request are untouched

        Returns:
            MenuItemWriteResponse: The updated row

        Raises:
            NotFoundError: If the menu item does not exist
        """
        await self._require_item(menu_item_id)

        values = body.model_dump(exclude_unset=True)
        values["updated_at"] = _now_iso()

        item = await self.menu_item_repository.update(menu_item_id, values)
        if item is None:
            raise NotFoundError("Menu item not found")

        logger.info(f"Updated menu item {menu_item_id} fields {sorted(values)}")
        return MenuItemWriteResponse(message="Menu item updated successfully", menu_item=item)

    @traced("delete_menu_item", record_args=("menu_item_id",))
    async def delete_menu_item(self, menu_item_id: str) -> MenuItemDeleteResponse:
        """Delete a menu item, softly unless hard deletes are configured.

        Raises:
            NotFoundError: If the menu item does not exist
        """
        item = await self._require_item(menu_item_id)

        if self.soft_delete:
            await self.menu_item_repository.update(
                menu_item_id, {"is_active": False, "updated_at": _now_iso()}
            )
        else:
            await self.menu_item_repository.delete(menu_item_id)

        logger.info(f"Deleted menu item {menu_item_id} (soft={self.soft_delete})")
        return MenuItemDeleteResponse(
            message="Menu item deleted successfully",
            deleted_item=DeletedMenuItem(
                menu_item_id=item.menu_item_id, display_name=item.display_name
            ),
        )

    async def get_menu_item(self, menu_item_id: str) -> MenuItem:
        """Look up a menu item directly, including soft-deleted rows."""
        return await self._require_item(menu_item_id)

    @traced("get_menu_item_nutrition", record_args=("menu_item_id",))
    async def get_nutrition(self, menu_item_id: str) -> MenuItemNutrition:
        """Return a menu item's nutrition, zero-filled when none is recorded.

        Raises:
            NotFoundError: If the menu item does not exist
        """
        found = await self.menu_item_repository.get_with_nutrition(menu_item_id)
        if found is None:
            raise NotFoundError("Menu item not found")

        item, nutrition = found
        return MenuItemNutrition(
            menu_item_id=item.menu_item_id,
            display_name=item.display_name,
            **nutrition.model_dump(),
        )

    @traced("create_restaurant")
    async def create_restaurant(self, body: RestaurantCreate) -> RestaurantWriteResponse:
        """Create a restaurant.

        Args:
            body: Create request

        Returns:
            RestaurantWriteResponse: The created row

        Raises:
            InputValidationError: If the name is missing
        """
        if not body.name or not body.name.strip():
            raise InputValidationError("Restaurant name is required")

        restaurant = Restaurant(
            restaurant_id=generate_id("rest", self.rng),
            is_active=True,
            **body.model_dump(),
        )
        created = await self.restaurant_repository.create(restaurant)
        logger.info(f"Created restaurant {created.restaurant_id}")
        return RestaurantWriteResponse(message="Restaurant created successfully", restaurant=created)
