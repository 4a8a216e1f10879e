"""Menu tree assembly: restaurants -> menus -> menu items."""

import logging
from typing import Any

from restaurant_menu_service.models.response_models import MenuItemLeaf, MenuNode, RestaurantNode
from restaurant_menu_service.observability import traced
from restaurant_menu_service.repositories.menu_repositories import RestaurantRepository
from restaurant_menu_service.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def _sort_key(row: dict[str, Any], column: str) -> str:
    return str(row.get(column) or "")


def _is_inactive(row: dict[str, Any]) -> bool:
    # Only an explicit false counts; a missing flag means active
    return row.get("is_active") is False


def _to_leaf(item: dict[str, Any]) -> MenuItemLeaf:
    return MenuItemLeaf(
        menu_item_id=item["menu_item_id"],
        item_name=item.get("display_name"),
        short_name=item.get("short_name"),
        description=item.get("item_description"),
        base_price=item.get("base_price"),
        portion_size=item.get("portion_size"),
        meal_type=item.get("meal_type"),
        availability=item.get("availability"),
        is_customizable=item.get("is_customizable"),
    )


def assemble_menu_tree(
    rows: list[dict[str, Any]],
    include_inactive_menus: bool = True,
) -> list[RestaurantNode]:
    """Reshape embedded restaurant rows into the ordered menu tree.

    Restaurants, menus and items are each sorted ascending by identifier so
    repeated calls over an unchanged store produce identical output. Items
    whose ``is_active`` flag is explicitly false are dropped.

    Args:
        rows: Restaurant rows with nested ``menu`` and ``menu_item`` lists
        include_inactive_menus: Keep menus whose is_active flag is false

    Returns:
        list[RestaurantNode]: Ordered restaurant nodes
    """
    restaurants = []
    for restaurant in sorted(rows, key=lambda r: _sort_key(r, "restaurant_id")):
        menus = []
        for menu in sorted(restaurant.get("menu") or [], key=lambda m: _sort_key(m, "menu_id")):
            if not include_inactive_menus and _is_inactive(menu):
                continue

            items = [
                _to_leaf(item)
                for item in sorted(
                    menu.get("menu_item") or [], key=lambda i: _sort_key(i, "menu_item_id")
                )
                if not _is_inactive(item)
            ]
            menus.append(MenuNode(menu_id=menu["menu_id"], menu_name=menu.get("menu_name"), items=items))

        restaurants.append(
            RestaurantNode(
                restaurant_id=restaurant["restaurant_id"],
                restaurant_name=restaurant.get("name"),
                description=restaurant.get("description"),
                phone=restaurant.get("phone"),
                website=restaurant.get("website"),
                status=restaurant.get("status"),
                dining_status=restaurant.get("dining_status"),
                menus=menus,
            )
        )
    return restaurants


class MenuTreeService:
    """Service serving the nested restaurant menu tree."""

    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        filter_inactive_restaurants: bool = True,
        filter_inactive_menus: bool = False,
    ) -> None:
        """Initialize the MenuTreeService.

        Args:
            restaurant_repository: Repository reading embedded restaurant rows
            filter_inactive_restaurants: Only include active restaurants
            filter_inactive_menus: Only include active menus
        """
        self.restaurant_repository = restaurant_repository
        self.filter_inactive_restaurants = filter_inactive_restaurants
        self.filter_inactive_menus = filter_inactive_menus

    @traced("get_all_restaurant_menus")
    async def get_all_restaurant_menus(self) -> list[RestaurantNode]:
        """Return the menu tree of every restaurant.

        Returns:
            list[RestaurantNode]: Restaurants ordered by identifier
        """
        rows = await self.restaurant_repository.list_restaurant_trees(
            active_only=self.filter_inactive_restaurants
        )
        tree = assemble_menu_tree(rows, include_inactive_menus=not self.filter_inactive_menus)
        logger.info(f"Assembled menu tree for {len(tree)} restaurants")
        return tree

    @traced("get_restaurant_menu", record_args=("restaurant_id",))
    async def get_restaurant_menu(self, restaurant_id: str) -> RestaurantNode:
        """Return the menu tree of one restaurant.

        Args:
            restaurant_id: Restaurant identifier

        Returns:
            RestaurantNode: The restaurant with its ordered menus

        Raises:
            NotFoundError: If the restaurant does not exist
        """
        row = await self.restaurant_repository.get_restaurant_tree(restaurant_id)
        if row is None:
            raise NotFoundError("Restaurant not found")

        return assemble_menu_tree([row], include_inactive_menus=not self.filter_inactive_menus)[0]
