"""FastAPI application for the menu API endpoints."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_menu_service.models.menu_models import MenuItem
from restaurant_menu_service.models.request_models import (
    MenuItemCreate,
    MenuItemUpdate,
    RestaurantCreate,
)
from restaurant_menu_service.models.response_models import (
    AllergenReport,
    AllergenSwapResult,
    CustomOptionValues,
    MenuImageResponse,
    MenuItemDeleteResponse,
    MenuItemNutrition,
    MenuItemWriteResponse,
    OrderScriptResponse,
    ProteinMenuItem,
    ProteinOptionWithPortions,
    RandomOptionValue,
    RestaurantNode,
    RestaurantWriteResponse,
    TranslatedOrderScriptResponse,
)
from restaurant_menu_service.repositories.store_gateway import StoreGateway
from restaurant_menu_service.services.allergen_service import AllergenService
from restaurant_menu_service.services.catalog_service import CatalogService
from restaurant_menu_service.services.customization_service import CustomizationService
from restaurant_menu_service.services.errors import MenuServiceError
from restaurant_menu_service.services.menu_image_service import MenuImageService
from restaurant_menu_service.services.menu_tree_service import MenuTreeService
from restaurant_menu_service.services.order_script_service import OrderScriptService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Map service errors and framework errors to ``{"error": ...}`` bodies.

    Args:
        app: Application to register the handlers on
    """

    @app.exception_handler(MenuServiceError)
    async def handle_service_error(request: Request, exc: MenuServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        detail = errors[0].get("msg", "invalid value") if errors else "invalid value"
        location = ".".join(str(part) for part in errors[0].get("loc", ())) if errors else ""
        message = f"Invalid request: {location} {detail}".replace("  ", " ").strip()
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404 and request.url.path.startswith("/api/"):
            return _error(404, "API endpoint not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error(500, "Internal Server Error")


def create_app(
    menu_tree_service: MenuTreeService,
    catalog_service: CatalogService,
    customization_service: CustomizationService,
    allergen_service: AllergenService,
    order_script_service: OrderScriptService,
    menu_image_service: MenuImageService,
    gateway: StoreGateway | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_tree_service: Service assembling the restaurant menu tree
        catalog_service: Service for catalog writes and direct lookups
        customization_service: Service for options, protein ranking and random values
        allergen_service: Service for allergen lookups and swaps
        order_script_service: Service generating order scripts
        menu_image_service: Service generating menu images
        gateway: Store gateway closed on application shutdown

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if gateway is not None:
            await gateway.close()
            logger.info("Store gateway closed")

    app = FastAPI(
        title="Restaurant Menu Service API",
        description="Restaurant menus, customizations, nutrition and allergens",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Store services in app state for access in route handlers
    app.state.menu_tree_service = menu_tree_service
    app.state.catalog_service = catalog_service
    app.state.customization_service = customization_service
    app.state.allergen_service = allergen_service
    app.state.order_script_service = order_script_service
    app.state.menu_image_service = menu_image_service

    register_error_handlers(app)

    @app.get("/api/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    @app.get("/api/all-restaurant-menus", response_model=list[RestaurantNode], tags=["Menus"])
    async def get_all_restaurant_menus() -> list[RestaurantNode]:
        """Get every restaurant with its menus and active menu items."""
        tree: list[RestaurantNode] = await app.state.menu_tree_service.get_all_restaurant_menus()
        return tree

    @app.get("/api/restaurants/{restaurant_id}", response_model=RestaurantNode, tags=["Menus"])
    async def get_restaurant_menu(restaurant_id: str) -> RestaurantNode:
        """Get one restaurant with its menus and active menu items."""
        node: RestaurantNode = await app.state.menu_tree_service.get_restaurant_menu(
            restaurant_id=restaurant_id
        )
        return node

    @app.post(
        "/api/restaurants",
        response_model=RestaurantWriteResponse,
        status_code=201,
        tags=["Catalog"],
    )
    async def create_restaurant(body: RestaurantCreate) -> RestaurantWriteResponse:
        """Create a restaurant."""
        result: RestaurantWriteResponse = await app.state.catalog_service.create_restaurant(body)
        return result

    @app.post(
        "/api/menu-items",
        response_model=MenuItemWriteResponse,
        status_code=201,
        tags=["Catalog"],
    )
    async def create_menu_item(body: MenuItemCreate) -> MenuItemWriteResponse:
        """Create a menu item in a menu or in a restaurant's first active menu."""
        result: MenuItemWriteResponse = await app.state.catalog_service.create_menu_item(body)
        return result

    @app.get("/api/menu-items/{menu_item_id}", response_model=MenuItem, tags=["Catalog"])
    async def get_menu_item(menu_item_id: str) -> MenuItem:
        """Get a menu item by identifier, including soft-deleted items."""
        item: MenuItem = await app.state.catalog_service.get_menu_item(menu_item_id)
        return item

    @app.put(
        "/api/menu-items/{menu_item_id}", response_model=MenuItemWriteResponse, tags=["Catalog"]
    )
    async def update_menu_item(menu_item_id: str, body: MenuItemUpdate) -> MenuItemWriteResponse:
        """Patch the provided fields of a menu item."""
        result: MenuItemWriteResponse = await app.state.catalog_service.update_menu_item(
            menu_item_id=menu_item_id, body=body
        )
        return result

    @app.delete(
        "/api/menu-items/{menu_item_id}", response_model=MenuItemDeleteResponse, tags=["Catalog"]
    )
    async def delete_menu_item(menu_item_id: str) -> MenuItemDeleteResponse:
        """Delete a menu item."""
        result: MenuItemDeleteResponse = await app.state.catalog_service.delete_menu_item(
            menu_item_id=menu_item_id
        )
        return result

    @app.get(
        "/api/menu-items/{menu_item_id}/nutrition",
        response_model=MenuItemNutrition,
        tags=["Nutrition"],
    )
    async def get_menu_item_nutrition(menu_item_id: str) -> MenuItemNutrition:
        """Get a menu item's nutrition, zero-filled when none is recorded."""
        nutrition: MenuItemNutrition = await app.state.catalog_service.get_nutrition(
            menu_item_id=menu_item_id
        )
        return nutrition

    @app.get(
        "/api/protein-custom-menu-items",
        response_model=list[ProteinMenuItem],
        tags=["Customizations"],
    )
    async def get_protein_custom_menu_items() -> list[ProteinMenuItem]:
        """Get menu items with the protein option and their ranked protein values."""
        items: list[ProteinMenuItem] = (
            await app.state.customization_service.get_protein_menu_items()
        )
        return items

    @app.get(
        "/api/protein-options-with-portions",
        response_model=list[ProteinOptionWithPortions],
        tags=["Nutrition"],
    )
    async def get_protein_options_with_portions() -> list[ProteinOptionWithPortions]:
        """Get protein option values with nutrition scaled per portion."""
        options: list[ProteinOptionWithPortions] = (
            await app.state.customization_service.get_protein_options_with_portions()
        )
        return options

    @app.get(
        "/api/custom-option-values/{option_id}",
        response_model=CustomOptionValues,
        tags=["Customizations"],
    )
    async def get_custom_option_values(
        option_id: str,
        limit: int | None = Query(None, ge=1, description="Keep only the top N values"),
    ) -> CustomOptionValues:
        """Get the values of a custom option, highest protein first."""
        values: CustomOptionValues = await app.state.customization_service.get_option_values(
            option_id=option_id, limit=limit
        )
        return values

    @app.get(
        "/api/random-option-value/{menu_item_id}",
        response_model=RandomOptionValue,
        tags=["Customizations"],
    )
    async def get_random_option_value(menu_item_id: str) -> RandomOptionValue:
        """Pick a random option value and portion for a menu item."""
        value: RandomOptionValue = await app.state.customization_service.get_random_option_value(
            menu_item_id=menu_item_id
        )
        return value

    @app.get(
        "/api/menu-item-allergen/{menu_item_id}/{allergen_id}",
        response_model=AllergenReport,
        tags=["Allergens"],
    )
    async def get_menu_item_allergen(menu_item_id: str, allergen_id: str) -> AllergenReport:
        """Get the ingredients of a menu item linked to an allergen."""
        report: AllergenReport = await app.state.allergen_service.find_allergen_ingredients(
            menu_item_id=menu_item_id, allergen_id=allergen_id
        )
        return report

    @app.get(
        "/api/swap-option-value-allergen/{menu_item_id}/{allergen_id}",
        response_model=AllergenSwapResult,
        tags=["Allergens"],
    )
    async def swap_option_value_allergen(
        menu_item_id: str, allergen_id: str
    ) -> AllergenSwapResult:
        """Swap a random option value for an allergen-free alternative."""
        result: AllergenSwapResult = await app.state.allergen_service.swap_option_value(
            menu_item_id=menu_item_id, allergen_id=allergen_id
        )
        return result

    @app.get(
        "/api/order-script/{menu_item_id}",
        response_model=OrderScriptResponse,
        tags=["Order Scripts"],
    )
    async def get_order_script(menu_item_id: str) -> OrderScriptResponse:
        """Generate an English order script for a menu item."""
        script: OrderScriptResponse = await app.state.order_script_service.generate(
            menu_item_id=menu_item_id
        )
        return script

    @app.get(
        "/api/order-script-translated/{menu_item_id}/{language}",
        response_model=TranslatedOrderScriptResponse,
        tags=["Order Scripts"],
    )
    async def get_translated_order_script(
        menu_item_id: str, language: str
    ) -> TranslatedOrderScriptResponse:
        """Generate an order script and its translation."""
        script: TranslatedOrderScriptResponse = (
            await app.state.order_script_service.generate_translated(
                menu_item_id=menu_item_id, language=language
            )
        )
        return script

    @app.get(
        "/api/generate-menu-image/{menu_item_id}",
        response_model=MenuImageResponse,
        tags=["Images"],
    )
    async def generate_menu_image(menu_item_id: str) -> MenuImageResponse:
        """Generate an image URL for a menu item."""
        image: MenuImageResponse = await app.state.menu_image_service.generate(
            menu_item_id=menu_item_id
        )
        return image

    return app
