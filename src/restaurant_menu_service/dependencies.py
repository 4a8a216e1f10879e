"""Wiring of gateway, repositories, adapters and services into the application."""

import logging
import random

from fastapi import FastAPI

from restaurant_menu_service.adapters.base_adapter import ImageAdapter, TranslationAdapter
from restaurant_menu_service.adapters.groq_adapter import GroqTranslationAdapter
from restaurant_menu_service.adapters.pollinations_adapter import PollinationsImageAdapter
from restaurant_menu_service.config import ServiceConfig
from restaurant_menu_service.handlers.api_handler import create_app
from restaurant_menu_service.repositories.menu_repositories import (
    MenuItemRepository,
    MenuRepository,
    RestaurantRepository,
)
from restaurant_menu_service.repositories.option_repositories import (
    AllergenRepository,
    CustomOptionRepository,
)
from restaurant_menu_service.repositories.postgrest_gateway import PostgrestGateway
from restaurant_menu_service.repositories.store_gateway import StoreGateway
from restaurant_menu_service.services.allergen_service import AllergenService
from restaurant_menu_service.services.catalog_service import CatalogService
from restaurant_menu_service.services.customization_service import CustomizationService
from restaurant_menu_service.services.menu_image_service import MenuImageService
from restaurant_menu_service.services.menu_tree_service import MenuTreeService
from restaurant_menu_service.services.order_script_service import OrderScriptService

logger = logging.getLogger(__name__)


def create_gateway(config: ServiceConfig) -> PostgrestGateway:
    """Create the PostgREST gateway for the configured Supabase project."""
    logger.info(f"Store gateway configured - URL: {config.supabase_url}")
    return PostgrestGateway(
        base_url=config.supabase_url,
        api_key=config.supabase_key,
        timeout_seconds=config.store_timeout_seconds,
    )


def create_translation_adapter(config: ServiceConfig) -> TranslationAdapter | None:
    """Create the translation adapter, or None when no API key is configured."""
    if not config.groq_api_key:
        logger.warning("GROQ_API_KEY not configured - translated order scripts will fail")
        return None
    return GroqTranslationAdapter(
        api_key=config.groq_api_key,
        model=config.groq_model,
        base_url=config.groq_base_url,
        timeout_seconds=config.store_timeout_seconds,
    )


def create_image_adapter(config: ServiceConfig) -> ImageAdapter | None:
    """Create the image adapter, or None when no API key is configured."""
    if not config.pollinations_api_key:
        logger.warning("POLLINATIONS_API_KEY not configured - menu images will fail")
        return None
    return PollinationsImageAdapter(
        api_key=config.pollinations_api_key, base_url=config.pollinations_base_url
    )


def build_app(
    config: ServiceConfig,
    gateway: StoreGateway | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Create repositories, adapters and services and the FastAPI app on top of them.

    Args:
        config: Service configuration
        gateway: Store gateway; a PostgREST gateway is created when omitted
        rng: Random source shared by every randomized selection

    Returns:
        Configured FastAPI application
    """
    gateway = gateway or create_gateway(config)
    rng = rng or random.Random()

    restaurant_repository = RestaurantRepository(gateway)
    menu_repository = MenuRepository(gateway)
    menu_item_repository = MenuItemRepository(gateway)
    option_repository = CustomOptionRepository(gateway)
    allergen_repository = AllergenRepository(gateway)

    app = create_app(
        menu_tree_service=MenuTreeService(
            restaurant_repository=restaurant_repository,
            filter_inactive_restaurants=config.filter_inactive_restaurants,
            filter_inactive_menus=config.filter_inactive_menus,
        ),
        catalog_service=CatalogService(
            restaurant_repository=restaurant_repository,
            menu_repository=menu_repository,
            menu_item_repository=menu_item_repository,
            soft_delete=config.soft_delete_items,
            rng=rng,
        ),
        customization_service=CustomizationService(
            option_repository=option_repository,
            menu_item_repository=menu_item_repository,
            protein_option_name=config.protein_option_name,
            rng=rng,
        ),
        allergen_service=AllergenService(
            menu_item_repository=menu_item_repository,
            option_repository=option_repository,
            allergen_repository=allergen_repository,
            rng=rng,
        ),
        order_script_service=OrderScriptService(
            menu_item_repository=menu_item_repository,
            option_repository=option_repository,
            translation_adapter=create_translation_adapter(config),
            rng=rng,
        ),
        menu_image_service=MenuImageService(
            menu_item_repository=menu_item_repository,
            option_repository=option_repository,
            image_adapter=create_image_adapter(config),
            rng=rng,
        ),
        gateway=gateway,
    )

    logger.info("Services initialized")
    return app
