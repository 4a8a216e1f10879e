"""Shared dependency factory for the Lambda handler.

Dependencies are created once and reused across invocations within the same
Lambda container.
"""

import logging
import os

from fastapi import FastAPI

from restaurant_menu_service.config import ServiceConfig, env_flag
from restaurant_menu_service.dependencies import build_app, create_gateway
from restaurant_menu_service.observability import configure_logging, setup_observability
from restaurant_menu_service.repositories.store_gateway import StoreGateway

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_config: ServiceConfig | None = None
_gateway: StoreGateway | None = None
_fastapi_app: FastAPI | None = None


def get_config() -> ServiceConfig:
    """Load or retrieve cached service configuration.

    Returns:
        ServiceConfig read from the environment
    """
    global _config

    if _config is None:
        _config = ServiceConfig.from_env()
    return _config


def get_gateway() -> StoreGateway:
    """Create or retrieve the cached store gateway.

    The gateway's HTTP client is reused across invocations of a warm container.

    Returns:
        Configured StoreGateway instance
    """
    global _gateway

    if _gateway is None:
        _gateway = create_gateway(get_config())
    return _gateway


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = build_app(get_config(), gateway=get_gateway())
    if env_flag("OTEL_ENABLED", False):
        setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Lambda environment initialized")
