"""Logging, tracing and metrics for the menu service."""

from restaurant_menu_service.observability.config import configure_logging, setup_observability
from restaurant_menu_service.observability.decorators import traced

__all__ = ["configure_logging", "setup_observability", "traced"]
