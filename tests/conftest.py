"""Shared pytest fixtures and configuration for all tests."""

import os
from typing import Any

import pytest

# Entry-point modules skip building the real application in test mode
os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture
def mock_menu_item_id() -> str:
    """Fixture providing a standard test menu item ID."""
    return "item_1"


@pytest.fixture
def mock_menu_item_row() -> dict[str, Any]:
    """Fixture providing a menu_item row as returned by the store."""
    return {
        "menu_item_id": "item_1",
        "menu_id": "menu_1",
        "display_name": "Burrito",
        "short_name": "Burrito",
        "item_description": "Rice, beans and your choice of protein",
        "base_price": 9.5,
        "portion_size": "Regular",
        "meal_type": "All Day",
        "availability": "Available",
        "is_customizable": True,
        "item_type": "Food",
        "is_active": True,
        "updated_at": "2024-01-15T10:30:00+00:00",
    }


@pytest.fixture
def mock_restaurant_tree_rows() -> list[dict[str, Any]]:
    """Fixture providing embedded restaurant -> menu -> item rows, deliberately unordered."""
    return [
        {
            "restaurant_id": "rest_2",
            "name": "Taqueria",
            "description": "Tacos",
            "phone": "555-0102",
            "website": None,
            "status": "Open",
            "dining_status": "Both",
            "is_active": True,
            "menu": [
                {
                    "menu_id": "menu_3",
                    "menu_name": "Lunch",
                    "is_active": True,
                    "menu_item": [
                        {"menu_item_id": "item_9", "display_name": "Taco", "is_active": True},
                    ],
                }
            ],
        },
        {
            "restaurant_id": "rest_1",
            "name": "Bowl House",
            "description": "Bowls",
            "phone": "555-0101",
            "website": "https://bowls.example.com",
            "status": "Open",
            "dining_status": "Takeout",
            "is_active": True,
            "menu": [
                {
                    "menu_id": "menu_2",
                    "menu_name": "Dinner",
                    "is_active": False,
                    "menu_item": [],
                },
                {
                    "menu_id": "menu_1",
                    "menu_name": "All Day",
                    "is_active": True,
                    "menu_item": [
                        {
                            "menu_item_id": "item_3",
                            "display_name": "Old Bowl",
                            "base_price": 8.0,
                            "is_active": False,
                        },
                        {
                            "menu_item_id": "item_2",
                            "display_name": "Tofu Bowl",
                            "short_name": "Tofu",
                            "item_description": "Tofu over rice",
                            "base_price": 10.0,
                            "portion_size": "Large",
                            "meal_type": "All Day",
                            "availability": "Available",
                            "is_customizable": True,
                            "is_active": True,
                        },
                        {
                            "menu_item_id": "item_1",
                            "display_name": "Chicken Bowl",
                            "base_price": 11.0,
                            "is_active": None,
                        },
                    ],
                },
            ],
        },
    ]


def option_value_row(
    value_id: int,
    value_name: str,
    protein: float | None,
    option_id: int = 1,
    diets: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Build an option_value row with embedded nutrition and diets."""
    return {
        "value_id": value_id,
        "option_id": option_id,
        "value_name": value_name,
        "default_portion": "single",
        "nutrition": None if protein is None else {"calories": 100, "protein_grams": protein},
        "option_value_diet": [
            {"diet": {"diet_id": index + 1, "diet_name": name}} for index, name in enumerate(diets)
        ],
    }


@pytest.fixture
def make_option_value_row() -> Any:
    """Fixture providing a builder for option_value rows."""
    return option_value_row
