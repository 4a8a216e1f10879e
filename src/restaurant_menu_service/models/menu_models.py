"""Menu data models.

These models represent rows read from the relational store: restaurants,
menus, menu items, nutrition, customization options and their values,
portions, diets, ingredients and allergens. Rows arrive as dictionaries with
embedded relations (PostgREST resource embedding); the ``from_row``
constructors flatten those shapes into typed models.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

NUTRITION_FIELDS = (
    "calories",
    "protein_grams",
    "fat_grams",
    "saturated_fat_grams",
    "carbohydrates_grams",
    "sugar_grams",
    "fiber_grams",
    "sodium_mg",
    "cholesterol_mg",
)

# Fields reported as whole numbers; every other nutrition field is grams
INTEGER_NUTRITION_FIELDS = ("calories", "sodium_mg", "cholesterol_mg")


def _embedded_one(value: Any) -> dict[str, Any] | None:
    """Return a single embedded row, tolerating list-shaped embeds."""
    if isinstance(value, list):
        return value[0] if value else None
    return value or None


class Nutrition(BaseModel):
    """Nutrition facts for a menu item or an option value."""

    calories: int | float = Field(default=0, description="Energy in kcal")
    protein_grams: float = Field(default=0, description="Protein in grams")
    fat_grams: float = Field(default=0, description="Total fat in grams")
    saturated_fat_grams: float = Field(default=0, description="Saturated fat in grams")
    carbohydrates_grams: float = Field(default=0, description="Carbohydrates in grams")
    sugar_grams: float = Field(default=0, description="Sugar in grams")
    fiber_grams: float = Field(default=0, description="Fiber in grams")
    sodium_mg: int | float = Field(default=0, description="Sodium in milligrams")
    cholesterol_mg: int | float = Field(default=0, description="Cholesterol in milligrams")
    is_verified: bool = Field(default=False, description="Whether the values were verified")

    @classmethod
    def from_row(cls, row: Any) -> "Nutrition":
        """Create Nutrition from an embedded store row, zero-filling gaps.

        Args:
            row: Nutrition row dictionary, a one-element list, or None

        Returns:
            Nutrition: Parsed model, all zeros when no row is attached
        """
        data = _embedded_one(row)
        if not data:
            return cls()

        values: dict[str, Any] = {
            field: data.get(field) or 0 for field in NUTRITION_FIELDS
        }
        values["is_verified"] = bool(data.get("is_verified", False))
        return cls(**values)


class Diet(BaseModel):
    """Diet tag (e.g. vegan) attached to option values."""

    diet_id: str | int = Field(..., description="Unique diet identifier")
    diet_name: str = Field(..., description="Diet name")


class OptionValue(BaseModel):
    """One concrete choice within a customization option."""

    value_id: str | int = Field(..., description="Unique option value identifier")
    option_id: str | int | None = Field(None, description="Custom option this value belongs to")
    value_name: str = Field(..., description="Value name (e.g. 'Tofu')")
    default_portion: str | None = Field(None, description="Default portion description")
    nutrition: Nutrition = Field(default_factory=Nutrition, description="Zero-filled nutrition")
    diets: list[Diet] = Field(default_factory=list, description="Diet tags attached to the value")

    @property
    def is_vegan(self) -> bool:
        """Whether any attached diet is named vegan (case-insensitive)."""
        return any(diet.diet_name.lower() == "vegan" for diet in self.diets)

    @property
    def diet_names(self) -> list[str]:
        """Names of the attached diets."""
        return [diet.diet_name for diet in self.diets]

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "OptionValue":
        """Create OptionValue from a store row with embedded nutrition and diets.

        Args:
            row: option_value row dictionary

        Returns:
            OptionValue: Parsed model instance
        """
        diets = []
        for link in row.get("option_value_diet") or []:
            diet = link.get("diet")
            if diet:
                diets.append(Diet(diet_id=diet["diet_id"], diet_name=diet["diet_name"]))

        return cls(
            value_id=row["value_id"],
            option_id=row.get("option_id"),
            value_name=row["value_name"],
            default_portion=row.get("default_portion"),
            nutrition=Nutrition.from_row(row.get("nutrition")),
            diets=diets,
        )


class CustomOption(BaseModel):
    """A named axis of choice on a menu item (e.g. 'Protein')."""

    option_id: str | int = Field(..., description="Unique custom option identifier")
    name: str = Field(..., description="Option name")
    option_description: str | None = Field(None, description="Option description")
    option_type: str | None = Field(None, description="Option type")


class Customization(BaseModel):
    """Link between a menu item and one of its custom options."""

    option_id: str | int = Field(..., description="Linked custom option")
    option_name: str = Field(default="Unknown", description="Name of the linked option")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Customization":
        """Create Customization from a menu_item_customization row."""
        option = _embedded_one(row.get("custom_option")) or {}
        return cls(option_id=row["option_id"], option_name=option.get("name") or "Unknown")


class Portion(BaseModel):
    """A scaling tier applied to an option value's nutrition."""

    portion_id: str | int = Field(..., description="Unique portion identifier")
    portion_type: str = Field(default="single", description="single, half, double or other")
    nutrition_multiplier: float | None = Field(
        None, description="Explicit multiplier overriding the portion type lookup"
    )

    @field_validator("portion_type")
    @classmethod
    def normalize_portion_type(cls, v: str) -> str:
        """Store portion types lowercased."""
        return v.lower()

    @classmethod
    def from_custom_portion_row(cls, row: dict[str, Any]) -> "Portion":
        """Create Portion from a custom_portion row with an embedded portion.

        Args:
            row: custom_portion row dictionary

        Returns:
            Portion: Parsed model instance
        """
        portion = _embedded_one(row.get("portion")) or {}
        return cls(
            portion_id=row["portion_id"],
            portion_type=portion.get("portion_type") or "single",
            nutrition_multiplier=portion.get("nutrition_multiplier"),
        )


class Ingredient(BaseModel):
    """Ingredient with allergen category flags."""

    ingredient_id: str | int = Field(..., description="Unique ingredient identifier")
    name: str = Field(..., description="Ingredient name")
    contains_meat: bool = False
    contains_dairy: bool = False
    contains_egg: bool = False
    contains_fish: bool = False
    contains_shellfish: bool = False
    contains_poultry: bool = False
    contains_honey: bool = False
    contains_animal_product: bool = False
    possible_allergens: str | None = Field(None, description="Free-form allergen notes")

    @classmethod
    def from_allergen_link_row(cls, row: dict[str, Any]) -> "Ingredient":
        """Create Ingredient from an ingredient_allergen row with embedded ingredient."""
        ingredient = _embedded_one(row.get("ingredient")) or {}
        flags = {
            key: bool(value)
            for key, value in ingredient.items()
            if key.startswith("contains_")
        }
        return cls(
            ingredient_id=row["ingredient_id"],
            name=ingredient.get("name") or "",
            possible_allergens=ingredient.get("possible_allergens"),
            **flags,
        )


class Allergen(BaseModel):
    """Allergen (e.g. peanuts) linked to ingredients."""

    allergen_id: str | int = Field(..., description="Unique allergen identifier")
    name: str = Field(..., description="Allergen name")


class MenuItem(BaseModel):
    """Menu item row."""

    menu_item_id: str = Field(..., description="Unique identifier for the menu item")
    menu_id: str | None = Field(None, description="Menu this item belongs to")
    display_name: str = Field(..., description="Display name")
    short_name: str | None = Field(None, description="Short name")
    item_description: str | None = Field(None, description="Item description")
    base_price: float | None = Field(None, description="Base price", ge=0)
    portion_size: str | None = Field(None, description="Portion size")
    meal_type: str | None = Field(None, description="Meal type (e.g. 'All Day')")
    availability: str | None = Field(None, description="Availability status")
    is_customizable: bool | None = Field(None, description="Whether the item has customizations")
    item_type: str | None = Field(None, description="Item type (e.g. 'Food')")
    is_active: bool = Field(default=True, description="False once soft-deleted")
    updated_at: str | None = Field(None, description="Last update timestamp")

    @field_validator("is_active", mode="before")
    @classmethod
    def null_is_active(cls, v: bool | None) -> bool:
        """A null activity flag counts as active."""
        return True if v is None else v


class Restaurant(BaseModel):
    """Restaurant row."""

    restaurant_id: str = Field(..., description="Unique identifier for the restaurant")
    name: str = Field(..., description="Restaurant name")
    description: str | None = None
    phone: str | None = None
    website: str | None = None
    status: str | None = None
    dining_status: str | None = None
    is_chain: bool | None = None
    is_active: bool = Field(default=True, description="False once deactivated")
    location: str | None = None

    @field_validator("is_active", mode="before")
    @classmethod
    def null_is_active(cls, v: bool | None) -> bool:
        """A null activity flag counts as active."""
        return True if v is None else v
