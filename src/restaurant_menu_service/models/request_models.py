"""Request body models for catalog write endpoints.

Required fields are optional at the model level; the catalog service checks
them so a missing field yields the service's own validation message.
"""

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class MenuItemCreate(BaseModel):
    """Body of POST /api/menu-items."""

    display_name: str | None = Field(None, description="Display name (required)")
    short_name: str | None = Field(None, description="Short name, defaults to display_name")
    item_description: str | None = Field(None, description="Item description")
    base_price: float | None = Field(None, description="Base price (required)", ge=0)
    portion_size: str | None = Field(None, description="Portion size")
    meal_type: str = Field(default="All Day", description="Meal type")
    menu_id: str | None = Field(None, description="Target menu")
    restaurant_id: str | None = Field(
        None, description="Restaurant whose first active menu receives the item"
    )


class MenuItemUpdate(BaseModel):
    """Body of PUT /api/menu-items/{menu_item_id}.

    Only fields present in the request are written. Required columns may be
    omitted but never cleared.
    """

    display_name: str | None = None
    short_name: str | None = None
    item_description: str | None = None
    base_price: float | None = Field(None, ge=0)
    portion_size: str | None = None
    meal_type: str | None = None
    availability: str | None = None
    is_customizable: bool | None = None

    @field_validator("display_name", "base_price")
    @classmethod
    def required_not_cleared(cls, v: str | float | None, info: ValidationInfo) -> str | float:
        """Reject an explicit null or blank value for a required column."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(f"{info.field_name} cannot be empty")
        return v


class RestaurantCreate(BaseModel):
    """Body of POST /api/restaurants."""

    name: str | None = Field(None, description="Restaurant name (required)")
    description: str | None = None
    phone: str | None = None
    website: str | None = None
    location: str | None = None
    is_chain: bool = False
    status: str = "Open"
    dining_status: str = "Both"
