"""Response shapes returned by the API."""

from pydantic import BaseModel, Field

from restaurant_menu_service.models.menu_models import (
    Diet,
    MenuItem,
    Nutrition,
    OptionValue,
    Restaurant,
)


class MenuItemLeaf(BaseModel):
    """Menu item projection inside the menu tree."""

    menu_item_id: str
    item_name: str | None = None
    short_name: str | None = None
    description: str | None = None
    base_price: float | None = None
    portion_size: str | None = None
    meal_type: str | None = None
    availability: str | None = None
    is_customizable: bool | None = None


class MenuNode(BaseModel):
    """Menu with its ordered items."""

    menu_id: str
    menu_name: str | None = None
    items: list[MenuItemLeaf] = Field(default_factory=list)


class RestaurantNode(BaseModel):
    """Restaurant with its ordered menus."""

    restaurant_id: str
    restaurant_name: str | None = None
    description: str | None = None
    phone: str | None = None
    website: str | None = None
    status: str | None = None
    dining_status: str | None = None
    menus: list[MenuNode] = Field(default_factory=list)


class MenuItemNutrition(Nutrition):
    """Nutrition facts for one menu item."""

    menu_item_id: str
    display_name: str


class MenuItemWriteResponse(BaseModel):
    """Result of creating or updating a menu item."""

    message: str
    menu_item: MenuItem


class DeletedMenuItem(BaseModel):
    """Identity of a deleted menu item."""

    menu_item_id: str
    display_name: str


class MenuItemDeleteResponse(BaseModel):
    """Result of deleting a menu item."""

    message: str
    deleted_item: DeletedMenuItem


class RestaurantWriteResponse(BaseModel):
    """Result of creating a restaurant."""

    message: str
    restaurant: Restaurant


class RankedProteinOption(BaseModel):
    """Protein option value as ranked for a menu item."""

    value_id: str | int
    value_name: str
    protein_grams: float
    is_vegan: bool


class ProteinMenuItem(BaseModel):
    """Menu item carrying the protein customization."""

    menu_item_id: str
    display_name: str
    short_name: str | None = None
    description: str | None = None
    base_price: float | None = None
    menu_id: str | None = None
    restaurant_id: str | None = None
    restaurant_name: str | None = None
    protein_options: list[RankedProteinOption] = Field(default_factory=list)


class ScaledNutrition(BaseModel):
    """Nutrition scaled by a portion multiplier."""

    calories: int = 0
    protein_grams: float = 0
    fat_grams: float = 0
    saturated_fat_grams: float = 0
    carbohydrates_grams: float = 0
    sugar_grams: float = 0
    fiber_grams: float = 0
    sodium_mg: int = 0
    cholesterol_mg: int = 0


class PortionNutrition(BaseModel):
    """One available portion with its scaled nutrition."""

    portion_id: str | int
    portion_type: str
    multiplier: float
    adjusted_nutrition: ScaledNutrition


class ProteinOptionWithPortions(BaseModel):
    """Protein option value with base and per-portion nutrition."""

    value_id: str | int
    value_name: str
    default_portion: str | None = None
    base_nutrition: Nutrition
    available_portions: list[PortionNutrition] = Field(default_factory=list)


class OptionValueDetail(BaseModel):
    """Option value with nutrition and diet tags."""

    value_id: str | int
    value_name: str
    default_portion: str | None = None
    nutrition: Nutrition = Field(default_factory=Nutrition)
    diets: list[Diet] = Field(default_factory=list)

    @classmethod
    def from_option_value(cls, value: OptionValue) -> "OptionValueDetail":
        """Project an OptionValue into its response shape."""
        return cls(
            value_id=value.value_id,
            value_name=value.value_name,
            default_portion=value.default_portion,
            nutrition=value.nutrition,
            diets=value.diets,
        )


class CustomOptionValues(BaseModel):
    """All values of one custom option."""

    option_id: str | int
    option_name: str
    option_values: list[OptionValueDetail] = Field(default_factory=list)


class SelectedPortion(BaseModel):
    """Randomly selected portion with scaled nutrition."""

    portion_type: str
    multiplier: float
    adjusted_nutrition: ScaledNutrition


class RandomOptionValueDetail(BaseModel):
    """Randomly selected option value and portion."""

    value_id: str | int
    value_name: str
    default_portion: str | None = None
    selected_portion: SelectedPortion
    diets: list[Diet] = Field(default_factory=list)


class RandomOptionValue(BaseModel):
    """Random option value selection for a menu item."""

    menu_item_id: str
    menu_item_name: str
    option_id: str | int | None = None
    option_name: str
    option_value: RandomOptionValueDetail


class MenuItemSummary(BaseModel):
    """Short menu item description used in allergen and order responses."""

    menu_item_id: str
    display_name: str
    item_description: str | None = None
    base_price: float | None = None

    @classmethod
    def from_menu_item(cls, item: MenuItem) -> "MenuItemSummary":
        """Project a MenuItem into its summary shape."""
        return cls(
            menu_item_id=item.menu_item_id,
            display_name=item.display_name,
            item_description=item.item_description,
            base_price=item.base_price,
        )


class AllergenSummary(BaseModel):
    """Allergen identity."""

    allergen_id: str | int
    allergen_name: str


class IngredientMatch(BaseModel):
    """Ingredient linked to a requested allergen."""

    ingredient_id: str | int
    ingredient_name: str
    possible_allergens: str | None = None


class SelectedOptionValue(OptionValueDetail):
    """Option value together with the name of its option."""

    option_name: str


class OriginalOptionValue(SelectedOptionValue):
    """Randomly selected option value and its allergen-flagged ingredients."""

    ingredients_with_allergen: list[IngredientMatch] = Field(default_factory=list)


class AllergenReport(BaseModel):
    """Ingredients of a menu item (and a selected option value) with an allergen."""

    menu_item: MenuItemSummary
    allergen: AllergenSummary
    option_value: SelectedOptionValue | None = None
    ingredients_with_allergen: list[IngredientMatch] = Field(default_factory=list)


class AllergenSwapResult(BaseModel):
    """Outcome of searching an allergen-free alternative option value."""

    menu_item: MenuItemSummary
    allergen: AllergenSummary
    original_option_value: OriginalOptionValue
    swapped_option_value: SelectedOptionValue | None = None
    swapped: bool = False
    message: str | None = None


class RestaurantSummary(BaseModel):
    """Restaurant identity used in order scripts."""

    restaurant_id: str | None = None
    name: str | None = None
    location: str = "Location not specified"


class CustomizationChoice(BaseModel):
    """One chosen value for a customization."""

    option_name: str
    value_name: str


class OrderScriptResponse(BaseModel):
    """Generated order script for a menu item."""

    restaurant: RestaurantSummary
    menu_item: MenuItemSummary
    customizations: list[CustomizationChoice] = Field(default_factory=list)
    order_script: str


class TranslatedScript(BaseModel):
    """Order script in the requested language."""

    language: str
    script: str


class BilingualOrderScript(BaseModel):
    """Order script in English and its translation."""

    english: str
    translated: TranslatedScript


class TranslatedOrderScriptResponse(BaseModel):
    """Generated order script with its translation."""

    restaurant: RestaurantSummary
    menu_item: MenuItemSummary
    customizations: list[CustomizationChoice] = Field(default_factory=list)
    order_script: BilingualOrderScript


class MenuImageResponse(BaseModel):
    """Generated image URL for a menu item."""

    menu_item_id: str
    menu_item_name: str
    option_name: str | None = None
    option_value_name: str | None = None
    prompt: str
    image_url: str
