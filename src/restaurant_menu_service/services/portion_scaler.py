"""Portion multiplier resolution and nutrition scaling."""

from decimal import ROUND_HALF_UP, Decimal

from restaurant_menu_service.models.menu_models import (
    INTEGER_NUTRITION_FIELDS,
    NUTRITION_FIELDS,
    Nutrition,
    Portion,
)
from restaurant_menu_service.models.response_models import PortionNutrition, ScaledNutrition

PORTION_MULTIPLIERS = {
    "single": 1.0,
    "half": 0.5,
    "double": 2.0,
}


def round_half_away(value: float, places: int = 0) -> float:
    """Round half away from zero at the given number of decimal places.

    Python's built-in ``round`` rounds half to even and works on the binary
    float, so 2.675 would round to 2.67. Going through the decimal string
    representation gives the expected 2.68.

    Args:
        value: Number to round
        places: Decimal places to keep (0 or 2 in practice)

    Returns:
        float: Rounded value
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def resolve_multiplier(portion_type: str | None, explicit: float | None = None) -> float:
    """Resolve the nutrition multiplier for a portion.

    Args:
        portion_type: Portion type name (single, half, double or other)
        explicit: Multiplier stored on the portion row, if any

    Returns:
        float: The explicit multiplier when positive, else the lookup value, else 1
    """
    if explicit is not None and explicit > 0:
        return float(explicit)
    return PORTION_MULTIPLIERS.get((portion_type or "").lower(), 1.0)


def scale_nutrition(base: Nutrition, multiplier: float) -> ScaledNutrition:
    """Scale every nutrition field by a multiplier.

    Args:
        base: Base nutrition (missing fields are already zero)
        multiplier: Portion multiplier

    Returns:
        ScaledNutrition: Integer fields rounded to whole numbers, gram fields to two decimals
    """
    scaled: dict[str, float | int] = {}
    for field in NUTRITION_FIELDS:
        value = (getattr(base, field) or 0) * multiplier
        if field in INTEGER_NUTRITION_FIELDS:
            scaled[field] = int(round_half_away(value))
        else:
            scaled[field] = round_half_away(value, 2)
    return ScaledNutrition(**scaled)


def scale_for_portions(base: Nutrition, portions: list[Portion]) -> list[PortionNutrition]:
    """Produce one scaled nutrition record per portion.

    Args:
        base: Base nutrition of an option value
        portions: Portions defined for the value's option

    Returns:
        list: Scaled nutrition in portion order
    """
    results = []
    for portion in portions:
        multiplier = resolve_multiplier(portion.portion_type, portion.nutrition_multiplier)
        results.append(
            PortionNutrition(
                portion_id=portion.portion_id,
                portion_type=portion.portion_type,
                multiplier=multiplier,
                adjusted_nutrition=scale_nutrition(base, multiplier),
            )
        )
    return results
