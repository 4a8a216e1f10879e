"""Unit tests for AllergenService."""

import random
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from restaurant_menu_service.models.menu_models import (
    Allergen,
    Customization,
    Ingredient,
    MenuItem,
    OptionValue,
)
from restaurant_menu_service.repositories.menu_repositories import MenuItemRepository
from restaurant_menu_service.repositories.option_repositories import (
    AllergenRepository,
    CustomOptionRepository,
)
from restaurant_menu_service.services.allergen_service import NO_SWAP_MESSAGE, AllergenService
from restaurant_menu_service.services.errors import NotFoundError

PEANUT_INGREDIENTS = {
    "ing_peanut_sauce": Ingredient(
        ingredient_id="ing_peanut_sauce", name="Peanut Sauce", possible_allergens="peanuts"
    ),
    "ing_satay": Ingredient(ingredient_id="ing_satay", name="Satay Glaze", possible_allergens=None),
}


async def _with_allergen(allergen_id: Any, ingredient_ids: list[Any]) -> list[Ingredient]:
    """Stand-in for the ingredient_allergen lookup over a fixed peanut set."""
    return [PEANUT_INGREDIENTS[i] for i in dict.fromkeys(ingredient_ids) if i in PEANUT_INGREDIENTS]


def _first_choice() -> MagicMock:
    rng = MagicMock(spec=random.Random)
    rng.choice.side_effect = lambda seq: seq[0]
    return rng


@pytest.mark.unit
class TestAllergenService:
    """Test suite for AllergenService."""

    @pytest.fixture
    def menu_item_repository(self) -> MagicMock:
        """Create a mocked menu item repository returning a Burrito."""
        repository = MagicMock(spec=MenuItemRepository)
        repository.get = AsyncMock(
            return_value=MenuItem(menu_item_id="item_1", display_name="Burrito", base_price=9.5)
        )
        return repository

    @pytest.fixture
    def option_repository(self, make_option_value_row: Any) -> MagicMock:
        """Create a mocked option repository with a sauce option and a protein option."""
        repository = MagicMock(spec=CustomOptionRepository)
        repository.list_item_customizations = AsyncMock(
            return_value=[
                Customization(option_id=1, option_name="Sauce"),
                Customization(option_id=2, option_name="Protein"),
            ]
        )
        repository.list_values = AsyncMock(
            return_value=[
                OptionValue.from_row(make_option_value_row(11, "Peanut", 4, option_id=1)),
                OptionValue.from_row(make_option_value_row(12, "Satay", 3, option_id=1)),
                OptionValue.from_row(make_option_value_row(13, "Salsa", 0, option_id=1)),
                OptionValue.from_row(make_option_value_row(21, "Tofu", 8, option_id=2)),
            ]
        )
        return repository

    @pytest.fixture
    def allergen_repository(self) -> MagicMock:
        """Create a mocked allergen repository with peanut ingredient links."""
        value_links = {
            11: ["ing_peanut_sauce", "ing_garlic"],
            12: ["ing_satay"],
            13: ["ing_tomato"],
            21: ["ing_tofu"],
        }

        async def value_ingredient_ids(value_ids: list[Any]) -> dict[Any, list[Any]]:
            return {v: list(value_links.get(v, [])) for v in value_ids}

        repository = MagicMock(spec=AllergenRepository)
        repository.get_allergen = AsyncMock(
            return_value=Allergen(allergen_id="alg_peanut", name="Peanuts")
        )
        repository.list_item_ingredient_ids = AsyncMock(return_value=["ing_rice", "ing_satay"])
        repository.list_value_ingredient_ids = AsyncMock(side_effect=value_ingredient_ids)
        repository.list_ingredients_with_allergen = AsyncMock(side_effect=_with_allergen)
        return repository

    @pytest.fixture
    def service(
        self,
        menu_item_repository: MagicMock,
        option_repository: MagicMock,
        allergen_repository: MagicMock,
    ) -> AllergenService:
        """Create an AllergenService whose random selection always takes the first value."""
        return AllergenService(
            menu_item_repository=menu_item_repository,
            option_repository=option_repository,
            allergen_repository=allergen_repository,
            rng=_first_choice(),
        )

    @pytest.mark.asyncio
    async def test_find_allergen_ingredients_unions_item_and_value(
        self, service: AllergenService, allergen_repository: MagicMock
    ) -> None:
        """Test that item and selected value ingredients are both checked."""
        report = await service.find_allergen_ingredients(
            menu_item_id="item_1", allergen_id="alg_peanut"
        )

        assert report.menu_item.display_name == "Burrito"
        assert report.allergen.allergen_name == "Peanuts"
        assert report.option_value is not None
        assert report.option_value.value_name == "Peanut"
        assert report.option_value.option_name == "Sauce"
        assert [i.ingredient_id for i in report.ingredients_with_allergen] == [
            "ing_satay",
            "ing_peanut_sauce",
        ]
        allergen_repository.list_ingredients_with_allergen.assert_called_once_with(
            "alg_peanut", ["ing_rice", "ing_satay", "ing_peanut_sauce", "ing_garlic"]
        )

    @pytest.mark.asyncio
    async def test_find_allergen_ingredients_without_customizations(
        self,
        service: AllergenService,
        option_repository: MagicMock,
        allergen_repository: MagicMock,
    ) -> None:
        """Test that only item ingredients are checked when there are no customizations."""
        option_repository.list_item_customizations = AsyncMock(return_value=[])

        report = await service.find_allergen_ingredients(
            menu_item_id="item_1", allergen_id="alg_peanut"
        )

        assert report.option_value is None
        assert [i.ingredient_name for i in report.ingredients_with_allergen] == ["Satay Glaze"]
        option_repository.list_values.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_allergen_ingredients_unknown_item(
        self, service: AllergenService, menu_item_repository: MagicMock
    ) -> None:
        """Test that an unknown item raises NotFoundError."""
        menu_item_repository.get = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="Menu item not found"):
            await service.find_allergen_ingredients(menu_item_id="missing", allergen_id="alg_peanut")

    @pytest.mark.asyncio
    async def test_find_allergen_ingredients_unknown_allergen(
        self, service: AllergenService, allergen_repository: MagicMock
    ) -> None:
        """Test that an unknown allergen raises NotFoundError."""
        allergen_repository.get_allergen = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="Allergen not found"):
            await service.find_allergen_ingredients(menu_item_id="item_1", allergen_id="missing")

    @pytest.mark.asyncio
    async def test_swap_skips_flagged_siblings(self, service: AllergenService) -> None:
        """Test that the first sibling without allergen ingredients is returned."""
        with patch(
            "restaurant_menu_service.services.allergen_service.record_allergen_swap"
        ) as mock_record:
            result = await service.swap_option_value(
                menu_item_id="item_1", allergen_id="alg_peanut"
            )

        assert result.original_option_value.value_name == "Peanut"
        assert [i.ingredient_id for i in result.original_option_value.ingredients_with_allergen] == [
            "ing_peanut_sauce"
        ]
        assert result.swapped is True
        assert result.swapped_option_value is not None
        # Satay also carries a peanut ingredient; Tofu belongs to another option
        assert result.swapped_option_value.value_name == "Salsa"
        assert result.swapped_option_value.option_name == "Sauce"
        assert result.message is None
        mock_record.assert_called_once_with("swapped")

    @pytest.mark.asyncio
    async def test_swap_reports_no_alternative(
        self, service: AllergenService, allergen_repository: MagicMock
    ) -> None:
        """Test that no false alternative is returned when every sibling is flagged."""
        allergen_repository.list_value_ingredient_ids = AsyncMock(
            return_value={11: ["ing_peanut_sauce"], 12: ["ing_satay"], 13: ["ing_satay"]}
        )

        result = await service.swap_option_value(menu_item_id="item_1", allergen_id="alg_peanut")

        assert result.swapped is False
        assert result.swapped_option_value is None
        assert result.message == NO_SWAP_MESSAGE

    @pytest.mark.asyncio
    async def test_swap_not_needed_returns_original(
        self,
        menu_item_repository: MagicMock,
        option_repository: MagicMock,
        allergen_repository: MagicMock,
    ) -> None:
        """Test that an allergen-free original is returned unchanged without a scan."""
        rng = MagicMock(spec=random.Random)
        rng.choice.side_effect = lambda seq: seq[2]
        service = AllergenService(
            menu_item_repository=menu_item_repository,
            option_repository=option_repository,
            allergen_repository=allergen_repository,
            rng=rng,
        )

        result = await service.swap_option_value(menu_item_id="item_1", allergen_id="alg_peanut")

        assert result.original_option_value.value_name == "Salsa"
        assert result.original_option_value.ingredients_with_allergen == []
        assert result.swapped is False
        assert result.swapped_option_value is not None
        assert result.swapped_option_value.value_id == result.original_option_value.value_id
        assert result.message is None
        allergen_repository.list_ingredients_with_allergen.assert_called_once()

    @pytest.mark.asyncio
    async def test_swap_requires_customizations(
        self, service: AllergenService, option_repository: MagicMock
    ) -> None:
        """Test that an item without customizations raises NotFoundError."""
        option_repository.list_item_customizations = AsyncMock(return_value=[])

        with pytest.raises(NotFoundError, match="No custom options"):
            await service.swap_option_value(menu_item_id="item_1", allergen_id="alg_peanut")

    @pytest.mark.asyncio
    async def test_swap_requires_option_values(
        self, service: AllergenService, option_repository: MagicMock
    ) -> None:
        """Test that customizations without values raise NotFoundError."""
        option_repository.list_values = AsyncMock(return_value=[])

        with pytest.raises(NotFoundError, match="No option values"):
            await service.swap_option_value(menu_item_id="item_1", allergen_id="alg_peanut")
