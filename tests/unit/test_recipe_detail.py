"""Unit tests for the recipe detail controller."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from eatmate.api.errors import ApiError
from eatmate.controllers.recipe_detail import (
    NUTRIENT_DISPLAY_LIMIT,
    DetailState,
    RecipeDetailController,
    RecipeTab,
)
from eatmate.models.models import RecipeDetail
from eatmate.prompts.prompts import RECIPE_FAILED_MESSAGE


def detail(**overrides):
    payload = {
        "id": 716429,
        "title": "Garlic Pasta",
        "analyzedInstructions": [{"steps": [{"number": 1, "step": "Boil water."}]}],
        "extendedIngredients": [{"name": "spaghetti", "amount": 200, "unit": "g"}],
        "nutrition": {
            "nutrients": [
                {"name": f"Nutrient {i}", "amount": 10.0 + i, "unit": "g", "percentOfDailyNeeds": 12.6}
                for i in range(12)
            ],
            "caloricBreakdown": {"percentProtein": 14.49, "percentFat": 30.5, "percentCarbs": 55.01},
        },
    }
    payload.update(overrides)
    return RecipeDetail.from_api(payload)


@pytest.fixture
def client():
    client = MagicMock()
    client.get_recipe_information = AsyncMock(return_value=detail())
    return client


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_success(self, client):
        controller = RecipeDetailController(client)
        states = []
        controller.subscribe(states.append)

        await controller.load(716429)

        assert states == [DetailState.LOADING, DetailState.LOADED]
        assert controller.recipe.title == "Garlic Pasta"
        client.get_recipe_information.assert_awaited_once_with(716429, include_nutrition=True)

    @pytest.mark.asyncio
    async def test_load_failure(self, client):
        client.get_recipe_information.side_effect = ApiError("Not found", status=404)
        controller = RecipeDetailController(client)

        await controller.load(1)

        assert controller.state is DetailState.FAILED
        assert controller.recipe is None
        assert controller.error_message == RECIPE_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_tab_switch_does_not_fetch(self, client):
        controller = RecipeDetailController(client)
        await controller.load(716429)

        controller.select_tab(RecipeTab.NUTRITION)
        controller.select_tab("ingredients")

        assert controller.active_tab is RecipeTab.INGREDIENTS
        assert client.get_recipe_information.await_count == 1

    def test_unknown_tab_rejected(self, client):
        with pytest.raises(ValueError):
            RecipeDetailController(client).select_tab("reviews")

    @pytest.mark.asyncio
    async def test_late_response_after_close_discarded(self, client):
        release = asyncio.Event()

        async def slow(recipe_id, include_nutrition=True):
            await release.wait()
            return detail()

        client.get_recipe_information = slow
        controller = RecipeDetailController(client)

        task = asyncio.create_task(controller.load(716429))
        await asyncio.sleep(0)
        controller.close()
        release.set()
        await task

        assert controller.recipe is None
        assert controller.state is DetailState.LOADING


class TestTabViews:
    @pytest.mark.asyncio
    async def test_all_tabs_have_data(self, client):
        controller = RecipeDetailController(client)
        await controller.load(716429)

        for tab in RecipeTab:
            assert controller.tab_has_data(tab) is True

    @pytest.mark.asyncio
    async def test_missing_instructions_only_affects_instructions_tab(self, client):
        client.get_recipe_information.return_value = detail(analyzedInstructions=[])
        controller = RecipeDetailController(client)
        await controller.load(1)

        assert controller.instructions_view() == ()
        assert controller.tab_has_data(RecipeTab.INSTRUCTIONS) is False
        assert controller.tab_has_data(RecipeTab.INGREDIENTS) is True
        assert controller.tab_has_data(RecipeTab.NUTRITION) is True

    @pytest.mark.asyncio
    async def test_missing_nutrition(self, client):
        client.get_recipe_information.return_value = detail(nutrition=None)
        controller = RecipeDetailController(client)
        await controller.load(1)

        assert controller.nutrition_view() is None
        assert controller.tab_has_data(RecipeTab.NUTRITION) is False
        assert controller.tab_has_data(RecipeTab.INSTRUCTIONS) is True

    @pytest.mark.asyncio
    async def test_nutrition_view_rounds_and_limits(self, client):
        controller = RecipeDetailController(client)
        await controller.load(1)

        view = controller.nutrition_view()

        assert (view.percent_protein, view.percent_fat, view.percent_carbs) == (14, 30, 55)
        assert len(view.nutrients) == NUTRIENT_DISPLAY_LIMIT
        assert view.nutrients[0].daily_value_percent == 13

    @pytest.mark.asyncio
    async def test_zero_daily_value_hidden(self, client):
        client.get_recipe_information.return_value = detail(
            nutrition={"nutrients": [{"name": "Sugar", "amount": 0, "unit": "g", "percentOfDailyNeeds": 0}]}
        )
        controller = RecipeDetailController(client)
        await controller.load(1)

        view = controller.nutrition_view()

        assert view.nutrients[0].daily_value_percent is None
        assert view.percent_protein is None

    def test_views_before_load(self, client):
        controller = RecipeDetailController(client)

        assert controller.instructions_view() == ()
        assert controller.ingredients_view() is None
        assert controller.nutrition_view() is None
