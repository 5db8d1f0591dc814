"""Recipe detail aggregator: one fetch, three tab views.

The full record (instructions, ingredients, nutrition) is fetched once per
``load``. Switching tabs only changes ``active_tab``; each tab reports its own
"no data" condition independently of the others.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from eatmate.api.spoonacular import SpoonacularClient
from eatmate.controllers.base import ScreenController
from eatmate.models.models import IngredientLine, InstructionStep, RecipeDetail
from eatmate.prompts.prompts import RECIPE_FAILED_MESSAGE

# Nutrition tab lists only the leading nutrients
NUTRIENT_DISPLAY_LIMIT = 8


class DetailState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class RecipeTab(str, Enum):
    INSTRUCTIONS = "instructions"
    INGREDIENTS = "ingredients"
    NUTRITION = "nutrition"


class NutrientRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    amount: float
    unit: str
    daily_value_percent: Optional[int] = None


class NutritionView(BaseModel):
    """Nutrition tab content with percentages rounded for display."""

    model_config = ConfigDict(frozen=True)

    percent_protein: Optional[int] = None
    percent_fat: Optional[int] = None
    percent_carbs: Optional[int] = None
    nutrients: tuple[NutrientRow, ...] = ()


class RecipeDetailController(ScreenController[DetailState]):
    """Loads one recipe and exposes tab-selectable read-only views."""

    screen_name = "recipe_detail"

    def __init__(self, client: SpoonacularClient) -> None:
        super().__init__()
        self._client = client
        self.state = DetailState.IDLE
        self.recipe: Optional[RecipeDetail] = None
        self.active_tab = RecipeTab.INSTRUCTIONS
        self.error_message: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.state is DetailState.LOADING

    async def load(self, recipe_id: Union[int, str]) -> None:
        """Fetch the full record for ``recipe_id`` including nutrition."""
        if self.closed:
            return

        request_id = self._next_request()
        self.error_message = None
        self._set_state(DetailState.LOADING)

        try:
            recipe = await self._client.get_recipe_information(recipe_id, include_nutrition=True)
        except Exception as e:
            if not self._is_current(request_id):
                return
            self._log("error", f"Error fetching recipe {recipe_id}: {e}", request_id)
            self.recipe = None
            self.error_message = RECIPE_FAILED_MESSAGE
            self._set_state(DetailState.FAILED)
            return

        if not self._is_current(request_id):
            return

        self.recipe = recipe
        self._log("info", f"Loaded recipe {recipe_id}: {recipe.title}", request_id)
        self._set_state(DetailState.LOADED)

    def select_tab(self, tab: Union[RecipeTab, str]) -> None:
        """Switch the visible tab; never triggers a fetch."""
        self.active_tab = RecipeTab(tab)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def instructions_view(self) -> tuple[InstructionStep, ...]:
        if self.recipe is None:
            return ()
        return self.recipe.instructions

    def ingredients_view(self) -> Optional[tuple[IngredientLine, ...]]:
        if self.recipe is None:
            return None
        return self.recipe.ingredients

    def nutrition_view(self) -> Optional[NutritionView]:
        if self.recipe is None or self.recipe.nutrition is None:
            return None

        nutrition = self.recipe.nutrition
        breakdown = nutrition.caloric_breakdown
        rows = tuple(
            NutrientRow(
                name=nutrient.name,
                amount=nutrient.amount,
                unit=nutrient.unit,
                # 0% DV is hidden like a missing value
                daily_value_percent=(
                    round(nutrient.percent_of_daily_needs) if nutrient.percent_of_daily_needs else None
                ),
            )
            for nutrient in nutrition.nutrients[:NUTRIENT_DISPLAY_LIMIT]
        )
        return NutritionView(
            percent_protein=round(breakdown.percent_protein) if breakdown else None,
            percent_fat=round(breakdown.percent_fat) if breakdown else None,
            percent_carbs=round(breakdown.percent_carbs) if breakdown else None,
            nutrients=rows,
        )

    def tab_has_data(self, tab: Union[RecipeTab, str]) -> bool:
        """False renders the tab's own "no data" placeholder."""
        tab = RecipeTab(tab)
        if tab is RecipeTab.INSTRUCTIONS:
            return len(self.instructions_view()) > 0
        if tab is RecipeTab.INGREDIENTS:
            return self.ingredients_view() is not None
        return self.nutrition_view() is not None

    def _set_state(self, state: DetailState) -> None:
        self.state = state
        self._notify(state)
