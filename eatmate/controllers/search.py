"""Search session controller shared by the three recipe search screens.

One generic state machine, configured per mode with:
- a query builder (criteria -> request pairs)
- a submittability predicate
- a fetch coroutine (request pairs -> SearchPage)

States: IDLE -> SEARCHING -> {RESULTS, NO_RESULTS, FAILED}. Every accepted
submit passes through SEARCHING; ``has_searched`` becomes true on the first
accepted submit and stays true.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from eatmate.api.spoonacular import SpoonacularClient
from eatmate.controllers.base import ScreenController
from eatmate.models.models import (
    IngredientCriteria,
    NutrientCriteria,
    ParameterCriteria,
    RecipeSummary,
    SearchPage,
)
from eatmate.prompts.prompts import NO_RESULTS_MESSAGES, SEARCH_FAILED_MESSAGE
from eatmate.search.queries import (
    build_ingredient_query,
    build_nutrient_query,
    build_parameter_query,
    is_ingredient_submittable,
    is_nutrient_submittable,
    is_parameter_submittable,
)

C = TypeVar("C")

QueryBuilder = Callable[[C], List[Tuple[str, Any]]]
Fetcher = Callable[[Sequence[Tuple[str, Any]]], Awaitable[SearchPage]]


class SearchState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS = "results"
    NO_RESULTS = "no_results"
    FAILED = "failed"


class SearchSessionController(ScreenController[SearchState], Generic[C]):
    """State machine for one search screen.

    Listeners receive the new SearchState on every transition.
    """

    def __init__(
        self,
        mode: str,
        builder: QueryBuilder,
        is_submittable: Callable[[C], bool],
        fetch: Fetcher,
    ) -> None:
        super().__init__()
        self.mode = mode
        self.screen_name = f"search:{mode}"
        self._builder = builder
        self._is_submittable = is_submittable
        self._fetch = fetch

        self.state = SearchState.IDLE
        self.results: List[RecipeSummary] = []
        self.total_results = 0
        self.has_searched = False
        self.error_message: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.state is SearchState.SEARCHING

    @property
    def empty_message(self) -> str:
        return NO_RESULTS_MESSAGES.get(self.mode, "No recipes found.")

    def can_submit(self, criteria: C) -> bool:
        """Whether the search button should be enabled."""
        return not self.closed and not self.is_loading and self._is_submittable(criteria)

    async def submit(self, criteria: C) -> bool:
        """Run one search for ``criteria``.

        A later submit supersedes an earlier one still in flight: the earlier
        response is discarded when it arrives.

        Returns:
            False if the criteria were rejected (nothing happened), else True.
        """
        if self.closed or not self._is_submittable(criteria):
            self._log("debug", "Submit rejected: criteria not submittable")
            return False

        request_id = self._next_request()
        self.has_searched = True
        self.error_message = None
        self._set_state(SearchState.SEARCHING)

        try:
            params = self._builder(criteria)
            self._log("info", f"Searching recipes ({self.mode})", request_id)
            page = await self._fetch(params)
        except Exception as e:
            if not self._is_current(request_id):
                return True
            self._log("error", f"Search failed: {e}", request_id)
            self.results = []
            self.total_results = 0
            self.error_message = SEARCH_FAILED_MESSAGE
            self._set_state(SearchState.FAILED)
            return True

        if not self._is_current(request_id):
            return True

        # Replace, never merge; keep the service's order
        self.results = list(page.results)
        self.total_results = page.total_results
        self._log("info", f"Search returned {len(self.results)} recipes", request_id)
        self._set_state(SearchState.RESULTS if self.results else SearchState.NO_RESULTS)
        return True

    def _set_state(self, state: SearchState) -> None:
        self.state = state
        self._notify(state)


def create_ingredient_search(client: SpoonacularClient) -> SearchSessionController[IngredientCriteria]:
    return SearchSessionController(
        "ingredients", build_ingredient_query, is_ingredient_submittable, client.find_by_ingredients
    )


def create_nutrient_search(client: SpoonacularClient) -> SearchSessionController[NutrientCriteria]:
    return SearchSessionController(
        "nutrients", build_nutrient_query, is_nutrient_submittable, client.find_by_nutrients
    )


def create_parameter_search(client: SpoonacularClient) -> SearchSessionController[ParameterCriteria]:
    return SearchSessionController(
        "parameters", build_parameter_query, is_parameter_submittable, client.complex_search
    )
