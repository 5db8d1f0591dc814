"""Unit tests for the search session state machine."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from eatmate.api.errors import ApiError, NetworkError
from eatmate.controllers.search import (
    SearchSessionController,
    SearchState,
    create_ingredient_search,
    create_nutrient_search,
    create_parameter_search,
)
from eatmate.models.models import (
    IngredientCriteria,
    NutrientCriteria,
    ParameterCriteria,
    RecipeSummary,
    SearchPage,
)
from eatmate.prompts.prompts import NO_RESULTS_MESSAGES, SEARCH_FAILED_MESSAGE


def page(*titles, total=None):
    results = [RecipeSummary(id=i, title=title) for i, title in enumerate(titles, start=1)]
    return SearchPage(results=results, total_results=len(results) if total is None else total)


@pytest.fixture
def client():
    client = MagicMock()
    client.find_by_ingredients = AsyncMock(return_value=page("Fried Rice", "Chicken Soup"))
    client.find_by_nutrients = AsyncMock(return_value=page())
    client.complex_search = AsyncMock(return_value=page("Pad Thai", total=57))
    return client


@pytest.fixture
def ingredient_search(client):
    controller = create_ingredient_search(client)
    states = []
    controller.subscribe(states.append)
    return controller, states


class TestInitialState:
    def test_idle_before_any_submit(self, client):
        controller = create_ingredient_search(client)

        assert controller.state is SearchState.IDLE
        assert controller.results == []
        assert controller.has_searched is False
        assert controller.is_loading is False

    def test_empty_messages_per_mode(self, client):
        assert create_ingredient_search(client).empty_message == NO_RESULTS_MESSAGES["ingredients"]
        assert create_nutrient_search(client).empty_message == NO_RESULTS_MESSAGES["nutrients"]
        assert create_parameter_search(client).empty_message == NO_RESULTS_MESSAGES["parameters"]


class TestSubmit:
    @pytest.mark.asyncio
    async def test_results_transition(self, client, ingredient_search):
        controller, states = ingredient_search

        accepted = await controller.submit(IngredientCriteria(ingredients=["chicken", "rice"]))

        assert accepted is True
        assert states == [SearchState.SEARCHING, SearchState.RESULTS]
        assert [r.title for r in controller.results] == ["Fried Rice", "Chicken Soup"]
        assert controller.has_searched is True
        client.find_by_ingredients.assert_awaited_once()
        params = client.find_by_ingredients.await_args.args[0]
        assert ("ingredients", "chicken,rice") in params

    @pytest.mark.asyncio
    async def test_empty_results_transition(self, client):
        controller = create_nutrient_search(client)
        states = []
        controller.subscribe(states.append)

        await controller.submit(NutrientCriteria())

        assert states == [SearchState.SEARCHING, SearchState.NO_RESULTS]
        assert controller.results == []

    @pytest.mark.asyncio
    async def test_failure_transition(self, client, ingredient_search):
        controller, states = ingredient_search
        client.find_by_ingredients.side_effect = ApiError("Daily points limit reached", status=402)

        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        assert states == [SearchState.SEARCHING, SearchState.FAILED]
        assert controller.error_message == SEARCH_FAILED_MESSAGE
        assert controller.results == []

    @pytest.mark.asyncio
    async def test_failure_clears_previous_results(self, client, ingredient_search):
        controller, _ = ingredient_search
        await controller.submit(IngredientCriteria(ingredients=["egg"]))
        assert controller.results

        client.find_by_ingredients.side_effect = NetworkError("connection reset")
        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        assert controller.state is SearchState.FAILED
        assert controller.results == []

    @pytest.mark.asyncio
    async def test_results_replaced_not_merged(self, client, ingredient_search):
        controller, _ = ingredient_search
        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        client.find_by_ingredients.return_value = page("Omelette")
        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        assert [r.title for r in controller.results] == ["Omelette"]

    @pytest.mark.asyncio
    async def test_has_searched_stays_true(self, client, ingredient_search):
        controller, _ = ingredient_search
        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        client.find_by_ingredients.return_value = page()
        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        assert controller.state is SearchState.NO_RESULTS
        assert controller.has_searched is True

    @pytest.mark.asyncio
    async def test_parameter_search_keeps_total(self, client):
        controller = create_parameter_search(client)

        await controller.submit(ParameterCriteria(cuisine="thai"))

        assert controller.total_results == 57
        assert controller.state is SearchState.RESULTS


class TestRejectedSubmit:
    @pytest.mark.asyncio
    async def test_empty_ingredients_is_noop(self, client, ingredient_search):
        controller, states = ingredient_search

        accepted = await controller.submit(IngredientCriteria())

        assert accepted is False
        assert states == []
        assert controller.state is SearchState.IDLE
        assert controller.has_searched is False
        client.find_by_ingredients.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_names_mutated_in_place_is_noop(self, client, ingredient_search):
        controller, states = ingredient_search
        criteria = IngredientCriteria()
        criteria.ingredients.append("   ")

        assert await controller.submit(criteria) is False
        assert states == []
        assert controller.has_searched is False
        assert controller.state is SearchState.IDLE
        client.find_by_ingredients.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_any_parameters_is_noop(self, client):
        controller = create_parameter_search(client)

        assert controller.can_submit(ParameterCriteria()) is False
        assert await controller.submit(ParameterCriteria()) is False
        client.complex_search.assert_not_awaited()

    def test_can_submit_follows_predicate(self, client):
        controller = create_ingredient_search(client)
        assert controller.can_submit(IngredientCriteria()) is False
        assert controller.can_submit(IngredientCriteria(ingredients=["egg"])) is True


class TestOverlappingRequests:
    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self):
        release_first = asyncio.Event()
        responses = {"slow": page("Stale Recipe"), "fast": page("Fresh Recipe")}

        async def fetch(params):
            key = dict(params)["ingredients"]
            if key == "slow":
                await release_first.wait()
            return responses[key]

        controller = SearchSessionController(
            "ingredients",
            lambda c: [("ingredients", c.ingredients[0])],
            lambda c: True,
            fetch,
        )

        first = asyncio.create_task(controller.submit(IngredientCriteria(ingredients=["slow"])))
        await asyncio.sleep(0)
        await controller.submit(IngredientCriteria(ingredients=["fast"]))
        release_first.set()
        await first

        assert [r.title for r in controller.results] == ["Fresh Recipe"]
        assert controller.state is SearchState.RESULTS

    @pytest.mark.asyncio
    async def test_stale_failure_is_discarded(self):
        release_first = asyncio.Event()

        async def fetch(params):
            if dict(params)["ingredients"] == "slow":
                await release_first.wait()
                raise NetworkError("late failure")
            return page("Fresh Recipe")

        controller = SearchSessionController(
            "ingredients", lambda c: [("ingredients", c.ingredients[0])], lambda c: True, fetch
        )

        first = asyncio.create_task(controller.submit(IngredientCriteria(ingredients=["slow"])))
        await asyncio.sleep(0)
        await controller.submit(IngredientCriteria(ingredients=["fast"]))
        release_first.set()
        await first

        assert controller.state is SearchState.RESULTS
        assert controller.error_message is None


class TestClose:
    @pytest.mark.asyncio
    async def test_response_after_close_is_discarded(self):
        release = asyncio.Event()

        async def fetch(params):
            await release.wait()
            return page("Too Late")

        controller = SearchSessionController(
            "ingredients", lambda c: [("ingredients", "egg")], lambda c: True, fetch
        )
        states = []
        controller.subscribe(states.append)

        task = asyncio.create_task(controller.submit(IngredientCriteria(ingredients=["egg"])))
        await asyncio.sleep(0)
        controller.close()
        release.set()
        await task

        assert controller.results == []
        assert states == [SearchState.SEARCHING]

    @pytest.mark.asyncio
    async def test_submit_after_close_rejected(self, client, ingredient_search):
        controller, _ = ingredient_search
        controller.close()

        assert await controller.submit(IngredientCriteria(ingredients=["egg"])) is False
        client.find_by_ingredients.assert_not_awaited()


class TestListeners:
    @pytest.mark.asyncio
    async def test_unsubscribe(self, client):
        controller = create_ingredient_search(client)
        states = []
        unsubscribe = controller.subscribe(states.append)
        unsubscribe()

        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        assert states == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_controller(self, client):
        controller = create_ingredient_search(client)

        def broken(state):
            raise RuntimeError("render failed")

        controller.subscribe(broken)
        await controller.submit(IngredientCriteria(ingredients=["egg"]))

        assert controller.state is SearchState.RESULTS
