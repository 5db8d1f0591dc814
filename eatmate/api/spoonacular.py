"""Spoonacular recipe/nutrition API client.

This module provides the SpoonacularClient class wrapping the five GET
endpoints used by the screens. Payloads are normalized into the models in
eatmate.models.models; errors are raised as NetworkError / ApiError.

Use as an async context manager to share one HTTP session across calls:

    async with SpoonacularClient(api_key="...") as client:
        page = await client.find_by_ingredients([("ingredients", "egg,flour")])

Outside a context manager every call opens and closes its own session.
"""

import asyncio
from typing import Any, Optional, Sequence, Tuple, Union

import aiohttp

from eatmate.api.errors import ApiError, NetworkError, extract_error_message
from eatmate.models.models import RecipeDetail, RecipeSummary, SearchPage, SubstituteResult
from eatmate.utils.config import config
from eatmate.utils.logger import get_logger

logger = get_logger("eatmate.api")

QueryParams = Sequence[Tuple[str, Any]]


class SpoonacularClient:
    """Async client for the Spoonacular REST API.

    Authentication is the ``apiKey`` query parameter appended to every request.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None) -> None:
        """Initialize SpoonacularClient with configuration.

        Args:
            api_key: Spoonacular API key. Defaults to SPOONACULAR_API_KEY.
            base_url: API root. Defaults to SPOONACULAR_BASE_URL.

        Raises:
            ValueError: If no API key is available.
        """
        self.api_key = api_key if api_key is not None else config.SPOONACULAR_API_KEY
        if not self.api_key:
            raise ValueError("SPOONACULAR_API_KEY is required")

        self.base_url = (base_url or config.SPOONACULAR_BASE_URL).rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "SpoonacularClient":
        self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, params: QueryParams) -> Any:
        """GET ``path`` with ``params`` plus the API key and decode the JSON body.

        Raises:
            NetworkError: If the request could not complete.
            ApiError: On non-2xx status or a body that is not JSON.
        """
        url = f"{self.base_url}{path}"
        query = [(key, _format_param(value)) for key, value in params]
        query.append(("apiKey", self.api_key))
        logger.debug(f"GET {path} params={[key for key, _ in params]}")

        if self._session is not None:
            return await self._send(self._session, url, query)

        async with aiohttp.ClientSession() as session:
            return await self._send(session, url, query)

    async def _send(self, session: aiohttp.ClientSession, url: str, query: list) -> Any:
        try:
            async with session.get(url, params=query) as response:
                if response.status < 200 or response.status >= 300:
                    payload = await _read_error_body(response)
                    message = extract_error_message(payload, f"API error: {response.status}")
                    raise ApiError(message, status=response.status)
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ApiError(f"Malformed response body: {e}", status=response.status) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def find_by_ingredients(self, params: QueryParams) -> SearchPage:
        """Recipes that use the given ingredients, in the service's ranking order."""
        payload = await self._get_json("/recipes/findByIngredients", params)
        return _page_from_list(payload)

    async def find_by_nutrients(self, params: QueryParams) -> SearchPage:
        """Recipes whose nutrients fall inside the given bounds."""
        payload = await self._get_json("/recipes/findByNutrients", params)
        return _page_from_list(payload)

    async def complex_search(self, params: QueryParams) -> SearchPage:
        """Query/cuisine/diet search with recipe information included."""
        payload = await self._get_json(
            "/recipes/complexSearch", [*params, ("addRecipeInformation", True)]
        )
        if not isinstance(payload, dict):
            raise ApiError("Expected an object from complexSearch")
        results = [RecipeSummary.model_validate(item) for item in payload.get("results") or []]
        return SearchPage(results=results, total_results=payload.get("totalResults") or 0)

    async def get_recipe_information(
        self, recipe_id: Union[int, str], include_nutrition: bool = True
    ) -> RecipeDetail:
        """Full record of one recipe (instructions, ingredients, nutrition)."""
        payload = await self._get_json(
            f"/recipes/{recipe_id}/information", [("includeNutrition", include_nutrition)]
        )
        if not isinstance(payload, dict):
            raise ApiError("Expected an object from recipe information")
        return RecipeDetail.from_api(payload)

    async def get_ingredient_substitutes(self, ingredient_name: str) -> SubstituteResult:
        """Substitutes for one ingredient.

        The service answers 200 with ``{"status": "failure", "message": ...}``
        when it knows no substitutes; that is returned as an empty list.
        """
        payload = await self._get_json(
            "/food/ingredients/substitutes", [("ingredientName", ingredient_name)]
        )
        if not isinstance(payload, dict):
            raise ApiError("Expected an object from ingredient substitutes")

        return SubstituteResult(
            ingredient=payload.get("ingredient") or ingredient_name,
            substitutes=payload.get("substitutes") or [],
            message=payload.get("message"),
        )


def _format_param(value: Any) -> Union[str, int, float]:
    # yarl rejects bools; the API expects lowercase literals
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _page_from_list(payload: Any) -> SearchPage:
    if not isinstance(payload, list):
        raise ApiError("Expected a list of recipes")
    results = [RecipeSummary.model_validate(item) for item in payload]
    return SearchPage(results=results, total_results=len(results))


async def _read_error_body(response: aiohttp.ClientResponse) -> Any:
    try:
        return await response.json(content_type=None)
    except (ValueError, aiohttp.ClientError):
        return None
