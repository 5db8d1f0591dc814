"""Query builders for the three recipe search modes.

Each builder turns one criteria shape into an ordered list of
(key, value) pairs for the matching Spoonacular endpoint. Builders are pure:
no I/O, no mutation of the criteria, same output for the same input.

The nutrient builder always emits every bound, while the parameter builder
drops cuisine/diet when they are "any". The service reads an absent key as
"no filter", so the two behaviors are not interchangeable.
"""

from typing import Any

from eatmate.api.errors import EmptyCriteriaError
from eatmate.models.models import (
    INGREDIENT_DELIMITER,
    Cuisine,
    Diet,
    IngredientCriteria,
    NutrientCriteria,
    ParameterCriteria,
)

# Criteria field -> remote parameter, in emission order
NUTRIENT_BOUNDS = (
    ("min_calories", "minCalories"),
    ("max_calories", "maxCalories"),
    ("min_protein", "minProtein"),
    ("max_protein", "maxProtein"),
    ("min_carbs", "minCarbs"),
    ("max_carbs", "maxCarbs"),
    ("min_fat", "minFat"),
    ("max_fat", "maxFat"),
)

QueryPairs = list[tuple[str, Any]]


def build_ingredient_query(criteria: IngredientCriteria) -> QueryPairs:
    """Pairs for find-by-ingredients.

    Raises:
        EmptyCriteriaError: If no non-blank ingredient is present.
    """
    names = [name.strip() for name in criteria.ingredients if name and name.strip()]
    if not names:
        raise EmptyCriteriaError("At least one ingredient is required")

    return [
        ("ingredients", INGREDIENT_DELIMITER.join(names)),
        ("number", criteria.number),
        ("ranking", criteria.ranking),
    ]


def split_ingredients(joined: str) -> list[str]:
    """Inverse of the ingredient join; names come back stripped."""
    return [name.strip() for name in joined.split(INGREDIENT_DELIMITER) if name.strip()]


def build_nutrient_query(criteria: NutrientCriteria) -> QueryPairs:
    """Pairs for find-by-nutrients: all eight bounds, then the count."""
    pairs: QueryPairs = [(remote, getattr(criteria, field)) for field, remote in NUTRIENT_BOUNDS]
    pairs.append(("number", criteria.number))
    return pairs


def build_parameter_query(criteria: ParameterCriteria) -> QueryPairs:
    """Pairs for complex search; "any" filters and a blank query are left out."""
    pairs: QueryPairs = []
    query = criteria.query.strip()
    if query:
        pairs.append(("query", query))
    if criteria.cuisine is not Cuisine.ANY:
        pairs.append(("cuisine", criteria.cuisine.value))
    if criteria.diet is not Diet.ANY:
        pairs.append(("diet", criteria.diet.value))
    pairs.append(("number", criteria.number))
    return pairs


def is_ingredient_submittable(criteria: IngredientCriteria) -> bool:
    return criteria.is_submittable()


def is_nutrient_submittable(criteria: NutrientCriteria) -> bool:
    return criteria.is_submittable()


def is_parameter_submittable(criteria: ParameterCriteria) -> bool:
    return criteria.is_submittable()
