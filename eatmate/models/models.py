"""Data models for the EatMate client core.

Defines Pydantic models for search criteria, normalized remote payloads,
conversation messages, and theme preferences.
All models use Pydantic v2. Remote payloads arrive with camelCase keys;
models accept the remote alias or the Python field name.
"""

from enum import Enum
import re
from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eatmate.utils.config import config


# ============================================================================
# Search Criteria
# ============================================================================


class Cuisine(str, Enum):
    """Cuisine filter values accepted by complex search ("any" means no filter)."""

    ANY = "any"
    AFRICAN = "african"
    AMERICAN = "american"
    BRITISH = "british"
    CHINESE = "chinese"
    FRENCH = "french"
    INDIAN = "indian"
    ITALIAN = "italian"
    JAPANESE = "japanese"
    KOREAN = "korean"
    MEXICAN = "mexican"
    THAI = "thai"


class Diet(str, Enum):
    """Diet filter values accepted by complex search ("any" means no filter)."""

    ANY = "any"
    GLUTEN_FREE = "gluten free"
    KETOGENIC = "ketogenic"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    PESCETARIAN = "pescetarian"
    PALEO = "paleo"


INGREDIENT_DELIMITER = ","


def _default_number() -> int:
    return config.MAX_RECIPES


def _split_names(name: str) -> List[str]:
    """One entry per delimiter-separated name, stripped, blanks dropped."""
    return [part.strip() for part in str(name).split(INGREDIENT_DELIMITER) if part.strip()]


class IngredientCriteria(BaseModel):
    """Ordered set of ingredient names for find-by-ingredients.

    Names are stripped and kept unique case-insensitively; the first spelling wins.
    An entry holding the delimiter ("salt, pepper") becomes separate names, so
    the joined query always splits back into the same set.
    """

    ingredients: Annotated[List[str], Field(default_factory=list, description="Ingredient names in entry order")]
    number: Annotated[int, Field(default_factory=_default_number, ge=1, description="Result-count cap")]
    ranking: Annotated[
        int,
        Field(1, ge=1, le=2, description="1 = maximize used ingredients, 2 = minimize missing ingredients"),
    ]

    @field_validator("ingredients", mode="before")
    @classmethod
    def dedupe_ingredients(cls, names: Optional[List[str]]) -> List[str]:
        """Split on the delimiter, strip, drop empties and case-insensitive duplicates, keep order."""
        unique: List[str] = []
        seen = set()
        for name in names or []:
            for cleaned in _split_names(name):
                if cleaned.lower() not in seen:
                    seen.add(cleaned.lower())
                    unique.append(cleaned)
        return unique

    def add(self, name: str) -> bool:
        """Append an ingredient unless it is blank or already present.

        A name holding the delimiter adds each part separately.

        Returns:
            True if at least one ingredient was added.
        """
        added = False
        for cleaned in _split_names(name):
            if cleaned.lower() in (existing.lower() for existing in self.ingredients):
                continue
            self.ingredients.append(cleaned)
            added = True
        return added

    def remove(self, index: int) -> None:
        """Remove the ingredient at ``index`` (a tapped chip)."""
        del self.ingredients[index]

    def is_submittable(self) -> bool:
        # Same stripped view the query builder uses; the list may be mutated in place
        return any(name.strip() for name in self.ingredients)


class NutrientCriteria(BaseModel):
    """Eight nutrient bounds for find-by-nutrients.

    No ordering is enforced between a min and its max; the remote service
    decides what an inverted range means.
    """

    min_calories: Annotated[float, Field(0, ge=0)]
    max_calories: Annotated[float, Field(800, ge=0)]
    min_protein: Annotated[float, Field(0, ge=0)]
    max_protein: Annotated[float, Field(100, ge=0)]
    min_carbs: Annotated[float, Field(0, ge=0)]
    max_carbs: Annotated[float, Field(100, ge=0)]
    min_fat: Annotated[float, Field(0, ge=0)]
    max_fat: Annotated[float, Field(100, ge=0)]
    number: Annotated[int, Field(default_factory=_default_number, ge=1)]

    def is_submittable(self) -> bool:
        return True


class ParameterCriteria(BaseModel):
    """Free-text query plus cuisine/diet filters for complex search."""

    query: Annotated[str, Field("", description="Free-text dish query (optional)")]
    cuisine: Annotated[Cuisine, Field(Cuisine.ANY)]
    diet: Annotated[Diet, Field(Diet.ANY)]
    number: Annotated[int, Field(default_factory=_default_number, ge=1)]

    def is_submittable(self) -> bool:
        """At least one of query, cuisine, diet must differ from its default."""
        return bool(self.query.strip()) or self.cuisine is not Cuisine.ANY or self.diet is not Diet.ANY


SearchCriteria = Union[IngredientCriteria, NutrientCriteria, ParameterCriteria]


# ============================================================================
# Search Results
# ============================================================================


class RecipeSummary(BaseModel):
    """One entry of a search result list.

    Ingredient search fills the used/missed counts; nutrient search fills the
    calories/protein/fat/carbs strings; complex search with recipe information
    fills ready_in_minutes and servings.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Annotated[Union[int, str], Field(description="Recipe ID from Spoonacular API")]
    title: Annotated[str, Field(description="Recipe name or title")]
    image: Annotated[Optional[str], Field(None, description="URL to recipe image")]
    ready_in_minutes: Annotated[Optional[int], Field(None, alias="readyInMinutes", ge=0)]
    servings: Annotated[Optional[int], Field(None, ge=0)]
    used_ingredient_count: Annotated[Optional[int], Field(None, alias="usedIngredientCount", ge=0)]
    missed_ingredient_count: Annotated[Optional[int], Field(None, alias="missedIngredientCount", ge=0)]
    calories: Annotated[Optional[Union[float, str]], Field(None)]
    protein: Annotated[Optional[str], Field(None)]
    fat: Annotated[Optional[str], Field(None)]
    carbs: Annotated[Optional[str], Field(None)]


class SearchPage(BaseModel):
    """Ordered result set of one search call."""

    results: Annotated[List[RecipeSummary], Field(default_factory=list)]
    total_results: Annotated[int, Field(0, ge=0)]


# ============================================================================
# Recipe Detail
# ============================================================================


class InstructionStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: Annotated[int, Field(ge=1, description="1-based step number")]
    step: str


class IngredientLine(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    amount: Annotated[float, Field(0)]
    unit: Annotated[str, Field("")]
    name: str


class CaloricBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    percent_protein: Annotated[float, Field(0, alias="percentProtein")]
    percent_fat: Annotated[float, Field(0, alias="percentFat")]
    percent_carbs: Annotated[float, Field(0, alias="percentCarbs")]


class Nutrient(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    amount: float
    unit: Annotated[str, Field("")]
    percent_of_daily_needs: Annotated[Optional[float], Field(None, alias="percentOfDailyNeeds")]


class Nutrition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    nutrients: Annotated[tuple[Nutrient, ...], Field(default_factory=tuple)]
    caloric_breakdown: Annotated[Optional[CaloricBreakdown], Field(None, alias="caloricBreakdown")]


_HTML_TAG = re.compile(r"</?[^>]+(>|$)")


class RecipeDetail(BaseModel):
    """Full record of one recipe, immutable once fetched.

    The three tab documents are independent: ``instructions`` is empty when the
    service has no analyzed steps, ``ingredients`` is None when the ingredient
    list is missing, and ``nutrition`` is None when nutrition was not returned.
    """

    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    title: str
    image: Optional[str] = None
    summary: Optional[str] = None
    ready_in_minutes: Optional[int] = None
    servings: Optional[int] = None
    source_url: Optional[str] = None
    instructions: tuple[InstructionStep, ...] = ()
    ingredients: Optional[tuple[IngredientLine, ...]] = None
    nutrition: Optional[Nutrition] = None

    @classmethod
    def from_api(cls, payload: dict) -> "RecipeDetail":
        """Build a RecipeDetail from a get-recipe-information response.

        Only the first analyzed-instructions block is used, matching what the
        service returns for single-part recipes.
        """
        blocks = payload.get("analyzedInstructions") or []
        steps = (blocks[0].get("steps") or []) if blocks else []
        ingredients = payload.get("extendedIngredients")

        return cls(
            id=payload["id"],
            title=payload.get("title") or "",
            image=payload.get("image"),
            summary=payload.get("summary"),
            ready_in_minutes=payload.get("readyInMinutes"),
            servings=payload.get("servings"),
            source_url=payload.get("sourceUrl"),
            instructions=tuple(InstructionStep(number=s["number"], step=s.get("step", "")) for s in steps),
            ingredients=(
                tuple(IngredientLine.model_validate(item) for item in ingredients)
                if ingredients is not None
                else None
            ),
            nutrition=Nutrition.model_validate(payload["nutrition"]) if payload.get("nutrition") else None,
        )

    def summary_text(self, limit: int = 150) -> str:
        """Summary with HTML tags removed, truncated to ``limit`` characters."""
        text = _HTML_TAG.sub("", self.summary or "")
        if len(text) > limit:
            return text[:limit] + "..."
        return text


# ============================================================================
# Conversation
# ============================================================================


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ConversationMessage(BaseModel):
    """One entry in the assistant conversation log."""

    model_config = ConfigDict(frozen=True)

    id: Annotated[str, Field(min_length=1, description="Locally generated, increasing id")]
    role: MessageRole
    content: str

    def to_completion(self) -> dict[str, str]:
        """Role/content pair in the completion endpoint's message format."""
        return {"role": self.role.value, "content": self.content}


# ============================================================================
# Substitutes
# ============================================================================


class SubstituteResult(BaseModel):
    """Substitutes for one ingredient; an empty list is a valid answer."""

    model_config = ConfigDict(extra="ignore")

    ingredient: str
    substitutes: Annotated[List[str], Field(default_factory=list)]
    message: Annotated[Optional[str], Field(None, description="Service note when nothing was found")]


# ============================================================================
# Theme
# ============================================================================


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Palette(BaseModel):
    """Color palette rendered by every screen."""

    model_config = ConfigDict(frozen=True)

    name: str
    background: str
    text: str
    primary: str
    secondary: str
    card: str
    border: str
    notification: str
    error: str
    success: str
    muted: str
