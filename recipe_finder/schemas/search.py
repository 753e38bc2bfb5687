"""Recipe search schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# --- Upstream (Spoonacular) shapes ---


class UpstreamModel(BaseModel):
    """Base for payloads coming from the provider, which uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ApiModel(BaseModel):
    """Base for models this API returns; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IngredientRef(UpstreamModel):
    """An ingredient as listed in a findByIngredients result."""

    id: int | None = None
    name: str = ""
    amount: float | None = None
    unit: str | None = None
    image: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def none_name_to_empty(cls, value):
        return value or ""


class RecipeCandidate(UpstreamModel):
    """A recipe returned by findByIngredients, before scoring."""

    id: int
    title: str = ""
    image: str | None = None
    likes: int = 0
    used_ingredients: list[IngredientRef] = []
    missed_ingredients: list[IngredientRef] = []
    unused_ingredients: list[IngredientRef] = []

    @field_validator("likes", mode="before")
    @classmethod
    def none_likes_to_zero(cls, value):
        return value or 0

    @field_validator("used_ingredients", "missed_ingredients", "unused_ingredients", mode="before")
    @classmethod
    def none_list_to_empty(cls, value):
        return value or []


# --- Matching results ---


class MatchMetrics(ApiModel):
    """How well one recipe matches the user's ingredients."""

    matched_ingredients: list[str]
    exact_matches: list[str]
    missing_ingredients: list[str]  # first 3 only, for display
    missing_count: int
    match_ratio: float = Field(..., ge=0.0, le=1.0)
    total_used_ingredients: int
    matched_count: int
    score: float


class ScoredIngredient(ApiModel):
    """Ingredient echoed back with its normalized name."""

    id: int | None
    name: str
    amount: float | None
    unit: str | None
    image: str | None
    normalized: str


class ScoredRecipe(ApiModel):
    """A candidate recipe annotated with its match metrics."""

    id: int
    title: str
    image: str | None
    likes: int
    used_ingredients: list[ScoredIngredient]
    missed_ingredients: list[ScoredIngredient]
    unused_ingredients: list[IngredientRef]
    match_metrics: MatchMetrics


class CategorySummary(ApiModel):
    """Bucket sizes plus the size of the batch that was categorized."""

    exact_matches: int
    one_missing: int
    other_matches: int
    total_recipes: int


class CategorizedRecipes(ApiModel):
    """Scored recipes split into three disjoint, ordered buckets."""

    exact_matches: list[ScoredRecipe]
    one_missing: list[ScoredRecipe]
    other_matches: list[ScoredRecipe]
    summary: CategorySummary


# --- API request/response ---


class SearchByIngredientsRequest(ApiModel):
    """Search recipes by what the user has on hand.

    `ingredients` may be a list or a single comma-separated string.
    """

    ingredients: list[str] | str | None = None
    number: int = Field(15, ge=1)
    ranking: int = Field(1, ge=1, le=2)
    ignore_pantry: bool = True


class SearchMeta(ApiModel):
    """Echo of the cleaned search input."""

    user_ingredients: list[str]
    search_count: int


class SearchByIngredientsResponse(ApiModel):
    """Categorized search results."""

    success: bool = True
    data: CategorizedRecipes
    search_meta: SearchMeta


class RecipeDetailResponse(ApiModel):
    """Full recipe details, either from cache or freshly fetched."""

    success: bool = True
    data: dict
    source: str


class CachedRecipeRef(ApiModel):
    """Title and fetch time of a cached recipe."""

    title: str
    last_fetched_at: datetime


class CacheStats(ApiModel):
    """Recipe cache statistics."""

    total_records: int
    total_fetches: int
    oldest: CachedRecipeRef | None
    newest: CachedRecipeRef | None


class CacheStatsResponse(ApiModel):
    """Cache statistics wrapper; `data` is null when stats are unavailable."""

    success: bool = True
    data: CacheStats | None
