"""Pydantic schemas for API requests and responses."""

from recipe_finder.schemas.search import (
    CacheStats,
    CategorizedRecipes,
    IngredientRef,
    MatchMetrics,
    RecipeCandidate,
    ScoredRecipe,
    SearchByIngredientsRequest,
)

__all__ = [
    "IngredientRef",
    "RecipeCandidate",
    "MatchMetrics",
    "ScoredRecipe",
    "CategorizedRecipes",
    "CacheStats",
    "SearchByIngredientsRequest",
]
