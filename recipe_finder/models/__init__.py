"""SQLAlchemy models."""

from recipe_finder.models.cached_recipe import CachedRecipe

__all__ = [
    "CachedRecipe",
]
