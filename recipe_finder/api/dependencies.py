"""FastAPI dependencies for services and database."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from recipe_finder.database import SessionLocal
from recipe_finder.services.recipe_search_service import RecipeSearchService
from recipe_finder.services.spoonacular import SpoonacularClient


def get_spoonacular_client() -> SpoonacularClient:
    """Get Spoonacular client instance."""
    return SpoonacularClient()


def get_session_factory() -> sessionmaker:
    """Get the factory the cache opens its own sessions from."""
    return SessionLocal


def get_recipe_search_service(
    session_factory: Annotated[sessionmaker, Depends(get_session_factory)],
    client: Annotated[SpoonacularClient, Depends(get_spoonacular_client)],
) -> RecipeSearchService:
    """Get recipe search service with dependencies."""
    return RecipeSearchService(session_factory, client=client)
