"""Recipe search API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from recipe_finder.api.dependencies import get_recipe_search_service
from recipe_finder.config import get_settings
from recipe_finder.exceptions import InputError, UpstreamError
from recipe_finder.schemas.search import (
    CacheStatsResponse,
    RecipeDetailResponse,
    SearchByIngredientsRequest,
    SearchByIngredientsResponse,
)
from recipe_finder.services.recipe_search_service import RecipeSearchService

router = APIRouter(prefix="/api/v1/search", tags=["search"])


def upstream_http_exception(error: UpstreamError) -> HTTPException:
    """Translate a provider failure into the response the client sees."""
    detail = {"code": error.code, "message": error.message}
    if get_settings().is_development and error.__cause__ is not None:
        detail["error"] = str(error.__cause__)
    return HTTPException(status_code=error.status_code, detail=detail)


@router.post("/by-ingredients", response_model=SearchByIngredientsResponse)
async def search_by_ingredients(
    request: SearchByIngredientsRequest,
    service: Annotated[RecipeSearchService, Depends(get_recipe_search_service)],
):
    """Find recipes for the given ingredients, grouped by how complete the match is."""
    try:
        result = await service.search_by_ingredients(
            request.ingredients,
            number=request.number,
            ranking=request.ranking,
            ignore_pantry=request.ignore_pantry,
        )
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except UpstreamError as e:
        raise upstream_http_exception(e) from e

    return SearchByIngredientsResponse(data=result["data"], search_meta=result["search_meta"])


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def get_cache_stats(
    service: Annotated[RecipeSearchService, Depends(get_recipe_search_service)],
):
    """Get recipe cache statistics."""
    stats = await service.get_cache_stats()
    return CacheStatsResponse(data=stats)


@router.get("/recipe/{recipe_id}", response_model=RecipeDetailResponse)
async def get_recipe(
    recipe_id: int,
    service: Annotated[RecipeSearchService, Depends(get_recipe_search_service)],
    force_refresh: Annotated[bool, Query(alias="forceRefresh")] = False,
):
    """Get full recipe details, served from the cache when fresh."""
    try:
        payload, source = await service.get_recipe_details(recipe_id, force_refresh=force_refresh)
    except UpstreamError as e:
        raise upstream_http_exception(e) from e

    return RecipeDetailResponse(data=payload, source=source)
