"""Recipe search service: ingredient search and cached recipe details."""

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from recipe_finder.config import get_settings
from recipe_finder.database import SessionLocal
from recipe_finder.schemas.search import CacheStats, SearchMeta
from recipe_finder.services.ingredient_matching import parse_ingredient_input
from recipe_finder.services.recipe_cache import RecipeCache, recipe_to_payload
from recipe_finder.services.recipe_categorization import match_and_categorize
from recipe_finder.services.spoonacular import SpoonacularClient

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_API = "api"


class CacheCallAbandoned(SQLAlchemyError):
    """The caller stopped waiting; the cache call must not commit."""


def _cached_payload(cache: RecipeCache, recipe_id: int) -> dict[str, Any] | None:
    recipe = cache.get(recipe_id)
    return recipe_to_payload(recipe) if recipe is not None else None


def _saved_payload(cache: RecipeCache, payload: dict[str, Any]) -> dict[str, Any] | None:
    recipe = cache.save(payload)
    return recipe_to_payload(recipe) if recipe is not None else None


def _cache_stats(cache: RecipeCache) -> CacheStats | None:
    return cache.stats()


class RecipeSearchService:
    """Service for searching recipes and serving recipe details.

    Cache work never runs on a request's session. Each cache call opens its
    own session in a worker thread; if the call times out the session refuses
    to commit, so an abandoned call leaves the store as it was.
    """

    def __init__(
        self,
        session_factory: sessionmaker | Callable[[], Session] = SessionLocal,
        client: SpoonacularClient | None = None,
        cache_factory: Callable[[Session], RecipeCache] = RecipeCache,
    ):
        self.session_factory = session_factory
        self.client = client or SpoonacularClient()
        self.cache_factory = cache_factory
        self.cache_timeout = get_settings().cache_timeout_seconds

    async def search_by_ingredients(
        self,
        ingredients: list[str] | str | None,
        number: int = 15,
        ranking: int = 1,
        ignore_pantry: bool = True,
    ) -> dict[str, Any]:
        """Search the provider by ingredients and categorize the results.

        Returns:
            {
                "data": CategorizedRecipes,
                "search_meta": SearchMeta,
            }

        Raises:
            InputError: no usable ingredients
            UpstreamError: the provider failed
        """
        user_ingredients = parse_ingredient_input(ingredients)

        candidates = await self.client.find_by_ingredients(
            user_ingredients,
            number=number,
            ranking=ranking,
            ignore_pantry=ignore_pantry,
        )
        categorized = match_and_categorize(user_ingredients, candidates)

        logger.info(
            f"Ingredient search {user_ingredients}: {len(candidates)} candidates, "
            f"{categorized.summary.exact_matches} exact, "
            f"{categorized.summary.one_missing} one missing, "
            f"{categorized.summary.other_matches} other"
        )

        return {
            "data": categorized,
            "search_meta": SearchMeta(
                user_ingredients=user_ingredients,
                search_count=len(candidates),
            ),
        }

    def _call_in_own_session(self, call, abandoned: threading.Event, *args):
        with self.session_factory() as session:

            @event.listens_for(session, "before_commit")
            def refuse_abandoned_commit(_session):
                if abandoned.is_set():
                    raise CacheCallAbandoned("cache call abandoned after timeout")

            return call(self.cache_factory(session), *args)

    async def _run_cache_call(self, operation: str, call, *args):
        """Run a blocking cache call off the event loop with a bounded timeout.

        Returns (completed, result); completed is False on timeout.
        """
        abandoned = threading.Event()
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(self._call_in_own_session, call, abandoned, *args),
                self.cache_timeout,
            )
        except TimeoutError:
            abandoned.set()
            logger.warning(f"Recipe cache {operation} timed out after {self.cache_timeout}s")
            return False, None
        return True, result

    async def get_recipe_details(
        self, recipe_id: int, force_refresh: bool = False
    ) -> tuple[dict[str, Any], str]:
        """Get full recipe details, preferring a fresh cached copy.

        A cache timeout counts as a miss. When the cache did not answer in time
        the fresh payload is not written back, since the store is unresponsive.

        Returns:
            (payload, source) where source is "cache" or "api"

        Raises:
            UpstreamError: the provider failed on a cache miss
        """
        cache_responsive = True
        if not force_refresh:
            cache_responsive, cached = await self._run_cache_call(
                "get", _cached_payload, recipe_id
            )
            if cached is not None:
                return cached, SOURCE_CACHE

        payload = await self.client.get_recipe_information(recipe_id)

        if not cache_responsive:
            return payload, SOURCE_API

        _, saved = await self._run_cache_call("save", _saved_payload, payload)
        if saved is None:
            logger.warning(f"Serving uncached payload for recipe {recipe_id}")
            return payload, SOURCE_API

        return saved, SOURCE_API

    async def get_cache_stats(self) -> CacheStats | None:
        """Get recipe cache statistics, or None if unavailable."""
        _, stats = await self._run_cache_call("stats", _cache_stats)
        return stats
