"""Read-through cache for Spoonacular recipe details."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_finder.config import get_settings
from recipe_finder.models.cached_recipe import CachedRecipe
from recipe_finder.schemas.search import CachedRecipeRef, CacheStats

logger = logging.getLogger(__name__)

# Model attribute -> key in the provider's recipe information payload
CACHED_FIELDS = {
    "title": "title",
    "image": "image",
    "summary": "summary",
    "instructions": "instructions",
    "ready_in_minutes": "readyInMinutes",
    "servings": "servings",
    "source_url": "sourceUrl",
    "spoonacular_source_url": "spoonacularSourceUrl",
    "extended_ingredients": "extendedIngredients",
    "analyzed_instructions": "analyzedInstructions",
    "nutrition": "nutrition",
    "diets": "diets",
    "cuisines": "cuisines",
    "dish_types": "dishTypes",
}

_INSERT_BY_DIALECT = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def recipe_to_payload(recipe: CachedRecipe) -> dict[str, Any]:
    """Rebuild the provider-shaped payload from a cached row."""
    payload: dict[str, Any] = {"id": recipe.spoonacular_id}
    for attr, key in CACHED_FIELDS.items():
        payload[key] = getattr(recipe, attr)
    payload["lastFetchedAt"] = _as_utc(recipe.last_fetched_at).isoformat()
    payload["fetchCount"] = recipe.fetch_count
    return payload


class RecipeCache:
    """Staleness-aware store in front of the rate-limited recipe detail API.

    Storage failures never propagate: a failed read is a miss, a failed write
    returns None and the caller serves the freshly fetched payload instead.
    """

    def __init__(self, db: Session, ttl_hours: int | None = None):
        self.db = db
        if ttl_hours is None:
            ttl_hours = get_settings().recipe_cache_ttl_hours
        self.ttl = timedelta(hours=ttl_hours)

    def is_fresh(self, recipe: CachedRecipe, now: datetime | None = None) -> bool:
        """Check whether a cached row is still inside the TTL window."""
        now = now or datetime.now(UTC)
        return now - _as_utc(recipe.last_fetched_at) <= self.ttl

    def get(self, recipe_id: int) -> CachedRecipe | None:
        """Return the cached recipe if present and fresh, bumping its fetch count.

        Args:
            recipe_id: Spoonacular recipe id

        Returns:
            The cached row, or None on a miss, a stale row or a storage error
        """
        try:
            recipe = (
                self.db.query(CachedRecipe).filter(CachedRecipe.spoonacular_id == recipe_id).first()
            )
            if recipe is None:
                logger.debug(f"Recipe cache miss: {recipe_id}")
                return None

            if not self.is_fresh(recipe):
                logger.debug(f"Recipe cache stale: {recipe_id}")
                return None

            # Single UPDATE so concurrent hits don't overwrite each other's bump
            self.db.execute(
                update(CachedRecipe)
                .where(CachedRecipe.id == recipe.id)
                .values(fetch_count=CachedRecipe.fetch_count + 1)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
            self.db.refresh(recipe)

            logger.info(f"Recipe cache hit: {recipe_id} (fetch_count={recipe.fetch_count})")
            return recipe
        except SQLAlchemyError as e:
            logger.warning(f"Recipe cache read failed for {recipe_id}: {e}")
            self.db.rollback()
            return None

    def save(self, recipe_data: dict[str, Any]) -> CachedRecipe | None:
        """Insert or refresh a recipe snapshot from a provider payload.

        On insert the row starts with fetch_count=1; on update every descriptive
        field is overwritten, last_fetched_at is reset and fetch_count goes up
        by one. Concurrent saves of the same id are last-write-wins.

        Returns:
            The stored row, or None if the write failed
        """
        recipe_id = recipe_data.get("id")
        if recipe_id is None:
            logger.warning("Refusing to cache recipe payload without an id")
            return None

        now = datetime.now(UTC)
        fields = {attr: recipe_data.get(key) for attr, key in CACHED_FIELDS.items()}
        fields["title"] = fields["title"] or ""

        try:
            dialect = self.db.get_bind().dialect.name
            insert = _INSERT_BY_DIALECT.get(dialect)
            if insert is None:
                raise SQLAlchemyError(f"Upsert not supported for dialect '{dialect}'")

            table = CachedRecipe.__table__
            stmt = insert(table).values(
                spoonacular_id=recipe_id,
                last_fetched_at=now,
                fetch_count=1,
                created_at=now,
                updated_at=now,
                **fields,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[table.c.spoonacular_id],
                set_={
                    **fields,
                    "last_fetched_at": now,
                    "updated_at": now,
                    "fetch_count": table.c.fetch_count + 1,
                },
            )
            self.db.execute(stmt)
            self.db.commit()

            recipe = (
                self.db.query(CachedRecipe)
                .filter(CachedRecipe.spoonacular_id == recipe_id)
                .populate_existing()
                .first()
            )
            if recipe is not None:
                logger.info(f"Cached recipe {recipe_id} (fetch_count={recipe.fetch_count})")
            return recipe
        except SQLAlchemyError as e:
            logger.warning(f"Recipe cache save failed for {recipe_id}: {e}")
            self.db.rollback()
            return None

    def stats(self) -> CacheStats | None:
        """Summarize the cache for observability; None if the query fails."""
        try:
            total_records = self.db.query(func.count(CachedRecipe.id)).scalar() or 0
            total_fetches = self.db.query(func.sum(CachedRecipe.fetch_count)).scalar() or 0

            oldest = (
                self.db.query(CachedRecipe.title, CachedRecipe.last_fetched_at)
                .order_by(CachedRecipe.last_fetched_at.asc())
                .first()
            )
            newest = (
                self.db.query(CachedRecipe.title, CachedRecipe.last_fetched_at)
                .order_by(CachedRecipe.last_fetched_at.desc())
                .first()
            )
        except SQLAlchemyError as e:
            logger.warning(f"Recipe cache stats failed: {e}")
            self.db.rollback()
            return None

        def _ref(row) -> CachedRecipeRef | None:
            if row is None:
                return None
            title, last_fetched_at = row
            return CachedRecipeRef(title=title, last_fetched_at=_as_utc(last_fetched_at))

        return CacheStats(
            total_records=total_records,
            total_fetches=int(total_fetches),
            oldest=_ref(oldest),
            newest=_ref(newest),
        )
