"""Cached Spoonacular recipe model."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from recipe_finder.database import Base
from recipe_finder.models.mixins import TimestampMixin


class CachedRecipe(Base, TimestampMixin):
    """Snapshot of a remote recipe's details, keyed by the provider's recipe id.

    Rows are refreshed by upsert whenever the remote API is hit again and are
    never deleted; a row older than the cache TTL is simply ignored on read.
    """

    __tablename__ = "cached_recipes"

    id = Column(Integer, primary_key=True, index=True)
    spoonacular_id = Column(Integer, nullable=False, unique=True, index=True)

    title = Column(String(500), nullable=False)
    image = Column(String(1000), nullable=True)
    summary = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    ready_in_minutes = Column(Integer, nullable=True)
    servings = Column(Integer, nullable=True)
    source_url = Column(String(1000), nullable=True)
    spoonacular_source_url = Column(String(1000), nullable=True)

    # Nested upstream structures stored as-is
    extended_ingredients = Column(JSON, nullable=True)
    analyzed_instructions = Column(JSON, nullable=True)
    nutrition = Column(JSON, nullable=True)
    diets = Column(JSON, nullable=True)
    cuisines = Column(JSON, nullable=True)
    dish_types = Column(JSON, nullable=True)

    last_fetched_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(UTC),
    )
    fetch_count = Column(Integer, nullable=False, default=1)
