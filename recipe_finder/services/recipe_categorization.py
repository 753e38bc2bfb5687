"""Bucket scored recipes into exact / one-missing / other tiers."""

import logging

from recipe_finder.exceptions import InputError
from recipe_finder.schemas.search import (
    CategorizedRecipes,
    CategorySummary,
    RecipeCandidate,
    ScoredRecipe,
)
from recipe_finder.services.ingredient_matching import normalize_ingredient_name, score_recipe

logger = logging.getLogger(__name__)

# (max missing ingredients, min match ratio) per tier
EXACT_MAX_MISSING, EXACT_MIN_RATIO = 0, 0.8
ONE_MISSING_MAX_MISSING, ONE_MISSING_MIN_RATIO = 1, 0.6
OTHER_MAX_MISSING, OTHER_MIN_RATIO = 3, 0.4


def classify_recipe(recipe: ScoredRecipe) -> str | None:
    """Return the tier a scored recipe falls into, or None if it is dropped.

    Rules are checked in order and the first match wins.
    """
    metrics = recipe.match_metrics
    if metrics.missing_count == EXACT_MAX_MISSING and metrics.match_ratio >= EXACT_MIN_RATIO:
        return "exact_matches"
    if (
        metrics.missing_count == ONE_MISSING_MAX_MISSING
        and metrics.match_ratio >= ONE_MISSING_MIN_RATIO
    ):
        return "one_missing"
    if metrics.missing_count <= OTHER_MAX_MISSING and metrics.match_ratio >= OTHER_MIN_RATIO:
        return "other_matches"
    return None


def categorize_recipes(recipes: list[ScoredRecipe]) -> CategorizedRecipes:
    """Split a scored batch into three disjoint, sorted buckets.

    - exact_matches: ratio desc, then likes desc
    - one_missing: ratio desc, then missing_count asc
    - other_matches: score desc

    Recipes that meet no tier are dropped, but still count towards
    summary.total_recipes.
    """
    buckets: dict[str, list[ScoredRecipe]] = {
        "exact_matches": [],
        "one_missing": [],
        "other_matches": [],
    }

    for recipe in recipes:
        tier = classify_recipe(recipe)
        if tier is None:
            logger.debug(f"Dropping recipe {recipe.id}: below every match threshold")
            continue
        buckets[tier].append(recipe)

    exact = sorted(
        buckets["exact_matches"],
        key=lambda r: (-r.match_metrics.match_ratio, -(r.likes or 0)),
    )
    # missing_count is always 1 in this bucket, so the second key never decides
    one_missing = sorted(
        buckets["one_missing"],
        key=lambda r: (-r.match_metrics.match_ratio, r.match_metrics.missing_count),
    )
    other = sorted(buckets["other_matches"], key=lambda r: -r.match_metrics.score)

    return CategorizedRecipes(
        exact_matches=exact,
        one_missing=one_missing,
        other_matches=other,
        summary=CategorySummary(
            exact_matches=len(exact),
            one_missing=len(one_missing),
            other_matches=len(other),
            total_recipes=len(recipes),
        ),
    )


def match_and_categorize(
    user_ingredients: list[str], recipes: list[RecipeCandidate]
) -> CategorizedRecipes:
    """Score every candidate against the user's ingredients and categorize the batch.

    Raises:
        InputError: if no user ingredient survives normalization (an empty
            name would be a substring of every recipe ingredient)
    """
    if not user_ingredients:
        raise InputError("Please provide at least one ingredient")

    normalized_user = [normalize_ingredient_name(ing) for ing in user_ingredients]
    normalized_user = [ing for ing in normalized_user if ing]
    if not normalized_user:
        raise InputError("No valid ingredients provided")

    scored = [score_recipe(normalized_user, recipe) for recipe in recipes]
    return categorize_recipes(scored)
